"""
Saved calculation repository for database operations.

Saved calculations are kept newest first (by timestamp) and capped: creating
one beyond the cap evicts the oldest.
"""

import random
import string
import time
from typing import Any, Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from wealth_mngr.db.models import SavedCalculation
from wealth_mngr.db.repositories.base import BaseRepository

_ID_ALPHABET = string.digits + string.ascii_lowercase


def generate_calculation_id(timestamp_ms: int) -> str:
    """Id of the form ``calc-<ms>-<9 random base36 chars>``."""
    suffix = "".join(random.choices(_ID_ALPHABET, k=9))
    return f"calc-{timestamp_ms}-{suffix}"


def now_ms() -> int:
    return int(time.time() * 1000)


class SavedCalculationRepository(BaseRepository[SavedCalculation]):
    """Repository for SavedCalculation database operations."""

    def __init__(self, session: Session):
        """Initialize saved calculation repository."""
        super().__init__(SavedCalculation, session)

    def _next_timestamp(self) -> int:
        """Current time in ms, strictly after every stored timestamp."""
        latest = self.session.query(func.max(SavedCalculation.timestamp)).scalar()
        current = now_ms()
        if latest is not None and current <= latest:
            return latest + 1
        return current

    def create_calculation(self, name: str, data: Dict[str, Any], max_count: int) -> SavedCalculation:
        """
        Store a new calculation and evict the oldest beyond ``max_count``.

        Args:
            name: Display name
            data: Calculation payload
            max_count: Number of calculations to retain

        Returns:
            Created SavedCalculation instance
        """
        timestamp = self._next_timestamp()
        instance = self.create(
            id=generate_calculation_id(timestamp),
            name=name,
            timestamp=timestamp,
            data=data,
        )
        self.evict_beyond(max_count)
        return instance

    def get_newest_first(self) -> List[SavedCalculation]:
        return (
            self.session.query(SavedCalculation)
            .order_by(SavedCalculation.timestamp.desc())
            .all()
        )

    def evict_beyond(self, max_count: int) -> int:
        """
        Delete the oldest calculations so at most ``max_count`` remain.

        Returns:
            Number of calculations evicted
        """
        stale = (
            self.session.query(SavedCalculation)
            .order_by(SavedCalculation.timestamp.desc())
            .offset(max_count)
            .all()
        )
        for instance in stale:
            self.session.delete(instance)
        if stale:
            self.session.flush()
        return len(stale)

    def update_calculation(self, id: str, updates: Dict[str, Any]) -> Optional[SavedCalculation]:
        """
        Apply ``name``/``data`` updates and refresh the timestamp.

        Returns:
            Updated instance or None if not found
        """
        fields = {key: value for key, value in updates.items() if key in ("name", "data")}
        fields["timestamp"] = self._next_timestamp()
        return self.update(id, **fields)
