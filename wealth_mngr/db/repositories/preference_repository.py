"""
Preference repository for database operations.

Key/value access to the user_preferences table.
"""

from typing import Any, Optional

from sqlalchemy.orm import Session

from wealth_mngr.db.models import UserPreference
from wealth_mngr.db.repositories.base import BaseRepository


class PreferenceRepository(BaseRepository[UserPreference]):
    """Repository for UserPreference database operations."""

    def __init__(self, session: Session):
        """Initialize preference repository."""
        super().__init__(UserPreference, session)

    def get_value(self, key: str) -> Optional[Any]:
        """Stored value for ``key``, or None."""
        instance = self.get_by_id(key)
        return instance.value if instance else None

    def set_value(self, key: str, value: Any) -> UserPreference:
        """Insert or replace the value stored under ``key``."""
        instance = self.get_by_id(key)
        if instance is None:
            return self.create(key=key, value=value)
        instance.value = value
        self.session.flush()
        return instance
