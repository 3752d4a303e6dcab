"""
Database repository layer.

Provides data access patterns using the Repository Pattern.
"""

from wealth_mngr.db.repositories.base import BaseRepository
from wealth_mngr.db.repositories.saved_calculation_repository import (
    SavedCalculationRepository,
    generate_calculation_id,
)
from wealth_mngr.db.repositories.preference_repository import PreferenceRepository

__all__ = [
    "BaseRepository",
    "SavedCalculationRepository",
    "PreferenceRepository",
    "generate_calculation_id",
]
