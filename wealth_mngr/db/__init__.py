"""
Database layer for Wealth Manager.

Provides the ORM models, connection management and the storage facade for
saved calculations and preferences.
"""

from .connection import db_session, get_db_manager, get_db_session, init_database
from wealth_mngr.db import models  # noqa: F401
from .models import (
    Base,
    SavedCalculation,
    UserPreference,
)

__all__ = [
    # Connection utilities
    "db_session",
    "get_db_manager",
    "get_db_session",
    "init_database",
    # Models
    "Base",
    "SavedCalculation",
    "UserPreference",
]
