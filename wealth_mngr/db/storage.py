"""
Persistence facade for saved calculations, preferences and the corpus state.

Every function accepts an optional SQLAlchemy session (the API passes its
request session); without one a short-lived session is opened. Database
failures are logged and reported through the return value (``None``,
``False`` or an empty list) so the calculators keep working without storage.
"""

import json
import logging
import os
from contextlib import contextmanager
from datetime import date
from typing import Any, Dict, Generator, List, Mapping, Optional, Union

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from wealth_mngr.core.constants import CORPUS_STATE_KEY, MAX_SAVED_CALCULATIONS, USER_PREFERENCES_KEY
from wealth_mngr.core.preferences import CorpusState, UserPreferences
from wealth_mngr.db.connection import db_session
from wealth_mngr.db.repositories import PreferenceRepository, SavedCalculationRepository
from wealth_mngr.utils.error_utils import StorageError, WealthMngrError

logger = logging.getLogger(__name__)

# Keys captured by save_current_state, with the value used when a key is missing
STATE_FIELDS = (
    ("selectedInstruments", list),
    ("investments", dict),
    ("settings", dict),
    ("results", lambda: None),
    ("purchasingPower", lambda: None),
    ("currentStep", lambda: 1),
)


def get_max_saved_calculations() -> int:
    """Retention cap, from WEALTH_MNGR_MAX_SAVED_CALCULATIONS (default 20)."""
    return int(os.getenv("WEALTH_MNGR_MAX_SAVED_CALCULATIONS", str(MAX_SAVED_CALCULATIONS)))


def default_calculation_name(today: Optional[date] = None) -> str:
    today = today or date.today()
    return f"Corpus Calculation {today.strftime('%d/%m/%Y')}"


@contextmanager
def _session_scope(session: Optional[Session] = None) -> Generator[Session, None, None]:
    """Use the caller's session (flushing on success) or open a committed one."""
    if session is None:
        with db_session() as own_session:
            yield own_session
        return

    try:
        yield session
        session.flush()
    except SQLAlchemyError:
        session.rollback()
        raise


def _require_mapping(data: Any, what: str) -> Dict[str, Any]:
    if not isinstance(data, Mapping):
        raise StorageError(f"{what} must be a mapping, got {type(data).__name__}")
    return dict(data)


# ======================
# Saved calculations
# ======================


def save_calculation(data: Mapping[str, Any], name: Optional[str] = None,
                     session: Optional[Session] = None) -> Optional[str]:
    """
    Save a calculation as the newest entry.

    Args:
        data: Calculation payload
        name: Display name (defaults to "Corpus Calculation <date>")
        session: Optional database session

    Returns:
        The new id, or None when the calculation could not be stored
    """
    try:
        payload = _require_mapping(data, "Calculation data")
        with _session_scope(session) as scope:
            repo = SavedCalculationRepository(scope)
            calculation = repo.create_calculation(name or default_calculation_name(), payload,
                                                  get_max_saved_calculations())
            calculation_id = calculation.id
        logger.info(f"Saved calculation {calculation_id}")
        return calculation_id
    except (SQLAlchemyError, StorageError) as e:
        logger.error(f"Error saving calculation: {e}")
        return None


def save_current_state(state: Union[CorpusState, Mapping[str, Any]], name: Optional[str] = None,
                       session: Optional[Session] = None) -> Optional[str]:
    """Save the corpus simulator's state (instruments, investments, settings, results, step)."""
    if isinstance(state, CorpusState):
        state = state.to_dict()
    state = state or {}
    payload = {key: state.get(key) or default() for key, default in STATE_FIELDS}
    return save_calculation(payload, name, session)


def get_all_saved_calculations(session: Optional[Session] = None) -> List[Dict[str, Any]]:
    """All saved calculations, newest first; empty when storage is unavailable."""
    try:
        with _session_scope(session) as scope:
            return [calculation.to_dict() for calculation in SavedCalculationRepository(scope).get_newest_first()]
    except SQLAlchemyError as e:
        logger.error(f"Error loading saved calculations: {e}")
        return []


def get_calculation(calculation_id: str, session: Optional[Session] = None) -> Optional[Dict[str, Any]]:
    try:
        with _session_scope(session) as scope:
            calculation = SavedCalculationRepository(scope).get_by_id(calculation_id)
            return calculation.to_dict() if calculation else None
    except SQLAlchemyError as e:
        logger.error(f"Error getting calculation {calculation_id}: {e}")
        return None


def load_calculation_for_store(calculation_id: str, session: Optional[Session] = None) -> Optional[Dict[str, Any]]:
    """Payload of a saved calculation, ready to restore into the simulator."""
    calculation = get_calculation(calculation_id, session)
    if calculation is None:
        return None
    return calculation["data"]


def update_calculation(calculation_id: str, updates: Mapping[str, Any],
                       session: Optional[Session] = None) -> bool:
    """
    Update a saved calculation's name and/or data and refresh its timestamp.

    Returns:
        True if updated, False if not found or storage failed
    """
    try:
        updates = _require_mapping(updates, "Updates")
        with _session_scope(session) as scope:
            updated = SavedCalculationRepository(scope).update_calculation(calculation_id, updates)
        return updated is not None
    except (SQLAlchemyError, StorageError) as e:
        logger.error(f"Error updating calculation {calculation_id}: {e}")
        return False


def delete_calculation(calculation_id: str, session: Optional[Session] = None) -> bool:
    """
    Delete a saved calculation.

    Returns:
        True if deleted, False if not found or storage failed
    """
    try:
        with _session_scope(session) as scope:
            return SavedCalculationRepository(scope).delete(calculation_id)
    except SQLAlchemyError as e:
        logger.error(f"Error deleting calculation {calculation_id}: {e}")
        return False


def clear_all_calculations(session: Optional[Session] = None) -> bool:
    try:
        with _session_scope(session) as scope:
            deleted = SavedCalculationRepository(scope).delete_all()
        logger.info(f"Cleared {deleted} saved calculations")
        return True
    except SQLAlchemyError as e:
        logger.error(f"Error clearing calculations: {e}")
        return False


def is_storage_available(session: Optional[Session] = None) -> bool:
    try:
        with _session_scope(session) as scope:
            scope.execute(text("SELECT 1"))
        return True
    except SQLAlchemyError as e:
        logger.error(f"Storage unavailable: {e}")
        return False


def get_storage_info(session: Optional[Session] = None) -> Dict[str, Any]:
    """
    Count and serialized size of the saved calculations.

    Returns:
        Dictionary with count, maxCount, dataSize (characters of JSON) and dataSizeKB (string, 2 decimals)
    """
    saved = get_all_saved_calculations(session)
    data_size = len(json.dumps(saved))
    return {
        "count": len(saved),
        "maxCount": get_max_saved_calculations(),
        "dataSize": data_size,
        "dataSizeKB": f"{data_size / 1024:.2f}",
    }


# ======================
# Preferences and corpus state
# ======================


def load_preferences(session: Optional[Session] = None) -> UserPreferences:
    """Stored preferences merged over the defaults; defaults when nothing is stored."""
    try:
        with _session_scope(session) as scope:
            stored = PreferenceRepository(scope).get_value(USER_PREFERENCES_KEY)
        return UserPreferences.from_dict(stored if isinstance(stored, Mapping) else None)
    except (SQLAlchemyError, WealthMngrError) as e:
        logger.error(f"Error loading preferences: {e}")
        return UserPreferences()


def save_preferences(preferences: UserPreferences, session: Optional[Session] = None) -> bool:
    try:
        with _session_scope(session) as scope:
            PreferenceRepository(scope).set_value(USER_PREFERENCES_KEY, preferences.to_dict())
        return True
    except (SQLAlchemyError, WealthMngrError) as e:
        logger.error(f"Error saving preferences: {e}")
        return False


def load_corpus_state(session: Optional[Session] = None) -> Optional[CorpusState]:
    """The work-in-progress corpus simulation, or None when none is stored."""
    try:
        with _session_scope(session) as scope:
            stored = PreferenceRepository(scope).get_value(CORPUS_STATE_KEY)
        if not isinstance(stored, Mapping):
            return None
        return CorpusState.from_dict(stored)
    except (SQLAlchemyError, WealthMngrError) as e:
        logger.error(f"Error loading corpus state: {e}")
        return None


def save_corpus_state(state: CorpusState, session: Optional[Session] = None) -> bool:
    try:
        with _session_scope(session) as scope:
            PreferenceRepository(scope).set_value(CORPUS_STATE_KEY, state.to_dict())
        return True
    except (SQLAlchemyError, WealthMngrError) as e:
        logger.error(f"Error saving corpus state: {e}")
        return False


def clear_corpus_state(session: Optional[Session] = None) -> bool:
    try:
        with _session_scope(session) as scope:
            PreferenceRepository(scope).delete(CORPUS_STATE_KEY)
        return True
    except SQLAlchemyError as e:
        logger.error(f"Error clearing corpus state: {e}")
        return False
