"""
Preference API endpoints.

User preferences and the work-in-progress corpus simulator state.
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from wealth_mngr.api.schemas import SaveStateRequest, UserPreferencesSchema
from wealth_mngr.core.preferences import CorpusState, UserPreferences
from wealth_mngr.db.connection import get_db_session
from wealth_mngr.db import storage


router = APIRouter()


@router.get("", response_model=UserPreferencesSchema)
def get_preferences(db: Session = Depends(get_db_session)):
    """Stored preferences merged over the defaults."""
    return storage.load_preferences(db).to_dict()


@router.put("", response_model=UserPreferencesSchema)
def update_preferences(data: UserPreferencesSchema, db: Session = Depends(get_db_session)):
    preferences = UserPreferences.from_dict(data.model_dump(by_alias=True))
    if not storage.save_preferences(preferences, db):
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Preferences could not be saved",
        )
    return preferences.to_dict()


@router.get("/corpus-state")
def get_corpus_state(db: Session = Depends(get_db_session)) -> Dict[str, Any]:
    state = storage.load_corpus_state(db)
    if state is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No corpus state saved",
        )
    return state.to_dict()


@router.put("/corpus-state")
def update_corpus_state(data: SaveStateRequest, db: Session = Depends(get_db_session)) -> Dict[str, Any]:
    """Persist the simulator's state so it can be restored later."""
    state = CorpusState.from_dict(data.model_dump(by_alias=True, exclude={"name"}))
    if not storage.save_corpus_state(state, db):
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Corpus state could not be saved",
        )
    return state.to_dict()


@router.delete("/corpus-state", status_code=status.HTTP_204_NO_CONTENT)
def clear_corpus_state(db: Session = Depends(get_db_session)):
    storage.clear_corpus_state(db)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
