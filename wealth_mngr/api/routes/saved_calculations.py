"""
Saved calculation API endpoints.

CRUD over saved corpus simulations. Storage failures surface as 503 so the
client can keep working without persistence.
"""

from typing import Any, Dict, List

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from wealth_mngr.api.schemas import (
    SaveCalculationRequest,
    SaveStateRequest,
    SavedCalculationCreated,
    SavedCalculationResponse,
    StorageInfo,
    UpdateCalculationRequest,
)
from wealth_mngr.db.connection import get_db_session
from wealth_mngr.db import storage


router = APIRouter()


def _not_found(calculation_id: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=f"Saved calculation {calculation_id} not found",
    )


def _created(calculation_id) -> SavedCalculationCreated:
    if calculation_id is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Calculation could not be saved",
        )
    return SavedCalculationCreated(id=calculation_id)


@router.get("", response_model=List[SavedCalculationResponse])
def list_calculations(db: Session = Depends(get_db_session)):
    """All saved calculations, newest first."""
    return storage.get_all_saved_calculations(db)


@router.post("", response_model=SavedCalculationCreated, status_code=status.HTTP_201_CREATED)
def save_calculation(data: SaveCalculationRequest, db: Session = Depends(get_db_session)):
    return _created(storage.save_calculation(data.data, data.name, db))


@router.post("/current-state", response_model=SavedCalculationCreated, status_code=status.HTTP_201_CREATED)
def save_current_state(data: SaveStateRequest, db: Session = Depends(get_db_session)):
    """Snapshot the corpus simulator's state."""
    state = data.model_dump(by_alias=True, exclude={"name"})
    return _created(storage.save_current_state(state, data.name, db))


@router.get("/info", response_model=StorageInfo)
def storage_info(db: Session = Depends(get_db_session)):
    return storage.get_storage_info(db)


@router.delete("", status_code=status.HTTP_204_NO_CONTENT)
def clear_calculations(db: Session = Depends(get_db_session)):
    if not storage.clear_all_calculations(db):
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Saved calculations could not be cleared",
        )
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{calculation_id}", response_model=SavedCalculationResponse)
def get_calculation(calculation_id: str, db: Session = Depends(get_db_session)):
    calculation = storage.get_calculation(calculation_id, db)
    if calculation is None:
        raise _not_found(calculation_id)
    return calculation


@router.get("/{calculation_id}/state")
def load_calculation_state(calculation_id: str, db: Session = Depends(get_db_session)) -> Dict[str, Any]:
    """Saved payload, ready to restore into the simulator."""
    data = storage.load_calculation_for_store(calculation_id, db)
    if data is None:
        raise _not_found(calculation_id)
    return data


@router.put("/{calculation_id}", response_model=SavedCalculationResponse)
def update_calculation(calculation_id: str, data: UpdateCalculationRequest,
                       db: Session = Depends(get_db_session)):
    """Rename and/or replace the data of a saved calculation."""
    updates = data.model_dump(exclude_none=True)
    if not storage.update_calculation(calculation_id, updates, db):
        raise _not_found(calculation_id)
    return storage.get_calculation(calculation_id, db)


@router.delete("/{calculation_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_calculation(calculation_id: str, db: Session = Depends(get_db_session)):
    if not storage.delete_calculation(calculation_id, db):
        raise _not_found(calculation_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
