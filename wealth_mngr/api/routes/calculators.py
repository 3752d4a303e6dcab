"""
Single-instrument calculator API endpoints.

Inputs are validated by the request schemas; results use the stored user
preferences for the tax slab and inflation adjustment.
"""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from wealth_mngr.api.schemas import (
    FDRequest,
    MarketLinkedInstrument,
    MarketLinkedRequest,
    NPSRequest,
    NSCRequest,
    PPFRequest,
    RDRequest,
    REITsRequest,
    SCSSRequest,
    SGBRequest,
    SIPRequest,
)
from wealth_mngr.core.engine.calculators import (
    calculate_fd_results,
    calculate_lumpsum_or_sip_results,
    calculate_nps_results,
    calculate_nsc_results,
    calculate_ppf_results,
    calculate_rd_results,
    calculate_reits_results,
    calculate_scss_results,
    calculate_sgb_results,
    calculate_sip_results,
)
from wealth_mngr.db.connection import get_db_session
from wealth_mngr.db.storage import load_preferences


router = APIRouter()


def _checked(result: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    if result is None:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="Inputs are below the instrument's minimums",
        )
    return result


@router.post("/ppf")
def ppf(data: PPFRequest, db: Session = Depends(get_db_session)):
    return _checked(calculate_ppf_results(
        data.yearly_investment, data.tenure, data.rate_pct,
        data.step_up_enabled, data.step_up_pct, load_preferences(db)))


@router.post("/fd")
def fd(data: FDRequest, db: Session = Depends(get_db_session)):
    return _checked(calculate_fd_results(
        data.principal, data.tenure_years, data.tenure_months, data.rate_pct,
        data.compounding, load_preferences(db)))


@router.post("/rd")
def rd(data: RDRequest, db: Session = Depends(get_db_session)):
    return _checked(calculate_rd_results(
        data.monthly_deposit, data.tenure_years, data.tenure_months, data.rate_pct,
        data.compounding, load_preferences(db)))


@router.post("/sip")
def sip(data: SIPRequest, db: Session = Depends(get_db_session)):
    return _checked(calculate_sip_results(
        data.monthly_sip, data.tenure, data.expected_return_pct, data.tenure_unit,
        data.step_up_enabled, data.step_up_pct, load_preferences(db)))


@router.post("/nsc")
def nsc(data: NSCRequest, db: Session = Depends(get_db_session)):
    return _checked(calculate_nsc_results(data.principal, data.rate_pct, data.tenure, load_preferences(db)))


@router.post("/scss")
def scss(data: SCSSRequest, db: Session = Depends(get_db_session)):
    return _checked(calculate_scss_results(
        data.principal, data.tenure, data.rate_pct, data.seniors_age,
        data.is_defence_personnel, load_preferences(db)))


@router.post("/sgb")
def sgb(data: SGBRequest, db: Session = Depends(get_db_session)):
    return _checked(calculate_sgb_results(
        data.gold_grams, data.tenure, data.gold_appreciation_pct, data.gold_price_per_gram,
        load_preferences(db)))


@router.post("/nps")
def nps(data: NPSRequest, db: Session = Depends(get_db_session)):
    """NPS projection; allocation and returns are percent per asset class."""
    return _checked(calculate_nps_results(
        data.monthly_contribution,
        data.tenure,
        data.current_age,
        data.allocation.model_dump(by_alias=True),
        data.returns.model_dump(by_alias=True),
        data.use_age_based_caps,
        load_preferences(db),
    ))


@router.post("/reits")
def reits(data: REITsRequest, db: Session = Depends(get_db_session)):
    return _checked(calculate_reits_results(
        data.investment_amount, data.tenure, data.dividend_yield_pct, data.capital_appreciation_pct,
        data.number_of_units, load_preferences(db)))


@router.post("/{instrument}")
def market_linked(instrument: MarketLinkedInstrument, data: MarketLinkedRequest,
                  db: Session = Depends(get_db_session)):
    """Equity, ELSS or debt mutual fund as a SIP or a lumpsum."""
    return _checked(calculate_lumpsum_or_sip_results(
        instrument.value, data.investment_type, data.amount, data.tenure, data.expected_return_pct,
        data.step_up_enabled, data.step_up_pct, load_preferences(db)))
