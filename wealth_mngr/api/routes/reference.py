"""
Reference data API endpoints.

Read-only access to the rate table, CII table, cities, price examples and
default inflation rates.
"""

from typing import Any, Dict, List

from fastapi import APIRouter

from wealth_mngr.core.constants import CORPUS_INSTRUMENTS, INSTRUMENT_NAMES
from wealth_mngr.core.indexation import CIITable, get_current_financial_year
from wealth_mngr.core.inflation import get_all_default_inflation_rates
from wealth_mngr.core.price_examples import examples_to_dict, get_all_cities
from wealth_mngr.core.rates import RateTable
from wealth_mngr.core.tax import get_tax_rule


router = APIRouter()


@router.get("/rates")
def get_rates() -> Dict[str, Dict[str, Any]]:
    """Current rates and limits per instrument."""
    return RateTable.default().to_dict()


@router.get("/cii")
def get_cii() -> Dict[str, Any]:
    """Cost Inflation Index table and the current financial year."""
    data = CIITable().to_dict()
    data["currentFinancialYear"] = get_current_financial_year()
    return data


@router.get("/cities")
def get_cities() -> List[Dict[str, str]]:
    return get_all_cities()


@router.get("/price-examples")
def get_price_examples() -> Dict[str, Dict[str, Dict[str, Any]]]:
    return examples_to_dict()


@router.get("/inflation-rates")
def get_inflation_rates() -> Dict[str, float]:
    """Default inflation rate per category (percent)."""
    return get_all_default_inflation_rates()


@router.get("/instruments")
def get_instruments() -> List[Dict[str, Any]]:
    """Instruments, their display names and tax notes."""
    instruments = []
    for instrument, (short_name, full_name) in INSTRUMENT_NAMES.items():
        instruments.append({
            "id": instrument,
            "shortName": short_name,
            "name": full_name,
            "corpusSupported": instrument in CORPUS_INSTRUMENTS,
            "taxRule": get_tax_rule(instrument).notes,
        })
    return instruments
