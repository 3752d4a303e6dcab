"""
Corpus and purchasing-power API endpoints.
"""

from typing import Any, Dict

from fastapi import APIRouter

from wealth_mngr.api.schemas import CorpusRequest, PurchasingPowerRequest
from wealth_mngr.core.engine.corpus_engine import calculate_corpus
from wealth_mngr.core.preferences import CorpusSettings
from wealth_mngr.core.purchasing_power import (
    ALL_CATEGORIES,
    calculate_purchasing_power_for_categories,
    get_purchasing_power_summary,
)


router = APIRouter()
purchasing_power_router = APIRouter()


@router.post("")
def corpus(data: CorpusRequest) -> Dict[str, Any]:
    """
    Simulate a corpus for the selected instruments.

    Returns totals, per-instrument valuations, advisories, the real corpus,
    tax for the chosen method and purchasing power in the selected city.
    """
    settings = CorpusSettings.from_dict(data.settings.model_dump(by_alias=True))
    result = calculate_corpus(data.selected_instruments, data.investments, settings)
    return result.to_dict()


@purchasing_power_router.post("")
def purchasing_power(data: PurchasingPowerRequest) -> Dict[str, Any]:
    """What a corpus buys after ``years`` of category inflation in a city."""
    rates = {category: rate / 100 for category, rate in data.inflation_rates.items()}
    results = calculate_purchasing_power_for_categories(
        data.corpus,
        data.categories or ALL_CATEGORIES,
        data.years,
        data.city_key,
        rates,
    )
    return {"results": results, "summary": get_purchasing_power_summary(results)}
