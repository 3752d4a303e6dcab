"""
Default category inflation rates for purchasing-power projections.

Rates are percentages (RBI and sector estimates); convert with
``inflation_rates_to_decimals`` before projecting prices.
"""

from typing import Dict, Mapping, Optional

from wealth_mngr.core.constants import ECategory
from wealth_mngr.utils.rate_utils import annual_pct_to_decimal, normalize_rate_input, validate_rate_range

GENERAL = "general"
CONSUMER_GOODS_WHOLESALE = "consumerGoodsWholesale"
CONSUMER_GOODS_RETAIL = "consumerGoodsRetail"

DEFAULT_INFLATION_RATES: Dict[str, float] = {
    ECategory.EDUCATION: 10,
    ECategory.HEALTHCARE: 8,
    ECategory.REAL_ESTATE: 7,
    ECategory.LUXURY_GOODS: 6,
    CONSUMER_GOODS_WHOLESALE: 4,
    CONSUMER_GOODS_RETAIL: 5,
    GENERAL: 6,
}

# Rate key used for each example category; consumers pay retail prices
CATEGORY_RATE_KEYS = {
    ECategory.EDUCATION: ECategory.EDUCATION,
    ECategory.HEALTHCARE: ECategory.HEALTHCARE,
    ECategory.REAL_ESTATE: ECategory.REAL_ESTATE,
    ECategory.LUXURY_GOODS: ECategory.LUXURY_GOODS,
    ECategory.CONSUMER_GOODS: CONSUMER_GOODS_RETAIL,
}


def get_default_inflation_rate(category: str) -> float:
    """Default rate (percent) for a rate key, falling back to the general rate."""
    return DEFAULT_INFLATION_RATES.get(category) or DEFAULT_INFLATION_RATES[GENERAL]


def get_all_default_inflation_rates() -> Dict[str, float]:
    return dict(DEFAULT_INFLATION_RATES)


def set_inflation_rate(current_rates: Mapping[str, float], category: str, rate: float) -> Dict[str, float]:
    """Copy of ``current_rates`` with one category replaced; accepts "7.5%" style input."""
    updated = dict(current_rates)
    updated[category] = normalize_rate_input(rate)
    return updated


def is_valid_inflation_rate(rate) -> bool:
    """True for a number between 0 and 100 percent."""
    if isinstance(rate, bool) or not isinstance(rate, (int, float)):
        return False
    return validate_rate_range(rate)


def inflation_rates_to_decimals(rates: Optional[Mapping[str, float]]) -> Dict[str, float]:
    """
    Percent rates to decimals, filling missing or zero entries from the defaults.

    Examples:
        >>> inflation_rates_to_decimals({"education": 12})["education"]
        0.12
        >>> inflation_rates_to_decimals(None)["general"]
        0.06
    """
    rates = rates or {}
    return {key: annual_pct_to_decimal(rates.get(key) or default) for key, default in DEFAULT_INFLATION_RATES.items()}
