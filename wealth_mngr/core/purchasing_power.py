"""
Purchasing-power engine.

Projects reference prices forward under category inflation and compares them
with a corpus. Examples whose price cannot be resolved for the chosen city are
skipped; an unknown city yields an empty result.
"""

import logging
import math
from typing import Any, Dict, Iterable, Mapping, Optional

from wealth_mngr.core.constants import ECategory
from wealth_mngr.core.inflation import (
    CATEGORY_RATE_KEYS,
    GENERAL,
    inflation_rates_to_decimals,
)
from wealth_mngr.core.price_examples import (
    PURCHASING_POWER_EXAMPLES,
    PriceExample,
    get_city_info,
)
from wealth_mngr.utils.rate_utils import round_amount

logger = logging.getLogger(__name__)


def calculate_future_price(current_price, inflation_rate, years) -> float:
    """
    Price after ``years`` of inflation: ``price·(1+rate)^years``.

    Returns the current price unchanged when the rate or period is missing.

    Examples:
        >>> round(calculate_future_price(100000, 0.10, 10), 2)
        259374.25
    """
    if not current_price or current_price <= 0 or not inflation_rate or not years:
        return current_price or 0
    return current_price * (1 + inflation_rate) ** years


def calculate_affordability(corpus, future_price) -> Dict[str, Any]:
    """
    How much of ``future_price`` a corpus covers.

    ``percentageAffordable`` is clamped to [0, 100] and rounded to 2 decimals.
    """
    if not corpus or corpus <= 0 or not future_price or future_price <= 0:
        return {"canAfford": False, "unitsAffordable": 0, "percentageAffordable": 0}

    units = math.floor(corpus / future_price)
    percentage = min(100.0, corpus / future_price * 100)
    return {
        "canAfford": units > 0,
        "unitsAffordable": units,
        "percentageAffordable": round_amount(percentage),
    }


def _category_rate(category: str, rates: Mapping[str, float]) -> float:
    return rates[CATEGORY_RATE_KEYS.get(category, GENERAL)]


def _merge_rates(inflation_rates: Optional[Mapping[str, float]]) -> Dict[str, float]:
    """Decimal rates with missing or zero entries replaced by the defaults."""
    defaults = inflation_rates_to_decimals(None)
    inflation_rates = inflation_rates or {}
    return {key: inflation_rates.get(key) or default for key, default in defaults.items()}


def calculate_purchasing_power(
    corpus,
    examples: Mapping[str, Mapping[str, PriceExample]],
    years,
    city_key: str,
    inflation_rates: Optional[Mapping[str, float]] = None,
) -> Dict[str, Dict[str, Any]]:
    """
    Affordability of every resolvable example, grouped by category.

    Args:
        corpus: Amount available at the horizon
        examples: Category -> example key -> ``PriceExample``
        years: Horizon in years
        city_key: City used for tier-based prices
        inflation_rates: Decimal rates keyed by education, healthcare, realEstate,
            luxuryGoods, consumerGoodsWholesale, consumerGoodsRetail, general

    Returns:
        ``{category: {"category": ..., "examples": [...]}}``; empty for a
        non-positive corpus, zero years or an unknown city
    """
    if not corpus or corpus <= 0 or not years or not city_key:
        return {}

    city = get_city_info(city_key)
    if city is None:
        logger.debug(f"Unknown city '{city_key}'; no purchasing-power examples")
        return {}

    rates = _merge_rates(inflation_rates)
    results = {}
    for category, category_examples in examples.items():
        if not category_examples:
            continue
        results[category] = {"category": category, "examples": []}
        rate = _category_rate(category, rates)

        for key, example in category_examples.items():
            current_price = example.price_for_tier(city.tier)
            if not current_price:
                logger.debug(f"No {city.tier} price for {category}/{key}; skipped")
                continue

            future_price = calculate_future_price(current_price, rate, years)
            entry = {
                "key": key,
                "label": example.label,
                "unit": example.unit,
                "currentPrice": round_amount(current_price),
                "futurePrice": round_amount(future_price),
                "inflationRate": round_amount(rate * 100, 1),
            }
            entry.update(calculate_affordability(corpus, future_price))
            results[category]["examples"].append(entry)

    return results


def calculate_purchasing_power_for_categories(
    corpus,
    categories: Iterable[str],
    years,
    city_key: str,
    inflation_rates: Optional[Mapping[str, float]] = None,
) -> Dict[str, Dict[str, Any]]:
    """Purchasing power restricted to the named categories; unknown names are ignored."""
    selected = {category: PURCHASING_POWER_EXAMPLES[category]
                for category in categories if category in PURCHASING_POWER_EXAMPLES}
    return calculate_purchasing_power(corpus, selected, years, city_key, inflation_rates)


def get_purchasing_power_summary(results: Optional[Mapping[str, Mapping[str, Any]]]) -> Dict[str, Any]:
    """Counts of fully, partially and un-affordable examples."""
    summary = {
        "totalExamples": 0,
        "affordableExamples": 0,
        "partiallyAffordableExamples": 0,
        "unaffordableExamples": 0,
        "affordabilityRate": 0,
    }
    if not results:
        return summary

    for category_data in results.values():
        for example in (category_data or {}).get("examples", []):
            summary["totalExamples"] += 1
            if example.get("canAfford") and example.get("unitsAffordable", 0) >= 1:
                summary["affordableExamples"] += 1
            elif example.get("percentageAffordable", 0) > 0:
                summary["partiallyAffordableExamples"] += 1
            else:
                summary["unaffordableExamples"] += 1

    if summary["totalExamples"]:
        summary["affordabilityRate"] = summary["affordableExamples"] / summary["totalExamples"] * 100
    return summary


ALL_CATEGORIES = (
    ECategory.EDUCATION,
    ECategory.REAL_ESTATE,
    ECategory.LUXURY_GOODS,
    ECategory.HEALTHCARE,
    ECategory.CONSUMER_GOODS,
)
