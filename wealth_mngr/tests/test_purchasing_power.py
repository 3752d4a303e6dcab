"""
Test suite for purchasing power, price examples and inflation defaults.
"""

import pytest

from wealth_mngr.core.inflation import (
    DEFAULT_INFLATION_RATES,
    get_default_inflation_rate,
    inflation_rates_to_decimals,
    is_valid_inflation_rate,
    set_inflation_rate,
)
from wealth_mngr.core.price_examples import (
    PURCHASING_POWER_EXAMPLES,
    get_all_cities,
    get_cities_by_tier,
    get_city_info,
    get_example_price,
)
from wealth_mngr.core.purchasing_power import (
    ALL_CATEGORIES,
    calculate_affordability,
    calculate_future_price,
    calculate_purchasing_power,
    calculate_purchasing_power_for_categories,
    get_purchasing_power_summary,
)


class TestInflationDefaults:

    def test_defaults(self):
        assert get_default_inflation_rate("education") == 10
        assert get_default_inflation_rate("consumerGoodsRetail") == 5
        assert get_default_inflation_rate("space-travel") == DEFAULT_INFLATION_RATES["general"]

    def test_to_decimals_fills_missing(self):
        rates = inflation_rates_to_decimals({"education": 12, "healthcare": 0})
        assert rates["education"] == 0.12
        assert rates["healthcare"] == 0.08
        assert rates["general"] == 0.06

    def test_set_rate_returns_copy(self):
        rates = {"education": 10}
        updated = set_inflation_rate(rates, "education", 11)
        assert updated == {"education": 11}
        assert rates == {"education": 10}

    def test_set_rate_accepts_percent_string(self):
        assert set_inflation_rate({}, "healthcare", "7.5%") == {"healthcare": 7.5}

    @pytest.mark.parametrize("rate, valid", [(0, True), (6.5, True), (100, True), (-1, False),
                                             (101, False), ("6", False), (True, False), (None, False)])
    def test_is_valid_inflation_rate(self, rate, valid):
        assert is_valid_inflation_rate(rate) is valid


class TestPriceExamples:

    def test_cities(self):
        assert len(get_all_cities()) == 10
        assert get_city_info("pune").tier == "tier1"
        assert get_city_info("atlantis") is None
        assert {city["key"] for city in get_cities_by_tier("tier2")} == {"indore", "guwahati"}

    def test_tiered_price(self):
        assert get_example_price("education", "mba-tuition", "mumbai") == 2500000
        assert get_example_price("education", "mba-tuition", "pune") == 2000000
        assert get_example_price("education", "mba-tuition", "indore") == 1500000

    def test_uniform_price_any_city(self):
        assert get_example_price("luxuryGoods", "bmw-m3", "atlantis") == 15000000

    def test_unresolvable(self):
        assert get_example_price("education", "mba-tuition", "atlantis") is None
        assert get_example_price("education", "phd", "mumbai") is None
        assert get_example_price("pets", "dog", "mumbai") is None


def test_future_price():
    assert calculate_future_price(100000, 0.10, 10) == pytest.approx(259374.25, abs=0.01)
    assert calculate_future_price(100000, 0, 10) == 100000
    assert calculate_future_price(None, 0.1, 10) == 0


class TestAffordability:

    def test_affordable(self):
        assert calculate_affordability(500000, 200000) == {
            "canAfford": True, "unitsAffordable": 2, "percentageAffordable": 100.0}

    def test_partially_affordable(self):
        assert calculate_affordability(50000, 200000) == {
            "canAfford": False, "unitsAffordable": 0, "percentageAffordable": 25.0}

    def test_invalid(self):
        assert calculate_affordability(0, 200000)["percentageAffordable"] == 0
        assert calculate_affordability(50000, 0)["canAfford"] is False


class TestPurchasingPower:

    def test_unknown_city_is_empty(self):
        assert calculate_purchasing_power(1000000, PURCHASING_POWER_EXAMPLES, 10, "atlantis") == {}

    def test_invalid_inputs_are_empty(self):
        assert calculate_purchasing_power(0, PURCHASING_POWER_EXAMPLES, 10, "mumbai") == {}
        assert calculate_purchasing_power(1000000, PURCHASING_POWER_EXAMPLES, 0, "mumbai") == {}

    def test_metro_education(self):
        results = calculate_purchasing_power(1000000, PURCHASING_POWER_EXAMPLES, 10, "mumbai")
        assert set(results) == set(ALL_CATEGORIES)
        school = results["education"]["examples"][0]
        assert school["key"] == "school-fees-1year"
        assert school["currentPrice"] == 500000.0
        assert school["futurePrice"] == pytest.approx(500000 * 1.1 ** 10, abs=0.01)
        assert school["inflationRate"] == 10.0
        assert school["unitsAffordable"] == 0

    def test_consumer_goods_use_retail_rate(self):
        results = calculate_purchasing_power_for_categories(1000000, ["consumerGoods"], 5, "pune")
        petrol = next(example for example in results["consumerGoods"]["examples"]
                      if example["key"] == "petrol-per-liter")
        assert petrol["inflationRate"] == 5.0
        assert petrol["canAfford"] is True

    def test_custom_rates(self):
        results = calculate_purchasing_power_for_categories(1000000, ["education"], 10, "indore",
                                                            {"education": 0.12})
        mba = results["education"]["examples"][2]
        assert mba["currentPrice"] == 1500000.0
        assert mba["inflationRate"] == 12.0

    def test_unknown_categories_ignored(self):
        results = calculate_purchasing_power_for_categories(1000000, ["education", "pets"], 10, "mumbai")
        assert list(results) == ["education"]


def test_summary():
    results = {
        "education": {"examples": [
            {"canAfford": True, "unitsAffordable": 2, "percentageAffordable": 100},
            {"canAfford": False, "unitsAffordable": 0, "percentageAffordable": 40},
        ]},
        "healthcare": {"examples": [
            {"canAfford": False, "unitsAffordable": 0, "percentageAffordable": 0},
            {"canAfford": True, "unitsAffordable": 1, "percentageAffordable": 100},
        ]},
    }
    summary = get_purchasing_power_summary(results)
    assert summary["totalExamples"] == 4
    assert summary["affordableExamples"] == 2
    assert summary["partiallyAffordableExamples"] == 1
    assert summary["unaffordableExamples"] == 1
    assert summary["affordabilityRate"] == 50.0


def test_summary_empty():
    assert get_purchasing_power_summary(None)["totalExamples"] == 0
    assert get_purchasing_power_summary({})["affordabilityRate"] == 0
