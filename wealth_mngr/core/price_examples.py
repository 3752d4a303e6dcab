"""
Reference prices for purchasing-power comparisons across Indian cities.

Examples either carry one uniform ``price`` or a price per city tier.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from wealth_mngr.core.constants import ECategory, ECityTier


@dataclass(frozen=True)
class City:
    key: str
    name: str
    tier: str

    def to_dict(self) -> Dict[str, str]:
        return {"key": self.key, "name": self.name, "tier": self.tier}


@dataclass(frozen=True)
class PriceExample:
    """
    A named price point.

    Attributes:
        label: Display label
        unit: What one unit of the price buys ("per year", "total" ...)
        price: Uniform price across cities, or None for tier-based pricing
        tier_prices: Price per city tier
    """
    label: str
    unit: str
    price: Optional[float] = None
    tier_prices: Mapping[str, float] = field(default_factory=dict)

    def price_for_tier(self, tier: Optional[str]) -> Optional[float]:
        if self.price is not None:
            return self.price
        if tier is None:
            return None
        return self.tier_prices.get(tier) or None

    def to_dict(self) -> Dict[str, Any]:
        data = {"label": self.label, "unit": self.unit}
        if self.price is not None:
            data["price"] = self.price
        data.update(self.tier_prices)
        return data


def _tiered(label, unit, metro, tier1, tier2) -> PriceExample:
    return PriceExample(label, unit, tier_prices={
        ECityTier.METRO: metro,
        ECityTier.TIER_1: tier1,
        ECityTier.TIER_2: tier2,
    })


CITIES: Dict[str, City] = {
    "new-delhi": City("new-delhi", "New Delhi", ECityTier.METRO),
    "mumbai": City("mumbai", "Mumbai", ECityTier.METRO),
    "chennai": City("chennai", "Chennai", ECityTier.METRO),
    "kolkata": City("kolkata", "Kolkata", ECityTier.METRO),
    "bangalore": City("bangalore", "Bangalore", ECityTier.TIER_1),
    "pune": City("pune", "Pune", ECityTier.TIER_1),
    "hyderabad": City("hyderabad", "Hyderabad", ECityTier.TIER_1),
    "ahmedabad": City("ahmedabad", "Ahmedabad", ECityTier.TIER_1),
    "indore": City("indore", "Indore", ECityTier.TIER_2),
    "guwahati": City("guwahati", "Guwahati", ECityTier.TIER_2),
}

PURCHASING_POWER_EXAMPLES: Dict[str, Dict[str, PriceExample]] = {
    ECategory.EDUCATION: {
        "school-fees-1year": _tiered("School Fees (1 Year)", "per year", 500000, 300000, 200000),
        "engineering-college-4years": _tiered("Engineering College (4 Years)", "total", 2000000, 1500000, 1000000),
        "mba-tuition": _tiered("MBA Tuition", "total", 2500000, 2000000, 1500000),
    },
    ECategory.REAL_ESTATE: {
        "2bhk-apartment": _tiered("2BHK Apartment", "per unit", 15000000, 8000000, 4000000),
        "plot-500sqyd": _tiered("Plot (500 sq yd)", "per plot", 10000000, 5000000, 2500000),
    },
    ECategory.LUXURY_GOODS: {
        "bmw-m3": PriceExample("BMW M3", "per car", 15000000),
        "iphone-15-pro-max": PriceExample("iPhone 15 Pro Max", "per phone", 150000),
        "tv-55-oled": PriceExample('55" OLED TV', "per TV", 150000),
    },
    ECategory.HEALTHCARE: {
        "health-insurance-annual": PriceExample("Annual Health Insurance Premium", "per year", 50000),
        "heart-surgery": _tiered("Heart Surgery", "per surgery", 500000, 350000, 250000),
        "icu-stay-1week": _tiered("ICU Stay (1 Week)", "per week", 200000, 150000, 100000),
    },
    ECategory.CONSUMER_GOODS: {
        "monthly-grocery-family4": PriceExample("Monthly Grocery (Family of 4)", "per month", 15000),
        "petrol-per-liter": PriceExample("Petrol (per Liter)", "per liter", 100),
        "gold-per-gram": PriceExample("Gold (per Gram)", "per gram", 13000),
    },
}


def get_city_info(city_key: str) -> Optional[City]:
    return CITIES.get(city_key)


def get_example_price(category: str, example_key: str, city_key: str) -> Optional[float]:
    """
    Current price of an example in a city; None when it cannot be resolved.

    Uniform prices resolve for any city key.

    Examples:
        >>> get_example_price("education", "mba-tuition", "pune")
        2000000
        >>> get_example_price("luxuryGoods", "bmw-m3", "atlantis")
        15000000
    """
    example = PURCHASING_POWER_EXAMPLES.get(category, {}).get(example_key)
    if example is None:
        return None
    if example.price is not None:
        return example.price
    city = get_city_info(city_key)
    return example.price_for_tier(city.tier if city else None)


def get_category_examples(category: str) -> Dict[str, PriceExample]:
    return PURCHASING_POWER_EXAMPLES.get(category, {})


def get_all_cities() -> List[Dict[str, str]]:
    return [city.to_dict() for city in CITIES.values()]


def get_cities_by_tier(tier: str) -> List[Dict[str, str]]:
    return [city.to_dict() for city in CITIES.values() if city.tier == tier]


def examples_to_dict() -> Dict[str, Dict[str, Dict[str, Any]]]:
    """Whole example table as plain dictionaries."""
    return {category: {key: example.to_dict() for key, example in examples.items()}
            for category, examples in PURCHASING_POWER_EXAMPLES.items()}
