"""
User preferences and corpus-simulator settings.

Both are plain values passed to the calculators. They are loaded from and
saved to the persistence layer (see ``wealth_mngr.db.storage``); loading
merges stored values over the defaults so older records gain new fields.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from wealth_mngr.core.constants import DEFAULT_INCOME_TAX_SLAB, ETaxMethod
from wealth_mngr.core.inflation import DEFAULT_INFLATION_RATES, GENERAL
from wealth_mngr.utils.error_utils import error_handler
from wealth_mngr.utils.rate_utils import annual_pct_to_decimal


def _default_category_rates() -> Dict[str, float]:
    return {key: rate for key, rate in DEFAULT_INFLATION_RATES.items() if key != GENERAL}


@dataclass
class UserPreferences:
    """
    Application-wide preferences.

    Attributes:
        default_inflation_rate: General inflation (percent)
        adjust_inflation: Report inflation-adjusted values in calculators
        income_tax_slab: Marginal slab rate (decimal)
        currency_format: Currency code
        number_format: Locale used for number formatting
    """
    default_inflation_rate: float = 6
    adjust_inflation: bool = False
    income_tax_slab: float = DEFAULT_INCOME_TAX_SLAB
    currency_format: str = "INR"
    number_format: str = "en-IN"

    @property
    def inflation_rate_decimal(self) -> float:
        return annual_pct_to_decimal(self.default_inflation_rate)

    @error_handler
    def to_dict(self) -> Dict[str, Any]:
        return {
            "defaultInflationRate": self.default_inflation_rate,
            "adjustInflation": self.adjust_inflation,
            "incomeTaxSlab": self.income_tax_slab,
            "currencyFormat": self.currency_format,
            "numberFormat": self.number_format,
        }

    @classmethod
    @error_handler
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'UserPreferences':
        """Build preferences from stored data; missing keys keep their defaults."""
        data = data or {}
        defaults = cls()
        return cls(
            default_inflation_rate=data.get("defaultInflationRate", defaults.default_inflation_rate),
            adjust_inflation=bool(data.get("adjustInflation", defaults.adjust_inflation)),
            income_tax_slab=data.get("incomeTaxSlab", defaults.income_tax_slab),
            currency_format=data.get("currencyFormat", defaults.currency_format),
            number_format=data.get("numberFormat", defaults.number_format),
        )


@dataclass
class CorpusSettings:
    """
    Settings for one corpus simulation.

    Attributes:
        general_inflation_rate: Inflation used for the real corpus (percent)
        tax_method: When tax is applied
        time_horizon: Years until the corpus is needed
        selected_city: City key for purchasing-power prices
        income_tax_slab: Marginal slab rate (decimal)
        inflation_rates: Category inflation (percent)
    """
    general_inflation_rate: float = 6
    tax_method: ETaxMethod = ETaxMethod.WITHDRAWAL
    time_horizon: int = 10
    selected_city: str = "mumbai"
    income_tax_slab: float = DEFAULT_INCOME_TAX_SLAB
    inflation_rates: Dict[str, float] = field(default_factory=_default_category_rates)

    @error_handler
    def to_dict(self) -> Dict[str, Any]:
        return {
            "generalInflationRate": self.general_inflation_rate,
            "taxMethod": self.tax_method.value,
            "timeHorizon": self.time_horizon,
            "selectedCity": self.selected_city,
            "incomeTaxSlab": self.income_tax_slab,
            "inflationRates": dict(self.inflation_rates),
        }

    @classmethod
    @error_handler
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'CorpusSettings':
        """Build settings from stored data, merging category rates over the defaults."""
        data = data or {}
        defaults = cls()
        inflation_rates = _default_category_rates()
        inflation_rates.update(data.get("inflationRates") or {})
        return cls(
            general_inflation_rate=data.get("generalInflationRate", defaults.general_inflation_rate),
            tax_method=ETaxMethod(data.get("taxMethod") or defaults.tax_method.value),
            time_horizon=data.get("timeHorizon", defaults.time_horizon),
            selected_city=data.get("selectedCity") or defaults.selected_city,
            income_tax_slab=data.get("incomeTaxSlab", defaults.income_tax_slab),
            inflation_rates=inflation_rates,
        )

    def purchasing_power_rates(self) -> Dict[str, float]:
        """Category rates as decimals, including the general rate."""
        rates = {key: annual_pct_to_decimal(value) for key, value in self.inflation_rates.items()}
        rates[GENERAL] = annual_pct_to_decimal(self.general_inflation_rate)
        return rates


@dataclass
class CorpusState:
    """Work-in-progress corpus simulation, as saved and restored."""
    selected_instruments: List[str] = field(default_factory=list)
    investments: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    settings: CorpusSettings = field(default_factory=CorpusSettings)
    results: Optional[Dict[str, Any]] = None
    purchasing_power: Optional[Dict[str, Any]] = None
    current_step: int = 1

    @error_handler
    def to_dict(self) -> Dict[str, Any]:
        return {
            "selectedInstruments": list(self.selected_instruments),
            "investments": dict(self.investments),
            "settings": self.settings.to_dict(),
            "results": self.results,
            "purchasingPower": self.purchasing_power,
            "currentStep": self.current_step,
        }

    @classmethod
    @error_handler
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'CorpusState':
        data = data or {}
        return cls(
            selected_instruments=list(data.get("selectedInstruments") or []),
            investments=dict(data.get("investments") or {}),
            settings=CorpusSettings.from_dict(data.get("settings")),
            results=data.get("results"),
            purchasing_power=data.get("purchasingPower"),
            current_step=data.get("currentStep") or 1,
        )

