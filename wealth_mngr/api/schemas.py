"""
Pydantic schemas for API request/response validation.

These schemas provide:
- Input validation for API requests (ranges and instrument minimums)
- Response serialization
- OpenAPI documentation generation

Requests and responses use camelCase field names, matching the calculators'
result dictionaries; snake_case names are accepted as well.
"""

from enum import Enum
from typing import Optional, Dict, Any, List

from pydantic import BaseModel, Field, ConfigDict, field_validator, model_validator
from pydantic.alias_generators import to_camel

from wealth_mngr.core.constants import CORPUS_INSTRUMENTS, DEFAULT_INCOME_TAX_SLAB, LTCG_INDEXED_RATE


# ======================
# Enums
# ======================


class CompoundingFrequency(str, Enum):
    """Interest crediting frequency for deposits."""

    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    ANNUALLY = "annually"
    CUMULATIVE = "cumulative"


class InvestmentType(str, Enum):
    """How a market-linked investment is made."""

    SIP = "sip"
    LUMPSUM = "lumpsum"


class TenureUnit(str, Enum):
    YEARS = "years"
    MONTHS = "months"


class TaxMethod(str, Enum):
    """When tax is applied in a corpus simulation."""

    WITHDRAWAL = "withdrawal"
    ACCUMULATION = "accumulation"
    BOTH = "both"


class MarketLinkedInstrument(str, Enum):
    """Instruments served by the shared SIP/lumpsum calculator."""

    EQUITY = "equity"
    ELSS = "elss"
    DEBT_MUTUAL_FUND = "debtMutualFund"


# ======================
# Base Schemas
# ======================


class BaseSchema(BaseModel):
    """Base schema with common configuration."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
        validate_assignment=True,
        use_enum_values=True,
    )


class StepUpMixin(BaseSchema):
    step_up_enabled: bool = False
    step_up_pct: float = Field(default=0, ge=0, le=100, description="Yearly increase in the contribution (percent)")


# ======================
# Calculator Schemas
# ======================


class PPFRequest(StepUpMixin):
    """Public Provident Fund calculator input."""

    yearly_investment: float = Field(..., ge=500, le=150000)
    tenure: int = Field(default=15, gt=0, le=50)
    rate_pct: float = Field(default=7.1, ge=0.1, le=50)


class FDRequest(BaseSchema):
    """Fixed deposit calculator input."""

    principal: float = Field(..., ge=1000)
    tenure_years: int = Field(default=0, ge=0, le=50)
    tenure_months: int = Field(default=0, ge=0, le=11)
    rate_pct: float = Field(default=6.5, ge=0.1, le=50)
    compounding: CompoundingFrequency = CompoundingFrequency.QUARTERLY

    @model_validator(mode="after")
    def check_tenure(self) -> "FDRequest":
        if not self.tenure_years and not self.tenure_months:
            raise ValueError("Tenure must be at least one month")
        return self


class RDRequest(BaseSchema):
    """Recurring deposit calculator input."""

    monthly_deposit: float = Field(..., ge=500)
    tenure_years: int = Field(default=0, ge=0, le=50)
    tenure_months: int = Field(default=0, ge=0, le=11)
    rate_pct: float = Field(default=6.5, ge=0.1, le=50)
    compounding: CompoundingFrequency = CompoundingFrequency.QUARTERLY

    @model_validator(mode="after")
    def check_tenure(self) -> "RDRequest":
        if not self.tenure_years and not self.tenure_months:
            raise ValueError("Tenure must be at least one month")
        return self


class SIPRequest(StepUpMixin):
    """Mutual fund SIP calculator input."""

    monthly_sip: float = Field(..., ge=500)
    tenure: float = Field(..., gt=0, le=600)
    tenure_unit: TenureUnit = TenureUnit.YEARS
    expected_return_pct: float = Field(default=12, ge=0.1, le=50)


class NSCRequest(BaseSchema):
    principal: float = Field(..., ge=1000)
    rate_pct: float = Field(default=7.7, ge=0.1, le=50)
    tenure: int = Field(default=5, gt=0, le=10)


class SCSSRequest(BaseSchema):
    """Senior Citizens Savings Scheme calculator input."""

    principal: float = Field(..., ge=1000, le=3000000)
    tenure: int = Field(default=5, gt=0, le=8)
    rate_pct: float = Field(default=8.2, ge=0.1, le=50)
    seniors_age: int = Field(..., ge=18, le=120)
    is_defence_personnel: bool = False

    @model_validator(mode="after")
    def check_age(self) -> "SCSSRequest":
        minimum = 55 if self.is_defence_personnel else 60
        if self.seniors_age < minimum:
            raise ValueError(f"Depositor must be at least {minimum} years old")
        return self


class SGBRequest(BaseSchema):
    """Sovereign Gold Bond calculator input."""

    gold_grams: float = Field(..., ge=1, le=4000)
    tenure: int = Field(default=8, gt=0, le=8)
    gold_appreciation_pct: float = Field(default=8, ge=0.1, le=50)
    gold_price_per_gram: Optional[float] = Field(None, gt=0)


class NPSAllocation(BaseSchema):
    """NPS asset allocation in percent; must total 100."""

    equity: float = Field(default=50, ge=0, le=100)
    corporate_bonds: float = Field(default=30, ge=0, le=100)
    government_bonds: float = Field(default=20, ge=0, le=100)
    alternative: float = Field(default=0, ge=0, le=5)

    @model_validator(mode="after")
    def check_total(self) -> "NPSAllocation":
        total = self.equity + self.corporate_bonds + self.government_bonds + self.alternative
        if abs(total - 100) > 0.01:
            raise ValueError(f"Allocation must total 100%, got {total}")
        return self


class NPSReturns(BaseSchema):
    """Expected return per NPS asset class (percent)."""

    equity: float = Field(default=12, ge=0, le=50)
    corporate_bonds: float = Field(default=9, ge=0, le=50)
    government_bonds: float = Field(default=8, ge=0, le=50)
    alternative: float = Field(default=7, ge=0, le=50)


class NPSRequest(BaseSchema):
    """National Pension System calculator input."""

    monthly_contribution: float = Field(..., ge=500)
    tenure: int = Field(..., gt=0, le=60)
    current_age: int = Field(..., ge=18, le=75)
    allocation: NPSAllocation = Field(default_factory=NPSAllocation)
    returns: NPSReturns = Field(default_factory=NPSReturns)
    use_age_based_caps: bool = False


class MarketLinkedRequest(StepUpMixin):
    """Equity, ELSS or debt mutual fund calculator input."""

    investment_type: InvestmentType = InvestmentType.SIP
    amount: float = Field(..., ge=500)
    tenure: int = Field(..., gt=0, le=50)
    expected_return_pct: float = Field(default=12, ge=0.1, le=50)


class REITsRequest(BaseSchema):
    """REIT calculator input."""

    investment_amount: float = Field(..., ge=1000)
    tenure: int = Field(..., gt=0, le=50)
    dividend_yield_pct: float = Field(default=7, gt=0, le=50)
    capital_appreciation_pct: float = Field(default=6, gt=0, le=50)
    number_of_units: Optional[int] = Field(None, gt=0)


# ======================
# Corpus Schemas
# ======================


class CorpusSettingsSchema(BaseSchema):
    """Settings for a corpus simulation."""

    general_inflation_rate: float = Field(default=6, ge=0, le=30)
    tax_method: TaxMethod = TaxMethod.WITHDRAWAL
    time_horizon: int = Field(default=10, ge=1, le=50)
    selected_city: str = "mumbai"
    income_tax_slab: float = Field(default=DEFAULT_INCOME_TAX_SLAB, ge=0, le=0.5)
    inflation_rates: Dict[str, float] = Field(default_factory=dict)

    @field_validator("inflation_rates")
    @classmethod
    def check_inflation_rates(cls, value: Dict[str, float]) -> Dict[str, float]:
        for category, rate in value.items():
            if rate < 0 or rate > 30:
                raise ValueError(f"Inflation rate for {category} must be between 0 and 30")
        return value


class CorpusRequest(BaseSchema):
    """Instruments, their investment data and the simulation settings."""

    selected_instruments: List[str] = Field(..., min_length=1)
    investments: Dict[str, Dict[str, Any]] = Field(default_factory=dict)
    settings: CorpusSettingsSchema = Field(default_factory=CorpusSettingsSchema)

    @field_validator("selected_instruments")
    @classmethod
    def check_instruments(cls, value: List[str]) -> List[str]:
        unknown = [instrument for instrument in value if instrument not in CORPUS_INSTRUMENTS]
        if unknown:
            raise ValueError(f"Unsupported instruments: {', '.join(unknown)}")
        return value


class PurchasingPowerRequest(BaseSchema):
    """Corpus to compare with future prices in a city."""

    corpus: float = Field(..., gt=0)
    years: float = Field(..., gt=0, le=50)
    city_key: str = "mumbai"
    categories: Optional[List[str]] = None
    inflation_rates: Dict[str, float] = Field(default_factory=dict, description="Category rates in percent")


# ======================
# Indexation Schemas
# ======================


class IndexedCostRequest(BaseSchema):
    original_cost: float = Field(..., gt=0)
    purchase_year: int = Field(..., ge=1981, le=2100)
    sale_year: int = Field(..., ge=1981, le=2100)

    @model_validator(mode="after")
    def check_years(self):
        if self.sale_year < self.purchase_year:
            raise ValueError("Sale year must not be before the purchase year")
        return self


class IndexationTaxRequest(IndexedCostRequest):
    original_cost: Optional[float] = None
    principal: float = Field(..., gt=0)
    maturity_amount: float = Field(..., ge=0)
    tax_rate: float = Field(default=LTCG_INDEXED_RATE, ge=0, le=1)


# ======================
# Storage Schemas
# ======================


class SaveCalculationRequest(BaseSchema):
    name: Optional[str] = Field(None, max_length=255)
    data: Dict[str, Any]


class SaveStateRequest(BaseSchema):
    """Corpus simulator state to snapshot."""

    name: Optional[str] = Field(None, max_length=255)
    selected_instruments: List[str] = Field(default_factory=list)
    investments: Dict[str, Dict[str, Any]] = Field(default_factory=dict)
    settings: Dict[str, Any] = Field(default_factory=dict)
    results: Optional[Dict[str, Any]] = None
    purchasing_power: Optional[Dict[str, Any]] = None
    current_step: int = Field(default=1, ge=1)


class UpdateCalculationRequest(BaseSchema):
    name: Optional[str] = Field(None, max_length=255)
    data: Optional[Dict[str, Any]] = None


class SavedCalculationResponse(BaseSchema):
    id: str
    name: str
    timestamp: int
    data: Dict[str, Any]


class SavedCalculationCreated(BaseSchema):
    id: str


class StorageInfo(BaseSchema):
    count: int
    max_count: int
    data_size: int
    data_size_kb: str = Field(..., alias="dataSizeKB")


class UserPreferencesSchema(BaseSchema):
    """Application-wide preferences."""

    default_inflation_rate: float = Field(default=6, ge=0, le=30)
    adjust_inflation: bool = False
    income_tax_slab: float = Field(default=DEFAULT_INCOME_TAX_SLAB, ge=0, le=0.5)
    currency_format: str = Field(default="INR", max_length=3)
    number_format: str = Field(default="en-IN", max_length=16)


# ======================
# Error Response Schema
# ======================


class ErrorResponse(BaseSchema):
    """Standard error response schema."""

    error: str = Field(..., description="Error message")
    detail: Optional[str] = Field(None, description="Detailed error information")
    type: Optional[str] = Field(None, description="Error type/class")
