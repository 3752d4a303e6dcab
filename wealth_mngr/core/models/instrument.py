"""
Instrument models for the corpus simulator.

Each supported instrument is a subclass of ``Instrument`` built from the
camelCase investment data captured by the forms. A subclass knows how to:

    - value an existing holding from its contribution history (``value_from_history``)
    - value new contributions over an effective tenure (``future_investment``)
    - project an existing holding forward (``project_existing``)

``Instrument.calculate`` combines the three into an ``InstrumentCorpus``.

Classes:
    ExistingInvestment: Holding the user already has in an instrument
    InstrumentCorpus: Valuation of one instrument at the horizon
    Instrument: Base class; PPFInstrument, SSYInstrument, FDInstrument,
        SIPInstrument, NSCInstrument, SCSSInstrument, SGBInstrument,
        NPSInstrument, EquityInstrument, ELSSInstrument
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple, Type

from wealth_mngr.core.constants import (
    EInstrument,
    EInvestmentType,
    INSTRUMENT_NAMES,
    MAX_TENURE_YEARS,
    ONE_TIME_INSTRUMENTS,
    SGB_FIXED_RATE_PCT,
)
from wealth_mngr.core.formulas import (
    NPS_ASSET_CLASSES,
    calculate_compound_interest,
    calculate_fd,
    calculate_nps_future_value,
    calculate_nps_weighted_return,
    calculate_nsc,
    calculate_ppf,
    calculate_ppf_with_step_up,
    calculate_scss,
    calculate_sgb,
    calculate_sip_future_value,
    calculate_step_up_sip,
    step_up_total_invested,
)
from wealth_mngr.core.rates import RateTable
from wealth_mngr.utils.error_utils import error_handler
from wealth_mngr.utils.rate_utils import round_amount
from wealth_mngr.utils.tenure_utils import migrate_fd_data, tenure_in_years

logger = logging.getLogger(__name__)


def _number(value, default: float = 0.0) -> float:
    if value is None or isinstance(value, bool):
        return default
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    if math.isnan(number) or math.isinf(number):
        return default
    return number


def _pct(value) -> float:
    return _number(value) / 100


def _grow(amount: float, rate: float, years: float) -> float:
    """Annual compounding that keeps the amount when the rate is zero."""
    if amount <= 0 or years <= 0 or not rate:
        return amount
    return calculate_compound_interest(amount, rate, years, 1)


def get_max_tenure_for_instrument(instrument: str) -> Optional[int]:
    return MAX_TENURE_YEARS.get(instrument)


def check_tenure_limit(instrument: str, years_invested) -> Dict[str, Any]:
    """
    Advisory for a holding that has reached the instrument's maximum tenure.

    Returns:
        ``{"exceeds": bool, "maxTenure": int | None, "message": str | None}``
    """
    max_tenure = get_max_tenure_for_instrument(instrument)
    if max_tenure is None:
        return {"exceeds": False, "maxTenure": None, "message": None}

    if _number(years_invested) >= max_tenure:
        name = INSTRUMENT_NAMES.get(instrument, (instrument.upper(),))[0]
        message = f"Maximum tenure of {max_tenure} years reached for {name}."
        if instrument == EInstrument.ppf:
            message += " You can extend PPF in blocks of 5 years after maturity."
        elif instrument == EInstrument.nsc:
            message += " NSC has a fixed 5-year tenure."
        elif instrument == EInstrument.scss:
            message += " SCSS maximum tenure is 5 years."
        return {"exceeds": True, "maxTenure": max_tenure, "message": message}

    return {"exceeds": False, "maxTenure": max_tenure, "message": None}


def get_default_plan_to_invest_more(instrument: str) -> bool:
    """One-time purchases (SGB, NSC, SCSS) default to not investing more."""
    return instrument not in ONE_TIME_INSTRUMENTS


class ExistingInvestment:
    """
    A holding the user already has.

    Percent fields (``rate``, ``expected_return_rate``, ``current_return_rate``)
    are annual percentages. Instrument-specific fields (``monthlySIP``,
    ``goldAppreciationRate``, NPS allocations ...) are kept in ``extras``.

    Attributes:
        current_value: Value today as entered by the user (0 if unknown)
        years_invested: Years since the first contribution
        initial_investment: First lump sum
        yearly_contribution: Yearly deposit (PPF/SSY)
        rate: Return earned so far (percent)
        expected_return_rate: Return expected from now on (percent)
        current_return_rate: Alternative field for the current return (percent)
    """

    _FIELDS = {
        "currentValue": "current_value",
        "yearsInvested": "years_invested",
        "initialInvestment": "initial_investment",
        "yearlyContribution": "yearly_contribution",
        "rate": "rate",
        "expectedReturnRate": "expected_return_rate",
        "currentReturnRate": "current_return_rate",
        "stepUpEnabled": "step_up_enabled",
        "stepUpPercentage": "step_up_percentage",
    }

    def __init__(
        self,
        current_value: float = 0,
        years_invested: float = 0,
        initial_investment: float = 0,
        yearly_contribution: float = 0,
        rate: float = 0,
        expected_return_rate: float = 0,
        current_return_rate: float = 0,
        step_up_enabled: bool = False,
        step_up_percentage: float = 0,
        extras: Optional[Dict[str, Any]] = None,
    ):
        self.current_value = _number(current_value)
        self.years_invested = _number(years_invested)
        self.initial_investment = _number(initial_investment)
        self.yearly_contribution = _number(yearly_contribution)
        self.rate = _number(rate)
        self.expected_return_rate = _number(expected_return_rate)
        self.current_return_rate = _number(current_return_rate)
        self.step_up_enabled = bool(step_up_enabled)
        self.step_up_percentage = _number(step_up_percentage)
        self.extras = dict(extras or {})

    @property
    def rate_decimal(self) -> float:
        return self.rate / 100

    @property
    def step_up_decimal(self) -> float:
        return self.step_up_percentage / 100 if self.step_up_enabled else 0.0

    def get(self, key: str, default=None):
        return self.extras.get(key, default)

    @error_handler
    def to_dict(self) -> Dict[str, Any]:
        data = dict(self.extras)
        for key, attr in self._FIELDS.items():
            data[key] = getattr(self, attr)
        return data

    @classmethod
    @error_handler
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> 'ExistingInvestment':
        data = dict(data or {})
        kwargs = {attr: data.pop(key) for key, attr in cls._FIELDS.items() if key in data}
        return cls(extras=data, **kwargs)


@dataclass
class InstrumentCorpus:
    """Value of one instrument at the horizon, split into existing and new money."""
    instrument: str
    invested_amount: float = 0.0
    maturity_value: float = 0.0
    returns: float = 0.0
    existing_investment_value: float = 0.0
    future_investment_value: float = 0.0
    existing_current_value: float = 0.0
    percentage: float = 0.0
    projected_invested_amount: float = 0.0
    projected_future_investment_value: float = 0.0
    projected_maturity_value: float = 0.0
    projected_returns: float = 0.0
    is_projected_beyond_horizon: bool = False
    advisories: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "investedAmount": self.invested_amount,
            "maturityValue": self.maturity_value,
            "returns": self.returns,
            "existingInvestmentValue": self.existing_investment_value,
            "futureInvestmentValue": self.future_investment_value,
            "existingCurrentValue": self.existing_current_value,
            "percentage": self.percentage,
            "projectedInvestedAmount": self.projected_invested_amount,
            "projectedFutureInvestmentValue": self.projected_future_investment_value,
            "projectedMaturityValue": self.projected_maturity_value,
            "projectedReturns": self.projected_returns,
            "isProjectedBeyondHorizon": self.is_projected_beyond_horizon,
            "advisories": list(self.advisories),
        }


class Instrument:
    """
    Base class for corpus instruments.

    Args:
        data: Investment data for the instrument (camelCase keys as captured by the forms)
        rates: Rate table used for defaults
    """

    instrument_id: str = None
    # Fixed-term schemes whose new tenure is capped at the maximum
    caps_tenure: bool = False

    def __init__(self, data: Optional[Mapping[str, Any]] = None, rates: Optional[RateTable] = None):
        self.data = dict(data or {})
        self.rates = rates or RateTable.default()
        existing = self.data.get("existingInvestment")
        self.existing = ExistingInvestment.from_dict(existing) if existing else None
        self.has_existing_investment = bool(self.data.get("hasExistingInvestment")) and self.existing is not None

    @property
    def plan_to_invest_more(self) -> bool:
        value = self.data.get("planToInvestMore")
        if value is None:
            # one-time purchases already held are assumed not to be topped up
            return not self.has_existing_investment or get_default_plan_to_invest_more(self.instrument_id)
        return bool(value)

    @property
    def projection_rate(self) -> float:
        """Annual rate (decimal) at which new and existing money grows."""
        return _pct(self.data.get("rate"))

    @property
    def step_up(self) -> float:
        if not self.data.get("stepUpEnabled"):
            return 0.0
        return _pct(self.data.get("stepUpPercentage"))

    def raw_tenure(self) -> float:
        """Tenure in years as entered."""
        return _number(self.data.get("tenure"))

    def tenure_years(self) -> float:
        tenure = self.raw_tenure()
        max_tenure = get_max_tenure_for_instrument(self.instrument_id)
        if self.caps_tenure and max_tenure is not None and tenure > max_tenure:
            return float(max_tenure)
        return tenure

    def effective_tenure(self, time_horizon: float = 0) -> float:
        """Tenure capped at the withdrawal horizon."""
        tenure = self.tenure_years()
        if tenure <= 0:
            return 0.0
        if time_horizon and time_horizon > 0:
            return min(tenure, time_horizon)
        return tenure

    def current_value(self, existing: Optional[ExistingInvestment] = None) -> float:
        """
        Value of an existing holding today.

        Resolution order: the user's own figure when positive; else the value
        computed from contribution history; else the initial investment; else 0.
        Without years invested only the user's figure is used.
        """
        existing = existing or self.existing
        if existing is None:
            return 0.0
        if existing.years_invested <= 0:
            return existing.current_value or 0.0
        if existing.current_value > 0:
            return existing.current_value
        value = self.value_from_history(existing)
        if value:
            return value
        return existing.initial_investment or 0.0

    def value_from_history(self, existing: ExistingInvestment) -> Optional[float]:
        """Value computed from contributions and elapsed years; None if not computable."""
        if existing.initial_investment > 0:
            return _grow(existing.initial_investment, existing.rate_decimal, existing.years_invested)
        return None

    def project_existing(self, current_value: float, rate: float, years: float) -> float:
        return _grow(current_value, rate, years)

    def existing_projection_rate(self, plan_to_invest_more: bool) -> float:
        return self.projection_rate

    def future_investment(self, effective_tenure: float) -> Tuple[float, float]:
        """(amount invested, value at the end of ``effective_tenure``) for new money."""
        return 0.0, 0.0

    def tenure_advisories(self) -> List[str]:
        advisories = []
        if self.has_existing_investment:
            check = check_tenure_limit(self.instrument_id, self.existing.years_invested)
            if check["message"]:
                advisories.append(check["message"])

        max_tenure = get_max_tenure_for_instrument(self.instrument_id)
        tenure = self.raw_tenure()
        if max_tenure is not None and tenure > max_tenure:
            name = INSTRUMENT_NAMES[self.instrument_id][0]
            if self.caps_tenure:
                advisories.append(f"Tenure of {tenure:g} years exceeds the {max_tenure}-year maximum for "
                                  f"{name}; {max_tenure} years used.")
            else:
                advisories.append(f"Tenure of {tenure:g} years exceeds the {max_tenure}-year term of {name}; "
                                  f"assumes extension after maturity.")
        for message in advisories:
            logger.info(message)
        return advisories

    def _beyond_horizon(self, time_horizon: float, existing_current: float) -> Tuple[float, float, bool]:
        """(projected invested, projected future value, projected flag) past the horizon."""
        return 0.0, 0.0, False

    def calculate(self, time_horizon: float = 0) -> InstrumentCorpus:
        """
        Value this instrument at ``time_horizon`` years.

        When the user plans to invest more, the existing holding grows at the
        instrument rate for ``min(effective tenure, horizon - years invested)``
        years; otherwise for ``horizon - years invested`` years. Returns are the
        growth of the existing holding plus the growth of new money.
        """
        time_horizon = _number(time_horizon)
        plan = self.plan_to_invest_more
        effective_tenure = self.effective_tenure(time_horizon)

        existing_current = self.current_value() if self.has_existing_investment else 0.0
        existing_value = 0.0
        if existing_current > 0:
            if time_horizon > 0:
                years_invested = self.existing.years_invested
                if plan and effective_tenure > 0:
                    years = max(0.0, min(effective_tenure, time_horizon - years_invested))
                else:
                    years = max(0.0, time_horizon - years_invested)
                existing_value = self.project_existing(existing_current, self.existing_projection_rate(plan), years)
            else:
                existing_value = existing_current

        invested, future_value = (0.0, 0.0)
        if plan and effective_tenure > 0:
            invested, future_value = self.future_investment(effective_tenure)

        projected_invested, projected_future, beyond = self._beyond_horizon(time_horizon, existing_current)

        returns = (existing_value - existing_current) + (future_value - invested)
        projected_maturity = existing_value + projected_future if beyond and projected_future > 0 else 0.0
        projected_returns = projected_maturity - existing_current - projected_invested if projected_maturity > 0 else 0.0

        return InstrumentCorpus(
            instrument=self.instrument_id,
            invested_amount=round_amount(invested),
            maturity_value=round_amount(existing_value + future_value),
            returns=round_amount(returns),
            existing_investment_value=round_amount(existing_value),
            future_investment_value=round_amount(future_value),
            existing_current_value=round_amount(existing_current),
            projected_invested_amount=round_amount(projected_invested),
            projected_future_investment_value=round_amount(projected_future),
            projected_maturity_value=round_amount(projected_maturity),
            projected_returns=round_amount(projected_returns),
            is_projected_beyond_horizon=beyond,
            advisories=self.tenure_advisories(),
        )

    @error_handler
    def to_dict(self) -> Dict[str, Any]:
        data = dict(self.data)
        data["type"] = self.instrument_id
        if self.existing is not None:
            data["existingInvestment"] = self.existing.to_dict()
        return data

    @classmethod
    @error_handler
    def from_dict(cls, data: Mapping[str, Any]) -> 'Instrument':
        data = dict(data)
        data.pop("type", None)
        return cls(data)


class PPFInstrument(Instrument):
    """Public Provident Fund: yearly deposits, annual compounding."""

    instrument_id = EInstrument.ppf

    def value_from_history(self, existing: ExistingInvestment) -> Optional[float]:
        if existing.yearly_contribution > 0:
            if existing.step_up_decimal > 0:
                return calculate_ppf_with_step_up(existing.yearly_contribution, existing.step_up_decimal,
                                                  existing.rate_decimal, existing.years_invested)
            return calculate_ppf(existing.yearly_contribution, existing.rate_decimal, existing.years_invested)
        if existing.initial_investment > 0 and existing.rate_decimal:
            return calculate_compound_interest(existing.initial_investment, existing.rate_decimal,
                                               existing.years_invested, 1)
        return None

    def future_investment(self, effective_tenure: float) -> Tuple[float, float]:
        yearly = _number(self.data.get("yearlyInvestment"))
        if yearly <= 0:
            return 0.0, 0.0
        if self.step_up > 0:
            invested = sum(yearly * (1 + self.step_up) ** year for year in range(int(math.ceil(effective_tenure))))
            return invested, calculate_ppf_with_step_up(yearly, self.step_up, self.projection_rate, effective_tenure)
        return yearly * effective_tenure, calculate_ppf(yearly, self.projection_rate, effective_tenure)


class SSYInstrument(PPFInstrument):
    """Sukanya Samriddhi Yojana; valued like PPF."""

    instrument_id = EInstrument.ssy


class FDInstrument(Instrument):
    """Fixed deposit; tenure as years + months or the legacy tenure + unit."""

    instrument_id = EInstrument.fd

    def __init__(self, data: Optional[Mapping[str, Any]] = None, rates: Optional[RateTable] = None):
        super().__init__(migrate_fd_data(dict(data or {})), rates)

    @property
    def compounding(self) -> str:
        return self.data.get("compoundingFrequency") or "quarterly"

    def raw_tenure(self) -> float:
        return tenure_in_years(self.data)

    def value_from_history(self, existing: ExistingInvestment) -> Optional[float]:
        if existing.initial_investment <= 0:
            return None
        years = existing.years_invested
        if existing.get("tenureUnit") == "months":
            years = years / 12
        return calculate_fd(existing.initial_investment, existing.rate_decimal, years,
                            existing.get("compoundingFrequency") or "quarterly")

    def future_investment(self, effective_tenure: float) -> Tuple[float, float]:
        principal = _number(self.data.get("principal"))
        if principal <= 0:
            return 0.0, 0.0
        return principal, calculate_fd(principal, self.projection_rate, effective_tenure, self.compounding)


class SIPInstrument(Instrument):
    """Mutual-fund SIP with optional yearly step-up."""

    instrument_id = EInstrument.sip

    @property
    def projection_rate(self) -> float:
        return _pct(self.data.get("expectedReturn"))

    def raw_tenure(self) -> float:
        tenure = _number(self.data.get("tenure"))
        return tenure / 12 if self.data.get("tenureUnit") == "months" else tenure

    def value_from_history(self, existing: ExistingInvestment) -> Optional[float]:
        monthly = _number(existing.get("monthlySIP"))
        if monthly <= 0:
            return None
        if existing.get("tenureUnit") == "months":
            years, months = existing.years_invested / 12, existing.years_invested
        else:
            years, months = existing.years_invested, existing.years_invested * 12
        if existing.step_up_decimal > 0:
            return calculate_step_up_sip(monthly, existing.step_up_decimal, years, existing.rate_decimal)
        return calculate_sip_future_value(monthly, existing.rate_decimal, months)

    def future_investment(self, effective_tenure: float) -> Tuple[float, float]:
        monthly = _number(self.data.get("monthlySIP"))
        if monthly <= 0:
            return 0.0, 0.0
        if self.step_up > 0:
            return (step_up_total_invested(monthly, self.step_up, effective_tenure),
                    calculate_step_up_sip(monthly, self.step_up, effective_tenure, self.projection_rate))
        months = effective_tenure * 12
        return monthly * months, calculate_sip_future_value(monthly, self.projection_rate, months)


class NSCInstrument(Instrument):
    """National Savings Certificate: fixed 5-year term, annual compounding."""

    instrument_id = EInstrument.nsc
    caps_tenure = True

    def raw_tenure(self) -> float:
        tenure = self.data.get("tenure")
        return 5.0 if tenure is None else _number(tenure)

    def value_from_history(self, existing: ExistingInvestment) -> Optional[float]:
        if existing.initial_investment <= 0 or not existing.rate_decimal:
            return None
        return calculate_nsc(existing.initial_investment, existing.rate_decimal, min(existing.years_invested, 5))

    def future_investment(self, effective_tenure: float) -> Tuple[float, float]:
        principal = _number(self.data.get("principal"))
        if principal <= 0:
            return 0.0, 0.0
        return principal, calculate_nsc(principal, self.projection_rate, effective_tenure) or principal


class SCSSInstrument(Instrument):
    """Senior Citizens Savings Scheme: quarterly payout, not reinvested."""

    instrument_id = EInstrument.scss
    caps_tenure = True

    def value_from_history(self, existing: ExistingInvestment) -> Optional[float]:
        if existing.initial_investment <= 0:
            return None
        return calculate_scss(existing.initial_investment, existing.rate_decimal, min(existing.years_invested, 5))

    def future_investment(self, effective_tenure: float) -> Tuple[float, float]:
        principal = _number(self.data.get("principal"))
        if principal <= 0:
            return 0.0, 0.0
        return principal, calculate_scss(principal, self.projection_rate, effective_tenure)


class SGBInstrument(Instrument):
    """Sovereign Gold Bond: gold appreciation plus a fixed semi-annual coupon."""

    instrument_id = EInstrument.sgb

    @property
    def projection_rate(self) -> float:
        return _pct(self.data.get("goldAppreciationRate"))

    @property
    def fixed_rate(self) -> float:
        return _pct(self.data.get("fixedRate", SGB_FIXED_RATE_PCT))

    def project_existing(self, current_value: float, rate: float, years: float) -> float:
        if current_value <= 0 or years <= 0:
            return current_value
        return calculate_sgb(current_value, rate, years, self.fixed_rate)

    def value_from_history(self, existing: ExistingInvestment) -> Optional[float]:
        if existing.initial_investment <= 0:
            return None
        return calculate_sgb(existing.initial_investment, _pct(existing.get("goldAppreciationRate")),
                             existing.years_invested, _pct(existing.get("fixedRate", SGB_FIXED_RATE_PCT)))

    def future_investment(self, effective_tenure: float) -> Tuple[float, float]:
        principal = _number(self.data.get("principal"))
        if principal <= 0:
            return 0.0, 0.0
        return principal, calculate_sgb(principal, self.projection_rate, effective_tenure, self.fixed_rate)


def nps_allocation_and_returns(data: Mapping[str, Any], rates: RateTable) -> Tuple[Dict[str, float], Dict[str, float]]:
    """
    Decimal allocations and expected returns from ``<class>Allocation`` /
    ``<class>Return`` percent fields. Missing returns use the rate table.
    """
    allocation = {}
    returns = {}
    for asset_class in NPS_ASSET_CLASSES:
        allocation[asset_class] = _pct(data.get(f"{asset_class}Allocation"))
        expected = data.get(f"{asset_class}Return")
        if expected is None:
            expected = rates.extra(EInstrument.nps, asset_class, 0.0)
        returns[asset_class] = _pct(expected)
    return allocation, returns


class NPSInstrument(Instrument):
    """
    National Pension System.

    New money grows at the allocation-weighted return. When the tenure runs
    past the horizon, the value at full tenure is also reported.
    """

    instrument_id = EInstrument.nps

    @property
    def weighted_return(self) -> float:
        allocation, returns = nps_allocation_and_returns(self.data, self.rates)
        return calculate_nps_weighted_return(allocation, returns)

    @property
    def projection_rate(self) -> float:
        return self.weighted_return

    def existing_projection_rate(self, plan_to_invest_more: bool) -> float:
        if plan_to_invest_more:
            return self.weighted_return
        return (self.existing.expected_return_rate or self.existing.current_return_rate) / 100

    def value_from_history(self, existing: ExistingInvestment) -> Optional[float]:
        monthly = _number(existing.get("monthlyContribution"))
        if monthly <= 0:
            return None
        allocation, returns = nps_allocation_and_returns(existing.extras, self.rates)
        weighted = calculate_nps_weighted_return(allocation, returns)
        return calculate_nps_future_value(monthly, weighted, existing.years_invested)

    def future_investment(self, effective_tenure: float) -> Tuple[float, float]:
        monthly = _number(self.data.get("monthlyContribution"))
        if monthly <= 0:
            return 0.0, 0.0
        return monthly * 12 * effective_tenure, calculate_nps_future_value(monthly, self.weighted_return,
                                                                           effective_tenure)

    def _beyond_horizon(self, time_horizon: float, existing_current: float) -> Tuple[float, float, bool]:
        tenure = self.tenure_years()
        beyond = time_horizon > 0 and tenure > time_horizon
        monthly = _number(self.data.get("monthlyContribution"))
        if not (beyond and self.plan_to_invest_more and monthly > 0):
            return 0.0, 0.0, beyond

        projected_invested = monthly * 12 * tenure
        projected_future = calculate_nps_future_value(monthly, self.weighted_return, tenure)
        if existing_current > 0:
            remaining = max(0.0, tenure - self.existing.years_invested)
            if remaining > 0:
                projected_future += self.project_existing(existing_current, self.weighted_return,
                                                          remaining) - existing_current
        return projected_invested, projected_future, beyond


class EquityInstrument(Instrument):
    """Direct equity or equity mutual funds, as SIP (with optional step-up) or lump sum."""

    instrument_id = EInstrument.equity
    allows_step_up = True

    @property
    def projection_rate(self) -> float:
        return _pct(self.data.get("expectedCAGR") or self.data.get("expectedReturn"))

    @property
    def is_sip(self) -> bool:
        return self.data.get("investmentType") == EInvestmentType.SIP

    def value_from_history(self, existing: ExistingInvestment) -> Optional[float]:
        amount = _number(existing.get("amount"))
        if existing.get("investmentType") == EInvestmentType.SIP and amount > 0:
            return calculate_sip_future_value(amount, existing.rate_decimal, existing.years_invested * 12)
        principal = existing.initial_investment or amount
        if principal > 0:
            return _grow(principal, existing.rate_decimal, existing.years_invested)
        return None

    def future_investment(self, effective_tenure: float) -> Tuple[float, float]:
        amount = _number(self.data.get("amount"))
        if amount <= 0:
            return 0.0, 0.0
        rate = self.projection_rate
        if not self.is_sip:
            return amount, _grow(amount, rate, effective_tenure)
        step_up = self.step_up if self.allows_step_up else 0.0
        if step_up > 0:
            return (step_up_total_invested(amount, step_up, effective_tenure),
                    calculate_step_up_sip(amount, step_up, effective_tenure, rate))
        months = effective_tenure * 12
        return amount * months, calculate_sip_future_value(amount, rate, months)


class ELSSInstrument(EquityInstrument):
    """Equity Linked Savings Scheme; no step-up."""

    instrument_id = EInstrument.elss
    allows_step_up = False

    @property
    def projection_rate(self) -> float:
        return _pct(self.data.get("expectedReturn") or self.data.get("expectedCAGR"))


INSTRUMENT_CLASSES: Dict[str, Type[Instrument]] = {
    cls.instrument_id: cls
    for cls in (
        PPFInstrument,
        SSYInstrument,
        FDInstrument,
        SIPInstrument,
        NSCInstrument,
        SCSSInstrument,
        SGBInstrument,
        NPSInstrument,
        EquityInstrument,
        ELSSInstrument,
    )
}


def create_instrument(instrument: str, data: Optional[Mapping[str, Any]],
                      rates: Optional[RateTable] = None) -> Optional[Instrument]:
    """Instrument model for an identifier, or None if the corpus simulator does not support it."""
    cls = INSTRUMENT_CLASSES.get(instrument)
    if cls is None:
        logger.warning(f"Instrument '{instrument}' is not supported by the corpus simulator")
        return None
    return cls(data, rates)


def get_instrument_defaults(instrument: str, existing_data: Optional[Mapping[str, Any]] = None,
                            rates: Optional[RateTable] = None) -> Dict[str, Any]:
    """
    Default form values for the fields ``existing_data`` does not set yet.

    Examples:
        >>> get_instrument_defaults("ssy")
        {'yearlyInvestment': 10000, 'tenure': 21, 'rate': 8.2}
    """
    data = existing_data or {}
    rates = rates or RateTable.default()
    defaults: Dict[str, Any] = {}

    def has_tenure_fields():
        return (data.get("tenureYears") is not None or data.get("tenureMonths") is not None
                or (data.get("tenure") and data.get("tenureUnit")))

    if instrument in (EInstrument.ppf, EInstrument.ssy):
        if not data.get("yearlyInvestment"):
            defaults["yearlyInvestment"] = 10000
        if not data.get("tenure"):
            defaults["tenure"] = 15 if instrument == EInstrument.ppf else 21
        if not data.get("rate"):
            defaults["rate"] = rates.rate_for(instrument, 7.1)
    elif instrument in (EInstrument.fd, EInstrument.rd):
        amount_key = "principal" if instrument == EInstrument.fd else "monthlyDeposit"
        if not data.get(amount_key):
            defaults[amount_key] = 100000 if instrument == EInstrument.fd else 5000
        if not has_tenure_fields():
            defaults["tenureYears"] = 1
            defaults["tenureMonths"] = 0
        if not data.get("rate"):
            defaults["rate"] = rates.rate_for(instrument, 6.5)
    elif instrument == EInstrument.sip:
        if not data.get("monthlySIP"):
            defaults["monthlySIP"] = 5000
        if not data.get("tenure"):
            defaults["tenure"] = 10
        if not data.get("tenureUnit"):
            defaults["tenureUnit"] = "years"
        if not data.get("expectedReturn"):
            defaults["expectedReturn"] = rates.rate_for(EInstrument.sip, 12)
    elif instrument in (EInstrument.nsc, EInstrument.scss):
        if not data.get("principal"):
            defaults["principal"] = 100000 if instrument == EInstrument.nsc else 3000000
        if not data.get("tenure"):
            defaults["tenure"] = 5
        if not data.get("rate"):
            defaults["rate"] = rates.rate_for(instrument)
    elif instrument == EInstrument.sgb:
        if not data.get("principal"):
            defaults["principal"] = 100000
        if not data.get("tenure"):
            defaults["tenure"] = 5
        if data.get("goldAppreciationRate") is None:
            defaults["goldAppreciationRate"] = rates.extra(EInstrument.sgb, "goldAppreciation", 8)
    elif instrument == EInstrument.nps:
        if not data.get("monthlyContribution"):
            defaults["monthlyContribution"] = 5000
        if not data.get("tenure"):
            defaults["tenure"] = 25
        for asset_class, share in (("equity", 50), ("corporateBonds", 30), ("governmentBonds", 20),
                                   ("alternative", 0)):
            if not data.get(f"{asset_class}Allocation"):
                defaults[f"{asset_class}Allocation"] = share
    elif instrument in (EInstrument.equity, EInstrument.elss):
        if not data.get("investmentType"):
            defaults["investmentType"] = EInvestmentType.SIP
        if not data.get("amount"):
            defaults["amount"] = 5000
        if not data.get("tenure"):
            defaults["tenure"] = 3 if instrument == EInstrument.elss else 10
        if not data.get("expectedReturn") and not data.get("expectedCAGR"):
            defaults["expectedReturn"] = rates.rate_for(instrument, 12)
            defaults["expectedCAGR"] = defaults["expectedReturn"]
    elif instrument == EInstrument.debt_mutual_fund:
        if not data.get("investmentType"):
            defaults["investmentType"] = EInvestmentType.SIP
        if not data.get("amount"):
            defaults["amount"] = 5000
        if not data.get("tenure"):
            defaults["tenure"] = 5
        if not data.get("fundType"):
            defaults["fundType"] = "shortTerm"
        if not data.get("expectedReturn"):
            defaults["expectedReturn"] = rates.extra(EInstrument.debt_mutual_fund, "shortTerm", 7.5)
    elif instrument == EInstrument.reits:
        if not data.get("investmentAmount"):
            defaults["investmentAmount"] = 100000
        if not data.get("tenure"):
            defaults["tenure"] = 10
        if data.get("dividendYield") is None:
            defaults["dividendYield"] = rates.extra(EInstrument.reits, "dividendYield", 7)
        if data.get("capitalAppreciation") is None:
            defaults["capitalAppreciation"] = rates.extra(EInstrument.reits, "capitalAppreciation", 6)
    elif instrument == EInstrument.bonds_54ec:
        if not data.get("investmentAmount"):
            defaults["investmentAmount"] = 100000
        if not data.get("capitalGainAmount"):
            defaults["capitalGainAmount"] = 100000
        if not data.get("tenure"):
            defaults["tenure"] = 5
        if not data.get("rate"):
            defaults["rate"] = rates.rate_for(EInstrument.bonds_54ec, 5.75)

    return defaults
