"""
Closed-form and iterative financial formulas.

All rates are nominal annual rates expressed as decimals (0.071 = 7.1%).

These functions are total: malformed or missing numeric input never raises.
A missing principal, contribution or period yields ``0``; inflation
adjustment with a missing rate or period returns the amount unchanged.
A rate of exactly zero is a valid input for the annuity formulas
(``calculate_ppf``, ``calculate_sip_future_value``, ``calculate_rd``) and
degenerates to the plain sum of contributions, while ``calculate_fd``
preserves the principal.

Annuity and growth terms are evaluated with ``numpy_financial``; results are
returned as plain ``float``.
"""

import math
from typing import Dict, Mapping, Optional

import numpy as np
import numpy_financial as npf

from wealth_mngr.core.constants import ECompounding

# NPS asset classes: Equity (E), Corporate bonds (C), Government securities (G), Alternative (A)
NPS_ASSET_CLASSES = ("equity", "corporateBonds", "governmentBonds", "alternative")


def _as_number(value) -> Optional[float]:
    """Coerce form input to float; None for anything that is not a finite number."""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def calculate_compound_interest(principal, rate, time, frequency: int = 1) -> float:
    """
    Maturity amount ``P·(1 + r/f)^(f·t)``.

    Args:
        principal: Initial investment amount
        rate: Annual interest rate (decimal)
        time: Period in years
        frequency: Compounding periods per year (1 annual, 4 quarterly, 12 monthly)

    Returns:
        Maturity amount, or 0 when principal, rate or time is missing or zero

    Examples:
        >>> round(calculate_compound_interest(100000, 0.08, 5), 2)
        146932.81
    """
    principal, rate, time = _as_number(principal), _as_number(rate), _as_number(time)
    frequency = _as_number(frequency) or 1
    if not principal or not rate or not time:
        return 0.0
    return float(-npf.fv(rate / frequency, frequency * time, 0, principal))


def calculate_sip_future_value(monthly_investment, annual_rate, months) -> float:
    """
    SIP future value with contributions at the start of each month.

    ``FV = m·[((1+i)^n − 1)/i]·(1+i)``, ``i = annual_rate/12``; ``m·n`` when the rate is 0.

    Examples:
        >>> round(calculate_sip_future_value(5000, 0.12, 120), 2)
        1161695.38
        >>> calculate_sip_future_value(5000, 0, 12)
        60000.0
    """
    monthly_investment, annual_rate, months = (
        _as_number(monthly_investment), _as_number(annual_rate), _as_number(months))
    if not monthly_investment or annual_rate is None or not months:
        return 0.0
    monthly_rate = annual_rate / 12
    return float(-npf.fv(monthly_rate, months, monthly_investment, 0, when="begin"))


def step_up_total_invested(initial_amount, step_up, years, periods_per_year: int = 12) -> float:
    """Sum of contributions when the per-period amount grows by ``step_up`` each year."""
    initial_amount, step_up, years = _as_number(initial_amount), _as_number(step_up) or 0.0, _as_number(years)
    if not initial_amount or not years:
        return 0.0
    total_periods = int(round(years * periods_per_year))
    return sum(initial_amount * (1 + step_up) ** (period // periods_per_year)
               for period in range(total_periods))


def calculate_step_up_sip(initial_sip, step_up, years, annual_rate) -> float:
    """
    Step-up SIP future value, simulated month by month.

    The monthly amount grows by ``step_up`` at the start of every year. Each
    contribution is made at the start of its month and earns that month's
    return, so a step-up of 0 reproduces ``calculate_sip_future_value``.

    Examples:
        >>> round(calculate_step_up_sip(1000, 0.10, 2, 0), 2)
        25200.0
    """
    initial_sip, step_up, years, annual_rate = (
        _as_number(initial_sip), _as_number(step_up) or 0.0, _as_number(years), _as_number(annual_rate))
    if not initial_sip or not years or annual_rate is None:
        return 0.0

    monthly_rate = annual_rate / 12
    balance = 0.0
    for month in range(int(round(years * 12))):
        contribution = initial_sip * (1 + step_up) ** (month // 12)
        balance = (balance + contribution) * (1 + monthly_rate)
    return balance


def calculate_step_up_sip_legacy(initial_sip, step_up, years, annual_rate) -> float:
    """
    Step-up SIP future value as computed by the earliest saved calculations.

    Every year's contributions are valued to the horizon and then the running
    total is grown by another full year, so earlier years' growth is applied
    more than once. Kept so previously saved results can be reproduced; use
    ``calculate_step_up_sip`` for new projections.
    """
    initial_sip, step_up, years, annual_rate = (
        _as_number(initial_sip), _as_number(step_up) or 0.0, _as_number(years), _as_number(annual_rate))
    if not initial_sip or not years or not annual_rate:
        return 0.0

    whole_years = int(math.ceil(years))
    monthly_rate = annual_rate / 12
    year_growth = (1 + monthly_rate) ** 12
    total = 0.0
    for year in range(whole_years):
        year_sip = initial_sip * (1 + step_up) ** year
        year_value = calculate_sip_future_value(year_sip, annual_rate, 12)
        year_value *= (1 + monthly_rate) ** (12 * (whole_years - year - 1))
        total = total * year_growth + year_value
    return total


def calculate_ppf(yearly_investment, rate, years) -> float:
    """
    PPF maturity (annuity due, yearly deposits compounded annually).

    ``A = P·[((1+r)^n − 1)/r]·(1+r)``; ``P·n`` when the rate is 0.

    Examples:
        >>> round(calculate_ppf(150000, 0.071, 15))
        4068209
        >>> calculate_ppf(1000, 0, 10)
        10000.0
    """
    yearly_investment, rate, years = _as_number(yearly_investment), _as_number(rate), _as_number(years)
    if not yearly_investment or rate is None or not years:
        return 0.0
    return float(-npf.fv(rate, years, yearly_investment, 0, when="begin"))


def calculate_ppf_with_step_up(yearly_investment, step_up, rate, years) -> float:
    """PPF maturity where the yearly deposit grows by ``step_up`` every year."""
    yearly_investment, step_up, rate, years = (
        _as_number(yearly_investment), _as_number(step_up) or 0.0, _as_number(rate), _as_number(years))
    if not yearly_investment or not years or rate is None:
        return 0.0

    balance = 0.0
    for year in range(int(math.ceil(years))):
        contribution = yearly_investment * (1 + step_up) ** year
        balance = (balance + contribution) * (1 + rate)
    return balance


def adjust_for_inflation(amount, inflation_rate, years):
    """
    Deflate a nominal amount to today's money: ``amount / (1+inflation)^years``.

    Returns ``amount`` unchanged when any argument is missing or zero.
    """
    value, inflation_rate, years = _as_number(amount), _as_number(inflation_rate), _as_number(years)
    if not value or not inflation_rate or not years:
        return amount
    return float(npf.pv(inflation_rate, years, 0, -value))


def calculate_real_return(nominal_return, inflation_rate) -> float:
    """Real rate ``(1+nominal)/(1+inflation) − 1``; 0 when either is missing."""
    nominal_return, inflation_rate = _as_number(nominal_return), _as_number(inflation_rate)
    if not nominal_return or not inflation_rate:
        return 0.0
    return (1 + nominal_return) / (1 + inflation_rate) - 1


def calculate_cagr(beginning_value, ending_value, years) -> float:
    """
    Compound annual growth rate ``(end/begin)^(1/years) − 1``.

    Examples:
        >>> round(calculate_cagr(100000, 200000, 6), 4)
        0.1225
        >>> calculate_cagr(0, 200000, 6)
        0.0
    """
    beginning_value, ending_value, years = (
        _as_number(beginning_value), _as_number(ending_value), _as_number(years))
    if not beginning_value or not ending_value or not years:
        return 0.0
    ratio = ending_value / beginning_value
    if ratio <= 0:
        return 0.0
    return ratio ** (1 / years) - 1


def calculate_fd(principal, rate, years, compounding="quarterly") -> float:
    """
    Fixed-deposit maturity amount.

    Args:
        principal: Deposit amount
        rate: Annual rate (decimal)
        years: Tenure in years (may be fractional)
        compounding: "monthly", "quarterly" (default), "annually" or "cumulative";
            cumulative uses simple interest below one year and annual compounding otherwise

    Returns:
        Maturity amount; 0 for missing or negative arguments, the principal when
        the rate or tenure is 0

    Examples:
        >>> round(calculate_fd(100000, 0.065, 1))
        106660
        >>> calculate_fd(100000, 0, 3)
        100000.0
    """
    principal, rate, years = _as_number(principal), _as_number(rate), _as_number(years)
    if principal is None or rate is None or years is None:
        return 0.0
    if principal < 0 or rate < 0 or years < 0:
        return 0.0
    if rate == 0 or years == 0:
        return principal

    mode = ECompounding.parse(compounding)
    if mode is ECompounding.CUMULATIVE and years < 1:
        return principal * (1 + rate * years)
    return calculate_compound_interest(principal, rate, years, mode.periods_per_year)


def rd_effective_monthly_rate(annual_rate, compounding="quarterly") -> float:
    """Monthly rate equivalent to the deposit's crediting frequency."""
    annual_rate = _as_number(annual_rate) or 0.0
    mode = ECompounding.parse(compounding)
    if mode is ECompounding.QUARTERLY:
        return (1 + annual_rate / 4) ** (1 / 3) - 1
    if mode is ECompounding.ANNUALLY:
        return (1 + annual_rate) ** (1 / 12) - 1
    return annual_rate / 12


def calculate_rd(monthly_deposit, annual_rate, months, compounding="quarterly") -> float:
    """
    Recurring-deposit maturity with deposits at the start of each month.

    Examples:
        >>> calculate_rd(5000, 0, 12)
        60000.0
    """
    monthly_deposit, annual_rate, months = (
        _as_number(monthly_deposit), _as_number(annual_rate), _as_number(months))
    if monthly_deposit is None or annual_rate is None or months is None:
        return 0.0
    if monthly_deposit < 0 or annual_rate < 0 or months <= 0:
        return 0.0

    effective_rate = rd_effective_monthly_rate(annual_rate, compounding)
    return float(-npf.fv(effective_rate, months, monthly_deposit, 0, when="begin"))


def calculate_nsc(principal, rate, years=5) -> float:
    """NSC maturity: annual compounding, paid at maturity."""
    return calculate_compound_interest(principal, rate, years, 1)


def calculate_scss(principal, rate, years) -> float:
    """
    SCSS maturity: interest is paid out quarterly and not reinvested.

    ``maturity = P + P·(r/4)·(4·years)``
    """
    principal, rate, years = _as_number(principal), _as_number(rate), _as_number(years)
    if not principal or rate is None or not years:
        return 0.0
    return principal + scss_quarterly_interest(principal, rate) * years * 4


def scss_quarterly_interest(principal, rate) -> float:
    principal, rate = _as_number(principal) or 0.0, _as_number(rate) or 0.0
    return principal * rate / 4


def calculate_sgb(principal, gold_appreciation_rate, years, fixed_rate=0.025) -> float:
    """
    Sovereign Gold Bond maturity value.

    The holding tracks the gold price and also earns a fixed coupon paid
    semi-annually: ``P·(1+g)^y + P·((1+f/2)^(2y) − 1)``.
    """
    principal, years = _as_number(principal), _as_number(years)
    gold_rate = _as_number(gold_appreciation_rate) or 0.0
    fixed_rate = _as_number(fixed_rate) or 0.0
    if not principal or not years:
        return 0.0
    gold_value = principal * (1 + gold_rate) ** years
    return gold_value + sgb_fixed_interest(principal, years, fixed_rate)


def sgb_fixed_interest(principal, years, fixed_rate=0.025) -> float:
    """Cumulative SGB coupon after ``years`` (compounded semi-annually)."""
    principal, years = _as_number(principal) or 0.0, _as_number(years) or 0.0
    fixed_rate = _as_number(fixed_rate) or 0.0
    return principal * ((1 + fixed_rate / 2) ** (years * 2) - 1)


def calculate_nps_weighted_return(allocations: Mapping[str, float], returns: Mapping[str, float]) -> float:
    """
    Allocation-weighted expected return across NPS asset classes.

    Args:
        allocations: Share per asset class (decimals summing to 1)
        returns: Expected annual return per asset class (decimals)

    Examples:
        >>> round(calculate_nps_weighted_return(
        ...     {"equity": 0.5, "corporateBonds": 0.3, "governmentBonds": 0.2},
        ...     {"equity": 0.12, "corporateBonds": 0.09, "governmentBonds": 0.08}), 4)
        0.103
    """
    weights = np.array([_as_number(allocations.get(asset_class)) or 0.0 for asset_class in NPS_ASSET_CLASSES])
    expected = np.array([_as_number(returns.get(asset_class)) or 0.0 for asset_class in NPS_ASSET_CLASSES])
    return float(np.dot(weights, expected))


def calculate_nps_future_value(monthly_contribution, weighted_return, years) -> float:
    """NPS corpus using the SIP formula at the weighted return."""
    years = _as_number(years)
    if not years:
        return 0.0
    return calculate_sip_future_value(monthly_contribution, weighted_return, years * 12)


def max_equity_allocation(age) -> float:
    """
    Maximum NPS equity share for a subscriber's age.

    100% up to 35; then 2.5% less per year down to 75% at 50; then 2.5% less
    per year with a floor of 50%.
    """
    age = _as_number(age) or 0.0
    if age <= 35:
        return 1.0
    if age <= 50:
        return max(0.75, 1.0 - (age - 35) * 0.025)
    return max(0.50, 0.75 - (age - 50) * 0.025)


def apply_equity_cap(allocation: Mapping[str, float], max_equity: float) -> Dict[str, float]:
    """
    Return a copy of ``allocation`` with equity capped at ``max_equity``.

    The excess is spread over the other classes in proportion to their share,
    or moved to government bonds when nothing else is allocated.
    """
    capped = {asset_class: _as_number(allocation.get(asset_class)) or 0.0 for asset_class in NPS_ASSET_CLASSES}
    if capped["equity"] <= max_equity:
        return capped

    excess = capped["equity"] - max_equity
    capped["equity"] = max_equity
    others = [asset_class for asset_class in NPS_ASSET_CLASSES if asset_class != "equity"]
    total_other = sum(capped[asset_class] for asset_class in others)
    if total_other > 0:
        shares = {asset_class: capped[asset_class] / total_other for asset_class in others}
        for asset_class in others:
            capped[asset_class] += excess * shares[asset_class]
    else:
        capped["governmentBonds"] += excess
    return capped
