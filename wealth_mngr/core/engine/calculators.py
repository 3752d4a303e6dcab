"""
Single-instrument calculators.

Each ``calculate_*_results`` function takes the instrument's form values and
the user's preferences and returns a JSON-ready dictionary with the totals,
the tax on withdrawal at the preference slab, inflation-adjusted values when
``adjust_inflation`` is on, and the year-by-year evolution table. Inputs
below the instrument's minimums return ``None``.

Rates are taken in percent, as entered on the forms.
"""

import logging
import math
from typing import Any, Dict, Mapping, Optional

from wealth_mngr.core.constants import EInstrument, EInvestmentType, SGB_FIXED_RATE_PCT
from wealth_mngr.core.evolution import (
    calculate_fd_evolution,
    calculate_fd_monthly_evolution,
    calculate_lumpsum_evolution,
    calculate_nps_evolution,
    calculate_nsc_evolution,
    calculate_ppf_evolution,
    calculate_rd_evolution,
    calculate_rd_monthly_evolution,
    calculate_scss_evolution,
    calculate_sgb_evolution,
    calculate_sip_evolution,
    evolution_to_records,
)
from wealth_mngr.core.formulas import (
    NPS_ASSET_CLASSES,
    adjust_for_inflation,
    apply_equity_cap,
    calculate_cagr,
    calculate_compound_interest,
    calculate_fd,
    calculate_nps_future_value,
    calculate_nps_weighted_return,
    calculate_ppf,
    calculate_ppf_with_step_up,
    calculate_rd,
    calculate_real_return,
    calculate_scss,
    calculate_sgb,
    calculate_sip_future_value,
    calculate_step_up_sip,
    max_equity_allocation,
    scss_quarterly_interest,
    sgb_fixed_interest,
    step_up_total_invested,
)
from wealth_mngr.core.preferences import UserPreferences
from wealth_mngr.core.tax import calculate_tax_on_withdrawal
from wealth_mngr.utils.rate_utils import (
    annual_pct_to_decimal,
    convert_duration_months_to_years,
    convert_duration_years_to_months,
    round_amount,
)
from wealth_mngr.utils.tenure_utils import (
    convert_years_months_to_months,
    convert_years_months_to_years,
)

logger = logging.getLogger(__name__)

# Form minimums
MIN_RATE_PCT = 0.1
MIN_PPF_YEARLY = 500
MIN_MONTHLY_CONTRIBUTION = 500
MIN_LUMPSUM = 500
MIN_DEPOSIT = 1000
MIN_ELSS_TENURE = 3
MIN_SCSS_AGE = 60
MIN_SCSS_AGE_DEFENCE = 55
MIN_NPS_MONTHLY = 500

# Gold price used when no price per gram is supplied
FALLBACK_GOLD_PRICE_PER_GRAM = 6500
# REIT unit price assumed when the number of units is not given
DEFAULT_REIT_UNIT_PRICE = 100


def _pct(value) -> float:
    return annual_pct_to_decimal(value)


def _below(value, minimum) -> bool:
    return value is None or value < minimum


def _inflation_view(maturity, invested, post_tax, rate, years, preferences: UserPreferences) -> Dict[str, Any]:
    """Inflation-adjusted figures; nulls when adjustment is off."""
    if not preferences.adjust_inflation:
        return {
            "realReturnRate": rate * 100,
            "realMaturityValue": None,
            "realReturns": None,
            "actualSpendingPower": None,
        }

    inflation = preferences.inflation_rate_decimal
    real_maturity = adjust_for_inflation(maturity, inflation, years)
    return {
        "realReturnRate": calculate_real_return(rate, inflation) * 100,
        "realMaturityValue": round_amount(real_maturity),
        "realReturns": round_amount(real_maturity - invested),
        "actualSpendingPower": round_amount(adjust_for_inflation(post_tax, inflation, years)),
    }


def _results(
    instrument: str,
    invested: float,
    maturity: float,
    years: float,
    rate: float,
    preferences: UserPreferences,
    evolution,
    **extra,
) -> Dict[str, Any]:
    """Common result block: totals, tax, inflation view and evolution."""
    returns = maturity - invested
    tax = calculate_tax_on_withdrawal(
        maturity,
        instrument,
        years,
        preferences.income_tax_slab,
        principal=invested,
        returns=returns,
    )
    result = {
        "instrument": instrument,
        "totalInvested": round_amount(invested),
        "maturityValue": round_amount(maturity),
        "returns": round_amount(returns),
        "returnPercentage": round_amount(returns / invested * 100) if invested > 0 else 0,
        "cagr": round_amount(calculate_cagr(invested, maturity, years) * 100),
        "taxAmount": tax["taxAmount"],
        "postTaxAmount": tax["postTaxCorpus"],
        "taxRate": tax["taxRate"],
        "taxRule": tax["taxRule"],
        "tenureYears": years,
    }
    result.update(_inflation_view(maturity, invested, tax["postTaxCorpus"], rate, years, preferences))
    result.update(extra)
    result["evolution"] = evolution_to_records(evolution)
    logger.debug(f"{instrument}: invested {invested:.2f}, maturity {maturity:.2f} over {years} years")
    return result


def calculate_ppf_results(yearly_investment, tenure, rate_pct, step_up_enabled: bool = False,
                          step_up_pct: float = 0, preferences: Optional[UserPreferences] = None):
    """
    Public Provident Fund calculator.

    Args:
        yearly_investment: Yearly deposit (minimum 500)
        tenure: Years
        rate_pct: Annual rate in percent (minimum 0.1)
        step_up_enabled: Grow the deposit every year
        step_up_pct: Yearly step-up in percent
        preferences: User preferences (slab, inflation)

    Returns:
        Result dictionary, or None when an input is below its minimum
    """
    if _below(yearly_investment, MIN_PPF_YEARLY) or not tenure or _below(rate_pct, MIN_RATE_PCT):
        return None
    preferences = preferences or UserPreferences()
    rate = _pct(rate_pct)
    step_up = _pct(step_up_pct)
    stepped = bool(step_up_enabled and step_up > 0)

    if stepped:
        maturity = calculate_ppf_with_step_up(yearly_investment, step_up, rate, tenure)
        invested = step_up_total_invested(yearly_investment, step_up, tenure, periods_per_year=1)
    else:
        maturity = calculate_ppf(yearly_investment, rate, tenure)
        invested = yearly_investment * tenure

    evolution = calculate_ppf_evolution(yearly_investment, rate, tenure, stepped, step_up)
    return _results(EInstrument.ppf, invested, maturity, tenure, rate, preferences, evolution)


def calculate_fd_results(principal, tenure_years, tenure_months, rate_pct, compounding="quarterly",
                         preferences: Optional[UserPreferences] = None):
    """Fixed deposit calculator; tenure is given as whole years plus months."""
    if (_below(principal, MIN_DEPOSIT) or tenure_years is None or tenure_months is None
            or (not tenure_years and not tenure_months) or _below(rate_pct, MIN_RATE_PCT)):
        return None
    preferences = preferences or UserPreferences()
    rate = _pct(rate_pct)
    years = convert_years_months_to_years(tenure_years, tenure_months)
    months = convert_years_months_to_months(tenure_years, tenure_months)

    maturity = calculate_fd(principal, rate, years, compounding)
    if years >= 1:
        evolution = calculate_fd_evolution(principal, rate, years, compounding)
    else:
        evolution = calculate_fd_monthly_evolution(principal, rate, months, compounding)
    return _results(EInstrument.fd, principal, maturity, years, rate, preferences, evolution,
                    totalMonths=months, compounding=compounding)


def calculate_rd_results(monthly_deposit, tenure_years, tenure_months, rate_pct, compounding="quarterly",
                         preferences: Optional[UserPreferences] = None):
    """Recurring deposit calculator; deposits at the start of each month."""
    if (_below(monthly_deposit, MIN_MONTHLY_CONTRIBUTION) or tenure_years is None or tenure_months is None
            or (not tenure_years and not tenure_months) or _below(rate_pct, MIN_RATE_PCT)):
        return None
    preferences = preferences or UserPreferences()
    rate = _pct(rate_pct)
    years = convert_years_months_to_years(tenure_years, tenure_months)
    months = convert_years_months_to_months(tenure_years, tenure_months)

    maturity = calculate_rd(monthly_deposit, rate, months, compounding)
    invested = monthly_deposit * months
    if years >= 1:
        evolution = calculate_rd_evolution(monthly_deposit, rate, years, compounding)
    else:
        evolution = calculate_rd_monthly_evolution(monthly_deposit, rate, months, compounding)
    return _results(EInstrument.rd, invested, maturity, years, rate, preferences, evolution,
                    totalMonths=months, compounding=compounding)


def calculate_sip_results(monthly_sip, tenure, expected_return_pct, tenure_unit: str = "years",
                          step_up_enabled: bool = False, step_up_pct: float = 0,
                          preferences: Optional[UserPreferences] = None):
    """
    Mutual fund SIP calculator.

    ``tenure`` is read in ``tenure_unit`` ("years" or "months"). The step-up
    applies once a year to the monthly amount.
    """
    if (_below(monthly_sip, MIN_MONTHLY_CONTRIBUTION) or not tenure
            or _below(expected_return_pct, MIN_RATE_PCT)):
        return None
    preferences = preferences or UserPreferences()
    rate = _pct(expected_return_pct)
    months = tenure if tenure_unit == "months" else convert_duration_years_to_months(tenure)
    years = convert_duration_months_to_years(months)
    step_up = _pct(step_up_pct)
    stepped = bool(step_up_enabled and step_up > 0)

    if stepped:
        maturity = calculate_step_up_sip(monthly_sip, step_up, years, rate)
        invested = step_up_total_invested(monthly_sip, step_up, years)
    else:
        maturity = calculate_sip_future_value(monthly_sip, rate, months)
        invested = monthly_sip * months

    evolution = calculate_sip_evolution(monthly_sip, rate, years, stepped, step_up)
    return _results(EInstrument.sip, invested, maturity, years, rate, preferences, evolution,
                    totalMonths=months)


def calculate_nsc_results(principal, rate_pct, tenure: float = 5, preferences: Optional[UserPreferences] = None):
    """National Savings Certificate calculator (annual compounding, 5-year term)."""
    if _below(principal, MIN_DEPOSIT) or _below(rate_pct, MIN_RATE_PCT):
        return None
    preferences = preferences or UserPreferences()
    rate = _pct(rate_pct)
    tenure = tenure or 5
    maturity = calculate_compound_interest(principal, rate, tenure, 1)
    return _results(EInstrument.nsc, principal, maturity, tenure, rate, preferences,
                    calculate_nsc_evolution(principal, rate, tenure))


def calculate_scss_results(principal, tenure, rate_pct, seniors_age, is_defence_personnel: bool = False,
                           preferences: Optional[UserPreferences] = None):
    """
    Senior Citizens Savings Scheme calculator.

    The depositor must be at least 60, or 55 for retired defence personnel.
    Interest is paid out every quarter and is not reinvested.
    """
    min_age = MIN_SCSS_AGE_DEFENCE if is_defence_personnel else MIN_SCSS_AGE
    if (_below(principal, MIN_DEPOSIT) or not tenure or _below(rate_pct, MIN_RATE_PCT)
            or _below(seniors_age, min_age)):
        return None
    preferences = preferences or UserPreferences()
    rate = _pct(rate_pct)
    maturity = calculate_scss(principal, rate, tenure)
    return _results(EInstrument.scss, principal, maturity, tenure, rate, preferences,
                    calculate_scss_evolution(principal, rate, tenure),
                    quarterlyInterest=round_amount(scss_quarterly_interest(principal, rate)))


def calculate_sgb_results(gold_grams, tenure, gold_appreciation_pct, gold_price_per_gram=None,
                          preferences: Optional[UserPreferences] = None):
    """
    Sovereign Gold Bond calculator.

    The principal is ``gold_grams × gold_price_per_gram``; the price defaults to
    ``FALLBACK_GOLD_PRICE_PER_GRAM``. Returns combine gold appreciation with the
    fixed 2.5% coupon.
    """
    price = gold_price_per_gram or FALLBACK_GOLD_PRICE_PER_GRAM
    if _below(gold_grams, 1) or not tenure or _below(gold_appreciation_pct, MIN_RATE_PCT):
        return None
    preferences = preferences or UserPreferences()
    gold_rate = _pct(gold_appreciation_pct)
    fixed_rate = _pct(SGB_FIXED_RATE_PCT)
    principal = gold_grams * price

    maturity = calculate_sgb(principal, gold_rate, tenure, fixed_rate)
    combined_rate = (maturity / principal) ** (1 / tenure) - 1
    return _results(EInstrument.sgb, principal, maturity, tenure, combined_rate, preferences,
                    calculate_sgb_evolution(principal, gold_rate, tenure, fixed_rate),
                    goldGrams=gold_grams,
                    goldPricePerGram=round_amount(price),
                    goldAppreciatedValue=round_amount(principal * (1 + gold_rate) ** tenure),
                    fixedInterestAmount=round_amount(sgb_fixed_interest(principal, tenure, fixed_rate)))


def nps_effective_allocation(allocation: Mapping[str, float], current_age, use_age_based_caps: bool,
                             returns: Mapping[str, float], tenure: int):
    """
    Allocation after the equity cap for ``current_age`` and the weighted return.

    With age-based caps the weighted return is the average over the tenure,
    re-capping the equity share each year as the subscriber ages.
    """
    effective = apply_equity_cap(allocation, max_equity_allocation(current_age))
    if not use_age_based_caps:
        return effective, calculate_nps_weighted_return(effective, returns)

    yearly = dict(effective)
    total = 0.0
    for year in range(tenure):
        yearly = apply_equity_cap(yearly, max_equity_allocation(current_age + year))
        total += calculate_nps_weighted_return(yearly, returns)
    return effective, total / tenure


def calculate_nps_results(monthly_contribution, tenure, current_age, allocation_pct: Mapping[str, float],
                          returns_pct: Mapping[str, float], use_age_based_caps: bool = False,
                          preferences: Optional[UserPreferences] = None):
    """
    National Pension System calculator.

    Args:
        monthly_contribution: Monthly contribution (minimum 500)
        tenure: Years until retirement
        current_age: Subscriber's age today
        allocation_pct: Percent per asset class (equity, corporateBonds,
            governmentBonds, alternative); must total 100
        returns_pct: Expected return per asset class in percent
        use_age_based_caps: Tighten the equity cap as the subscriber ages

    Returns:
        Result dictionary with the weighted return and the effective allocation,
        or None for invalid input
    """
    if _below(monthly_contribution, MIN_NPS_MONTHLY) or not tenure or not current_age:
        return None
    allocation_pct = allocation_pct or {}
    if abs(sum(allocation_pct.get(asset, 0) or 0 for asset in NPS_ASSET_CLASSES) - 100) > 0.01:
        return None
    preferences = preferences or UserPreferences()

    allocation = {asset: _pct(allocation_pct.get(asset)) for asset in NPS_ASSET_CLASSES}
    returns = {asset: _pct((returns_pct or {}).get(asset)) for asset in NPS_ASSET_CLASSES}
    effective, weighted_return = nps_effective_allocation(
        allocation, current_age, use_age_based_caps, returns, int(math.ceil(tenure)))

    maturity = calculate_nps_future_value(monthly_contribution, weighted_return, tenure)
    invested = monthly_contribution * 12 * tenure
    evolution = calculate_nps_evolution(monthly_contribution, weighted_return, tenure, current_age,
                                        use_age_based_caps, effective, returns)
    return _results(EInstrument.nps, invested, maturity, tenure, weighted_return, preferences, evolution,
                    weightedReturn=weighted_return * 100,
                    allocation={asset: round_amount(share * 100, 1) for asset, share in effective.items()},
                    inputAllocation=dict(allocation_pct))


def calculate_lumpsum_or_sip_results(instrument, investment_type, amount, tenure, expected_return_pct,
                                     step_up_enabled: bool = False, step_up_pct: float = 0,
                                     preferences: Optional[UserPreferences] = None):
    """
    Market-linked calculator shared by equity, ELSS and debt mutual funds.

    ``investment_type`` is "sip" (monthly ``amount``) or "lumpsum". ELSS needs at
    least three years for its lock-in and ignores the step-up.
    """
    if investment_type not in (EInvestmentType.SIP, EInvestmentType.LUMPSUM):
        return None
    minimum_tenure = MIN_ELSS_TENURE if instrument == EInstrument.elss else 1
    if _below(amount, MIN_LUMPSUM) or _below(tenure, minimum_tenure) or _below(expected_return_pct, MIN_RATE_PCT):
        return None
    preferences = preferences or UserPreferences()
    rate = _pct(expected_return_pct)
    step_up = _pct(step_up_pct) if instrument != EInstrument.elss else 0
    stepped = bool(step_up_enabled and step_up > 0)

    if investment_type == EInvestmentType.SIP:
        if stepped:
            maturity = calculate_step_up_sip(amount, step_up, tenure, rate)
            invested = step_up_total_invested(amount, step_up, tenure)
        else:
            maturity = calculate_sip_future_value(amount, rate, tenure * 12)
            invested = amount * tenure * 12
        evolution = calculate_sip_evolution(amount, rate, tenure, stepped, step_up)
    else:
        maturity = calculate_compound_interest(amount, rate, tenure, 1)
        invested = amount
        evolution = calculate_lumpsum_evolution(amount, rate, tenure)

    return _results(instrument, invested, maturity, tenure, rate, preferences, evolution,
                    investmentType=investment_type)


def calculate_reits_results(investment_amount, tenure, dividend_yield_pct, capital_appreciation_pct,
                            number_of_units=None, preferences: Optional[UserPreferences] = None):
    """
    REIT calculator.

    Dividends are reinvested: each year the holding grows by the appreciation
    plus the dividend yield on its current value.
    """
    if (_below(investment_amount, MIN_DEPOSIT) or not tenure
            or not dividend_yield_pct or not capital_appreciation_pct):
        return None
    preferences = preferences or UserPreferences()
    dividend_rate = _pct(dividend_yield_pct)
    appreciation_rate = _pct(capital_appreciation_pct)

    units = number_of_units or math.floor(investment_amount / DEFAULT_REIT_UNIT_PRICE)
    unit_price = investment_amount / number_of_units if number_of_units else DEFAULT_REIT_UNIT_PRICE

    value = investment_amount
    total_dividend = 0.0
    for _ in range(int(math.ceil(tenure))):
        dividend = value * dividend_rate
        total_dividend += dividend
        value += value * appreciation_rate + dividend

    evolution = calculate_lumpsum_evolution(investment_amount, dividend_rate + appreciation_rate, tenure)
    return _results(EInstrument.reits, investment_amount, value, tenure, dividend_rate + appreciation_rate,
                    preferences, evolution,
                    numberOfUnits=units,
                    unitPrice=round_amount(unit_price),
                    totalDividendIncome=round_amount(total_dividend),
                    totalCapitalGain=round_amount(investment_amount * ((1 + appreciation_rate) ** tenure - 1)))


CALCULATORS = {
    EInstrument.ppf: calculate_ppf_results,
    EInstrument.fd: calculate_fd_results,
    EInstrument.rd: calculate_rd_results,
    EInstrument.sip: calculate_sip_results,
    EInstrument.nsc: calculate_nsc_results,
    EInstrument.scss: calculate_scss_results,
    EInstrument.sgb: calculate_sgb_results,
    EInstrument.nps: calculate_nps_results,
    EInstrument.reits: calculate_reits_results,
}

LUMPSUM_OR_SIP_INSTRUMENTS = (EInstrument.equity, EInstrument.elss, EInstrument.debt_mutual_fund)
