"""
Year-wise evolution tables.

Every table is a ``pandas.DataFrame`` with one row per period and the columns
``year, opening_balance, investment, interest, closing_balance`` (monthly
tables use ``month`` instead of ``year``). Amounts are rounded half-up to
2 decimals.

For every row ``closing_balance = opening_balance + investment + interest``
(within rounding), and each row's opening balance is the previous row's
closing balance.
"""

import math
from typing import Any, Dict, List, Mapping, Optional

import pandas as pd

from wealth_mngr.core.formulas import (
    NPS_ASSET_CLASSES,
    apply_equity_cap,
    calculate_fd,
    calculate_nps_weighted_return,
    max_equity_allocation,
    rd_effective_monthly_rate,
    sgb_fixed_interest,
)
from wealth_mngr.utils.rate_utils import annual_decimal_to_monthly_decimal, round_amount

YEAR = "year"
MONTH = "month"
OPENING_BALANCE = "opening_balance"
INVESTMENT = "investment"
INTEREST = "interest"
CLOSING_BALANCE = "closing_balance"

EVOLUTION_COLUMNS = [YEAR, OPENING_BALANCE, INVESTMENT, INTEREST, CLOSING_BALANCE]

DEFAULT_NPS_ALLOCATION = {"equity": 0.5, "corporateBonds": 0.3, "governmentBonds": 0.2, "alternative": 0.0}
DEFAULT_NPS_RETURNS = {"equity": 0.12, "corporateBonds": 0.09, "governmentBonds": 0.08, "alternative": 0.07}


def _row(period: int, opening: float, investment: float, interest: float, closing: float,
         period_column: str = YEAR, **extra) -> Dict[str, Any]:
    row = {
        period_column: period,
        OPENING_BALANCE: round_amount(opening),
        INVESTMENT: round_amount(investment),
        INTEREST: round_amount(interest),
        CLOSING_BALANCE: round_amount(closing),
    }
    row.update({key: round_amount(value) for key, value in extra.items()})
    return row


def _frame(rows: List[Dict[str, Any]], period_column: str = YEAR) -> pd.DataFrame:
    columns = [period_column] + EVOLUTION_COLUMNS[1:]
    if rows:
        columns += [key for key in rows[0] if key not in columns]
    return pd.DataFrame(rows, columns=columns)


def _whole_years(years) -> int:
    try:
        return max(0, int(math.ceil(float(years))))
    except (TypeError, ValueError):
        return 0


def evolution_to_records(evolution: pd.DataFrame) -> List[Dict[str, Any]]:
    """JSON-ready list of row dicts with camelCase keys."""
    if evolution is None or evolution.empty:
        return []
    renamed = evolution.rename(columns={
        OPENING_BALANCE: "openingBalance",
        CLOSING_BALANCE: "closingBalance",
        "fixed_interest": "fixedInterest",
        "gold_appreciation": "goldAppreciation",
        "equity_allocation": "equityAllocation",
    })
    return renamed.to_dict(orient="records")


def calculate_ppf_evolution(yearly_investment, rate, years, step_up_enabled: bool = False,
                            step_up: float = 0.0) -> pd.DataFrame:
    """Yearly PPF table; interest accrues on opening balance plus the year's deposit."""
    rows = []
    opening = 0.0
    rate = rate or 0.0
    for year in range(1, _whole_years(years) + 1):
        investment = yearly_investment * (1 + step_up) ** (year - 1) if step_up_enabled else yearly_investment
        interest = (opening + investment) * rate
        closing = opening + investment + interest
        rows.append(_row(year, opening, investment, interest, closing))
        opening = closing
    return _frame(rows)


def _total_months(years) -> int:
    try:
        return max(0, int(round(float(years) * 12)))
    except (TypeError, ValueError):
        return 0


def _monthly_contribution_rows(monthly_amounts, monthly_rates, years) -> List[Dict[str, Any]]:
    """
    Yearly rows from a month-by-month simulation. Each contribution is made at
    the start of its month and earns that month's return; a fractional tenure
    ends with a partial final year.
    """
    rows = []
    balance = 0.0
    remaining = _total_months(years)
    year = 0
    while remaining > 0:
        year += 1
        opening = balance
        deposited = 0.0
        amount = monthly_amounts(year)
        monthly_rate = monthly_rates(year)
        for _ in range(min(12, remaining)):
            balance = (balance + amount) * (1 + monthly_rate)
            deposited += amount
        remaining -= 12
        rows.append(_row(year, opening, deposited, balance - opening - deposited, balance))
    return rows


def calculate_sip_evolution(monthly_investment, annual_rate, years, step_up_enabled: bool = False,
                            step_up: float = 0.0) -> pd.DataFrame:
    """Yearly SIP table, simulated month by month with an optional yearly step-up."""
    monthly_rate = annual_decimal_to_monthly_decimal(annual_rate or 0.0)

    def amount_for(year):
        if step_up_enabled:
            return monthly_investment * (1 + step_up) ** (year - 1)
        return monthly_investment

    rows = _monthly_contribution_rows(amount_for, lambda year: monthly_rate, years)
    return _frame(rows)


def calculate_rd_evolution(monthly_deposit, annual_rate, years, compounding="quarterly") -> pd.DataFrame:
    """Yearly RD table at the effective monthly rate for the crediting frequency."""
    monthly_rate = rd_effective_monthly_rate(annual_rate, compounding)
    rows = _monthly_contribution_rows(lambda year: monthly_deposit, lambda year: monthly_rate, years)
    return _frame(rows)


def calculate_rd_monthly_evolution(monthly_deposit, annual_rate, months, compounding="quarterly") -> pd.DataFrame:
    """Monthly RD table, used for tenures under a year."""
    monthly_rate = rd_effective_monthly_rate(annual_rate, compounding)
    rows = []
    balance = 0.0
    for month in range(1, int(months or 0) + 1):
        opening = balance
        balance = (balance + monthly_deposit) * (1 + monthly_rate)
        rows.append(_row(month, opening, monthly_deposit, balance - opening - monthly_deposit, balance, MONTH))
    return _frame(rows, MONTH)


def _lumpsum_rows(principal, years, value_at) -> List[Dict[str, Any]]:
    rows = []
    total_years = float(years or 0)
    opening = 0.0
    for year in range(1, _whole_years(years) + 1):
        investment = principal if year == 1 else 0.0
        closing = value_at(min(year, total_years))
        rows.append(_row(year, opening, investment, closing - opening - investment, closing))
        opening = closing
    return rows


def calculate_fd_evolution(principal, rate, years, compounding="quarterly") -> pd.DataFrame:
    """
    Yearly FD table. The deposit is the first row's investment; a fractional
    tenure ends with a partial final year.
    """
    rows = _lumpsum_rows(principal, years, lambda t: calculate_fd(principal, rate, t, compounding))
    return _frame(rows)


def calculate_fd_monthly_evolution(principal, rate, months, compounding="quarterly") -> pd.DataFrame:
    """Monthly FD table, used for tenures under a year."""
    rows = []
    opening = 0.0
    for month in range(1, int(months or 0) + 1):
        investment = principal if month == 1 else 0.0
        closing = calculate_fd(principal, rate, month / 12, compounding)
        rows.append(_row(month, opening, investment, closing - opening - investment, closing, MONTH))
        opening = closing
    return _frame(rows, MONTH)


def calculate_lumpsum_evolution(principal, rate, years) -> pd.DataFrame:
    """Yearly table for a one-time investment compounding annually."""
    rate = rate or 0.0
    rows = _lumpsum_rows(principal, years, lambda t: principal * (1 + rate) ** t)
    return _frame(rows)


def calculate_nsc_evolution(principal, rate, years=5) -> pd.DataFrame:
    return calculate_lumpsum_evolution(principal, rate, years)


def calculate_sgb_evolution(principal, gold_appreciation_rate, years, fixed_rate: float = 0.025) -> pd.DataFrame:
    """
    Yearly SGB table. ``interest`` is the year's total return; the extra
    ``fixed_interest`` and ``gold_appreciation`` columns split it into the
    coupon and the change in gold value.
    """
    rows = []
    gold_rate = gold_appreciation_rate or 0.0
    opening = 0.0
    for year in range(1, _whole_years(years) + 1):
        investment = principal if year == 1 else 0.0
        gold_value = principal * (1 + gold_rate) ** year
        previous_gold = principal * (1 + gold_rate) ** (year - 1)
        coupon = sgb_fixed_interest(principal, year, fixed_rate) - sgb_fixed_interest(principal, year - 1, fixed_rate)
        closing = gold_value + sgb_fixed_interest(principal, year, fixed_rate)
        rows.append(_row(year, opening, investment, closing - opening - investment, closing,
                         fixed_interest=coupon, gold_appreciation=gold_value - previous_gold))
        opening = closing
    return _frame(rows)


def calculate_scss_evolution(principal, rate, years) -> pd.DataFrame:
    """
    Yearly SCSS table. Interest is paid out quarterly, so the closing balance is
    the principal plus interest received to date.
    """
    rows = []
    yearly_interest = principal * (rate or 0.0)
    opening = 0.0
    for year in range(1, _whole_years(years) + 1):
        investment = principal if year == 1 else 0.0
        closing = opening + investment + yearly_interest
        rows.append(_row(year, opening, investment, yearly_interest, closing))
        opening = closing
    return _frame(rows)


def calculate_nps_evolution(
    monthly_contribution,
    weighted_return,
    years,
    current_age: int = 35,
    use_age_based_caps: bool = False,
    initial_allocation: Optional[Mapping[str, float]] = None,
    returns: Optional[Mapping[str, float]] = None,
) -> pd.DataFrame:
    """
    Yearly NPS table.

    With ``use_age_based_caps`` the equity share is re-capped every year for the
    subscriber's age that year and the weighted return recomputed; the capped
    allocation carries forward to later years. An ``equity_allocation`` column
    records the share used each year.
    """
    allocation = dict(initial_allocation or DEFAULT_NPS_ALLOCATION)
    returns = dict(returns or DEFAULT_NPS_RETURNS)
    for asset_class in NPS_ASSET_CLASSES:
        allocation.setdefault(asset_class, 0.0)

    capped = False
    equity_by_year = []

    def monthly_rate_for(year):
        nonlocal allocation, capped
        if use_age_based_caps:
            cap = max_equity_allocation(current_age + year - 1)
            if allocation["equity"] > cap:
                allocation = apply_equity_cap(allocation, cap)
                capped = True
        equity_by_year.append(allocation["equity"])
        if capped:
            return calculate_nps_weighted_return(allocation, returns) / 12
        return (weighted_return or 0.0) / 12

    rows = _monthly_contribution_rows(lambda year: monthly_contribution, monthly_rate_for, years)
    for row, equity in zip(rows, equity_by_year):
        row["equity_allocation"] = round(equity, 4)
    return _frame(rows)
