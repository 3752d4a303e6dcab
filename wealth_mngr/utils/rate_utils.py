"""
Rate conversion utilities for financial calculations.

This module provides standardized functions for converting between the
different rate formats used throughout the calculators.

Conventions:
- User inputs (forms, saved calculations) are annual rates as percentages (e.g., 7.1 = 7.1%)
- All formula calculations use decimal rates (e.g., 0.071 = 7.1%)
- Monthly rates are derived from annual rates: annual_decimal / 12
- Displayed amounts are rounded half-up to 2 decimals (paise)
"""

import math
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional, Union

from wealth_mngr.utils.error_utils import error_handler


@error_handler
def annual_pct_to_decimal(rate_pct: Union[float, str, None]) -> float:
    """
    Convert annual percentage rate to decimal format.

    Missing values are treated as 0%.

    Examples:
        >>> annual_pct_to_decimal(7.5)
        0.075
        >>> annual_pct_to_decimal(None)
        0.0
    """
    if rate_pct is None or rate_pct == "":
        return 0.0
    return float(rate_pct) / 100.0


@error_handler
def decimal_to_annual_pct(rate_decimal: float) -> float:
    """
    Convert decimal rate to annual percentage format.

    Examples:
        >>> decimal_to_annual_pct(0.05)
        5.0
    """
    return float(rate_decimal) * 100.0


@error_handler
def annual_decimal_to_monthly_decimal(annual_rate_decimal: float) -> float:
    """
    Convert annual decimal rate to monthly decimal rate (nominal, not effective).

    Examples:
        >>> annual_decimal_to_monthly_decimal(0.12)
        0.01
    """
    return annual_rate_decimal / 12.0


@error_handler
def convert_duration_years_to_months(years: Union[float, int]) -> int:
    """
    Convert duration from years to months, rounded to the nearest month.

    Examples:
        >>> convert_duration_years_to_months(2.5)
        30
    """
    return round(float(years) * 12)


@error_handler
def convert_duration_months_to_years(months: int) -> float:
    """
    Convert duration from months to years.

    Examples:
        >>> convert_duration_months_to_years(30)
        2.5
    """
    return float(months) / 12.0


@error_handler
def validate_rate_range(rate_pct: float, min_pct: float = 0.0, max_pct: float = 100.0) -> bool:
    """
    Validate that a percentage rate is within reasonable bounds.

    Examples:
        >>> validate_rate_range(7.1)
        True
        >>> validate_rate_range(-1.0)
        False
    """
    return min_pct <= rate_pct <= max_pct


@error_handler
def normalize_rate_input(rate_input: Union[str, float, int]) -> float:
    """
    Normalize rate input from various formats to a standard float percentage.

    Handles string inputs, removes percentage signs, and validates ranges.

    Raises:
        ValueError: If rate cannot be converted or is out of range

    Examples:
        >>> normalize_rate_input("7.1%")
        7.1
        >>> normalize_rate_input(8)
        8.0
    """
    if isinstance(rate_input, str):
        cleaned = rate_input.strip().rstrip('%')
        try:
            rate_float = float(cleaned)
        except ValueError:
            raise ValueError(f"Cannot convert rate input '{rate_input}' to number")
    else:
        rate_float = float(rate_input)

    if not validate_rate_range(rate_float):
        raise ValueError(f"Rate {rate_float}% is outside valid range (0% to 100%)")

    return rate_float


def round_amount(value: Optional[float], places: int = 2) -> float:
    """
    Round half-up to ``places`` decimals.

    Python's built-in ``round`` uses banker's rounding, which would make
    displayed rupee/paise values drift from the published calculator tables.

    Examples:
        >>> round_amount(2.675)
        2.68
        >>> round_amount(None)
        0.0
    """
    if value is None:
        return 0.0
    value = float(value)
    if not math.isfinite(value):
        return value
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(repr(value)).quantize(quantum, rounding=ROUND_HALF_UP))


# Convenience constants for common conversions
MONTHS_PER_YEAR = 12
PERCENTAGE_TO_DECIMAL = 100.0
