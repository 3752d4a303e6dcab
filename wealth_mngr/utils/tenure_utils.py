"""
Tenure conversion helpers.

FD and RD forms capture tenure as years + months; older saved calculations
store a single ``tenure`` value with a ``tenureUnit`` of "years" or "months".
These helpers normalise both shapes.
"""

import math
from typing import Any, Dict, Tuple


def _to_int(value: Any) -> int:
    try:
        return int(float(value))
    except (TypeError, ValueError):
        return 0


def convert_years_months_to_years(years: Any, months: Any) -> float:
    """Total tenure in (fractional) years."""
    return _to_int(years) + _to_int(months) / 12


def convert_years_months_to_months(years: Any, months: Any) -> int:
    """Total tenure in months."""
    return _to_int(years) * 12 + _to_int(months)


def normalize_years_months(years: Any, months: Any) -> Tuple[int, int]:
    """Carry whole years out of the months field, e.g. (0, 15) -> (1, 3)."""
    total = convert_years_months_to_months(years, months)
    return total // 12, total % 12


def convert_legacy_to_years_months(tenure: Any, tenure_unit: str) -> Tuple[int, int]:
    """Convert a legacy ``tenure`` + ``tenureUnit`` pair to (years, months)."""
    try:
        tenure_num = float(tenure)
    except (TypeError, ValueError):
        return 0, 0
    if tenure_num <= 0:
        return 0, 0

    if tenure_unit == "months":
        total_months = int(math.floor(tenure_num + 0.5))
        return total_months // 12, total_months % 12

    years = int(math.floor(tenure_num))
    months = int(math.floor((tenure_num % 1) * 12 + 0.5))
    return years, (0 if months >= 12 else months)


def migrate_fd_data(data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Return a copy of FD investment data with ``tenureYears``/``tenureMonths`` set.

    New-format fields win; otherwise the legacy ``tenure``/``tenureUnit`` pair is
    converted. Data with no tenure information is returned unchanged.
    """
    if not data:
        return {}

    migrated = dict(data)
    if data.get("tenureYears") is not None or data.get("tenureMonths") is not None:
        years, months = normalize_years_months(data.get("tenureYears") or 0, data.get("tenureMonths") or 0)
        migrated["tenureYears"] = years
        migrated["tenureMonths"] = months
    elif data.get("tenure") is not None and data.get("tenureUnit"):
        years, months = convert_legacy_to_years_months(data["tenure"], data["tenureUnit"])
        migrated["tenureYears"] = years
        migrated["tenureMonths"] = months
    return migrated


def tenure_in_years(data: Dict[str, Any]) -> float:
    """Tenure in years from either the years+months or the legacy tenure+unit fields."""
    migrated = migrate_fd_data(data)
    if migrated.get("tenureYears") is not None or migrated.get("tenureMonths") is not None:
        return convert_years_months_to_years(migrated.get("tenureYears") or 0, migrated.get("tenureMonths") or 0)
    tenure = migrated.get("tenure")
    if not tenure:
        return 0.0
    if migrated.get("tenureUnit") == "months":
        return float(tenure) / 12
    return float(tenure)
