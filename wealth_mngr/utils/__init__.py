"""
Utility modules for Wealth Manager.

This package contains reusable utility functions for rate conversions,
tenure normalisation, and error handling throughout the application.
"""

from wealth_mngr.utils.rate_utils import (
    annual_pct_to_decimal,
    decimal_to_annual_pct,
    annual_decimal_to_monthly_decimal,
    convert_duration_years_to_months,
    convert_duration_months_to_years,
    validate_rate_range,
    normalize_rate_input,
    round_amount,
    MONTHS_PER_YEAR,
    PERCENTAGE_TO_DECIMAL,
)

from wealth_mngr.utils.tenure_utils import (
    convert_years_months_to_years,
    convert_years_months_to_months,
    normalize_years_months,
    convert_legacy_to_years_months,
    migrate_fd_data,
    tenure_in_years,
)

from wealth_mngr.utils.error_utils import (
    WealthMngrError,
    StorageError,
    error_handler,
    logger,
)

__all__ = [
    # Rate utilities
    "annual_pct_to_decimal",
    "decimal_to_annual_pct",
    "annual_decimal_to_monthly_decimal",
    "convert_duration_years_to_months",
    "convert_duration_months_to_years",
    "validate_rate_range",
    "normalize_rate_input",
    "round_amount",
    "MONTHS_PER_YEAR",
    "PERCENTAGE_TO_DECIMAL",
    # Tenure utilities
    "convert_years_months_to_years",
    "convert_years_months_to_months",
    "normalize_years_months",
    "convert_legacy_to_years_months",
    "migrate_fd_data",
    "tenure_in_years",
    # Error handling
    "WealthMngrError",
    "StorageError",
    "error_handler",
    "logger",
]
