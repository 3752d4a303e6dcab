"""
Test suite for tenure conversion helpers.
"""

import pytest

from wealth_mngr.utils.tenure_utils import (
    convert_legacy_to_years_months,
    convert_years_months_to_months,
    convert_years_months_to_years,
    migrate_fd_data,
    normalize_years_months,
    tenure_in_years,
)


def test_years_months_conversions():
    assert convert_years_months_to_years(2, 6) == 2.5
    assert convert_years_months_to_months(2, 6) == 30
    assert convert_years_months_to_months("1", None) == 12
    assert convert_years_months_to_years(None, None) == 0


def test_normalize_years_months_carries_whole_years():
    assert normalize_years_months(0, 15) == (1, 3)
    assert normalize_years_months(2, 24) == (4, 0)
    assert normalize_years_months(1, 11) == (1, 11)


class TestLegacyConversion:
    """Legacy tenure + tenureUnit pairs."""

    def test_years(self):
        assert convert_legacy_to_years_months(5, "years") == (5, 0)

    def test_fractional_years(self):
        assert convert_legacy_to_years_months(2.5, "years") == (2, 6)

    def test_months(self):
        assert convert_legacy_to_years_months(18, "months") == (1, 6)

    def test_invalid(self):
        assert convert_legacy_to_years_months("abc", "years") == (0, 0)
        assert convert_legacy_to_years_months(-3, "years") == (0, 0)
        assert convert_legacy_to_years_months(0, "months") == (0, 0)


class TestMigrateFdData:
    """FD data is upgraded to years + months without losing other fields."""

    def test_new_format_is_normalized(self):
        migrated = migrate_fd_data({"principal": 1000, "tenureYears": 0, "tenureMonths": 18})
        assert migrated["tenureYears"] == 1
        assert migrated["tenureMonths"] == 6
        assert migrated["principal"] == 1000

    def test_legacy_format_is_converted(self):
        migrated = migrate_fd_data({"tenure": 30, "tenureUnit": "months"})
        assert (migrated["tenureYears"], migrated["tenureMonths"]) == (2, 6)

    def test_no_tenure_is_unchanged(self):
        assert migrate_fd_data({"principal": 5}) == {"principal": 5}
        assert migrate_fd_data({}) == {}

    def test_input_is_not_mutated(self):
        data = {"tenure": 2, "tenureUnit": "years"}
        migrate_fd_data(data)
        assert data == {"tenure": 2, "tenureUnit": "years"}


@pytest.mark.parametrize("data, expected", [
    ({"tenureYears": 1, "tenureMonths": 6}, 1.5),
    ({"tenure": 24, "tenureUnit": "months"}, 2.0),
    ({"tenure": 7}, 7.0),
    ({}, 0.0),
])
def test_tenure_in_years(data, expected):
    assert tenure_in_years(data) == expected
