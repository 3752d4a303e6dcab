"""
Test suite for the financial formulas.

Reference values are the published PPF/SIP/FD calculator figures.
"""

import pytest

from wealth_mngr.core.formulas import (
    adjust_for_inflation,
    apply_equity_cap,
    calculate_cagr,
    calculate_compound_interest,
    calculate_fd,
    calculate_nps_future_value,
    calculate_nps_weighted_return,
    calculate_nsc,
    calculate_ppf,
    calculate_ppf_with_step_up,
    calculate_rd,
    calculate_real_return,
    calculate_scss,
    calculate_sgb,
    calculate_sip_future_value,
    calculate_step_up_sip,
    calculate_step_up_sip_legacy,
    max_equity_allocation,
    sgb_fixed_interest,
    step_up_total_invested,
)


class TestReferenceValues:
    """Known results from standard calculators."""

    def test_compound_interest(self):
        assert calculate_compound_interest(100000, 0.08, 5) == pytest.approx(146932.81, abs=0.01)

    def test_ppf(self):
        assert round(calculate_ppf(150000, 0.071, 15)) == 4068209

    def test_sip(self):
        assert calculate_sip_future_value(5000, 0.12, 120) == pytest.approx(1161695.38, abs=0.01)

    def test_fd_quarterly(self):
        assert round(calculate_fd(100000, 0.065, 1)) == 106660

    def test_cagr(self):
        assert calculate_cagr(100000, 200000, 6) == pytest.approx(0.1225, abs=1e-4)

    def test_nps_weighted_return(self):
        allocation = {"equity": 0.5, "corporateBonds": 0.3, "governmentBonds": 0.2}
        returns = {"equity": 0.12, "corporateBonds": 0.09, "governmentBonds": 0.08}
        assert calculate_nps_weighted_return(allocation, returns) == pytest.approx(0.103)


class TestZeroRates:
    """A zero rate degenerates to the plain sum of contributions."""

    def test_ppf(self):
        assert calculate_ppf(1000, 0, 10) == 10000.0

    def test_sip(self):
        assert calculate_sip_future_value(5000, 0, 12) == 60000.0

    def test_rd(self):
        assert calculate_rd(5000, 0, 12) == 60000.0

    def test_fd_keeps_principal(self):
        assert calculate_fd(100000, 0, 3) == 100000.0

    def test_step_up_sip(self):
        assert calculate_step_up_sip(1000, 0.10, 2, 0) == pytest.approx(25200.0)


class TestMissingInput:
    """Formulas never raise on malformed input."""

    def test_missing_amounts_yield_zero(self):
        assert calculate_compound_interest(None, 0.08, 5) == 0.0
        assert calculate_compound_interest("abc", 0.08, 5) == 0.0
        assert calculate_ppf(None, 0.071, 15) == 0.0
        assert calculate_sip_future_value(5000, 0.12, None) == 0.0
        assert calculate_step_up_sip(0, 0.1, 10, 0.12) == 0.0
        assert calculate_scss(None, 0.082, 5) == 0.0
        assert calculate_sgb(100000, 0.08, 0) == 0.0

    def test_nan_and_bool_are_ignored(self):
        assert calculate_compound_interest(float("nan"), 0.08, 5) == 0.0
        assert calculate_ppf(True, 0.071, 15) == 0.0

    def test_fd_negative_arguments(self):
        assert calculate_fd(-1, 0.07, 1) == 0.0
        assert calculate_fd(1000, -0.07, 1) == 0.0
        assert calculate_fd(None, 0.07, 1) == 0.0

    def test_rd_negative_arguments(self):
        assert calculate_rd(5000, 0.07, 0) == 0.0
        assert calculate_rd(-5000, 0.07, 12) == 0.0

    def test_inflation_identity(self):
        assert adjust_for_inflation(1000, None, 5) == 1000
        assert adjust_for_inflation(1000, 0.06, 0) == 1000
        assert adjust_for_inflation(None, 0.06, 5) is None

    def test_cagr_degenerate(self):
        assert calculate_cagr(0, 200000, 6) == 0.0
        assert calculate_cagr(100000, 0, 6) == 0.0
        assert calculate_cagr(100000, 200000, 0) == 0.0
        assert calculate_cagr(100000, -5, 6) == 0.0

    def test_real_return_missing(self):
        assert calculate_real_return(None, 0.06) == 0.0
        assert calculate_real_return(0.12, 0) == 0.0


class TestDeposits:

    def test_fd_more_frequent_compounding_earns_more(self):
        monthly = calculate_fd(100000, 0.07, 3, "monthly")
        quarterly = calculate_fd(100000, 0.07, 3, "quarterly")
        annually = calculate_fd(100000, 0.07, 3, "annually")
        assert monthly > quarterly > annually

    def test_fd_cumulative_below_one_year_is_simple_interest(self):
        assert calculate_fd(100000, 0.06, 0.5, "cumulative") == pytest.approx(103000.0)

    def test_fd_cumulative_from_one_year_compounds_annually(self):
        assert calculate_fd(100000, 0.06, 2, "cumulative") == pytest.approx(112360.0)

    def test_fd_unknown_frequency_is_quarterly(self):
        assert calculate_fd(100000, 0.065, 1, "weekly") == calculate_fd(100000, 0.065, 1, "quarterly")

    def test_rd_monthly_matches_sip(self):
        assert calculate_rd(5000, 0.12, 12, "monthly") == pytest.approx(calculate_sip_future_value(5000, 0.12, 12))

    def test_rd_exceeds_deposits(self):
        assert calculate_rd(5000, 0.065, 24) > 5000 * 24

    def test_nsc_is_annual_compounding(self):
        assert calculate_nsc(100000, 0.077) == pytest.approx(100000 * 1.077 ** 5)

    def test_scss_interest_is_not_reinvested(self):
        assert calculate_scss(100000, 0.082, 5) == pytest.approx(141000.0)


class TestStepUp:

    def test_total_invested_monthly(self):
        assert step_up_total_invested(1000, 0.10, 2) == pytest.approx(25200.0)

    def test_total_invested_yearly(self):
        assert step_up_total_invested(1000, 0.10, 3, periods_per_year=1) == pytest.approx(3310.0)

    def test_ppf_step_up_without_step_matches_ppf(self):
        assert calculate_ppf_with_step_up(150000, 0, 0.071, 15) == pytest.approx(calculate_ppf(150000, 0.071, 15))

    def test_ppf_step_up_grows_maturity(self):
        assert calculate_ppf_with_step_up(50000, 0.05, 0.071, 15) > calculate_ppf(50000, 0.071, 15)

    def test_step_up_sip_grows_maturity(self):
        assert calculate_step_up_sip(5000, 0.10, 10, 0.12) > calculate_sip_future_value(5000, 0.12, 120)

    def test_step_up_of_zero_is_flat_sip(self):
        assert calculate_step_up_sip(5000, 0, 10, 0.12) == pytest.approx(
            calculate_sip_future_value(5000, 0.12, 120), abs=0.01)

    def test_small_step_up_beats_flat_sip(self):
        assert calculate_step_up_sip(5000, 0.001, 10, 0.12) > calculate_sip_future_value(5000, 0.12, 120)

    def test_legacy_step_up_overstates(self):
        """The legacy variant applies earlier years' growth more than once."""
        legacy = calculate_step_up_sip_legacy(5000, 0.10, 10, 0.12)
        assert legacy > calculate_step_up_sip(5000, 0.10, 10, 0.12)


class TestGold:

    def test_sgb_combines_gold_and_coupon(self):
        principal = 100000
        expected = principal * 1.08 ** 8 + principal * (1.0125 ** 16 - 1)
        assert calculate_sgb(principal, 0.08, 8) == pytest.approx(expected)

    def test_sgb_coupon_only(self):
        assert calculate_sgb(100000, 0, 1) == pytest.approx(100000 + sgb_fixed_interest(100000, 1))

    def test_fixed_interest_zero_years(self):
        assert sgb_fixed_interest(100000, 0) == 0.0


class TestNPS:

    def test_future_value_is_sip_at_weighted_return(self):
        assert calculate_nps_future_value(5000, 0.103, 20) == pytest.approx(
            calculate_sip_future_value(5000, 0.103, 240))

    @pytest.mark.parametrize("age, expected", [
        (25, 1.0),
        (35, 1.0),
        (45, 0.75),
        (50, 0.75),
        (55, 0.625),
        (60, 0.5),
        (70, 0.5),
    ])
    def test_max_equity_allocation(self, age, expected):
        assert max_equity_allocation(age) == pytest.approx(expected)

    def test_equity_cap_spreads_excess_proportionally(self):
        capped = apply_equity_cap({"equity": 0.9, "corporateBonds": 0.05, "governmentBonds": 0.05}, 0.75)
        assert capped["equity"] == pytest.approx(0.75)
        assert capped["corporateBonds"] == pytest.approx(0.125)
        assert capped["governmentBonds"] == pytest.approx(0.125)
        assert capped["alternative"] == 0.0
        assert sum(capped.values()) == pytest.approx(1.0)

    def test_equity_cap_moves_excess_to_government_bonds(self):
        capped = apply_equity_cap({"equity": 1.0}, 0.5)
        assert capped["equity"] == pytest.approx(0.5)
        assert capped["governmentBonds"] == pytest.approx(0.5)

    def test_equity_cap_under_limit_is_unchanged(self):
        allocation = {"equity": 0.5, "corporateBonds": 0.3, "governmentBonds": 0.2}
        capped = apply_equity_cap(allocation, 0.75)
        assert capped == {"equity": 0.5, "corporateBonds": 0.3, "governmentBonds": 0.2, "alternative": 0.0}


def test_adjust_for_inflation():
    assert adjust_for_inflation(1060, 0.06, 1) == pytest.approx(1000.0)


def test_real_return():
    assert calculate_real_return(0.12, 0.06) == pytest.approx(1.12 / 1.06 - 1)


class TestCompoundInterestMonotonic:
    """Compound interest grows with both tenure and rate."""

    YEARS = [1, 2, 5, 10, 20, 30]
    RATES = [0.01, 0.04, 0.071, 0.1, 0.15]

    @pytest.mark.parametrize("rate", RATES)
    def test_increases_with_years(self, rate):
        values = [calculate_compound_interest(100000, rate, years) for years in self.YEARS]
        assert all(earlier < later for earlier, later in zip(values, values[1:]))

    @pytest.mark.parametrize("years", YEARS)
    def test_increases_with_rate(self, years):
        values = [calculate_compound_interest(100000, rate, years) for rate in self.RATES]
        assert all(earlier < later for earlier, later in zip(values, values[1:]))
