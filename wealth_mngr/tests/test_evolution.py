"""
Test suite for year-wise evolution tables.

Every table must chain (opening = previous closing), balance
(closing = opening + investment + interest) and end on the maturity value.
"""

import pandas as pd
import pytest

from wealth_mngr.core.evolution import (
    CLOSING_BALANCE,
    INTEREST,
    INVESTMENT,
    MONTH,
    OPENING_BALANCE,
    YEAR,
    calculate_fd_evolution,
    calculate_fd_monthly_evolution,
    calculate_lumpsum_evolution,
    calculate_nps_evolution,
    calculate_ppf_evolution,
    calculate_rd_evolution,
    calculate_rd_monthly_evolution,
    calculate_scss_evolution,
    calculate_sgb_evolution,
    calculate_sip_evolution,
    evolution_to_records,
)
from wealth_mngr.core.formulas import (
    calculate_fd,
    calculate_nps_future_value,
    calculate_ppf,
    calculate_ppf_with_step_up,
    calculate_rd,
    calculate_scss,
    calculate_sgb,
    calculate_sip_future_value,
    calculate_step_up_sip,
)


def assert_consistent(table: pd.DataFrame):
    """Rows chain and balance within rounding."""
    previous_closing = 0.0
    for row in table.to_dict(orient="records"):
        assert row[OPENING_BALANCE] == pytest.approx(previous_closing, abs=0.01)
        total = row[OPENING_BALANCE] + row[INVESTMENT] + row[INTEREST]
        assert row[CLOSING_BALANCE] == pytest.approx(total, abs=0.02)
        previous_closing = row[CLOSING_BALANCE]


class TestPPF:

    def test_rows_and_maturity(self):
        table = calculate_ppf_evolution(150000, 0.071, 15)
        assert len(table) == 15
        assert list(table[YEAR]) == list(range(1, 16))
        assert table[CLOSING_BALANCE].iloc[-1] == pytest.approx(calculate_ppf(150000, 0.071, 15), abs=0.05)
        assert_consistent(table)

    def test_step_up(self):
        table = calculate_ppf_evolution(50000, 0.071, 10, step_up_enabled=True, step_up=0.1)
        assert table[INVESTMENT].iloc[1] == pytest.approx(55000.0)
        assert table[CLOSING_BALANCE].iloc[-1] == pytest.approx(
            calculate_ppf_with_step_up(50000, 0.1, 0.071, 10), abs=0.05)
        assert_consistent(table)

    def test_zero_years_is_empty(self):
        table = calculate_ppf_evolution(150000, 0.071, 0)
        assert table.empty
        assert list(table.columns) == [YEAR, OPENING_BALANCE, INVESTMENT, INTEREST, CLOSING_BALANCE]


class TestSIP:

    def test_flat_sip(self):
        table = calculate_sip_evolution(5000, 0.12, 10)
        assert len(table) == 10
        assert table[INVESTMENT].sum() == pytest.approx(600000.0)
        assert table[CLOSING_BALANCE].iloc[-1] == pytest.approx(
            calculate_sip_future_value(5000, 0.12, 120), abs=0.05)
        assert_consistent(table)

    def test_fractional_tenure_ends_on_partial_year(self):
        table = calculate_sip_evolution(5000, 0.12, 2.5)
        assert list(table[INVESTMENT]) == [60000.0, 60000.0, 30000.0]
        assert table[CLOSING_BALANCE].iloc[-1] == pytest.approx(
            calculate_sip_future_value(5000, 0.12, 30), abs=0.05)
        assert_consistent(table)

    def test_step_up_matches_formula(self):
        table = calculate_sip_evolution(5000, 0.12, 10, step_up_enabled=True, step_up=0.1)
        assert table[CLOSING_BALANCE].iloc[-1] == pytest.approx(
            calculate_step_up_sip(5000, 0.1, 10, 0.12), abs=0.05)
        assert_consistent(table)


class TestDeposits:

    def test_rd_yearly(self):
        table = calculate_rd_evolution(5000, 0.065, 3)
        assert len(table) == 3
        assert table[INVESTMENT].iloc[0] == pytest.approx(60000.0)
        assert table[CLOSING_BALANCE].iloc[-1] == pytest.approx(calculate_rd(5000, 0.065, 36), abs=0.05)
        assert_consistent(table)

    def test_rd_yearly_fractional_tenure(self):
        table = calculate_rd_evolution(5000, 0.07, 1.5)
        assert list(table[INVESTMENT]) == [60000.0, 30000.0]
        assert table[CLOSING_BALANCE].iloc[-1] == pytest.approx(calculate_rd(5000, 0.07, 18), abs=0.05)
        assert_consistent(table)

    def test_rd_monthly_ends_at_maturity(self):
        table = calculate_rd_monthly_evolution(5000, 0.065, 6)
        assert MONTH in table.columns
        assert len(table) == 6
        assert table[CLOSING_BALANCE].iloc[-1] == pytest.approx(calculate_rd(5000, 0.065, 6), abs=0.05)
        assert_consistent(table)

    def test_fd_partial_final_year(self):
        table = calculate_fd_evolution(100000, 0.07, 2.5)
        assert len(table) == 3
        assert table[INVESTMENT].iloc[0] == 100000.0
        assert table[INVESTMENT].iloc[1:].sum() == 0.0
        assert table[CLOSING_BALANCE].iloc[-1] == pytest.approx(calculate_fd(100000, 0.07, 2.5), abs=0.01)
        assert_consistent(table)

    def test_fd_monthly(self):
        table = calculate_fd_monthly_evolution(100000, 0.07, 9)
        assert len(table) == 9
        assert table[CLOSING_BALANCE].iloc[-1] == pytest.approx(calculate_fd(100000, 0.07, 0.75), abs=0.01)
        assert_consistent(table)

    def test_scss_pays_out_interest(self):
        table = calculate_scss_evolution(100000, 0.082, 5)
        assert (table[INTEREST] == 8200.0).all()
        assert table[CLOSING_BALANCE].iloc[-1] == pytest.approx(calculate_scss(100000, 0.082, 5))
        assert_consistent(table)


class TestLumpsum:

    def test_lumpsum(self):
        table = calculate_lumpsum_evolution(100000, 0.12, 5)
        assert table[CLOSING_BALANCE].iloc[-1] == pytest.approx(100000 * 1.12 ** 5, abs=0.01)
        assert_consistent(table)

    def test_sgb_split(self):
        table = calculate_sgb_evolution(100000, 0.08, 8)
        assert table[CLOSING_BALANCE].iloc[-1] == pytest.approx(calculate_sgb(100000, 0.08, 8), abs=0.01)
        for row in table.to_dict(orient="records"):
            assert row["fixed_interest"] + row["gold_appreciation"] == pytest.approx(row[INTEREST], abs=0.02)
        assert_consistent(table)


class TestNPS:

    def test_without_caps(self):
        table = calculate_nps_evolution(5000, 0.103, 5)
        assert len(table) == 5
        assert (table["equity_allocation"] == 0.5).all()
        assert table[CLOSING_BALANCE].iloc[-1] == pytest.approx(
            calculate_nps_future_value(5000, 0.103, 5), abs=0.05)
        assert_consistent(table)

    def test_age_caps_reduce_equity_over_time(self):
        allocation = {"equity": 0.75, "corporateBonds": 0.15, "governmentBonds": 0.1, "alternative": 0.0}
        table = calculate_nps_evolution(5000, 0.11, 10, current_age=50, use_age_based_caps=True,
                                        initial_allocation=allocation)
        equity = list(table["equity_allocation"])
        assert equity[0] == 0.75
        assert equity[-1] == pytest.approx(0.525)
        assert equity == sorted(equity, reverse=True)
        assert_consistent(table)


def test_records_use_camel_case():
    records = evolution_to_records(calculate_ppf_evolution(1000, 0.07, 2))
    assert set(records[0]) == {"year", "openingBalance", "investment", "interest", "closingBalance"}
    assert evolution_to_records(None) == []
