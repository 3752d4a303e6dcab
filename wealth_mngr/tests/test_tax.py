"""
Test suite for instrument tax rules.
"""

import pytest

from wealth_mngr.core.constants import ETaxMethod, ETaxRuleType
from wealth_mngr.core.tax import (
    calculate_tax_both,
    calculate_tax_during_accumulation,
    calculate_tax_for_multiple_instruments,
    calculate_tax_on_withdrawal,
    get_tax_rule,
)


class TestRules:

    def test_known_rules(self):
        assert get_tax_rule("ppf").type == ETaxRuleType.EXEMPT
        assert get_tax_rule("fd").type == ETaxRuleType.INTEREST
        assert get_tax_rule("elss").min_holding_period == 3
        assert get_tax_rule("nps").taxable_portion == 0.4
        assert get_tax_rule("debtMutualFund").type == ETaxRuleType.LTCG_INDEXED

    def test_etf_follows_underlying(self):
        assert get_tax_rule("etf", "gold").type == ETaxRuleType.LTCG_INDEXED
        assert get_tax_rule("etf", "equity").type == ETaxRuleType.LTCG
        assert get_tax_rule("etf", "unknown").type == ETaxRuleType.LTCG

    def test_unknown_instrument(self):
        result = calculate_tax_on_withdrawal(100000, "crypto", 5)
        assert result["taxAmount"] == 0
        assert result["postTaxCorpus"] == 100000
        assert result["taxRule"] == "Tax rules not defined for this instrument"


class TestWithdrawal:

    def test_exempt(self):
        result = calculate_tax_on_withdrawal(4068209, "ppf", 15)
        assert result["taxAmount"] == 0
        assert result["postTaxCorpus"] == 4068209

    def test_zero_corpus(self):
        result = calculate_tax_on_withdrawal(0, "fd", 5)
        assert result["taxAmount"] == 0
        assert result["taxRate"] == 0

    def test_equity_ltcg_above_exemption(self):
        result = calculate_tax_on_withdrawal(500000, "equity", 5)
        assert result["taxAmount"] == 40000.0
        assert result["postTaxCorpus"] == 460000.0
        assert result["taxRate"] == 8.0

    def test_equity_exemption_already_used(self):
        result = calculate_tax_on_withdrawal(500000, "equity", 5, ltcg_exemption_used=50000)
        assert result["taxAmount"] == 45000.0

    def test_equity_stcg(self):
        result = calculate_tax_on_withdrawal(500000, "sip", 0.5)
        assert result["taxAmount"] == 75000.0
        assert result["taxRate"] == 15.0

    def test_elss_before_lock_in(self):
        assert calculate_tax_on_withdrawal(500000, "elss", 2)["taxAmount"] == 75000.0
        assert calculate_tax_on_withdrawal(500000, "elss", 3)["taxAmount"] == 40000.0

    def test_interest_with_principal(self):
        result = calculate_tax_on_withdrawal(150000, "fd", 5, income_tax_slab=0.3, principal=100000)
        assert result["taxAmount"] == 15000.0
        assert result["taxRate"] == 10.0

    def test_interest_principal_from_investment_data(self):
        result = calculate_tax_on_withdrawal(150000, "nsc", 5, income_tax_slab=0.2,
                                             investment_data={"principal": 100000})
        assert result["taxAmount"] == 10000.0

    def test_interest_estimated_without_principal(self):
        result = calculate_tax_on_withdrawal(100000, "scss", 5, income_tax_slab=0.3)
        assert result["taxAmount"] == 9000.0

    def test_nps_partial(self):
        result = calculate_tax_on_withdrawal(1000000, "nps", 25, income_tax_slab=0.3)
        assert result["taxAmount"] == 120000.0
        assert result["taxRate"] == 12.0

    def test_sgb_held_to_maturity(self):
        assert calculate_tax_on_withdrawal(200000, "sgb", 8)["taxAmount"] == 0

    def test_sgb_early_exit(self):
        assert calculate_tax_on_withdrawal(200000, "sgb", 3)["taxAmount"] == 30000.0

    def test_debt_fund_with_cii(self):
        result = calculate_tax_on_withdrawal(150000, "debtMutualFund", 5, principal=100000, purchase_year=2015)
        assert result["taxAmount"] == pytest.approx(6299.21, abs=0.01)

    def test_debt_fund_fallback_indexation(self):
        result = calculate_tax_on_withdrawal(150000, "debtMutualFund", 3, principal=100000)
        expected = (150000 - 100000 * 1.06 ** 3) * 0.2
        assert result["taxAmount"] == pytest.approx(expected, abs=0.01)

    def test_debt_fund_short_term_at_slab(self):
        result = calculate_tax_on_withdrawal(150000, "debtMutualFund", 2, income_tax_slab=0.3, principal=100000)
        assert result["taxAmount"] == 15000.0

    def test_54ec_bonds(self):
        result = calculate_tax_on_withdrawal(130000, "bonds54EC", 5, income_tax_slab=0.3,
                                             investment_data={"investedAmount": 100000})
        assert result["taxAmount"] == 9000.0


class TestAccumulation:

    def test_interest_instrument(self):
        result = calculate_tax_during_accumulation({"principal": 100000}, "fd", 2, income_tax_slab=0.3)
        assert result["totalTaxPaid"] == pytest.approx(4934.4)
        assert result["finalCorpus"] == pytest.approx(111513.6)
        assert [row["year"] for row in result["annualTaxBreakdown"]] == [1, 2]
        assert result["annualTaxBreakdown"][0]["taxPaid"] == 2400.0

    def test_exempt_instrument_reports_zeros(self):
        result = calculate_tax_during_accumulation({"yearlyInvestment": 150000}, "ppf", 15)
        assert result == {"totalTaxPaid": 0, "finalCorpus": 0, "annualTaxBreakdown": []}

    def test_missing_data(self):
        assert calculate_tax_during_accumulation(None, "fd", 5)["totalTaxPaid"] == 0


def test_tax_both_compares_methods():
    result = calculate_tax_both(150000, {"principal": 100000}, "fd", 5, income_tax_slab=0.3)
    assert set(result) == {"withdrawal", "accumulation", "comparison"}
    assert result["comparison"]["moreBeneficial"] in ("withdrawal", "accumulation")
    assert result["comparison"]["difference"] == pytest.approx(
        result["withdrawal"]["postTaxCorpus"] - result["accumulation"]["finalCorpus"], abs=0.01)


class TestMultipleInstruments:

    investments = {
        "ppf": {"yearlyInvestment": 150000, "tenure": 15},
        "equity": {"amount": 100000, "tenure": 10},
    }
    corpus = {"ppf": 4068209, "equity": 500000}

    def test_withdrawal_totals(self):
        result = calculate_tax_for_multiple_instruments(self.corpus, self.investments, ["ppf", "equity"])
        assert result["byInstrument"]["ppf"]["taxAmount"] == 0
        assert result["byInstrument"]["equity"]["taxAmount"] == 40000.0
        assert result["total"]["taxAmount"] == 40000.0
        assert result["total"]["postTaxCorpus"] == 4068209 + 460000

    def test_accepts_method_value(self):
        result = calculate_tax_for_multiple_instruments(self.corpus, self.investments, ["ppf"], "accumulation")
        assert result["byInstrument"]["ppf"] == {"taxAmount": 0, "postTaxCorpus": 0}

    def test_both_uses_withdrawal_totals(self):
        result = calculate_tax_for_multiple_instruments(self.corpus, self.investments, ["equity"], ETaxMethod.BOTH)
        assert result["total"]["taxAmount"] == 40000.0
        assert "comparison" in result["byInstrument"]["equity"]

    def test_no_instruments(self):
        result = calculate_tax_for_multiple_instruments(self.corpus, self.investments, [])
        assert result == {"byInstrument": {}, "total": {"taxAmount": 0, "postTaxCorpus": 0}}
