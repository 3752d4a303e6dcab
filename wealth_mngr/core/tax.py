"""
Tax treatment of maturity proceeds for Indian instruments (FY 2024-25 rules).

Each instrument maps to a ``TaxRule``. ``calculate_tax_on_withdrawal`` applies
the rule to a corpus at withdrawal; ``calculate_tax_during_accumulation``
estimates tax paid yearly on interest-bearing schemes.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Mapping, Optional

from wealth_mngr.core.constants import (
    EInstrument,
    ETaxMethod,
    ETaxRuleType,
    DEFAULT_INCOME_TAX_SLAB,
    LTCG_EQUITY_RATE,
    LTCG_EXEMPTION_LIMIT,
    LTCG_INDEXED_RATE,
    NPS_TAXABLE_PORTION,
    SGB_MIN_TAX_FREE_TENURE,
    STCG_EQUITY_RATE,
)
from wealth_mngr.core.indexation import CIITable
from wealth_mngr.utils.rate_utils import round_amount
from wealth_mngr.utils.tenure_utils import tenure_in_years

logger = logging.getLogger(__name__)

# Rough shares of the corpus assumed to be interest when no principal is known
INTEREST_ESTIMATE_SHARE = 0.3
BONDS_54EC_INTEREST_ESTIMATE_SHARE = 0.25
DEBT_FUND_PRINCIPAL_ESTIMATE_SHARE = 0.7
# Yearly indexation used when no purchase/sale financial years are given
FALLBACK_INDEXATION_RATE = 0.06
# Yearly interest assumed when estimating tax during accumulation
ACCUMULATION_INTEREST_ESTIMATE = 0.08


@dataclass(frozen=True)
class TaxRule:
    type: str
    rate: Optional[float] = None
    exemption_limit: float = 0
    min_holding_period: int = 0
    stcg_rate: Optional[float] = None
    taxable_portion: float = 0
    notes: str = ""


_EQUITY_NOTES = "LTCG: 10% above ₹1L exemption (held > 1 year). STCG: 15% (held < 1 year)"

TAX_RULES: Dict[str, TaxRule] = {
    EInstrument.ppf: TaxRule(ETaxRuleType.EXEMPT, 0, notes="Tax-free (EEE - Exempt, Exempt, Exempt)"),
    EInstrument.ssy: TaxRule(ETaxRuleType.EXEMPT, 0, notes="Tax-free (EEE - Exempt, Exempt, Exempt)"),
    EInstrument.fd: TaxRule(
        ETaxRuleType.INTEREST,
        notes="Interest taxed annually as per income slab. TDS applicable if interest > ₹40,000 "
              "(₹50,000 for senior citizens)",
    ),
    EInstrument.rd: TaxRule(ETaxRuleType.INTEREST, notes="Interest taxed as per income slab"),
    EInstrument.pomis: TaxRule(ETaxRuleType.INTEREST, notes="Monthly interest taxed as per income slab"),
    EInstrument.equity: TaxRule(ETaxRuleType.LTCG, LTCG_EQUITY_RATE, LTCG_EXEMPTION_LIMIT, 1, STCG_EQUITY_RATE,
                                notes=_EQUITY_NOTES),
    EInstrument.sip: TaxRule(ETaxRuleType.LTCG, LTCG_EQUITY_RATE, LTCG_EXEMPTION_LIMIT, 1, STCG_EQUITY_RATE,
                             notes=_EQUITY_NOTES),
    EInstrument.elss: TaxRule(
        ETaxRuleType.LTCG, LTCG_EQUITY_RATE, LTCG_EXEMPTION_LIMIT, 3, STCG_EQUITY_RATE,
        notes="LTCG: 10% above ₹1L exemption (held > 3 years). STCG: 15% (held < 3 years)",
    ),
    EInstrument.ipo: TaxRule(
        ETaxRuleType.LTCG, LTCG_EQUITY_RATE, LTCG_EXEMPTION_LIMIT, 1, STCG_EQUITY_RATE,
        notes=_EQUITY_NOTES + ". Listing gains taxable",
    ),
    EInstrument.reits: TaxRule(
        ETaxRuleType.LTCG, LTCG_EQUITY_RATE, LTCG_EXEMPTION_LIMIT, 1, STCG_EQUITY_RATE,
        notes="Dividend income: Taxable as per income tax slab. " + _EQUITY_NOTES
              + ". No indexation benefit on capital gains",
    ),
    EInstrument.nps: TaxRule(ETaxRuleType.PARTIAL, taxable_portion=NPS_TAXABLE_PORTION,
                             notes="60% tax-free, 40% taxable as per income slab"),
    EInstrument.sgb: TaxRule(
        ETaxRuleType.CONDITIONAL, STCG_EQUITY_RATE, min_holding_period=SGB_MIN_TAX_FREE_TENURE,
        notes="Capital gains exempt if held till maturity (5/8 years). Interest (2.5%) taxable annually",
    ),
    EInstrument.nsc: TaxRule(ETaxRuleType.INTEREST,
                             notes="Interest taxable as per income slab. Reinvested qualifies for 80C deduction"),
    EInstrument.scss: TaxRule(ETaxRuleType.INTEREST, notes="Interest taxable quarterly as per income slab"),
    EInstrument.debt_mutual_fund: TaxRule(
        ETaxRuleType.LTCG_INDEXED, LTCG_INDEXED_RATE, min_holding_period=3,
        notes="LTCG: 20% with indexation benefit after 3 years. STCG: Taxed as per income tax slab "
              "if held < 3 years. No TDS on redemption.",
    ),
    EInstrument.bonds_54ec: TaxRule(
        ETaxRuleType.CAPITAL_GAINS_EXEMPT,
        notes="Exempts long-term capital gains tax on property sale (up to ₹50L per FY). "
              "Interest taxable as per income tax slab.",
    ),
}

# ETFs follow the rule of their underlying asset
ETF_TAX_RULES: Dict[str, TaxRule] = {
    "equity": TaxRule(ETaxRuleType.LTCG, LTCG_EQUITY_RATE, LTCG_EXEMPTION_LIMIT, 1, STCG_EQUITY_RATE,
                      notes="Equity ETF: " + _EQUITY_NOTES),
    "international": TaxRule(ETaxRuleType.LTCG, LTCG_EQUITY_RATE, LTCG_EXEMPTION_LIMIT, 1, STCG_EQUITY_RATE,
                             notes="International ETF: " + _EQUITY_NOTES),
    "debt": TaxRule(ETaxRuleType.LTCG_INDEXED, LTCG_INDEXED_RATE, min_holding_period=3,
                    notes="Debt ETF: LTCG (20% with indexation) after 3 years"),
    "gold": TaxRule(ETaxRuleType.LTCG_INDEXED, LTCG_INDEXED_RATE, min_holding_period=3,
                    notes="Gold ETF: LTCG (20% with indexation) after 3 years"),
}

UNKNOWN_RULE = TaxRule(ETaxRuleType.UNKNOWN, 0, notes="Tax rules not defined for this instrument")


def get_tax_rule(instrument: str, etf_type: str = "equity") -> TaxRule:
    """Tax rule for an instrument identifier; unknown instruments are untaxed."""
    if instrument == EInstrument.etf:
        return ETF_TAX_RULES.get(etf_type, ETF_TAX_RULES["equity"])
    return TAX_RULES.get(instrument, UNKNOWN_RULE)


def _first_positive(*values) -> Optional[float]:
    for value in values:
        if value is not None and value > 0:
            return value
    return None


def _interest_from(corpus: float, principal, returns, investment_data: Mapping[str, Any]) -> Optional[float]:
    """Interest earned: explicit returns, else corpus minus a known principal."""
    if returns is not None and returns > 0:
        return returns
    if principal is None:
        principal = _first_positive(
            investment_data.get("principal"),
            investment_data.get("investedAmount"),
            investment_data.get("yearlyInvestment"),
        )
    if principal and principal > 0 and corpus > principal:
        return corpus - principal
    return None


def calculate_tax_on_withdrawal(
    corpus: float,
    instrument: str,
    tenure: float,
    income_tax_slab: float = DEFAULT_INCOME_TAX_SLAB,
    ltcg_exemption_used: float = 0,
    investment_data: Optional[Mapping[str, Any]] = None,
    principal: Optional[float] = None,
    returns: Optional[float] = None,
    purchase_year: Optional[int] = None,
    sale_year: Optional[int] = None,
    etf_type: str = "equity",
    cii_table: Optional[CIITable] = None,
) -> Dict[str, Any]:
    """
    Tax payable when ``corpus`` is withdrawn after ``tenure`` years.

    Args:
        corpus: Maturity value
        instrument: Instrument identifier
        tenure: Holding period in years
        income_tax_slab: Marginal slab rate (decimal)
        ltcg_exemption_used: Part of the ₹1L equity LTCG exemption already used this year
        investment_data: Form data, used to find the principal when not given
        principal: Amount invested
        returns: Gains/interest earned, if known
        purchase_year: Financial year of purchase (debt funds: enables CII indexation)
        sale_year: Financial year of sale (defaults to purchase_year + tenure)
        etf_type: Underlying asset for ETFs
        cii_table: CII table for indexation

    Returns:
        Dictionary with taxAmount, postTaxCorpus, taxRate (effective %, of corpus) and taxRule notes
    """
    rule = get_tax_rule(instrument, etf_type)
    if not corpus or corpus <= 0:
        return {"taxAmount": 0, "postTaxCorpus": corpus, "taxRate": 0, "taxRule": rule.notes}

    investment_data = investment_data or {}
    tenure = tenure or 0
    income_tax_slab = DEFAULT_INCOME_TAX_SLAB if income_tax_slab is None else income_tax_slab
    tax_amount = 0.0
    effective_rate = 0.0

    if rule.type == ETaxRuleType.LTCG:
        exemption = max(0, rule.exemption_limit - (ltcg_exemption_used or 0))
        if tenure >= rule.min_holding_period:
            tax_amount = max(0.0, corpus - exemption) * rule.rate
            effective_rate = tax_amount / corpus * 100
        else:
            tax_amount = corpus * rule.stcg_rate
            effective_rate = rule.stcg_rate * 100

    elif rule.type == ETaxRuleType.LTCG_INDEXED:
        principal_amount = principal
        if principal_amount is None:
            principal_amount = _first_positive(
                investment_data.get("principal"),
                investment_data.get("investedAmount"),
                investment_data.get("yearlyInvestment"),
            )
        if principal_amount is None:
            principal_amount = corpus - returns if returns is not None and returns > 0 \
                else corpus * DEBT_FUND_PRINCIPAL_ESTIMATE_SHARE

        if tenure >= rule.min_holding_period:
            if purchase_year is not None:
                table = cii_table or CIITable()
                sale = sale_year if sale_year is not None else purchase_year + int(round(tenure))
                indexed_cost = table.compute_indexed_cost(principal_amount, purchase_year, sale).indexed_cost
            else:
                indexed_cost = principal_amount * (1 + FALLBACK_INDEXATION_RATE) ** tenure
            tax_amount = max(0.0, corpus - indexed_cost) * rule.rate
        else:
            tax_amount = max(0.0, corpus - principal_amount) * income_tax_slab
        effective_rate = tax_amount / corpus * 100

    elif rule.type == ETaxRuleType.PARTIAL:
        tax_amount = corpus * rule.taxable_portion * income_tax_slab
        effective_rate = rule.taxable_portion * income_tax_slab * 100

    elif rule.type == ETaxRuleType.CONDITIONAL:
        if tenure < rule.min_holding_period:
            tax_amount = corpus * rule.rate
            effective_rate = rule.rate * 100

    elif rule.type == ETaxRuleType.INTEREST:
        interest = _interest_from(corpus, principal, returns, investment_data)
        if interest is None:
            interest = corpus * INTEREST_ESTIMATE_SHARE
            logger.debug(f"No principal for {instrument}; estimating interest as {INTEREST_ESTIMATE_SHARE:.0%} of corpus")
        tax_amount = interest * income_tax_slab
        effective_rate = tax_amount / corpus * 100

    elif rule.type == ETaxRuleType.CAPITAL_GAINS_EXEMPT:
        interest = _interest_from(corpus, principal, returns, {
            "principal": investment_data.get("principal"),
            "investedAmount": investment_data.get("investedAmount"),
        })
        if interest is None:
            interest = corpus * BONDS_54EC_INTEREST_ESTIMATE_SHARE
        tax_amount = interest * income_tax_slab
        effective_rate = tax_amount / corpus * 100

    return {
        "taxAmount": round_amount(tax_amount),
        "postTaxCorpus": round_amount(corpus - tax_amount),
        "taxRate": round_amount(effective_rate),
        "taxRule": rule.notes,
    }


def calculate_tax_during_accumulation(
    investment_data: Optional[Mapping[str, Any]],
    instrument: str,
    tenure: float,
    income_tax_slab: float = DEFAULT_INCOME_TAX_SLAB,
) -> Dict[str, Any]:
    """
    Estimate of tax paid every year on interest-bearing instruments.

    Interest is assumed at 8% a year on the running post-tax balance. Instruments
    taxed only at withdrawal report zeros.
    """
    empty = {"totalTaxPaid": 0, "finalCorpus": 0, "annualTaxBreakdown": []}
    if not investment_data or not instrument or not tenure:
        return empty
    if get_tax_rule(instrument).type != ETaxRuleType.INTEREST:
        return empty

    balance = investment_data.get("principal") or investment_data.get("yearlyInvestment") or 0
    total_tax = 0.0
    breakdown = []
    for year in range(1, int(tenure) + 1):
        interest = balance * ACCUMULATION_INTEREST_ESTIMATE
        tax = interest * income_tax_slab
        total_tax += tax
        balance += interest - tax
        breakdown.append({
            "year": year,
            "interestEarned": round_amount(interest),
            "taxPaid": round_amount(tax),
            "netCorpus": round_amount(balance),
        })

    return {
        "totalTaxPaid": round_amount(total_tax),
        "finalCorpus": round_amount(balance),
        "annualTaxBreakdown": breakdown,
    }


def calculate_tax_both(
    corpus: float,
    investment_data: Optional[Mapping[str, Any]],
    instrument: str,
    tenure: float,
    **options,
) -> Dict[str, Any]:
    """Withdrawal and accumulation tax side by side."""
    withdrawal = calculate_tax_on_withdrawal(corpus, instrument, tenure, investment_data=investment_data, **options)
    accumulation = calculate_tax_during_accumulation(
        investment_data, instrument, tenure,
        income_tax_slab=options.get("income_tax_slab", DEFAULT_INCOME_TAX_SLAB),
    )
    return {
        "withdrawal": withdrawal,
        "accumulation": accumulation,
        "comparison": {
            "difference": round_amount(withdrawal["postTaxCorpus"] - accumulation["finalCorpus"]),
            "moreBeneficial": "withdrawal" if withdrawal["postTaxCorpus"] > accumulation["finalCorpus"]
            else "accumulation",
        },
    }


def calculate_tax_for_multiple_instruments(
    corpus_by_instrument: Mapping[str, float],
    investments: Mapping[str, Mapping[str, Any]],
    instruments: Iterable[str],
    tax_method=ETaxMethod.WITHDRAWAL,
    **options,
) -> Dict[str, Any]:
    """
    Tax for every selected instrument under one method, plus totals.

    Totals use the withdrawal figures when ``tax_method`` is ``both``.
    """
    method = tax_method if isinstance(tax_method, ETaxMethod) else ETaxMethod(tax_method or "withdrawal")
    results = {"byInstrument": {}, "total": {"taxAmount": 0, "postTaxCorpus": 0}}
    if not instruments:
        return results

    total_tax = 0.0
    total_post_tax = 0.0
    for instrument in instruments:
        corpus = corpus_by_instrument.get(instrument) or 0
        data = investments.get(instrument) or {}
        tenure = tenure_in_years(data)

        if method is ETaxMethod.ACCUMULATION:
            accumulation = calculate_tax_during_accumulation(
                data, instrument, tenure, income_tax_slab=options.get("income_tax_slab", DEFAULT_INCOME_TAX_SLAB))
            results["byInstrument"][instrument] = {
                "taxAmount": accumulation["totalTaxPaid"],
                "postTaxCorpus": accumulation["finalCorpus"],
            }
            total_tax += accumulation["totalTaxPaid"]
            total_post_tax += accumulation["finalCorpus"]
        elif method is ETaxMethod.BOTH:
            both = calculate_tax_both(corpus, data, instrument, tenure, **options)
            results["byInstrument"][instrument] = both
            total_tax += both["withdrawal"]["taxAmount"]
            total_post_tax += both["withdrawal"]["postTaxCorpus"]
        else:
            withdrawal = calculate_tax_on_withdrawal(corpus, instrument, tenure, investment_data=data, **options)
            results["byInstrument"][instrument] = withdrawal
            total_tax += withdrawal["taxAmount"]
            total_post_tax += withdrawal["postTaxCorpus"]

    results["total"] = {
        "taxAmount": round_amount(total_tax),
        "postTaxCorpus": round_amount(total_post_tax),
    }
    return results
