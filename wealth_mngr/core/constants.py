"""
Core constants and enumerations for Wealth Manager.

This module defines all constant values, enumerations, and configuration
parameters used throughout the calculators and the corpus simulator.
"""

from enum import Enum


class EInstrument:
    """Instrument identifiers (as used in forms and saved calculations)"""
    ppf = "ppf"
    ssy = "ssy"
    fd = "fd"
    rd = "rd"
    sip = "sip"
    nsc = "nsc"
    scss = "scss"
    sgb = "sgb"
    nps = "nps"
    equity = "equity"
    elss = "elss"
    ipo = "ipo"
    pomis = "pomis"
    etf = "etf"
    reits = "reits"
    debt_mutual_fund = "debtMutualFund"
    bonds_54ec = "bonds54EC"


# Instruments the corpus simulator can aggregate
CORPUS_INSTRUMENTS = (
    EInstrument.ppf,
    EInstrument.ssy,
    EInstrument.fd,
    EInstrument.sip,
    EInstrument.nsc,
    EInstrument.scss,
    EInstrument.sgb,
    EInstrument.nps,
    EInstrument.equity,
    EInstrument.elss,
)

INSTRUMENT_NAMES = {
    EInstrument.ppf: ("PPF", "Public Provident Fund"),
    EInstrument.fd: ("FD", "Fixed Deposit"),
    EInstrument.sip: ("SIP", "Systematic Investment Plan"),
    EInstrument.ssy: ("SSY", "Sukanya Samriddhi Yojana"),
    EInstrument.nsc: ("NSC", "National Savings Certificate"),
    EInstrument.scss: ("SCSS", "Senior Citizens Savings Scheme"),
    EInstrument.sgb: ("SGB", "Sovereign Gold Bond"),
    EInstrument.nps: ("NPS", "National Pension System"),
    EInstrument.equity: ("Equity", "Equity/Mutual Funds"),
    EInstrument.elss: ("ELSS", "Equity Linked Savings Scheme"),
    EInstrument.ipo: ("IPO/FPO", "Initial/Follow-on Public Offer"),
    EInstrument.rd: ("RD", "Recurring Deposit"),
    EInstrument.debt_mutual_fund: ("Debt MF", "Debt Mutual Funds"),
    EInstrument.etf: ("ETF", "Exchange Traded Funds"),
    EInstrument.reits: ("REITs", "Real Estate Investment Trusts"),
    EInstrument.bonds_54ec: ("54EC Bonds", "Capital Gain Bonds"),
}


class ECompounding(Enum):
    """
    Compounding frequency for deposits.

    ``cumulative`` pays interest at maturity: simple interest below one year,
    annual compounding otherwise.
    """
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    ANNUALLY = "annually"
    CUMULATIVE = "cumulative"

    @classmethod
    def parse(cls, value) -> 'ECompounding':
        """Parse a form value, defaulting to quarterly for anything unknown."""
        if isinstance(value, cls):
            return value
        for member in cls:
            if member.value == value:
                return member
        return cls.QUARTERLY

    @property
    def periods_per_year(self) -> int:
        return {
            ECompounding.MONTHLY: 12,
            ECompounding.QUARTERLY: 4,
            ECompounding.ANNUALLY: 1,
            ECompounding.CUMULATIVE: 1,
        }[self]


class ETaxMethod(Enum):
    """When tax is applied in the corpus simulator"""
    WITHDRAWAL = "withdrawal"
    ACCUMULATION = "accumulation"
    BOTH = "both"


class ETaxRuleType:
    """Tax treatment families"""
    EXEMPT = "exempt"
    INTEREST = "interest"
    LTCG = "ltcg"
    LTCG_INDEXED = "ltcg_indexed"
    PARTIAL = "partial"
    CONDITIONAL = "conditional"
    CAPITAL_GAINS_EXEMPT = "capital_gains_exempt"
    UNKNOWN = "unknown"


class EInvestmentType:
    """Contribution style for market-linked instruments"""
    SIP = "sip"
    LUMPSUM = "lumpsum"


class ECityTier:
    """City tiers used for city-dependent prices"""
    METRO = "metro"
    TIER_1 = "tier1"
    TIER_2 = "tier2"


class ECategory:
    """Purchasing-power example categories"""
    EDUCATION = "education"
    REAL_ESTATE = "realEstate"
    LUXURY_GOODS = "luxuryGoods"
    HEALTHCARE = "healthcare"
    CONSUMER_GOODS = "consumerGoods"


# Tax constants (FY 2024-25 rules)
LTCG_EQUITY_RATE = 0.10
LTCG_EXEMPTION_LIMIT = 100000
STCG_EQUITY_RATE = 0.15
LTCG_INDEXED_RATE = 0.20
NPS_TAXABLE_PORTION = 0.40
SGB_MIN_TAX_FREE_TENURE = 5
DEFAULT_INCOME_TAX_SLAB = 0.30

# SGB fixed coupon, paid semi-annually
SGB_FIXED_RATE_PCT = 2.5

# Maximum tenures for fixed-term schemes; None means no fixed cap
MAX_TENURE_YEARS = {
    EInstrument.ppf: 15,
    EInstrument.ssy: None,
    EInstrument.nsc: 5,
    EInstrument.scss: 5,
}

# One-time purchases default to "not investing more" in the corpus simulator
ONE_TIME_INSTRUMENTS = (EInstrument.sgb, EInstrument.nsc, EInstrument.scss)

# Persistence (keys in the user_preferences table)
MAX_SAVED_CALCULATIONS = 20
CORPUS_STATE_KEY = "corpus_state"
USER_PREFERENCES_KEY = "user_preferences"


# Module metadata
__version__ = "1.0.0"
__author__ = "Wealth Manager Contributors"
__description__ = "Core constants and enumerations for Wealth Manager"
