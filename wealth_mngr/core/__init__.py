"""
Core modules for Wealth Manager.

This package contains the constants and static tables, the formula library,
instrument models, and the corpus and calculator engines.
"""

from wealth_mngr.core.constants import (
    EInstrument,
    ECompounding,
    ETaxMethod,
    ETaxRuleType,
    EInvestmentType,
    ECityTier,
    ECategory,
    CORPUS_INSTRUMENTS,
    INSTRUMENT_NAMES,
)
from wealth_mngr.core.rates import RateTable, InstrumentRate
from wealth_mngr.core.indexation import CIITable, get_current_financial_year
from wealth_mngr.core.preferences import UserPreferences, CorpusSettings, CorpusState

__all__ = [
    "EInstrument",
    "ECompounding",
    "ETaxMethod",
    "ETaxRuleType",
    "EInvestmentType",
    "ECityTier",
    "ECategory",
    "CORPUS_INSTRUMENTS",
    "INSTRUMENT_NAMES",
    "RateTable",
    "InstrumentRate",
    "CIITable",
    "get_current_financial_year",
    "UserPreferences",
    "CorpusSettings",
    "CorpusState",
]

__version__ = "1.0.0"
