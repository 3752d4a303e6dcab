"""
Wealth Manager Core Engine Package.

This package contains the calculation engines built on the formula library.

Modules:
    corpus_engine: Multi-instrument corpus aggregation with tax, inflation and purchasing power
    calculators: Single-instrument calculators (PPF, FD, RD, SIP, NSC, SCSS, SGB, NPS, market-linked, REITs)
"""

from wealth_mngr.core.engine.corpus_engine import (
    CorpusResult,
    calculate_corpus,
    calculate_corpus_from_instruments,
    calculate_instrument_corpus,
)
from wealth_mngr.core.engine.calculators import CALCULATORS, calculate_lumpsum_or_sip_results

__all__ = [
    "CorpusResult",
    "calculate_corpus",
    "calculate_corpus_from_instruments",
    "calculate_instrument_corpus",
    "CALCULATORS",
    "calculate_lumpsum_or_sip_results",
]

__version__ = "1.0.0"
__author__ = "Wealth Manager Contributors"
