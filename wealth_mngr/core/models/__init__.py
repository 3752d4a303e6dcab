"""
Wealth Manager Core Models Package.

Instrument classes for the corpus simulator. Each instrument values existing
holdings and new contributions at a time horizon.

Modules:
    instrument: Instrument base class, per-instrument subclasses and the registry
"""

from wealth_mngr.core.models.instrument import (
    ExistingInvestment,
    InstrumentCorpus,
    Instrument,
    PPFInstrument,
    SSYInstrument,
    FDInstrument,
    SIPInstrument,
    NSCInstrument,
    SCSSInstrument,
    SGBInstrument,
    NPSInstrument,
    EquityInstrument,
    ELSSInstrument,
    INSTRUMENT_CLASSES,
    create_instrument,
    get_instrument_defaults,
    check_tenure_limit,
)

__all__ = [
    "ExistingInvestment",
    "InstrumentCorpus",
    "Instrument",
    "PPFInstrument",
    "SSYInstrument",
    "FDInstrument",
    "SIPInstrument",
    "NSCInstrument",
    "SCSSInstrument",
    "SGBInstrument",
    "NPSInstrument",
    "EquityInstrument",
    "ELSSInstrument",
    "INSTRUMENT_CLASSES",
    "create_instrument",
    "get_instrument_defaults",
    "check_tenure_limit",
]

__version__ = "1.0.0"
__author__ = "Wealth Manager Contributors"
