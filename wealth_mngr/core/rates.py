"""
Static rate table for Indian savings and investment instruments.

Rates are annual percentages. The table is immutable at runtime; it is
updated only by editing ``_RATE_DATA`` below (last revised November 2025).
"""

from dataclasses import dataclass, field, asdict
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional

from wealth_mngr.core.constants import EInstrument


@dataclass(frozen=True)
class InstrumentRate:
    """
    Rate and limits for a single instrument.

    Attributes:
        instrument: Instrument identifier
        rate: Nominal annual rate as percentage (None for purely market-linked schemes)
        compounding: "annual", "quarterly", "monthly" or None
        min_investment: Minimum investment (None if not applicable)
        max_investment: Maximum investment (None if unlimited)
        lock_in_years: Lock-in period in years (None if none)
        extras: Instrument-specific expected returns (e.g. NPS asset classes)
    """
    instrument: str
    rate: Optional[float] = None
    compounding: Optional[str] = None
    min_investment: Optional[float] = None
    max_investment: Optional[float] = None
    lock_in_years: Optional[int] = None
    extras: Mapping[str, float] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["extras"] = dict(self.extras)
        return data


_RATE_DATA = (
    InstrumentRate(EInstrument.ppf, 7.1, "annual", 500, 150000, 15),
    InstrumentRate(EInstrument.nsc, 7.7, "annual", 1000, None, 5),
    InstrumentRate(EInstrument.ssy, 8.2, "annual", 250, 150000, 21),
    InstrumentRate(EInstrument.scss, 8.2, "quarterly", 1000, 3000000, 5),
    InstrumentRate(EInstrument.pomis, 7.4, "monthly", 1000, 900000, 5,
                   {"maxInvestmentJoint": 1500000}),
    InstrumentRate(EInstrument.sgb, 2.5, "semi-annual", 1, None, 5,
                   {"fixedRate": 2.5, "goldAppreciation": 8}),
    InstrumentRate(EInstrument.fd, 6.5, "quarterly", 1000, None, None),
    InstrumentRate(EInstrument.rd, 6.5, "quarterly", 500, None, None),
    InstrumentRate(EInstrument.nps, None, None, 500, None, None,
                   {"equity": 12, "corporateBonds": 9, "governmentBonds": 8, "alternative": 7}),
    InstrumentRate(EInstrument.sip, 12, None, 500, None, None),
    InstrumentRate(EInstrument.elss, 14, None, 500, None, 3),
    InstrumentRate(EInstrument.equity, 12, None, None, None, None),
    InstrumentRate(EInstrument.ipo, 12, None, None, None, None),
    InstrumentRate(EInstrument.etf, None, None, None, None, None,
                   {"equity": 12, "debt": 7, "gold": 8, "international": 10}),
    InstrumentRate(EInstrument.debt_mutual_fund, 7.5, None, 500, None, None,
                   {"liquid": 6.5, "shortTerm": 7.5, "longTerm": 8.5, "gilt": 7.8, "corporateBond": 8.2}),
    InstrumentRate(EInstrument.reits, None, None, 1000, None, None,
                   {"dividendYield": 7, "capitalAppreciation": 6}),
    InstrumentRate(EInstrument.bonds_54ec, 5.75, "annual", 1000, 5000000, 5),
)


class RateTable:
    """
    Read-only mapping from instrument identifier to ``InstrumentRate``.

    Examples:
        >>> RateTable.default().rate_for("ppf")
        7.1
    """

    _default: Optional['RateTable'] = None

    def __init__(self, entries=_RATE_DATA):
        self._entries = MappingProxyType({entry.instrument: entry for entry in entries})

    @classmethod
    def default(cls) -> 'RateTable':
        if cls._default is None:
            cls._default = cls()
        return cls._default

    def get(self, instrument: str) -> Optional[InstrumentRate]:
        return self._entries.get(instrument)

    def rate_for(self, instrument: str, default: float = 0.0) -> float:
        """Nominal annual rate (percent) for an instrument, or ``default`` if unknown."""
        entry = self._entries.get(instrument)
        if entry is None or entry.rate is None:
            return default
        return entry.rate

    def extra(self, instrument: str, key: str, default: float = 0.0) -> float:
        entry = self._entries.get(instrument)
        if entry is None:
            return default
        return entry.extras.get(key, default)

    def __contains__(self, instrument: str) -> bool:
        return instrument in self._entries

    def __iter__(self):
        return iter(self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)

    def to_dict(self) -> Dict[str, Dict[str, Any]]:
        return {key: entry.to_dict() for key, entry in self._entries.items()}
