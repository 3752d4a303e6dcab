"""
Corpus aggregation engine.

Combines the selected instruments' projected values into one corpus and,
through ``calculate_corpus``, applies inflation, tax and purchasing-power
analysis using the simulation settings.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional

from wealth_mngr.core.formulas import adjust_for_inflation
from wealth_mngr.core.models.instrument import InstrumentCorpus, create_instrument
from wealth_mngr.core.preferences import CorpusSettings
from wealth_mngr.core.price_examples import PURCHASING_POWER_EXAMPLES
from wealth_mngr.core.purchasing_power import calculate_purchasing_power, get_purchasing_power_summary
from wealth_mngr.core.rates import RateTable
from wealth_mngr.core.tax import calculate_tax_for_multiple_instruments
from wealth_mngr.utils.rate_utils import round_amount

logger = logging.getLogger(__name__)


@dataclass
class CorpusResult:
    """
    Aggregate corpus for a basket of instruments.

    Attributes:
        total_invested: New money invested across instruments
        total_returns: Growth of existing holdings plus growth of new money
        nominal_corpus: Sum of maturity values at the horizon
        total_existing_value: Today's value of existing holdings
        total_future_invested: Same as total_invested (kept for display)
        by_instrument: Per-instrument valuation, in selection order
        real_corpus: Nominal corpus in today's money (None until computed)
        tax: Tax summary for the selected method (None until computed)
        purchasing_power: Purchasing-power analysis by category
    """
    total_invested: float = 0.0
    total_returns: float = 0.0
    nominal_corpus: float = 0.0
    total_existing_value: float = 0.0
    total_future_invested: float = 0.0
    by_instrument: Dict[str, InstrumentCorpus] = field(default_factory=dict)
    real_corpus: Optional[float] = None
    tax: Optional[Dict[str, Any]] = None
    post_tax_corpus: Optional[float] = None
    purchasing_power: Dict[str, Any] = field(default_factory=dict)
    purchasing_power_summary: Optional[Dict[str, Any]] = None

    @property
    def advisories(self) -> List[str]:
        return [message for corpus in self.by_instrument.values() for message in corpus.advisories]

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "totalInvested": self.total_invested,
            "totalReturns": self.total_returns,
            "nominalCorpus": self.nominal_corpus,
            "totalExistingValue": self.total_existing_value,
            "totalFutureInvested": self.total_future_invested,
            "byInstrument": {key: corpus.to_dict() for key, corpus in self.by_instrument.items()},
            "advisories": self.advisories,
        }
        if self.real_corpus is not None:
            data["realCorpus"] = self.real_corpus
        if self.tax is not None:
            data["tax"] = self.tax
            data["postTaxCorpus"] = self.post_tax_corpus
        if self.purchasing_power_summary is not None:
            data["purchasingPower"] = self.purchasing_power
            data["purchasingPowerSummary"] = self.purchasing_power_summary
        return data


def calculate_instrument_corpus(
    instrument: str,
    investment_data: Optional[Mapping[str, Any]],
    time_horizon: float = 0,
    rates: Optional[RateTable] = None,
) -> InstrumentCorpus:
    """Value one instrument at the horizon; unknown instruments or missing data value at zero."""
    if not instrument or not investment_data:
        return InstrumentCorpus(instrument=instrument)
    model = create_instrument(instrument, investment_data, rates)
    if model is None:
        return InstrumentCorpus(instrument=instrument)
    return model.calculate(time_horizon)


def calculate_corpus_from_instruments(
    instruments: Optional[Iterable[str]],
    investments: Optional[Mapping[str, Mapping[str, Any]]],
    time_horizon: float = 0,
    rates: Optional[RateTable] = None,
) -> CorpusResult:
    """
    Aggregate the selected instruments.

    Instruments without investment data are skipped. ``percentage`` on each
    instrument is its share of the nominal corpus (2 decimals).
    """
    result = CorpusResult()
    if not instruments or not investments:
        return result

    total_invested = 0.0
    total_maturity = 0.0
    total_existing = 0.0
    for instrument in instruments:
        data = investments.get(instrument)
        if not data:
            continue
        corpus = calculate_instrument_corpus(instrument, data, time_horizon, rates)
        result.by_instrument[instrument] = corpus
        total_invested += corpus.invested_amount
        total_maturity += corpus.maturity_value
        total_existing += corpus.existing_current_value

    if total_maturity > 0:
        for corpus in result.by_instrument.values():
            corpus.percentage = round_amount(corpus.maturity_value / total_maturity * 100)

    result.total_invested = round_amount(total_invested)
    result.total_returns = round_amount(sum(corpus.returns for corpus in result.by_instrument.values()))
    result.nominal_corpus = round_amount(total_maturity)
    result.total_existing_value = round_amount(total_existing)
    result.total_future_invested = round_amount(total_invested)
    return result


def aggregate_invested_amounts(instruments, investments, time_horizon: float = 0) -> Dict[str, Any]:
    """New money invested per instrument and in total."""
    corpus = calculate_corpus_from_instruments(instruments, investments, time_horizon)
    return {
        "byInstrument": {key: value.invested_amount for key, value in corpus.by_instrument.items()},
        "total": corpus.total_invested,
    }


def aggregate_maturity_values(instruments, investments, time_horizon: float = 0) -> Dict[str, Any]:
    """Maturity value per instrument and in total."""
    corpus = calculate_corpus_from_instruments(instruments, investments, time_horizon)
    return {
        "byInstrument": {key: value.maturity_value for key, value in corpus.by_instrument.items()},
        "total": corpus.nominal_corpus,
    }


def _tax_inputs(result: CorpusResult, investments: Mapping[str, Mapping[str, Any]]) -> Dict[str, Dict[str, Any]]:
    """Investment data enriched with the amounts the tax rules need."""
    inputs = {}
    for instrument, corpus in result.by_instrument.items():
        data = dict(investments.get(instrument) or {})
        data["investedAmount"] = corpus.invested_amount + corpus.existing_current_value
        inputs[instrument] = data
    return inputs


def calculate_corpus(
    instruments: Optional[Iterable[str]],
    investments: Optional[Mapping[str, Mapping[str, Any]]],
    settings: Optional[CorpusSettings] = None,
    rates: Optional[RateTable] = None,
) -> CorpusResult:
    """
    Full corpus simulation.

    Aggregates the instruments over ``settings.time_horizon`` (default 10 years),
    deflates the nominal corpus at the general inflation rate, applies tax for
    ``settings.tax_method`` at ``settings.income_tax_slab`` and, when the
    corpus is positive, compares it with future prices in ``settings.selected_city``.
    """
    settings = settings or CorpusSettings()
    investments = investments or {}
    time_horizon = settings.time_horizon or 10
    instruments = list(instruments or [])

    result = calculate_corpus_from_instruments(instruments, investments, time_horizon, rates)
    if not result.by_instrument:
        return result

    result.real_corpus = round_amount(
        adjust_for_inflation(result.nominal_corpus, (settings.general_inflation_rate or 0) / 100, time_horizon))

    maturity_values = {key: corpus.maturity_value for key, corpus in result.by_instrument.items()}
    result.tax = calculate_tax_for_multiple_instruments(
        maturity_values,
        _tax_inputs(result, investments),
        list(result.by_instrument),
        settings.tax_method,
        income_tax_slab=settings.income_tax_slab,
    )
    result.post_tax_corpus = result.tax["total"]["postTaxCorpus"]

    if result.nominal_corpus > 0 and settings.selected_city:
        result.purchasing_power = calculate_purchasing_power(
            result.nominal_corpus,
            PURCHASING_POWER_EXAMPLES,
            time_horizon,
            settings.selected_city,
            settings.purchasing_power_rates(),
        )
        result.purchasing_power_summary = get_purchasing_power_summary(result.purchasing_power)

    logger.debug(f"Corpus for {len(result.by_instrument)} instruments over {time_horizon} years: "
                 f"{result.nominal_corpus:.2f}")
    return result
