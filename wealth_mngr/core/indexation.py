"""
Cost Inflation Index (CII) lookups and capital-gains indexation.

CII values are published yearly by the CBDT (base FY 2001-02 = 100).
Years outside the tabulated range are extrapolated by compounding the
nearest-end value at ``growth_rate`` per year; that is a modelling
assumption, not authoritative data.
"""

import logging
from dataclasses import dataclass
from datetime import date
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional

from wealth_mngr.core.constants import LTCG_INDEXED_RATE
from wealth_mngr.utils.rate_utils import round_amount

logger = logging.getLogger(__name__)

# Financial year (2024 means FY 2024-25) -> CII
CII_VALUES = MappingProxyType({
    2001: 100,
    2002: 105,
    2003: 109,
    2004: 113,
    2005: 117,
    2006: 122,
    2007: 129,
    2008: 137,
    2009: 148,
    2010: 167,
    2011: 184,
    2012: 200,
    2013: 220,
    2014: 240,
    2015: 254,
    2016: 264,
    2017: 272,
    2018: 280,
    2019: 289,
    2020: 301,
    2021: 317,
    2022: 331,
    2023: 348,
    2024: 363,  # estimated
    2025: 378,  # projected
    2026: 393,  # projected
})

DEFAULT_CII_GROWTH_RATE = 0.04


@dataclass
class IndexedCost:
    purchase_cii: int
    sale_cii: int
    indexation_factor: float
    indexed_cost: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "purchaseCII": self.purchase_cii,
            "saleCII": self.sale_cii,
            "indexationFactor": self.indexation_factor,
            "indexedCost": self.indexed_cost,
        }


@dataclass
class IndexationResult:
    """Tax on a gain with and without indexation."""
    purchase_year: int
    sale_year: int
    purchase_cii: int
    sale_cii: int
    indexation_factor: float
    indexed_cost: float
    principal: float
    maturity_amount: float
    taxable_gains: float
    tax_amount: float
    savings: float
    tax_without_indexation: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "purchaseYear": self.purchase_year,
            "saleYear": self.sale_year,
            "purchaseCII": self.purchase_cii,
            "saleCII": self.sale_cii,
            "indexationFactor": self.indexation_factor,
            "indexedCost": self.indexed_cost,
            "principal": self.principal,
            "maturityAmount": self.maturity_amount,
            "taxableGains": self.taxable_gains,
            "taxAmount": self.tax_amount,
            "savings": self.savings,
            "taxWithoutIndexation": self.tax_without_indexation,
        }


class CIITable:
    """
    Cost Inflation Index by financial year.

    Args:
        values: Mapping of financial year to CII
        growth_rate: Yearly growth used to extrapolate untabulated years

    Examples:
        >>> table = CIITable()
        >>> table.get_cii_for_year(2020)
        301
        >>> table.get_cii_for_year(2027)
        409
    """

    def __init__(self, values: Mapping[int, int] = CII_VALUES, growth_rate: float = DEFAULT_CII_GROWTH_RATE):
        self.values = MappingProxyType(dict(values))
        self.growth_rate = growth_rate
        self.first_year = min(self.values)
        self.last_year = max(self.values)

    def get_cii_for_year(self, financial_year: int, growth_rate: Optional[float] = None) -> int:
        """
        CII for a financial year. Years after the table are extrapolated from
        its last year; years before it take the base-year value.
        """
        financial_year = int(financial_year)
        if financial_year in self.values:
            return self.values[financial_year]
        if financial_year < self.first_year:
            return self.values[self.first_year]

        rate = self.growth_rate if growth_rate is None else growth_rate
        projected = self.values[self.last_year] * (1 + rate) ** (financial_year - self.last_year)
        logger.debug(f"Extrapolated CII for FY {financial_year} from FY {self.last_year}: {projected:.2f}")
        return int(round_amount(projected, 0))

    def compute_indexed_cost(self, original_cost: float, purchase_year: int, sale_year: int) -> IndexedCost:
        """
        Scale an acquisition cost by sale-year CII / purchase-year CII.

        Examples:
            >>> CIITable().compute_indexed_cost(100000, 2015, 2020).indexed_cost
            118503.94
        """
        purchase_cii = self.get_cii_for_year(purchase_year)
        sale_cii = self.get_cii_for_year(sale_year)
        factor = sale_cii / purchase_cii
        return IndexedCost(
            purchase_cii=purchase_cii,
            sale_cii=sale_cii,
            indexation_factor=round_amount(factor, 4),
            indexed_cost=round_amount(original_cost * factor),
        )

    def compute_tax_with_indexation(
        self,
        principal: float,
        maturity_amount: float,
        purchase_year: int,
        sale_year: int,
        tax_rate: float = LTCG_INDEXED_RATE,
    ) -> IndexationResult:
        """
        LTCG tax on ``maturity_amount`` using the indexed cost of ``principal``.

        ``savings`` is the flat-rate tax without indexation minus the tax with it.
        """
        indexation = self.compute_indexed_cost(principal, purchase_year, sale_year)
        taxable_gains = max(0.0, maturity_amount - indexation.indexed_cost)
        tax_amount = taxable_gains * tax_rate

        tax_without_indexation = max(0.0, maturity_amount - principal) * tax_rate
        savings = tax_without_indexation - tax_amount

        return IndexationResult(
            purchase_year=int(purchase_year),
            sale_year=int(sale_year),
            purchase_cii=indexation.purchase_cii,
            sale_cii=indexation.sale_cii,
            indexation_factor=indexation.indexation_factor,
            indexed_cost=indexation.indexed_cost,
            principal=principal,
            maturity_amount=maturity_amount,
            taxable_gains=round_amount(taxable_gains),
            tax_amount=round_amount(tax_amount),
            savings=round_amount(savings),
            tax_without_indexation=round_amount(tax_without_indexation),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "values": {str(year): cii for year, cii in self.values.items()},
            "growthRate": self.growth_rate,
            "firstYear": self.first_year,
            "lastYear": self.last_year,
        }


def get_current_financial_year(today: Optional[date] = None) -> int:
    """
    Financial year (April to March) containing ``today``.

    Examples:
        >>> get_current_financial_year(date(2025, 3, 31))
        2024
        >>> get_current_financial_year(date(2025, 4, 1))
        2025
    """
    today = today or date.today()
    return today.year if today.month >= 4 else today.year - 1
