"""
Indexation API endpoints.

Indexed acquisition cost and LTCG tax with Cost Inflation Index indexation.
"""

from typing import Any, Dict

from fastapi import APIRouter

from wealth_mngr.api.schemas import IndexedCostRequest, IndexationTaxRequest
from wealth_mngr.core.indexation import CIITable


router = APIRouter()


@router.post("/cost")
def indexed_cost(data: IndexedCostRequest) -> Dict[str, Any]:
    """Acquisition cost scaled by sale-year CII / purchase-year CII."""
    return CIITable().compute_indexed_cost(data.original_cost, data.purchase_year, data.sale_year).to_dict()


@router.post("/tax")
def indexed_tax(data: IndexationTaxRequest) -> Dict[str, Any]:
    """Tax on a gain with and without indexation."""
    result = CIITable().compute_tax_with_indexation(
        data.principal,
        data.maturity_amount,
        data.purchase_year,
        data.sale_year,
        data.tax_rate,
    )
    return result.to_dict()
