from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query

from ..deps import get_financial_service
from ..models import FinancialTableResponse, PeriodType
from ..services.financial_aggregation import FinancialAggregationService

router = APIRouter(prefix="/api/financial-table", tags=["financial-table"])


@router.get("", response_model=FinancialTableResponse)
async def financial_table(
    year: int = Query(..., ge=1900, le=9999),
    period_type: PeriodType = Query(default="monthly", alias="periodType"),
    cost_center_id: Optional[str] = Query(default=None, alias="costCenterId"),
    service: FinancialAggregationService = Depends(get_financial_service),
) -> FinancialTableResponse:
    return await service.get_financial_table(period_type, year, cost_center_id)
