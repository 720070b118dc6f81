from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from ..deps import get_incomes_service
from ..models import ExploreFilters, IncomeData, IncomesByPeriod, IncomesFilterOptions, PeriodType
from ..services.incomes import IncomesService

router = APIRouter(prefix="/api/incomes", tags=["incomes"])


def incomes_filters(
    period_type: Optional[PeriodType] = Query(default=None, alias="periodType"),
    year: Optional[str] = Query(default=None, pattern=r"^\d{4}$"),
    cost_center_id: Optional[str] = Query(default=None, alias="costCenterId"),
    client_id: Optional[str] = Query(default=None, alias="clientId"),
    status: Optional[str] = Query(default=None),
) -> ExploreFilters:
    return ExploreFilters(
        period_type=period_type,
        year=year,
        cost_center_id=cost_center_id,
        client_id=client_id,
        status=status,
    )


@router.get("/explore", response_model=IncomeData)
async def incomes_explore(
    filters: ExploreFilters = Depends(incomes_filters),
    service: IncomesService = Depends(get_incomes_service),
) -> IncomeData:
    return await service.get_income_data(filters)


@router.get("/by-period", response_model=List[IncomesByPeriod])
async def incomes_by_period(
    filters: ExploreFilters = Depends(incomes_filters),
    service: IncomesService = Depends(get_incomes_service),
) -> List[IncomesByPeriod]:
    return await service.get_incomes_by_period(filters)


@router.get("/filter-options", response_model=IncomesFilterOptions)
async def incomes_filter_options(service: IncomesService = Depends(get_incomes_service)) -> IncomesFilterOptions:
    return await service.get_filter_options()
