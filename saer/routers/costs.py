from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from ..deps import get_costs_service
from ..models import CostsByPeriod, CostsData, CostsFilterOptions, ExploreFilters, PeriodType
from ..services.costs import CostsService

router = APIRouter(prefix="/api/costs", tags=["costs"])


def costs_filters(
    period_type: Optional[PeriodType] = Query(default=None, alias="periodType"),
    year: Optional[str] = Query(default=None, pattern=r"^\d{4}$"),
    cost_center_id: Optional[str] = Query(default=None, alias="costCenterId"),
    category_id: Optional[str] = Query(default=None, alias="categoryId"),
    status: Optional[str] = Query(default=None),
) -> ExploreFilters:
    return ExploreFilters(
        period_type=period_type,
        year=year,
        cost_center_id=cost_center_id,
        category_id=category_id,
        status=status,
    )


@router.get("/explore", response_model=CostsData)
async def costs_explore(
    filters: ExploreFilters = Depends(costs_filters),
    service: CostsService = Depends(get_costs_service),
) -> CostsData:
    return await service.get_costs_data(filters)


@router.get("/by-period", response_model=List[CostsByPeriod])
async def costs_by_period(
    filters: ExploreFilters = Depends(costs_filters),
    service: CostsService = Depends(get_costs_service),
) -> List[CostsByPeriod]:
    return await service.get_costs_by_period(filters)


@router.get("/filter-options", response_model=CostsFilterOptions)
async def costs_filter_options(service: CostsService = Depends(get_costs_service)) -> CostsFilterOptions:
    return await service.get_filter_options()
