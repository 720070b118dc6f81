from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query

from ..config import settings
from ..deps import DashboardService, get_dashboard_service
from ..models import (
    ConsolidatedData,
    DashboardFilters,
    DashboardOverview,
    FinancialKPIs,
    OperationalMetrics,
    TopTransactions,
)

router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])


def dashboard_filters(
    date_from: Optional[str] = Query(default=None, alias="dateFrom"),
    date_to: Optional[str] = Query(default=None, alias="dateTo"),
    cost_center_id: Optional[str] = Query(default=None, alias="costCenterId"),
) -> DashboardFilters:
    return DashboardFilters(date_from=date_from, date_to=date_to, cost_center_id=cost_center_id)


@router.get("/consolidated", response_model=ConsolidatedData)
async def consolidated(
    filters: DashboardFilters = Depends(dashboard_filters),
    service: DashboardService = Depends(get_dashboard_service),
) -> ConsolidatedData:
    return await service.fetch_all_data(filters)


@router.get("/kpis", response_model=FinancialKPIs)
async def kpis(
    filters: DashboardFilters = Depends(dashboard_filters),
    service: DashboardService = Depends(get_dashboard_service),
) -> FinancialKPIs:
    data = await service.fetch_all_data(filters)
    return service.calculate_kpis(data)


@router.get("/overview", response_model=DashboardOverview)
async def overview(
    filters: DashboardFilters = Depends(dashboard_filters),
    limit: int = Query(default=settings.top_transactions_limit, ge=1, le=50),
    service: DashboardService = Depends(get_dashboard_service),
) -> DashboardOverview:
    return await service.get_overview(filters, limit)


@router.get("/operational-metrics", response_model=OperationalMetrics)
async def operational_metrics(
    filters: DashboardFilters = Depends(dashboard_filters),
    service: DashboardService = Depends(get_dashboard_service),
) -> OperationalMetrics:
    return await service.get_operational_metrics(filters)


@router.get("/top-transactions", response_model=TopTransactions)
async def top_transactions(
    filters: DashboardFilters = Depends(dashboard_filters),
    limit: int = Query(default=settings.top_transactions_limit, ge=1, le=50),
    service: DashboardService = Depends(get_dashboard_service),
) -> TopTransactions:
    return await service.get_top_transactions(limit, filters)
