from __future__ import annotations

import asyncio
import logging
from typing import List, Optional, Union

from ..api_client import ALL_SENTINEL
from ..models.dashboard import (
    ConsolidatedData,
    DashboardFilters,
    DashboardOverview,
    DimensionalView,
    FinancialKPIs,
    OperationalMetrics,
    TopTransaction,
    TopTransactions,
)
from ..repos.dashboard_repo import (
    COST_CENTERS_PATH,
    EXPENSE_TYPES_PATH,
    INCOME_TYPES_PATH,
    DashboardRepo,
    Entity,
)
from .kpi import calculate_kpis

logger = logging.getLogger(__name__)

DEFAULT_TOP_TRANSACTIONS = 5


def _is_scoped(cost_center_id: Optional[Union[int, str]]) -> bool:
    if cost_center_id is None:
        return False
    return str(cost_center_id).strip().lower() not in ("", ALL_SENTINEL)


class ConsolidatedDashboardService:
    """Income + expense snapshot for the main dashboard.

    ``fetch_all_data`` is atomic: any of its eight sub-fetches failing fails the
    whole snapshot. Operational metrics and top transactions are supplementary
    and degrade to zero/empty values instead.
    """

    def __init__(self, repo: DashboardRepo) -> None:
        self._repo = repo

    async def fetch_all_data(self, filters: Optional[DashboardFilters] = None) -> ConsolidatedData:
        filters = filters or DashboardFilters()
        try:
            (
                income_summary,
                income_by_type,
                income_by_category,
                income_cash_flow,
                expense_summary,
                expense_by_type,
                expense_by_category,
                expense_cash_flow,
            ) = await asyncio.gather(
                self._repo.fetch_summary("incomes", filters),
                self._repo.fetch_by_type("incomes", filters),
                self._repo.fetch_by_category("incomes", filters),
                self._repo.fetch_cash_flow("incomes", filters),
                self._repo.fetch_summary("expenses", filters),
                self._repo.fetch_by_type("expenses", filters),
                self._repo.fetch_by_category("expenses", filters),
                self._repo.fetch_cash_flow("expenses", filters),
            )
        except Exception:
            logger.exception("Error fetching consolidated dashboard data")
            raise

        return ConsolidatedData(
            income=DimensionalView(
                summary=income_summary,
                by_type=income_by_type,
                by_category=income_by_category,
                cash_flow=income_cash_flow,
            ),
            expense=DimensionalView(
                summary=expense_summary,
                by_type=expense_by_type,
                by_category=expense_by_category,
                cash_flow=expense_cash_flow,
            ),
        )

    @staticmethod
    def calculate_kpis(data: ConsolidatedData) -> FinancialKPIs:
        return calculate_kpis(data)

    async def get_operational_metrics(self, filters: Optional[DashboardFilters] = None) -> OperationalMetrics:
        filters = filters or DashboardFilters()
        try:
            income_types, expense_types, cost_centers = await asyncio.gather(
                self._repo.fetch_catalog(INCOME_TYPES_PATH, {"only_active": True}),
                self._repo.fetch_catalog(EXPENSE_TYPES_PATH, {"only_active": True}),
                self._repo.fetch_catalog(COST_CENTERS_PATH),
            )
        except Exception as exc:
            logger.warning("Error fetching operational metrics, reporting zeros: %s", exc)
            return OperationalMetrics()

        # A scoped dashboard always covers exactly one cost center.
        if _is_scoped(filters.cost_center_id):
            cost_centers_count = 1
        else:
            cost_centers_count = sum(1 for center in cost_centers if center.get("is_active") is not False)

        return OperationalMetrics(
            cost_centers_count=cost_centers_count,
            income_types_count=len(income_types),
            expense_types_count=len(expense_types),
            total_transactions=0,
        )

    async def _top_for(self, entity: Entity, limit: int, filters: DashboardFilters) -> List[TopTransaction]:
        try:
            return await self._repo.fetch_top_transactions(entity, limit, filters)
        except Exception as exc:
            logger.warning("Top %s transactions unavailable, showing none: %s", entity, exc)
            return []

    async def get_top_transactions(
        self,
        limit: int = DEFAULT_TOP_TRANSACTIONS,
        filters: Optional[DashboardFilters] = None,
    ) -> TopTransactions:
        filters = filters or DashboardFilters()
        income, expense = await asyncio.gather(
            self._top_for("incomes", limit, filters),
            self._top_for("expenses", limit, filters),
        )
        return TopTransactions(income=income, expense=expense)

    async def get_overview(
        self,
        filters: Optional[DashboardFilters] = None,
        limit: int = DEFAULT_TOP_TRANSACTIONS,
    ) -> DashboardOverview:
        data, metrics, top = await asyncio.gather(
            self.fetch_all_data(filters),
            self.get_operational_metrics(filters),
            self.get_top_transactions(limit, filters),
        )
        return DashboardOverview(
            data=data,
            kpis=self.calculate_kpis(data),
            metrics=metrics,
            top_transactions=top,
        )
