from __future__ import annotations

import logging
from typing import Any, Dict, List, Literal, Mapping, Optional

from ..api_client import ApiClient
from ..models.dashboard import (
    CashFlowPeriod,
    CategorySummary,
    DashboardFilters,
    DashboardSummary,
    TopTransaction,
    TypeSummary,
)
from .payloads import as_list, parse_list, parse_model

logger = logging.getLogger(__name__)

Entity = Literal["incomes", "expenses"]

INCOME_TYPES_PATH = "/income-types"
EXPENSE_TYPES_PATH = "/expense-types"
COST_CENTERS_PATH = "/cost-centers"


class DashboardRepo:
    """Aggregate queries behind the consolidated income/expense dashboard."""

    def __init__(self, client: ApiClient) -> None:
        self._client = client

    async def _fetch(self, path: str, params: Optional[Mapping[str, Any]] = None) -> Any:
        return await self._client.get_data(path, params)

    @staticmethod
    def _params(filters: Optional[DashboardFilters]) -> Dict[str, Any]:
        return filters.to_params() if filters else {}

    async def fetch_summary(self, entity: Entity, filters: Optional[DashboardFilters] = None) -> DashboardSummary:
        path = f"/{entity}/dashboard/summary"
        data = await self._fetch(path, self._params(filters))
        return parse_model(DashboardSummary, data, path)

    async def fetch_by_type(self, entity: Entity, filters: Optional[DashboardFilters] = None) -> List[TypeSummary]:
        path = f"/{entity}/dashboard/by-type"
        data = await self._fetch(path, self._params(filters))
        return parse_list(TypeSummary, data, path)

    async def fetch_by_category(self, entity: Entity, filters: Optional[DashboardFilters] = None) -> List[CategorySummary]:
        path = f"/{entity}/dashboard/by-category"
        data = await self._fetch(path, self._params(filters))
        return parse_list(CategorySummary, data, path)

    async def fetch_cash_flow(self, entity: Entity, filters: Optional[DashboardFilters] = None) -> List[CashFlowPeriod]:
        path = f"/{entity}/dashboard/cash-flow"
        data = await self._fetch(path, self._params(filters))
        return parse_list(CashFlowPeriod, data, path)

    async def fetch_top_transactions(
        self,
        entity: Entity,
        limit: int,
        filters: Optional[DashboardFilters] = None,
    ) -> List[TopTransaction]:
        path = f"/{entity}/dashboard/top-transactions"
        params = {**self._params(filters), "limit": limit}
        data = await self._fetch(path, params)
        return parse_list(TopTransaction, data, path)

    async def fetch_catalog(self, path: str, params: Optional[Mapping[str, Any]] = None) -> List[Dict[str, Any]]:
        data = await self._fetch(path, params)
        rows = as_list(data)
        if data is not None and not rows:
            logger.debug("Catalog %s returned no rows (payload type %s)", path, type(data).__name__)
        return [row for row in rows if isinstance(row, dict)]
