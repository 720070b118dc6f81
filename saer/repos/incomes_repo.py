from __future__ import annotations

from typing import Any, Dict, List

from ..api_client import ApiClient
from ..errors import DomainFailure
from ..models.explore import ExploreFilters, PeriodAmountRow
from .payloads import parse_list


class IncomesRepo:
    def __init__(self, client: ApiClient) -> None:
        self._client = client

    async def fetch_explore(self, filters: ExploreFilters) -> Dict[str, Any]:
        path = "/ingresos/explore"
        data = await self._client.get_data(path, filters.to_params())
        if not isinstance(data, dict):
            raise DomainFailure(path, "expected an object with summary, items, by_client and by_center")
        return data

    async def fetch_by_period(self, filters: ExploreFilters) -> List[PeriodAmountRow]:
        path = "/ingresos/by-period"
        data = await self._client.get_data(path, filters.to_params())
        return parse_list(PeriodAmountRow, data, path)

    async def fetch_dimensions(self) -> Dict[str, Any]:
        path = "/ingresos/dimensions"
        data = await self._client.get_data(path)
        if not isinstance(data, dict):
            raise DomainFailure(path, "expected an object with dimension lists")
        return data
