from __future__ import annotations

import logging
from typing import Any, Dict, List
from urllib.parse import quote

from ..models.dashboard import to_amount, to_count
from ..models.explore import (
    ExploreFilters,
    FilterOption,
    IncomeData,
    IncomesByCenter,
    IncomesByClient,
    IncomesByPeriod,
    IncomesFilterOptions,
)
from ..repos.incomes_repo import IncomesRepo
from ..repos.payloads import as_list
from .costs import RECENT_ITEMS, group_rows_by_name

logger = logging.getLogger(__name__)

NO_CLIENT = "Sin Cliente"
NO_CENTER = "Sin Centro"


def client_path(client: str) -> str:
    return f"/ingresos/client/{quote(client, safe='')}"


def _by_client(rows: List[Dict[str, Any]]) -> List[IncomesByClient]:
    result: List[IncomesByClient] = []
    for index, client in enumerate(rows):
        tax_id = client.get("client_tax_id") or ""
        count = to_count(client.get("income_count"))
        result.append(
            IncomesByClient(
                client_id=tax_id or str(index),
                client_name=client.get("client_name") or NO_CLIENT,
                client_tax_id=tax_id,
                amount=to_amount(client.get("total_amount")),
                count=count,
                path=client_path(tax_id or "sin-cliente"),
                has_data=count > 0,
            )
        )
    return result


def _by_center(rows: List[Dict[str, Any]]) -> List[IncomesByCenter]:
    result: List[IncomesByCenter] = []
    for index, center in enumerate(rows):
        center_id = center.get("center_id") or index + 1
        count = to_count(center.get("income_count"))
        result.append(
            IncomesByCenter(
                center_id=center_id,
                center_name=center.get("center_name") or NO_CENTER,
                center_code=center.get("center_code") or "",
                amount=to_amount(center.get("total_amount")),
                count=count,
                path=f"/ingresos/center/{center_id}",
                has_data=count > 0,
            )
        )
    return result


def _cost_center_label(center: Dict[str, Any]) -> str:
    label = center.get("name") or ""
    if center.get("code"):
        label = f"{center['code']} - {label}"
    if center.get("type"):
        label = f"{label} ({center['type']})"
    return label


class IncomesService:
    def __init__(self, repo: IncomesRepo) -> None:
        self._repo = repo

    async def get_income_data(self, filters: ExploreFilters) -> IncomeData:
        data = await self._repo.fetch_explore(filters)
        summary = data.get("summary") or {}
        items = [item for item in as_list(data.get("items")) if isinstance(item, dict)]
        clients = [row for row in as_list(data.get("by_client")) if isinstance(row, dict)]
        centers = [row for row in as_list(data.get("by_center")) if isinstance(row, dict)]

        return IncomeData(
            total_incomes=to_amount(summary.get("total_incomes")),
            pending_incomes=to_count(summary.get("pending_count")),
            recent_incomes=items[:RECENT_ITEMS],
            by_client_data=_by_client(clients),
            by_center_data=_by_center(centers),
        )

    async def get_incomes_by_period(self, filters: ExploreFilters) -> List[IncomesByPeriod]:
        try:
            rows = await self._repo.fetch_by_period(filters)
        except Exception as exc:
            logger.warning("Error fetching incomes by period: %s", exc)
            return []
        if not rows:
            logger.info("No income period data returned for %s", filters.to_params())
            return []

        grouped = group_rows_by_name(rows, lambda row: row.client_name, NO_CLIENT)
        return [
            IncomesByPeriod(client=client, path=client_path(client), amounts=amounts)
            for client, amounts in grouped.items()
        ]

    async def get_filter_options(self) -> IncomesFilterOptions:
        try:
            data = await self._repo.fetch_dimensions()
        except Exception as exc:
            logger.warning("Error fetching income filter options: %s", exc)
            return IncomesFilterOptions()

        cost_centers = [cc for cc in as_list(data.get("cost_centers")) if isinstance(cc, dict) and cc.get("id") is not None]
        clients = [client for client in as_list(data.get("clients")) if isinstance(client, dict) and client.get("tax_id")]
        statuses = [status for status in as_list(data.get("statuses")) if isinstance(status, dict)]

        return IncomesFilterOptions(
            projects=[FilterOption(value=str(cc["id"]), label=cc.get("name") or "") for cc in cost_centers],
            cost_centers=[FilterOption(value=str(cc["id"]), label=_cost_center_label(cc)) for cc in cost_centers],
            clients=[
                FilterOption(value=client["tax_id"], label=f"{client.get('name') or ''} ({client['tax_id']})")
                for client in clients
            ],
            statuses=[FilterOption(value=str(s.get("value")), label=str(s.get("label"))) for s in statuses],
        )
