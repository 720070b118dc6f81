from __future__ import annotations

import logging
from collections import OrderedDict
from typing import Dict, Iterable, List
from urllib.parse import quote

from ..models.dashboard import to_amount, to_count
from ..models.explore import (
    CostItem,
    CostsByCategory,
    CostsByPeriod,
    CostsData,
    CostsFilterOptions,
    ExploreFilters,
    FilterOption,
    PeriodAmountRow,
)
from ..repos.costs_repo import CostsRepo
from ..repos.payloads import as_list, parse_list

logger = logging.getLogger(__name__)

RECENT_ITEMS = 10
UNCATEGORIZED = "Sin Categoría"


def category_path(name: str) -> str:
    return f"/costs/category/{quote(name, safe='')}"


def group_rows_by_name(rows: Iterable[PeriodAmountRow], name_of, default: str) -> Dict[str, Dict[str, float]]:
    """Pivot ``{name, period_key, total_amount}`` rows into ``{name: {period_key: amount}}``.

    A repeated (name, period) pair keeps the last amount seen.
    """
    grouped: Dict[str, Dict[str, float]] = OrderedDict()
    for row in rows:
        name = name_of(row) or default
        grouped.setdefault(name, {})[row.period_key] = row.total_amount
    return grouped


def _cost_center_label(center: Dict) -> str:
    label = center.get("name") or ""
    if center.get("type"):
        label = f"{label} ({center['type']})"
    return label


def _category_label(category: Dict) -> str:
    name = category.get("name") or ""
    if category.get("group_name"):
        return f"{category['group_name']}: {name}"
    return name


class CostsService:
    def __init__(self, repo: CostsRepo) -> None:
        self._repo = repo

    async def get_costs_data(self, filters: ExploreFilters) -> CostsData:
        data = await self._repo.fetch_explore(filters)
        summary = data.get("summary") or {}
        items = parse_list(CostItem, as_list(data.get("items")), "/costs/explore")

        by_category: List[CostsByCategory] = []
        for index, row in enumerate(as_list(data.get("by_category"))):
            if not isinstance(row, dict):
                continue
            name = row.get("category_name") or UNCATEGORIZED
            count = to_count(row.get("cost_count"))
            by_category.append(
                CostsByCategory(
                    category_id=row.get("category_id") or index + 1,
                    title=name,
                    amount=to_amount(row.get("total_amount")),
                    count=count,
                    path=category_path(row.get("category_name") or "sin-categoria"),
                    has_data=count > 0,
                )
            )

        return CostsData(
            total_expenses=to_amount(summary.get("total_expenses")),
            pending_expenses=to_count(summary.get("pending_count")),
            recent_expenses=items[:RECENT_ITEMS],
            by_category_data=by_category,
        )

    async def get_costs_by_period(self, filters: ExploreFilters) -> List[CostsByPeriod]:
        try:
            rows = await self._repo.fetch_by_period(filters)
        except Exception as exc:
            logger.warning("Error fetching costs by period: %s", exc)
            return []
        if not rows:
            logger.info("No cost period data returned for %s", filters.to_params())
            return []

        grouped = group_rows_by_name(rows, lambda row: row.category_name, UNCATEGORIZED)
        return [
            CostsByPeriod(category=category, path=category_path(category), amounts=amounts)
            for category, amounts in grouped.items()
        ]

    async def get_filter_options(self) -> CostsFilterOptions:
        try:
            data = await self._repo.fetch_dimensions()
        except Exception as exc:
            logger.warning("Error fetching cost filter options: %s", exc)
            return CostsFilterOptions()

        cost_centers = [cc for cc in as_list(data.get("cost_centers")) if isinstance(cc, dict) and cc.get("id") is not None]
        categories = [cat for cat in as_list(data.get("categories")) if isinstance(cat, dict) and cat.get("id") is not None]
        statuses = [status for status in as_list(data.get("statuses")) if isinstance(status, dict)]

        return CostsFilterOptions(
            projects=[FilterOption(value=str(cc["id"]), label=cc.get("name") or "") for cc in cost_centers],
            cost_centers=[FilterOption(value=str(cc["id"]), label=_cost_center_label(cc)) for cc in cost_centers],
            categories=[FilterOption(value=str(cat["id"]), label=_category_label(cat)) for cat in categories],
            statuses=[FilterOption(value=str(s.get("value")), label=str(s.get("label"))) for s in statuses],
        )
