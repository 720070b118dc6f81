from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from time import perf_counter
from typing import Any, Dict, List, Mapping, Optional, Union

from ..api_client import ApiClient
from ..errors import DomainFailure
from ..models.categories import CategoryDescriptor
from ..models.dashboard import to_amount
from ..models.explore import ExploreFilters, PeriodAmountRow
from ..services.periods import parse_date, period_range
from .payloads import as_list, parse_list, parse_model

logger = logging.getLogger(__name__)

# Legacy sources behind the four fixed categories of the period table.
FIXED_CATEGORY_SOURCES: Dict[str, str] = {
    "remuneraciones": "/remuneraciones",
    "factoring": "/factoring",
    "previsionales": "/previsionales",
    "costosFijos": "/fixed-costs",
}

ACCOUNT_CATEGORIES_PATH = "/account-categories"
ACCOUNT_CATEGORY_ITEMS_PATH = "/account-categories/items"

DATE_FIELDS = ("date", "payment_date", "period_date", "due_date")
AMOUNT_FIELDS = ("amount", "total_amount", "net_amount", "total")

CostCenterId = Optional[Union[int, str]]


@dataclass
class DatedAmount:
    day: Optional[date]
    amount: float


@dataclass
class CategoryAmount:
    category: CategoryDescriptor
    day: Optional[date]
    amount: float


def _record_date(record: Mapping[str, Any]) -> Optional[date]:
    for field in DATE_FIELDS:
        raw = record.get(field)
        if raw:
            parsed = parse_date(raw)
            if parsed is not None:
                return parsed
    year, month = record.get("period_year"), record.get("period_month")
    if year and month:
        try:
            return date(int(year), int(month), 1)
        except (TypeError, ValueError):
            return None
    return None


def _record_amount(record: Mapping[str, Any]) -> float:
    for field in AMOUNT_FIELDS:
        if record.get(field) is not None:
            return to_amount(record[field])
    return 0.0


def _record_category(record: Mapping[str, Any]) -> Optional[Dict[str, Any]]:
    nested = record.get("account_category")
    if isinstance(nested, dict):
        return nested
    name = record.get("category_name")
    category_type = record.get("category_type")
    if not name or not category_type:
        return None
    return {
        "id": record.get("account_category_id"),
        "code": record.get("category_code"),
        "name": name,
        "type": category_type,
        "group_name": record.get("group_name"),
    }


class CostsRepo:
    """Expense-side fetchers: explore views, legacy fixed sources and account categories."""

    def __init__(self, client: ApiClient) -> None:
        self._client = client

    @staticmethod
    def _year_params(year: int, cost_center_id: CostCenterId) -> Dict[str, Any]:
        date_from, date_to = period_range(year)
        return {"date_from": date_from, "date_to": date_to, "cost_center_id": cost_center_id}

    async def fetch_explore(self, filters: ExploreFilters) -> Dict[str, Any]:
        path = "/costs/explore"
        data = await self._client.get_data(path, filters.to_params())
        if not isinstance(data, dict):
            raise DomainFailure(path, "expected an object with summary, items and by_category")
        return data

    async def fetch_by_period(self, filters: ExploreFilters) -> List[PeriodAmountRow]:
        path = "/costs/by-period"
        data = await self._client.get_data(path, filters.to_params())
        return parse_list(PeriodAmountRow, data, path)

    async def fetch_dimensions(self) -> Dict[str, Any]:
        path = "/costs/dimensions"
        data = await self._client.get_data(path)
        if not isinstance(data, dict):
            raise DomainFailure(path, "expected an object with dimension lists")
        return data

    async def fetch_fixed_category_records(
        self,
        category: str,
        year: int,
        cost_center_id: CostCenterId = None,
    ) -> List[DatedAmount]:
        path = FIXED_CATEGORY_SOURCES[category]
        start = perf_counter()
        data = await self._client.get_data(path, self._year_params(year, cost_center_id))
        records = [
            DatedAmount(day=_record_date(row), amount=_record_amount(row))
            for row in as_list(data)
            if isinstance(row, dict)
        ]
        elapsed = (perf_counter() - start) * 1000
        logger.debug("fetch_fixed_category_records category=%s year=%s rows=%s elapsed_ms=%.2f", category, year, len(records), elapsed)
        return records

    async def fetch_account_category_items(self, year: int, cost_center_id: CostCenterId = None) -> List[CategoryAmount]:
        path = ACCOUNT_CATEGORY_ITEMS_PATH
        start = perf_counter()
        data = await self._client.get_data(path, self._year_params(year, cost_center_id))
        items: List[CategoryAmount] = []
        skipped = 0
        for row in as_list(data):
            if not isinstance(row, dict):
                skipped += 1
                continue
            category = _record_category(row)
            if category is None:
                skipped += 1
                continue
            try:
                descriptor = parse_model(CategoryDescriptor, category, path)
            except DomainFailure as exc:
                logger.debug("Skipping account category row %s: %s", category, exc)
                skipped += 1
                continue
            items.append(
                CategoryAmount(
                    category=descriptor,
                    day=_record_date(row),
                    amount=_record_amount(row),
                )
            )
        elapsed = (perf_counter() - start) * 1000
        logger.debug("fetch_account_category_items year=%s rows=%s skipped=%s elapsed_ms=%.2f", year, len(items), skipped, elapsed)
        return items

    async def fetch_account_categories(self) -> List[CategoryDescriptor]:
        data = await self._client.get_data(ACCOUNT_CATEGORIES_PATH)
        if data is None:
            return []
        if not isinstance(data, list):
            raise DomainFailure(ACCOUNT_CATEGORIES_PATH, f"expected a list, got {type(data).__name__}")
        categories: List[CategoryDescriptor] = []
        for entry in data:
            try:
                categories.append(parse_model(CategoryDescriptor, entry, ACCOUNT_CATEGORIES_PATH))
            except DomainFailure as exc:
                logger.debug("Skipping catalogue entry %s: %s", entry, exc)
        return categories
