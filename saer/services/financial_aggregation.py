from __future__ import annotations

import asyncio
import logging
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Awaitable, Dict, Iterable, List, Mapping, Optional, Sequence

from ..models.categories import CategoryDescriptor
from ..models.financial_table import FinancialTableResponse
from ..models.periods import AmountByPeriod, Period, PeriodType
from ..repos.costs_repo import CategoryAmount, CostCenterId, CostsRepo, DatedAmount
from .categories import (
    FIXED_CATEGORIES,
    convert_to_financial_categories,
    generate_category_key,
    is_fixed_category,
)
from .periods import generate_periods, initialize_empty_periods, resolve_period_id

logger = logging.getLogger(__name__)

FinancialDataByPeriod = Dict[str, AmountByPeriod]

ACCOUNT_CATEGORIES_SOURCE = "accountCategories"


@dataclass
class SourceResult:
    """Settled outcome of one source in a fan-out batch."""

    source: str
    value: Any = None
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.error is None


async def settle(sources: Mapping[str, Awaitable[Any]]) -> Dict[str, SourceResult]:
    """Await every source concurrently and record each success or failure."""
    names = list(sources)
    results = await asyncio.gather(*sources.values(), return_exceptions=True)
    outcomes: Dict[str, SourceResult] = OrderedDict()
    for name, result in zip(names, results):
        if isinstance(result, Exception):
            outcomes[name] = SourceResult(source=name, error=result)
        elif isinstance(result, BaseException):
            raise result
        else:
            outcomes[name] = SourceResult(source=name, value=result)
    return outcomes


def _within(day, periods: Sequence[Period]) -> bool:
    return periods[0].start_date <= day <= periods[-1].end_date


def bucket_amounts(records: Iterable[DatedAmount], periods: Sequence[Period]) -> AmountByPeriod:
    amounts = initialize_empty_periods(periods)
    if not periods:
        return amounts
    for record in records:
        if record.day is None or not _within(record.day, periods):
            continue
        period_id = resolve_period_id(record.day, periods)
        if period_id in amounts:
            amounts[period_id] += record.amount
    return amounts


def bucket_category_amounts(items: Iterable[CategoryAmount], periods: Sequence[Period]) -> FinancialDataByPeriod:
    data: FinancialDataByPeriod = OrderedDict()
    for item in items:
        key = generate_category_key(item.category)
        amounts = data.get(key)
        if amounts is None:
            amounts = data[key] = initialize_empty_periods(periods)
        if item.day is None or not periods or not _within(item.day, periods):
            continue
        period_id = resolve_period_id(item.day, periods)
        if period_id in amounts:
            amounts[period_id] += item.amount
    return data


def merge_financial_sources(outcomes: Mapping[str, SourceResult], periods: Sequence[Period]) -> FinancialDataByPeriod:
    result: FinancialDataByPeriod = OrderedDict()
    for category in FIXED_CATEGORIES:
        outcome = outcomes.get(category)
        if outcome is not None and outcome.ok:
            result[category] = dict(outcome.value)
        else:
            result[category] = initialize_empty_periods(periods)

    dynamic = outcomes.get(ACCOUNT_CATEGORIES_SOURCE)
    if dynamic is None or not dynamic.ok:
        logger.info("Account category data unavailable; period table limited to fixed categories")
        return result

    for key, amounts in dynamic.value.items():
        if is_fixed_category(key):
            logger.warning("Dynamic category key %s collides with a fixed category; ignored", key)
            continue
        result[key] = dict(amounts)
    return result


def get_total_for_category(amounts: Mapping[str, float]) -> float:
    return sum(amounts.values())


def get_all_category_keys(financial_data: Mapping[str, Mapping[str, float]]) -> List[str]:
    dynamic_keys = [
        key
        for key, amounts in financial_data.items()
        if not is_fixed_category(key) and isinstance(amounts, Mapping)
    ]
    return [*FIXED_CATEGORIES, *dynamic_keys]


def get_combined_totals(financial_data: Mapping[str, Mapping[str, float]]) -> Dict[str, float]:
    """Per-period sum across fixed and dynamic categories."""
    base = financial_data.get(FIXED_CATEGORIES[0])
    if base is not None:
        period_ids = list(base)
    else:
        period_ids = list(OrderedDict.fromkeys(pid for amounts in financial_data.values() for pid in amounts))

    totals: Dict[str, float] = {}
    for period_id in period_ids:
        period_total = 0
        for key in get_all_category_keys(financial_data):
            amounts = financial_data.get(key) or {}
            period_total += amounts.get(period_id, 0) or 0
        totals[period_id] = period_total
    return totals


def get_grand_total(financial_data: Mapping[str, Mapping[str, float]]) -> float:
    return sum(
        get_total_for_category(financial_data.get(key) or {})
        for key in get_all_category_keys(financial_data)
    )


class FinancialAggregationService:
    """Builds the per-period, per-category cost table.

    The four fixed legacy sources and the dynamic account-category dataset are
    fetched concurrently; a failing source degrades to zero-filled periods for
    that source only.
    """

    def __init__(self, repo: CostsRepo) -> None:
        self._repo = repo

    async def _get_fixed_category_data(
        self,
        category: str,
        periods: Sequence[Period],
        year: int,
        cost_center_id: CostCenterId,
    ) -> AmountByPeriod:
        records = await self._repo.fetch_fixed_category_records(category, year, cost_center_id)
        return bucket_amounts(records, periods)

    async def get_remuneraciones_data(self, periods: Sequence[Period], year: int, cost_center_id: CostCenterId = None) -> AmountByPeriod:
        return await self._get_fixed_category_data("remuneraciones", periods, year, cost_center_id)

    async def get_factoring_data(self, periods: Sequence[Period], year: int, cost_center_id: CostCenterId = None) -> AmountByPeriod:
        return await self._get_fixed_category_data("factoring", periods, year, cost_center_id)

    async def get_previsionales_data(self, periods: Sequence[Period], year: int, cost_center_id: CostCenterId = None) -> AmountByPeriod:
        return await self._get_fixed_category_data("previsionales", periods, year, cost_center_id)

    async def get_costos_fijos_data(self, periods: Sequence[Period], year: int, cost_center_id: CostCenterId = None) -> AmountByPeriod:
        return await self._get_fixed_category_data("costosFijos", periods, year, cost_center_id)

    async def get_account_categories_data(
        self,
        periods: Sequence[Period],
        year: int,
        cost_center_id: CostCenterId = None,
    ) -> FinancialDataByPeriod:
        items = await self._repo.fetch_account_category_items(year, cost_center_id)
        return bucket_category_amounts(items, periods)

    async def collect_sources(
        self,
        periods: Sequence[Period],
        year: int,
        cost_center_id: CostCenterId = None,
    ) -> Dict[str, SourceResult]:
        outcomes = await settle(
            OrderedDict(
                [
                    ("remuneraciones", self.get_remuneraciones_data(periods, year, cost_center_id)),
                    ("factoring", self.get_factoring_data(periods, year, cost_center_id)),
                    ("previsionales", self.get_previsionales_data(periods, year, cost_center_id)),
                    ("costosFijos", self.get_costos_fijos_data(periods, year, cost_center_id)),
                    (ACCOUNT_CATEGORIES_SOURCE, self.get_account_categories_data(periods, year, cost_center_id)),
                ]
            )
        )
        for outcome in outcomes.values():
            if not outcome.ok:
                logger.warning("Financial source %s failed, falling back to zero-filled periods: %s", outcome.source, outcome.error)
        return outcomes

    async def get_all_financial_data(
        self,
        periods: Sequence[Period],
        year: int,
        cost_center_id: CostCenterId = None,
    ) -> FinancialDataByPeriod:
        outcomes = await self.collect_sources(periods, year, cost_center_id)
        return merge_financial_sources(outcomes, periods)

    async def get_account_categories(self) -> List[CategoryDescriptor]:
        try:
            return await self._repo.fetch_account_categories()
        except Exception as exc:
            logger.warning("Account category catalogue unavailable; display names fall back to keys: %s", exc)
            return []

    async def get_financial_table(
        self,
        period_type: PeriodType,
        year: int,
        cost_center_id: CostCenterId = None,
    ) -> FinancialTableResponse:
        periods = generate_periods(period_type, year)
        outcomes, categories = await asyncio.gather(
            self.collect_sources(periods, year, cost_center_id),
            self.get_account_categories(),
        )
        data = merge_financial_sources(outcomes, periods)
        return FinancialTableResponse(
            periods=periods,
            category_keys=get_all_category_keys(data),
            fixed={key: data[key] for key in FIXED_CATEGORIES},
            categories=convert_to_financial_categories(data, categories),
            totals_by_period=get_combined_totals(data),
            grand_total=get_grand_total(data),
            degraded_sources=[name for name, outcome in outcomes.items() if not outcome.ok],
        )
