from __future__ import annotations

import asyncio
import logging
import time
from typing import Callable, Dict, Hashable, Optional, Tuple

from ..models.dashboard import (
    ConsolidatedData,
    DashboardFilters,
    DashboardOverview,
    FinancialKPIs,
    OperationalMetrics,
    TopTransactions,
)
from .consolidated_dashboard import DEFAULT_TOP_TRANSACTIONS, ConsolidatedDashboardService

logger = logging.getLogger(__name__)


class TTLCache:
    """Time-boxed memoisation keyed by filter tuples."""

    def __init__(self, ttl_seconds: float, clock: Callable[[], float] = time.time) -> None:
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: Dict[Hashable, Tuple[float, object]] = {}

    def get(self, key: Hashable) -> Optional[object]:
        entry = self._entries.get(key)
        if not entry:
            return None
        ts, payload = entry
        if self._clock() - ts > self.ttl_seconds:
            self._entries.pop(key, None)
            return None
        return payload

    def set(self, key: Hashable, payload: object) -> None:
        now = self._clock()
        self._purge_expired(now)
        self._entries[key] = (now, payload)

    def _purge_expired(self, now: float) -> None:
        # Entries older than the TTL are dropped on every write.
        expired = [key for key, (ts, _) in self._entries.items() if now - ts > self.ttl_seconds]
        for key in expired:
            del self._entries[key]

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)


class CachedDashboardService:
    """Wraps a ``ConsolidatedDashboardService`` and memoises the consolidated snapshot.

    Entries are partitioned by ``scope`` (the caller identity) so snapshots
    never leak between credentials. Failures propagate and are never cached.
    """

    def __init__(self, inner: ConsolidatedDashboardService, cache: TTLCache, scope: str = "") -> None:
        self._inner = inner
        self._cache = cache
        self._scope = scope

    async def fetch_all_data(self, filters: Optional[DashboardFilters] = None) -> ConsolidatedData:
        filters = filters or DashboardFilters()
        key = ("consolidated", self._scope, *filters.cache_key())
        cached = self._cache.get(key)
        if cached is not None:
            logger.debug("Consolidated snapshot served from cache for %s", key)
            return cached  # type: ignore[return-value]
        data = await self._inner.fetch_all_data(filters)
        self._cache.set(key, data)
        return data

    @staticmethod
    def calculate_kpis(data: ConsolidatedData) -> FinancialKPIs:
        return ConsolidatedDashboardService.calculate_kpis(data)

    async def get_operational_metrics(self, filters: Optional[DashboardFilters] = None) -> OperationalMetrics:
        return await self._inner.get_operational_metrics(filters)

    async def get_top_transactions(
        self,
        limit: int = DEFAULT_TOP_TRANSACTIONS,
        filters: Optional[DashboardFilters] = None,
    ) -> TopTransactions:
        return await self._inner.get_top_transactions(limit, filters)

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
