from __future__ import annotations

import asyncio

import pytest

from saer.errors import TransportFailure
from saer.models.dashboard import (
    ConsolidatedData,
    DashboardFilters,
    DashboardSummary,
    DimensionalView,
    OperationalMetrics,
    TopTransactions,
)
from saer.services.cache import CachedDashboardService, TTLCache


class FakeClock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


class CountingDashboard:
    """Stand-in for the uncached service that records each snapshot fetch."""

    def __init__(self, fail: bool = False) -> None:
        self.calls = []
        self.fail = fail

    async def fetch_all_data(self, filters=None):
        self.calls.append(filters)
        if self.fail:
            raise TransportFailure("/incomes/dashboard/summary", "HTTP 503", 503)
        income = DimensionalView(summary=DashboardSummary(total_amount=100 * len(self.calls)))
        expense = DimensionalView(summary=DashboardSummary(total_amount=40))
        return ConsolidatedData(income=income, expense=expense)

    async def get_operational_metrics(self, filters=None):
        return OperationalMetrics(cost_centers_count=2)

    async def get_top_transactions(self, limit=5, filters=None):
        return TopTransactions()


def test_ttl_cache_expires_entries():
    clock = FakeClock()
    cache = TTLCache(45, clock=clock)
    cache.set(("k",), "value")
    clock.now += 45
    assert cache.get(("k",)) == "value"
    clock.now += 1
    assert cache.get(("k",)) is None
    assert len(cache) == 0


def test_ttl_cache_clear():
    cache = TTLCache(10)
    cache.set("a", 1)
    cache.set("b", 2)
    cache.clear()
    assert len(cache) == 0
    assert cache.get("a") is None


def test_snapshot_is_memoised_per_filter_tuple():
    inner = CountingDashboard()
    service = CachedDashboardService(inner, TTLCache(45, clock=FakeClock()), scope="user-a")
    january = DashboardFilters(date_from="2024-01-01", date_to="2024-01-31")

    async def scenario():
        first = await service.fetch_all_data(january)
        second = await service.fetch_all_data(DashboardFilters(date_from="2024-01-01", date_to="2024-01-31"))
        other = await service.fetch_all_data(DashboardFilters(date_from="2024-02-01", date_to="2024-02-29"))
        return first, second, other

    first, second, other = asyncio.run(scenario())

    assert first is second
    assert other.income.summary.total_amount == 200
    assert len(inner.calls) == 2


def test_cost_center_ids_share_a_key_across_types():
    inner = CountingDashboard()
    service = CachedDashboardService(inner, TTLCache(45))

    async def scenario():
        await service.fetch_all_data(DashboardFilters(cost_center_id=7))
        await service.fetch_all_data(DashboardFilters(cost_center_id="7"))

    asyncio.run(scenario())
    assert len(inner.calls) == 1


def test_scopes_do_not_share_snapshots():
    inner = CountingDashboard()
    cache = TTLCache(45)
    alice = CachedDashboardService(inner, cache, scope="alice")
    bob = CachedDashboardService(inner, cache, scope="bob")

    async def scenario():
        await alice.fetch_all_data()
        await bob.fetch_all_data()
        await alice.fetch_all_data()

    asyncio.run(scenario())
    assert len(inner.calls) == 2
    assert len(cache) == 2


def test_failures_are_not_cached():
    inner = CountingDashboard(fail=True)
    cache = TTLCache(45)
    service = CachedDashboardService(inner, cache)

    for _ in range(2):
        with pytest.raises(TransportFailure):
            asyncio.run(service.fetch_all_data())

    assert len(inner.calls) == 2
    assert len(cache) == 0


def test_cached_overview_computes_kpis():
    service = CachedDashboardService(CountingDashboard(), TTLCache(45))

    overview = asyncio.run(service.get_overview())

    assert overview.kpis.net_cash_flow == 60
    assert overview.metrics.cost_centers_count == 2


def test_expired_scopes_are_purged_on_write():
    clock = FakeClock()
    cache = TTLCache(45, clock=clock)

    for scope in range(1000):
        cache.set(("consolidated", f"scope-{scope}"), scope)
        clock.now += 60

    assert len(cache) == 1


def test_live_entries_survive_purge():
    clock = FakeClock()
    cache = TTLCache(45, clock=clock)
    cache.set("old", 1)
    clock.now += 30
    cache.set("recent", 2)
    clock.now += 20
    cache.set("new", 3)

    assert len(cache) == 2
    assert cache.get("old") is None
    assert cache.get("recent") == 2
