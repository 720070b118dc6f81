from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from saer.config import settings
from saer.deps import get_http_client
from saer.main import app

from .stubs import dashboard_routes, envelope

client = TestClient(app)


@pytest.fixture
def upstream(remote):
    """Point the app's shared HTTP client at an in-memory remote service."""

    def install(routes):
        stub = remote(routes)

        async def http_override():
            async with stub.http_client() as http:
                yield http

        app.dependency_overrides[get_http_client] = http_override
        return stub

    yield install
    app.dependency_overrides.clear()


def test_health():
    response = client.get("/api/health")
    assert response.status_code == 200
    assert response.json() == {"ok": True}


def test_financial_table_endpoint(upstream):
    upstream(
        {
            "/remuneraciones": envelope([{"date": "2024-05-10", "amount": 120}]),
            "/factoring": 500,
            "/previsionales": envelope([]),
            "/fixed-costs": envelope([]),
            "/account-categories/items": envelope(
                [{"category_name": "Cemento y Áridos", "category_type": "materiales", "date": "2024-02-01", "amount": 30}]
            ),
            "/account-categories": envelope([{"id": 7, "name": "Cemento y Áridos", "type": "materiales"}]),
        }
    )

    response = client.get("/api/financial-table", params={"year": 2024, "periodType": "quarterly"})

    assert response.status_code == 200
    payload = response.json()
    assert [period["id"] for period in payload["periods"]] == ["quarter-1", "quarter-2", "quarter-3", "quarter-4"]
    assert payload["periods"][0]["startDate"] == "2024-01-01"
    assert payload["categoryKeys"][-1] == "materiales_cementoyaridos"
    assert payload["fixed"]["remuneraciones"]["quarter-2"] == 120
    assert payload["categories"] == [
        {"category": "Cemento y Áridos", "amounts": {"quarter-1": 30, "quarter-2": 0, "quarter-3": 0, "quarter-4": 0}, "path": "/costos/materiales"}
    ]
    assert payload["totalsByPeriod"]["quarter-1"] == 30
    assert payload["grandTotal"] == 150
    assert payload["degradedSources"] == ["factoring"]


def test_financial_table_requires_a_year(upstream):
    upstream({})
    assert client.get("/api/financial-table").status_code == 422
    assert client.get("/api/financial-table", params={"year": 2024, "periodType": "daily"}).status_code == 422


def test_kpis_forward_caller_token(upstream):
    stub = upstream(dashboard_routes())

    response = client.get(
        "/api/dashboard/kpis",
        params={"dateFrom": "2024-01-01", "costCenterId": "all"},
        headers={"Authorization": "Bearer user-token"},
    )

    assert response.status_code == 200
    assert response.json()["netCashFlow"] == 300
    assert {request.headers["Authorization"] for request in stub.requests} == {"Bearer user-token"}
    assert stub.params_for("/incomes/dashboard/summary") == {"date_from": "2024-01-01"}


def test_consolidated_failure_maps_to_bad_gateway(upstream):
    routes = dashboard_routes()
    routes["/expenses/dashboard/cash-flow"] = 503
    upstream(routes)

    response = client.get("/api/dashboard/consolidated")

    assert response.status_code == 502
    assert response.json() == {
        "detail": "Upstream data service failure",
        "source": "/expenses/dashboard/cash-flow",
        "upstream_status": 503,
    }


def test_overview_payload_shape(upstream):
    upstream(dashboard_routes())

    response = client.get("/api/dashboard/overview", params={"limit": 3})

    assert response.status_code == 200
    payload = response.json()
    assert payload["data"]["income"]["byType"][0]["type_name"] == "Estado de Pago"
    assert payload["kpis"]["profitMargin"] == 25.0
    assert payload["metrics"]["costCentersCount"] == 2
    assert payload["topTransactions"]["expense"][0]["name"] == "Hormigón"


def test_top_transactions_limit_is_bounded(upstream):
    upstream(dashboard_routes())
    assert client.get("/api/dashboard/top-transactions", params={"limit": 0}).status_code == 422
    assert client.get("/api/dashboard/top-transactions", params={"limit": 51}).status_code == 422


def test_costs_by_period_endpoint(upstream):
    stub = upstream(
        {"/costs/by-period": envelope([{"category_name": "Materiales", "period_key": "2024-01", "total_amount": 10}])}
    )

    response = client.get("/api/costs/by-period", params={"year": "2024", "periodType": "monthly", "categoryId": "3"})

    assert response.status_code == 200
    assert response.json() == [{"category": "Materiales", "path": "/costs/category/Materiales", "amounts": {"2024-01": 10.0}}]
    assert stub.params_for("/costs/by-period") == {"period_type": "monthly", "year": "2024", "category_id": "3"}


def test_explore_year_must_have_four_digits(upstream):
    upstream({})
    assert client.get("/api/costs/explore", params={"year": "24"}).status_code == 422


def test_incomes_filter_options_endpoint(upstream):
    upstream(
        {
            "/ingresos/dimensions": envelope(
                {"cost_centers": [{"id": 4, "code": "ON", "name": "Obra Norte"}], "clients": [], "statuses": []}
            )
        }
    )

    response = client.get("/api/incomes/filter-options")

    assert response.status_code == 200
    assert response.json()["costCenters"] == [{"value": "4", "label": "ON - Obra Norte"}]


def test_dashboard_cache_reuses_snapshot(upstream, monkeypatch):
    monkeypatch.setattr(settings, "feature_dashboard_cache", True)
    stub = upstream(dashboard_routes())

    with TestClient(app) as cached_client:
        first = cached_client.get("/api/dashboard/consolidated", headers={"Authorization": "Bearer a"})
        second = cached_client.get("/api/dashboard/consolidated", headers={"Authorization": "Bearer a"})
        other_user = cached_client.get("/api/dashboard/consolidated", headers={"Authorization": "Bearer b"})

    assert first.status_code == second.status_code == other_user.status_code == 200
    assert first.json() == second.json()
    summary_calls = [path for path in stub.paths() if path.endswith("/incomes/dashboard/summary")]
    assert len(summary_calls) == 2
