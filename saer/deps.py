from __future__ import annotations

import hashlib
from typing import Optional, Union

import httpx
from fastapi import Depends, Request

from .api_client import ApiClient
from .config import settings
from .repos.costs_repo import CostsRepo
from .repos.dashboard_repo import DashboardRepo
from .repos.incomes_repo import IncomesRepo
from .services.cache import CachedDashboardService
from .services.consolidated_dashboard import ConsolidatedDashboardService
from .services.costs import CostsService
from .services.financial_aggregation import FinancialAggregationService
from .services.incomes import IncomesService

DashboardService = Union[ConsolidatedDashboardService, CachedDashboardService]


def get_http_client(request: Request) -> httpx.AsyncClient:
    return request.app.state.http_client


def caller_token(request: Request) -> Optional[str]:
    authorization = request.headers.get("Authorization") or ""
    scheme, _, credential = authorization.partition(" ")
    if scheme.lower() == "bearer" and credential.strip():
        return credential.strip()
    return settings.api_service_token


def get_api_client(
    http: httpx.AsyncClient = Depends(get_http_client),
    token: Optional[str] = Depends(caller_token),
) -> ApiClient:
    async def token_getter() -> Optional[str]:
        return token

    return ApiClient(http, token_getter)


def get_dashboard_service(
    request: Request,
    client: ApiClient = Depends(get_api_client),
    token: Optional[str] = Depends(caller_token),
) -> DashboardService:
    service = ConsolidatedDashboardService(DashboardRepo(client))
    if not settings.feature_dashboard_cache:
        return service
    scope = hashlib.sha256((token or "").encode("utf-8")).hexdigest()
    return CachedDashboardService(service, request.app.state.dashboard_cache, scope=scope)


def get_financial_service(client: ApiClient = Depends(get_api_client)) -> FinancialAggregationService:
    return FinancialAggregationService(CostsRepo(client))


def get_costs_service(client: ApiClient = Depends(get_api_client)) -> CostsService:
    return CostsService(CostsRepo(client))


def get_incomes_service(client: ApiClient = Depends(get_api_client)) -> IncomesService:
    return IncomesService(IncomesRepo(client))
