from __future__ import annotations

import logging
from time import perf_counter
from typing import Any, AsyncGenerator, Awaitable, Callable, Dict, Mapping, Optional

import httpx

from .config import Settings
from .errors import DomainFailure, TransportFailure

logger = logging.getLogger(__name__)

TokenGetter = Callable[[], Awaitable[Optional[str]]]

# Sentinel used by the dashboard filters to mean "no filter".
ALL_SENTINEL = "all"


def build_http_client(settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None) -> httpx.AsyncClient:
    return httpx.AsyncClient(
        base_url=settings.api_base_url,
        timeout=settings.api_timeout_seconds,
        headers={"Content-Type": "application/json"},
        transport=transport,
    )


def clean_params(params: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    cleaned: Dict[str, Any] = {}
    for key, value in (params or {}).items():
        if value is None or value == "":
            continue
        if isinstance(value, str) and value.strip().lower() == ALL_SENTINEL:
            continue
        if isinstance(value, bool):
            cleaned[key] = "true" if value else "false"
            continue
        cleaned[key] = value
    return cleaned


def unwrap_envelope(payload: Any, source: str) -> Any:
    if isinstance(payload, dict) and "success" in payload and not payload.get("success"):
        detail = payload.get("message") or payload.get("error") or "remote service reported failure"
        raise DomainFailure(source, str(detail))
    if isinstance(payload, dict) and "data" in payload:
        return payload["data"]
    return payload


class BearerTokenAuth(httpx.Auth):
    def __init__(self, token_getter: TokenGetter) -> None:
        self._token_getter = token_getter

    async def async_auth_flow(self, request: httpx.Request) -> AsyncGenerator[httpx.Request, httpx.Response]:
        token: Optional[str] = None
        try:
            token = await self._token_getter()
        except Exception:
            logger.warning("Token getter failed; sending %s unauthenticated", request.url.path, exc_info=True)
        if token:
            request.headers["Authorization"] = f"Bearer {token}"
        else:
            logger.warning("No session token available for %s", request.url.path)
        yield request


class ApiClient:
    """Thin wrapper over a shared ``httpx.AsyncClient`` with per-caller credentials."""

    def __init__(self, http: httpx.AsyncClient, token_getter: Optional[TokenGetter] = None) -> None:
        self._http = http
        self._auth = BearerTokenAuth(token_getter) if token_getter else None

    async def get(self, path: str, params: Optional[Mapping[str, Any]] = None) -> Any:
        query = clean_params(params)
        if "cost_center_id" in query:
            logger.debug("Filtering %s by cost center %s", path, query["cost_center_id"])
        start = perf_counter()
        try:
            if self._auth is not None:
                response = await self._http.get(path, params=query, auth=self._auth)
            else:
                response = await self._http.get(path, params=query)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            status_code = exc.response.status_code
            if status_code == 401:
                logger.warning("Remote service rejected credentials for %s; session may have expired", path)
            else:
                logger.warning("Remote request %s failed with status %s", path, status_code)
            raise TransportFailure(path, f"HTTP {status_code}", status_code=status_code) from exc
        except httpx.HTTPError as exc:
            logger.warning("Remote request %s failed: %s", path, exc)
            raise TransportFailure(path, str(exc) or exc.__class__.__name__) from exc

        elapsed = (perf_counter() - start) * 1000
        logger.debug("GET %s params=%s status=%s elapsed_ms=%.2f", path, query, response.status_code, elapsed)
        try:
            return response.json()
        except ValueError as exc:
            raise TransportFailure(path, "response body is not valid JSON", status_code=response.status_code) from exc

    async def get_data(self, path: str, params: Optional[Mapping[str, Any]] = None) -> Any:
        payload = await self.get(path, params)
        return unwrap_envelope(payload, path)
