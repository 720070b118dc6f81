import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import ORJSONResponse

from .api_client import build_http_client
from .config import settings
from .errors import DashboardError, TransportFailure
from .routers import costs, dashboard, financial_table, incomes
from .services.cache import TTLCache

logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.http_client = build_http_client(settings)  # shared transport, timeout fixed here
    app.state.dashboard_cache = TTLCache(settings.dashboard_cache_ttl_seconds)
    logger.info("Remote data service at %s (timeout %ss)", settings.api_base_url, settings.api_timeout_seconds)
    try:
        yield
    finally:
        app.state.dashboard_cache.clear()
        await app.state.http_client.aclose()

app = FastAPI(
    title="SAER Finance Backend",
    version="0.1.0",
    default_response_class=ORJSONResponse,
    lifespan=lifespan,
)

# Allow any localhost/127.* origin for the dashboard dev servers
origins = ["*"]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_origin_regex=r".*",
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(DashboardError)
async def dashboard_error_handler(request: Request, exc: DashboardError):
    logger.warning("Upstream failure while serving %s: %s", request.url.path, exc)
    body = {"detail": "Upstream data service failure", "source": exc.source}
    if isinstance(exc, TransportFailure) and exc.status_code is not None:
        body["upstream_status"] = exc.status_code
    return ORJSONResponse(status_code=502, content=body)


app.include_router(dashboard.router)
app.include_router(financial_table.router)
app.include_router(costs.router)
app.include_router(incomes.router)

@app.get("/api/health")
def health():
    return {"ok": True}
