import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware

from common.core.config import settings
from common.core.constants import Environment
from api.errors import register_exception_handlers
from api.v1.routes.router import api_router
from common.core.background import drain_detached_tasks
from common.db.session import dispose_engine
from common.providers.caching.factory import close_cache_provider
from packages.billing.services.price_catalog import get_price_catalog

# Initialize Axiom OpenTelemetry exporter (must be first)
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.asgi import OpenTelemetryMiddleware
from common.core.otel_axiom_exporter import (
    _initialize_telemetry,
    get_logger,
    shutdown_telemetry,
)  # noqa


_initialize_telemetry()
# Configure logging
logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)

# Get logger
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logger.info("Starting application...")
    # Refuses to start on an incomplete Stripe price configuration
    get_price_catalog()
    yield
    # Shutdown
    logger.info("Shutting down application...")
    await drain_detached_tasks()
    await dispose_engine()
    await close_cache_provider()
    shutdown_telemetry()


# Only expose OpenAPI docs in local development
is_local = settings.environment == Environment.LOCAL
docs_url = "/docs" if is_local else None
redoc_url = "/redoc" if is_local else None
openapi_url = "/openapi.json" if is_local else None

app = FastAPI(
    title=settings.app_name,
    version=settings.api_version,
    lifespan=lifespan,
    docs_url=docs_url,
    redoc_url=redoc_url,
    openapi_url=openapi_url,
)
register_exception_handlers(app)


# Instrument FastAPI with OpenTelemetry
FastAPIInstrumentor.instrument_app(app)
# Add ASGI middleware for context propagation
app.add_middleware(OpenTelemetryMiddleware)

# Add gzip compression middleware
app.add_middleware(GZipMiddleware, minimum_size=1000)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers (auth enforced via dependencies at router level)
app.include_router(api_router, prefix="/api/v1")


# Internal health endpoint for k8s probes - not under /api/v1 to avoid external spam
@app.get("/healthz", include_in_schema=False)
async def healthz():
    return {"status": "ok"}
