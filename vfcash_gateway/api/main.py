"""FastAPI application factory"""

from typing import Optional

from fastapi import FastAPI
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from starlette.responses import Response

from vfcash_gateway.api.errors import register_error_handlers
from vfcash_gateway.api.middleware import MetricsMiddleware, RequestIDMiddleware
from vfcash_gateway.api.v1 import limits, transactions, usage
from vfcash_gateway.config import Settings, settings
from vfcash_gateway.infrastructure.observability.logging import setup_logging
from vfcash_gateway.infrastructure.storage.base import LimitsStore, TransactionStore
from vfcash_gateway.infrastructure.storage.factory import create_stores

# Setup structured logging
setup_logging(settings.log_level)


def create_app(
    transaction_store: Optional[TransactionStore] = None,
    limits_store: Optional[LimitsStore] = None,
    app_settings: Optional[Settings] = None,
) -> FastAPI:
    """
    Create and configure FastAPI application.

    Stores are created once here and shared by every request; pass them in to
    substitute a different backend.
    """
    app_settings = app_settings or settings

    app = FastAPI(
        title="VF-Cash Tracker Gateway",
        description="Mobile-money transaction ingestion and limits service",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    if transaction_store is None or limits_store is None:
        default_transactions, default_limits = create_stores(app_settings)
        transaction_store = transaction_store or default_transactions
        limits_store = limits_store or default_limits

    app.state.transaction_store = transaction_store
    app.state.limits_store = limits_store

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)
    register_error_handlers(app)

    def health_check():
        return {"status": "ok", "service": app_settings.service_name}

    # The companion app probes the prefixed path to test connectivity
    app.add_api_route("/health", health_check, methods=["GET"], tags=["health"])
    if app_settings.api_prefix:
        app.add_api_route(f"{app_settings.api_prefix}/health", health_check, methods=["GET"], tags=["health"])

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # Register API routers
    app.include_router(transactions.router, prefix=app_settings.api_prefix, tags=["transactions"])
    app.include_router(limits.router, prefix=app_settings.api_prefix, tags=["limits"])
    app.include_router(usage.router, prefix=app_settings.api_prefix, tags=["usage"])

    return app


app = create_app()
