"""FastAPI application factory"""

from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from fx_gateway.api.errors import register_exception_handlers
from fx_gateway.api.middleware import RequestIDMiddleware, MetricsMiddleware
from fx_gateway.api.v1 import deals
from fx_gateway.infrastructure.observability.logging import setup_logging
from fx_gateway.config import settings

# Setup structured logging
setup_logging(settings.log_level)


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="FX Deals Gateway",
        description="Import, deduplicate and store FX deals, one at a time or in batches",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    # Health check endpoint
    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # Register API routers
    app.include_router(deals.router, prefix="/v1", tags=["deals"])

    return app


app = create_app()
