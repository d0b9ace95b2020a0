"""FastAPI application factory"""

from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from finplan.api.middleware import RequestIDMiddleware, MetricsMiddleware
from finplan.api.v1 import allocation, analysis, planning
from finplan.infrastructure.observability.logging import setup_logging
from finplan.config import settings

setup_logging(settings.log_level)

API_PREFIX = "/v1"

# (router module, OpenAPI tag)
V1_ROUTERS = (
    (analysis, "analysis"),
    (allocation, "allocation"),
    (planning, "planning"),
)


def create_app() -> FastAPI:
    """
    Build the gateway: v1 planning routes plus /health and /metrics.

    Middleware runs RequestID first so the ID is set before metrics and
    route handlers see the request.
    """
    app = FastAPI(
        title="FinPlan Gateway",
        description="Transaction categorization and monthly budget allocation service",
        version="0.1.0",
    )

    # Last added = first executed
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    for module, tag in V1_ROUTERS:
        app.include_router(module.router, prefix=API_PREFIX, tags=[tag])

    return app


app = create_app()
