"""FastAPI application factory"""

from contextlib import asynccontextmanager
from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from ptz_gateway.api.middleware import RequestIDMiddleware, MetricsMiddleware
from ptz_gateway.api.v1 import eligibility, export, submissions
from ptz_gateway.domain.tables import get_policy_tables
from ptz_gateway.infrastructure.database.models import Base
from ptz_gateway.infrastructure.database.session import engine
from ptz_gateway.infrastructure.observability.logging import setup_logging
from ptz_gateway.config import settings

# Setup structured logging
setup_logging(settings.log_level)


@asynccontextmanager
async def lifespan(app: FastAPI):
    Base.metadata.create_all(bind=engine)
    yield


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="PTZ Gateway",
        description="Zero-interest home loan eligibility simulation and submission service",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # Regulatory tables are resolved once and shared by every request
    app.state.policy = get_policy_tables(settings.policy_version)

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # Health check endpoint
    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name, "policy": app.state.policy.version}

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # Register API routers (export before submissions keeps /submissions/export unambiguous)
    app.include_router(eligibility.router, prefix="/v1", tags=["eligibility"])
    app.include_router(export.router, prefix="/v1", tags=["export"])
    app.include_router(submissions.router, prefix="/v1", tags=["submissions"])

    return app


app = create_app()
