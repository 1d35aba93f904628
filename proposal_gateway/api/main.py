"""FastAPI application factory"""

from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from proposal_gateway.api.middleware import RequestIDMiddleware, MetricsMiddleware
from proposal_gateway.api.v1 import auth, documents, fees, proposals
from proposal_gateway.infrastructure.observability.logging import setup_logging
from proposal_gateway.config import settings

# Setup structured logging
setup_logging(settings.log_level)


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="Pricing Proposal Gateway",
        description="Payment processing fee proposals: saved drafts and printable documents",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # Health check endpoint
    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # Register API routers
    app.include_router(auth.router, prefix="/v1", tags=["auth"])
    app.include_router(proposals.router, prefix="/v1", tags=["proposals"])
    app.include_router(documents.router, prefix="/v1", tags=["documents"])
    app.include_router(fees.router, prefix="/v1", tags=["fees"])

    return app


app = create_app()
