"""FastAPI application factory"""

from contextlib import asynccontextmanager
from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from quantum_rates.api.middleware import RequestIDMiddleware, MetricsMiddleware
from quantum_rates.api.v1 import history, simulation, tiers
from quantum_rates.infrastructure.database.models import Base
from quantum_rates.infrastructure.database.session import engine
from quantum_rates.infrastructure.observability.logging import setup_logging
from quantum_rates.config import settings

# Setup structured logging
setup_logging(settings.log_level)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Simulation history table
    Base.metadata.create_all(bind=engine)
    yield


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="Quantum Capital Investment Rates",
        description="Investment rate tier administration and simulation service",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
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
    app.include_router(tiers.router, prefix="/v1", tags=["tiers"])
    app.include_router(simulation.router, prefix="/v1", tags=["simulations"])
    app.include_router(history.router, prefix="/v1", tags=["history"])

    return app


app = create_app()
