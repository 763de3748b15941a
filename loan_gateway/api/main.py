"""FastAPI application factory"""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from loan_gateway.api.middleware import CorrelationIDMiddleware, MetricsMiddleware
from loan_gateway.api.v1 import assessment, emi, policy
from loan_gateway.domain.policy import PolicyDataset, load_policy_dataset
from loan_gateway.infrastructure.clients.policy import PolicyClient
from loan_gateway.infrastructure.observability.logging import setup_logging
from loan_gateway.config import settings

# Setup structured logging
setup_logging(settings.log_level)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Remote policy is fetched once; a failure aborts startup
    if app.state.policy is None:
        app.state.policy = await PolicyClient().fetch_dataset()
    yield


def create_app(dataset: Optional[PolicyDataset] = None) -> FastAPI:
    """
    Create and configure FastAPI application.

    The policy dataset is fixed for the lifetime of the app: an explicit
    dataset wins, then settings.policy_url (fetched at startup), then the
    settings.policy_path file (loaded here, so a bad file fails fast).
    """
    app = FastAPI(
        title="Loan Assessment Gateway",
        description="Policy-driven loan eligibility and risk assessment service",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    if dataset is None and not settings.policy_url:
        dataset = load_policy_dataset(settings.policy_path)
    app.state.policy = dataset

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(CorrelationIDMiddleware)

    # Health check endpoint
    @app.get("/health")
    def health_check(request: Request):
        loaded = request.app.state.policy
        return {
            "status": "ok" if loaded is not None else "starting",
            "service": settings.service_name,
            "policy_version": loaded.version if loaded is not None else None,
        }

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # Register API routers
    app.include_router(assessment.router, prefix="/v1", tags=["assessments"])
    app.include_router(emi.router, prefix="/v1", tags=["emi"])
    app.include_router(policy.router, prefix="/v1", tags=["policy"])

    return app


app = create_app()
