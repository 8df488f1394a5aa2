"""FastAPI application factory"""

import logging
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from treasury_gateway.api.dependencies import get_request_id
from treasury_gateway.api.middleware import RequestIDMiddleware, MetricsMiddleware
from treasury_gateway.api.v1.schemas import ErrorResponse
from treasury_gateway.api.v1 import (
    accounts,
    customers,
    reports,
    tax_filings,
    tax_payments,
    tax_rates,
    taxpayers,
    transactions,
)
from treasury_gateway.domain.exceptions import (
    ALREADY_EXISTS,
    CONFLICT,
    INSUFFICIENT_RESOURCE,
    INVALID_INPUT,
    INVALID_STATE,
    NOT_FOUND,
    DomainException,
)
from treasury_gateway.infrastructure.observability.logging import setup_logging
from treasury_gateway.config import settings

# Setup structured logging
setup_logging(settings.log_level)

STATUS_BY_KIND = {
    NOT_FOUND: 404,
    ALREADY_EXISTS: 409,
    CONFLICT: 409,
    INVALID_STATE: 409,
    INSUFFICIENT_RESOURCE: 422,
    INVALID_INPUT: 400,
}


async def domain_exception_handler(request: Request, exc: DomainException) -> JSONResponse:
    """Translate a domain error into an HTTP response by its kind"""
    status_code = STATUS_BY_KIND.get(exc.kind, 400)
    logging.warning(
        f"Request rejected: {exc}",
        extra={"request_id": get_request_id(request), "kind": exc.kind, "path": request.url.path},
    )
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=type(exc).__name__, kind=exc.kind, detail=str(exc)).model_dump(),
    )


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="Treasury Gateway",
        description="Banking money movement and tax lifecycle service",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    app.add_exception_handler(DomainException, domain_exception_handler)

    # Health check endpoint
    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # Register API routers
    app.include_router(customers.router, prefix="/v1", tags=["customers"])
    app.include_router(accounts.router, prefix="/v1", tags=["accounts"])
    app.include_router(transactions.router, prefix="/v1", tags=["transactions"])
    app.include_router(taxpayers.router, prefix="/v1", tags=["taxpayers"])
    app.include_router(tax_rates.router, prefix="/v1", tags=["tax-rates"])
    app.include_router(tax_filings.router, prefix="/v1", tags=["tax-filings"])
    app.include_router(tax_payments.router, prefix="/v1", tags=["tax-payments"])
    app.include_router(reports.router, prefix="/v1", tags=["reports"])

    return app


app = create_app()
