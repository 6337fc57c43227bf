"""FastAPI application factory"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from crediario.api.dependencies import get_request_id
from crediario.api.middleware import RequestIDMiddleware, MetricsMiddleware
from crediario.api.v1 import installments, orders
from crediario.domain.exceptions import OrderNotFoundError, StoreAPIError
from crediario.infrastructure.observability.logging import setup_logging
from crediario.config import settings

# Setup structured logging
setup_logging(settings.log_level)


async def store_error_handler(request: Request, exc: StoreAPIError) -> JSONResponse:
    """Store failures are passed through as-is: 404 for a missing order, 502 otherwise"""
    request_id = get_request_id(request)
    if isinstance(exc, OrderNotFoundError):
        return JSONResponse(status_code=404, content={"detail": str(exc), "request_id": request_id})

    logging.error(f"Store API error: {exc}", extra={"request_id": request_id, "path": request.url.path})
    return JSONResponse(
        status_code=502,
        content={"detail": f"Order store unavailable: {exc}", "request_id": request_id},
    )


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="Crediario Gateway",
        description="Installment scheduling, payment reconciliation and collection ranking for credit-sale orders",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    app.add_exception_handler(StoreAPIError, store_error_handler)

    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name, "store": settings.store_api_base}

    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    app.include_router(installments.router, prefix="/v1", tags=["installments"])
    app.include_router(orders.router, prefix="/v1", tags=["orders"])

    return app


app = create_app()
