"""FastAPI application factory"""

import logging
import time
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from libs.result import Error
from src.api.error import ClientError
from src.api.routes import (
    admin_invoices,
    admin_orders,
    admin_products,
    cart,
    corporate_invoices,
    delivery,
    orders,
    products,
    shop,
    user_orders,
    webhooks,
)
from src.api.schemas.response import error_body
from src.app import errors

logger = logging.getLogger(__name__)

ROUTERS = (
    orders.router,
    user_orders.router,
    admin_orders.router,
    admin_invoices.router,
    admin_products.router,
    corporate_invoices.router,
    shop.router,
    products.router,
    cart.router,
    delivery.router,
    webhooks.router,
)


def create_app(config) -> FastAPI:
    logging.basicConfig(
        level=config.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    include_details = config.ENVIRONMENT == "development"

    app = FastAPI(
        title="Bella Fleurs API",
        description="Storefront backend: orders, corporate invoicing, shop settings",
        version="1.0.0",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_credentials=config.CORS_ALLOW_CREDENTIALS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    if config.ENABLE_LOGGING_MIDDLEWARE:
        @app.middleware("http")
        async def log_requests(request: Request, call_next):
            started = time.perf_counter()
            response = await call_next(request)
            duration_ms = (time.perf_counter() - started) * 1000
            logger.info(
                f"{request.method} {request.url.path} -> {response.status_code} "
                f"({duration_ms:.1f} ms)"
            )
            return response

    @app.exception_handler(ClientError)
    async def client_error_handler(request: Request, exc: ClientError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error(f"{exc.error.code} on {request.url.path}: {exc.error.reason or exc.error.message}")
        return JSONResponse(
            status_code=exc.status_code,
            content=error_body(exc.error, include_details),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        error = Error(
            code=errors.VALIDATION_ERROR,
            message="Invalid request parameters",
            reason=str(exc.errors()),
        )
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content=error_body(error, include_details),
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        error = Error(code="INTERNAL_ERROR", message="Internal server error", reason=str(exc))
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=error_body(error, include_details),
        )

    for router in ROUTERS:
        app.include_router(router, prefix=config.API_PREFIX)

    @app.get("/health", tags=["Health"])
    async def health():
        return {"status": "ok"}

    return app
