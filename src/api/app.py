"""
FastAPI application factory for the storefront backend
"""

import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from src.api import health_checks, order_routes, payment_routes, product_routes
from src.infrastructure.configuration.config import Settings, get_config
from src.infrastructure.container.dependency_injection import DependencyContainer
from src.infrastructure.utilities.constants import ErrorCodes
from src.infrastructure.utilities.exceptions import ErrorReporter, StorefrontError, ValidationError

logger = logging.getLogger(__name__)


def _describe_validation_errors(exc: RequestValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        parts.append(f"{location}: {error.get('msg')}" if location else str(error.get("msg")))
    return "; ".join(parts)


async def storefront_error_handler(request: Request, exc: StorefrontError) -> JSONResponse:
    if exc.status_code >= 500:
        ErrorReporter.report_critical_error(exc)
    else:
        ErrorReporter.report_business_error(exc, request.headers.get("X-User-Id"))
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    error = ValidationError("Invalid request body", details=_describe_validation_errors(exc))
    logger.info("Rejected malformed request to %s: %s", request.url.path, error.details)
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    ErrorReporter.report_critical_error(exc)
    return JSONResponse(
        status_code=500,
        content={
            "error": ErrorCodes.GENERIC_ERROR_MESSAGE,
            "details": "Internal server error",
            "code": ErrorCodes.GENERAL_ERROR,
        },
    )


def create_app(container: Optional[DependencyContainer] = None, config: Optional[Settings] = None) -> FastAPI:
    """Build the HTTP app; the container defaults to the global one, resolved on first request"""
    config = config or (container.config if container else get_config())

    app = FastAPI(title="Kingsman Storefront API")
    app.state.container = container

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(StorefrontError, storefront_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unexpected_error_handler)

    app.include_router(health_checks.router)
    app.include_router(product_routes.router)
    app.include_router(payment_routes.router)
    app.include_router(order_routes.router)
    return app
