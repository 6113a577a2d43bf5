"""
Central API router and exception handlers for the exam sheet service.

This module provides:
- A central router that includes the feature routers under the version prefix
- Exception handlers rendering every failure as the standard error envelope
"""

from typing import Dict

from fastapi import APIRouter, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from examsheet.common.auth.exceptions import AuthError
from examsheet.common.error_handling import (
    ErrorCode,
    ErrorInfo,
    error_response,
    log_error,
    status_code_for,
    to_error_info,
)
from examsheet.common.exceptions import BaseError
from examsheet.common.logger import app_logger

logger = app_logger.getChild("api")

# Create main API router
main_router = APIRouter()

# Routers registered with the main router
registered_modules: Dict[str, APIRouter] = {}


def register_module(name: str, router: APIRouter) -> None:
    """
    Register a feature router with the main API router.

    Args:
        name: Name of the feature module
        router: FastAPI router for the module
    """
    if name in registered_modules:
        logger.warning(f"Module '{name}' already registered, skipping")
        return

    main_router.include_router(router)
    registered_modules[name] = router
    logger.info(f"Registered module: {name} with {len(router.routes)} routes")


async def service_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Handle service and authentication errors.

    Args:
        request: The incoming request
        exc: A ``BaseError`` or ``AuthError``

    Returns:
        A JSON response with the error kind and message
    """
    info = to_error_info(exc)
    log_error(info, exc, request.url.path)
    return error_response(info)


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """
    Handle request validation errors as invalid arguments.

    Args:
        request: The incoming request
        exc: The validation exception

    Returns:
        A 400 JSON response with per-field details
    """
    error_details = []
    for error in exc.errors():
        error_details.append({
            "location": error.get("loc", []),
            "message": error.get("msg", "Unknown validation error"),
            "type": error.get("type", "")
        })

    info = ErrorInfo(
        code=ErrorCode.INVALID_ARGUMENT,
        message="Request validation failed.",
        status_code=status_code_for(ErrorCode.INVALID_ARGUMENT),
        exception_type=type(exc).__name__,
        details=error_details,
    )
    log_error(info, exc, request.url.path)
    return error_response(info)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Log an unexpected exception and answer with a generic internal error."""
    info = to_error_info(exc)
    log_error(info, exc, request.url.path)
    return error_response(info)


def register_exception_handlers(app: FastAPI) -> None:
    """Install the error envelope handlers on an application."""
    app.add_exception_handler(BaseError, service_exception_handler)
    app.add_exception_handler(AuthError, service_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)


def _register_modules() -> None:
    from examsheet.evaluations.router import router as evaluations_router
    register_module("evaluations", evaluations_router)


_register_modules()
