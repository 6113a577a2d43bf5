"""
Error Handling for the exam sheet service

This module turns the service's exception kinds into structured error
responses:
1. ``ErrorCode`` - the machine-readable error kinds exposed to clients
2. ``ErrorInfo`` - structured description of an error, used for logging
3. ``error_code_for`` / ``status_code_for`` - the exception-to-HTTP mapping
4. ``error_response`` - the JSON body returned at the API boundary
"""

import logging
from enum import Enum
from datetime import datetime
from typing import Any, Dict, Optional, Type

from fastapi import status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from examsheet.common.exceptions import (
    BaseError,
    ConflictError,
    DatabaseError,
    ForbiddenError,
    InvalidArgumentError,
    NotFoundError,
)
from examsheet.common.auth.exceptions import AuthError

logger = logging.getLogger(__name__)


class ErrorCode(Enum):
    """Error kinds returned to API clients"""
    INVALID_ARGUMENT = "invalid_argument"
    NOT_FOUND = "not_found"
    FORBIDDEN = "forbidden"
    CONFLICT = "conflict"
    UNAUTHENTICATED = "unauthenticated"
    INTERNAL_ERROR = "internal_error"


class ErrorInfo(BaseModel):
    """Structured information about an error"""
    code: ErrorCode
    message: str
    status_code: int
    timestamp: datetime = Field(default_factory=datetime.utcnow)
    exception_type: Optional[str] = None
    details: Optional[Any] = None

    class Config:
        use_enum_values = True


_ERROR_CODES: Dict[Type[BaseError], ErrorCode] = {
    InvalidArgumentError: ErrorCode.INVALID_ARGUMENT,
    NotFoundError: ErrorCode.NOT_FOUND,
    ForbiddenError: ErrorCode.FORBIDDEN,
    ConflictError: ErrorCode.CONFLICT,
    DatabaseError: ErrorCode.INTERNAL_ERROR,
}

_STATUS_CODES: Dict[ErrorCode, int] = {
    ErrorCode.INVALID_ARGUMENT: status.HTTP_400_BAD_REQUEST,
    ErrorCode.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.FORBIDDEN: status.HTTP_403_FORBIDDEN,
    ErrorCode.CONFLICT: status.HTTP_409_CONFLICT,
    ErrorCode.UNAUTHENTICATED: status.HTTP_401_UNAUTHORIZED,
    ErrorCode.INTERNAL_ERROR: status.HTTP_500_INTERNAL_SERVER_ERROR,
}

INTERNAL_ERROR_MESSAGE = "An unexpected error occurred. Please try again later."


def error_code_for(exc: Exception) -> ErrorCode:
    """Resolve the client-facing error kind for an exception."""
    if isinstance(exc, AuthError):
        return ErrorCode.UNAUTHENTICATED

    for exc_type in type(exc).__mro__:
        code = _ERROR_CODES.get(exc_type)
        if code is not None:
            return code

    return ErrorCode.INTERNAL_ERROR


def status_code_for(code: ErrorCode) -> int:
    """HTTP status for an error kind."""
    return _STATUS_CODES[code]


def to_error_info(exc: Exception, details: Optional[Any] = None) -> ErrorInfo:
    """
    Build the ``ErrorInfo`` for an exception.

    Internal errors never carry the original message; storage drivers put
    statement text and parameters there.
    """
    code = error_code_for(exc)
    if code == ErrorCode.INTERNAL_ERROR:
        message = INTERNAL_ERROR_MESSAGE
    else:
        message = getattr(exc, "message", None) or str(exc)

    return ErrorInfo(
        code=code,
        message=message,
        status_code=status_code_for(code),
        exception_type=type(exc).__name__,
        details=details,
    )


def error_response(info: ErrorInfo) -> JSONResponse:
    """Render an ``ErrorInfo`` as the standard error envelope."""
    content: Dict[str, Any] = {
        "status": "error",
        "code": info.code,
        "message": info.message,
    }
    if info.details:
        content["details"] = info.details

    return JSONResponse(status_code=info.status_code, content=content)


def log_error(info: ErrorInfo, exc: Exception, path: Optional[str] = None) -> None:
    """Log an error at a level that matches its kind."""
    where = f" on {path}" if path else ""
    if info.code == ErrorCode.INTERNAL_ERROR.value:
        logger.error(f"Unhandled {info.exception_type}{where}: {exc}", exc_info=exc)
    else:
        logger.info(f"Request rejected{where} ({info.code}): {info.message}")
