"""
Common Components for the exam sheet service

This package contains the infrastructure shared by the feature modules:
1. Logging - Centralized logging configuration
2. Error Handling - Error kinds and their HTTP mapping
3. Authentication - Bearer token verification
4. Database settings - Connection URL resolution
"""

# Initialize logging
from examsheet.common.logger import app_logger

from examsheet.common.exceptions import (
    BaseError,
    ConflictError,
    DatabaseError,
    ForbiddenError,
    InvalidArgumentError,
    NotFoundError,
)

__all__ = [
    'app_logger',
    'BaseError',
    'ConflictError',
    'DatabaseError',
    'ForbiddenError',
    'InvalidArgumentError',
    'NotFoundError',
]
