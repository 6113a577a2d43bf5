"""
Common Exception Classes

This module defines the error kinds raised by the evaluation services.
Every kind maps to exactly one machine-readable code at the HTTP boundary
(see ``examsheet.common.error_handling``).
"""

from typing import Optional, Any


class BaseError(Exception):
    """Base class for all custom exceptions."""

    def __init__(self, message: str, original_exception: Optional[Exception] = None):
        """
        Initialize the exception.

        Args:
            message: Human-readable error message
            original_exception: Original exception that caused this error
        """
        super().__init__(message)
        self.message = message
        self.original_exception = original_exception


class InvalidArgumentError(BaseError):
    """Raised for malformed identifiers, out-of-range paging or unknown template items."""

    def __init__(self, message: str, field: Optional[str] = None):
        """
        Initialize the invalid argument error.

        Args:
            message: Error message
            field: Name of the offending argument, if there is a single one
        """
        super().__init__(message)
        self.field = field


class NotFoundError(BaseError):
    """Raised when a lesson, evaluation, enrollment, template or student does not exist."""

    def __init__(self, resource_type: str, resource_id: Any):
        """
        Initialize the not found error.

        Args:
            resource_type: Type of resource that wasn't found
            resource_id: ID of the resource that wasn't found
        """
        super().__init__(f"{resource_type} with ID {resource_id} not found.")
        self.resource_type = resource_type
        self.resource_id = resource_id


class ForbiddenError(BaseError):
    """Raised when an authenticated caller lacks the required relationship."""

    def __init__(self, message: str, resource: Optional[str] = None, action: Optional[str] = None):
        """
        Initialize the forbidden error.

        Args:
            message: Error message
            resource: The resource that was being accessed
            action: The action that was being attempted
        """
        super().__init__(message)
        self.resource = resource
        self.action = action


class ConflictError(BaseError):
    """Raised when an evaluation already exists for the target lesson."""

    def __init__(self, resource_type: str, identifier: Any):
        """
        Initialize the conflict error.

        Args:
            resource_type: Type of resource that already exists
            identifier: The identifier that is already taken
        """
        super().__init__(f"{resource_type} already exists for {identifier}.")
        self.resource_type = resource_type
        self.identifier = identifier


class DatabaseError(BaseError):
    """Raised for unexpected storage failures."""

    def __init__(self, message: str, original_exception: Optional[Exception] = None):
        super().__init__(f"Database error: {message}", original_exception)
