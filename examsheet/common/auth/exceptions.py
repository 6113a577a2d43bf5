"""
Authentication Exceptions

This module defines exception classes for authentication failures at the
API boundary. Token issuance happens elsewhere; the service only verifies.
"""

class AuthError(Exception):
    """Base exception for authentication and authorization errors."""

    def __init__(self, message: str = "Authentication error", status_code: int = 401):
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)


class InvalidTokenError(AuthError):
    """Exception raised when a token is invalid."""

    def __init__(self, message: str = "Invalid token"):
        super().__init__(message, status_code=401)


class ExpiredTokenError(AuthError):
    """Exception raised when a token has expired."""

    def __init__(self, message: str = "Token has expired"):
        super().__init__(message, status_code=401)


class MissingTokenError(AuthError):
    """Exception raised when a required token is missing."""

    def __init__(self, message: str = "Authentication token is missing"):
        super().__init__(message, status_code=401)

