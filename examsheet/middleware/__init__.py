"""
Middleware Package

This package contains middleware components for the exam sheet service.
"""

from examsheet.middleware.request_logging import RequestLoggingMiddleware

__all__ = ['RequestLoggingMiddleware']
