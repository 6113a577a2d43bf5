"""
Request Logging Middleware

Logs one line per API request with its outcome and duration.
"""

import time
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from examsheet.common.logger import app_logger

# Setup module logger
logger = app_logger.getChild("middleware.requests")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware that logs method, path, status and duration of each request."""

    def __init__(self, app, path_prefix: str = "/api"):
        super().__init__(app)
        self.path_prefix = path_prefix

    async def dispatch(self, request: Request, call_next):
        """
        Process the request and log its outcome.

        Args:
            request: The incoming request
            call_next: The next middleware/route handler

        Returns:
            The response from the next handler
        """
        path = request.url.path
        if not path.startswith(self.path_prefix):
            return await call_next(request)

        start_time = time.time()
        client_ip = request.client.host if request.client else "unknown"

        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                f"REQUEST: method={request.method}, path={path}, failed after "
                f"{time.time() - start_time:.3f}s, ip={client_ip}: {type(e).__name__}"
            )
            raise

        logger.info(
            f"REQUEST: method={request.method}, path={path}, status={response.status_code}, "
            f"duration={time.time() - start_time:.3f}s, ip={client_ip}"
        )
        return response
