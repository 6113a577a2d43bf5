"""
Authentication dependencies for the exam sheet API.

This module provides the FastAPI dependency resolving the caller identity
from the ``Authorization: Bearer <token>`` header.
"""

import logging
from typing import Optional

from fastapi import Header

from examsheet.common.auth.exceptions import InvalidTokenError, MissingTokenError
from examsheet.common.auth.jwt import get_token_identity
from examsheet.common.auth.user import AuthenticatedUser

logger = logging.getLogger(__name__)


async def get_current_user(authorization: Optional[str] = Header(None)) -> AuthenticatedUser:
    """
    Resolve the authenticated caller from the authorization header.

    Args:
        authorization: Authorization header value

    Returns:
        The caller identity

    Raises:
        MissingTokenError: If no header was sent
        InvalidTokenError: If the header is malformed or the token does not verify
        ExpiredTokenError: If the token has expired
    """
    if not authorization:
        raise MissingTokenError("Missing authorization header")

    try:
        scheme, token = authorization.split()
    except ValueError:
        raise InvalidTokenError("Invalid authorization header format")

    if scheme.lower() != "bearer":
        raise InvalidTokenError("Invalid authentication scheme")

    user = get_token_identity(token)
    logger.debug(f"Authenticated user {user.user_id} with role {user.role}")
    return user
