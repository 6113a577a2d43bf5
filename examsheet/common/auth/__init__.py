"""
Authentication

Bearer token verification and the caller identity consumed by the
evaluation access rules.
"""

from examsheet.common.auth.jwt import (
    create_access_token,
    validate_token,
    get_token_identity,
    JWTConfig,
    get_jwt_config,
    set_jwt_config,
)

from examsheet.common.auth.user import (
    UserRole,
    AuthenticatedUser,
)

from examsheet.common.auth.exceptions import (
    AuthError,
    InvalidTokenError,
    ExpiredTokenError,
    MissingTokenError,
)

from .dependencies import get_current_user

__all__ = [
    # JWT tokens
    'create_access_token',
    'validate_token',
    'get_token_identity',
    'JWTConfig',
    'get_jwt_config',
    'set_jwt_config',

    # Identity
    'UserRole',
    'AuthenticatedUser',

    # Exceptions
    'AuthError',
    'InvalidTokenError',
    'ExpiredTokenError',
    'MissingTokenError',

    'get_current_user',
]
