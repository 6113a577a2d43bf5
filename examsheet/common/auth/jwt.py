"""
JWT Verification Module

Bearer tokens are issued by the account service. This module verifies them
and turns their claims into an ``AuthenticatedUser``. ``create_access_token``
produces tokens with the same claim layout and is used by tooling and tests.
"""

import datetime
from dataclasses import dataclass
from typing import Any, Dict, Optional

# Using PyJWT for JWT operations
import jwt

from examsheet.config import settings
from examsheet.common.auth.exceptions import (
    InvalidTokenError,
    ExpiredTokenError
)
from examsheet.common.auth.user import AuthenticatedUser, UserRole

ROLE_CLAIM = "role"
SCHOOL_CLAIM = "schoolId"


@dataclass
class JWTConfig:
    """
    Configuration for JWT verification.

    Attributes:
        secret_key: Secret key used for signing tokens
        algorithm: Algorithm used for signing tokens
        access_token_expires: Lifetime of tokens minted by create_access_token, in minutes
        token_issuer: Expected issuer of the tokens
    """
    secret_key: str
    algorithm: str = "HS256"
    access_token_expires: int = 60
    token_issuer: str = "driving-school-api"


_jwt_config = JWTConfig(
    secret_key=settings.JWT_SECRET_KEY,
    algorithm=settings.JWT_ALGORITHM,
    token_issuer=settings.JWT_ISSUER,
)


def set_jwt_config(config: JWTConfig) -> None:
    """Replace the global JWT configuration."""
    global _jwt_config
    _jwt_config = config


def get_jwt_config() -> JWTConfig:
    """Get the current JWT configuration."""
    return _jwt_config


def create_access_token(
    subject: str,
    role: Optional[str] = None,
    school_id: Optional[int] = None,
    expires_in: Optional[int] = None
) -> str:
    """
    Create a signed access token carrying the identity claims.

    Args:
        subject: User ID
        role: Role claim (e.g. "Instructor")
        school_id: School claim, omitted when None
        expires_in: Lifetime in minutes (overrides config); may be negative

    Returns:
        The encoded token
    """
    config = get_jwt_config()

    now = datetime.datetime.utcnow()
    lifetime = expires_in if expires_in is not None else config.access_token_expires

    payload: Dict[str, Any] = {
        "sub": str(subject),
        "iat": now,
        "exp": now + datetime.timedelta(minutes=lifetime),
        "iss": config.token_issuer,
    }
    if role is not None:
        payload[ROLE_CLAIM] = role
    if school_id is not None:
        payload[SCHOOL_CLAIM] = str(school_id)

    return jwt.encode(payload, config.secret_key, algorithm=config.algorithm)


def validate_token(token: str) -> Dict[str, Any]:
    """
    Verify a token's signature, expiry and issuer and return its payload.

    Raises:
        InvalidTokenError: If the token is malformed, forged or from another issuer
        ExpiredTokenError: If the token has expired
    """
    config = get_jwt_config()

    try:
        return jwt.decode(
            token,
            config.secret_key,
            algorithms=[config.algorithm],
            issuer=config.token_issuer,
            options={"require": ["exp", "sub"]}
        )
    except jwt.ExpiredSignatureError:
        raise ExpiredTokenError("Token has expired")
    except jwt.PyJWTError as e:
        raise InvalidTokenError(f"Invalid token: {str(e)}")


def get_token_identity(token: str) -> AuthenticatedUser:
    """
    Verify a token and build the caller identity from its claims.

    Raises:
        InvalidTokenError: If the token is invalid or its school claim is not numeric
        ExpiredTokenError: If the token has expired
    """
    payload = validate_token(token)

    subject = payload.get("sub")
    if not subject:
        raise InvalidTokenError("Token does not contain a subject claim")

    school_id = payload.get(SCHOOL_CLAIM)
    if school_id is not None:
        try:
            school_id = int(school_id)
        except (TypeError, ValueError):
            raise InvalidTokenError("Token school claim is not a valid identifier")

    return AuthenticatedUser(
        user_id=str(subject),
        role=UserRole.parse(payload.get(ROLE_CLAIM)),
        school_id=school_id,
    )
