"""
Security utilities for authentication.
Access tokens are JWTs issued by the auth provider; ``sub`` is the
caller's profile ID.
"""
import hmac
from datetime import timedelta
from typing import Optional, Dict, Any

import jwt
from fastapi import HTTPException, status

from app.config import settings
from app.utils.datetime_utils import utc_now


class SecurityException(HTTPException):
    """Custom exception for security-related errors."""
    def __init__(self, detail: str):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        )


def create_access_token(
    subject: str,
    expires_delta: Optional[timedelta] = None,
    extra_claims: Optional[Dict[str, Any]] = None
) -> str:
    """
    Create JWT access token.

    Used by tests and local tooling; production tokens come from the
    auth provider with the same claims.

    Args:
        subject: Profile ID placed in ``sub``
        expires_delta: Optional expiration time delta
        extra_claims: Additional claims to include

    Returns:
        Encoded JWT token

    Example:
        ```python
        token = create_access_token(profile.id, expires_delta=timedelta(hours=1))
        ```
    """
    now = utc_now()
    expire = now + (expires_delta or timedelta(hours=settings.jwt_expiration_hours))

    to_encode: Dict[str, Any] = dict(extra_claims or {})
    to_encode.update({"sub": subject, "exp": expire, "iat": now})
    if settings.jwt_audience:
        to_encode["aud"] = settings.jwt_audience

    return jwt.encode(to_encode, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_token(token: str) -> Dict[str, Any]:
    """
    Decode and validate JWT token.

    Args:
        token: JWT token string

    Returns:
        Decoded token payload

    Raises:
        SecurityException: If token is invalid, expired or has no subject
    """
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            audience=settings.jwt_audience or None,
            options={"verify_aud": bool(settings.jwt_audience)},
        )
    except jwt.ExpiredSignatureError:
        raise SecurityException("Token has expired")
    except jwt.InvalidTokenError:
        raise SecurityException("Invalid token")

    if not payload.get("sub"):
        raise SecurityException("Token has no subject")

    return payload


def extract_token_from_header(authorization: str) -> str:
    """
    Extract JWT token from Authorization header.

    Args:
        authorization: Authorization header value (e.g., "Bearer <token>")

    Returns:
        Extracted token

    Raises:
        SecurityException: If header format is invalid
    """
    if not authorization:
        raise SecurityException("Missing authorization header")

    parts = authorization.split()

    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise SecurityException("Invalid authorization header format")

    return parts[1]


def verify_webhook_secret(provided: Optional[str]) -> bool:
    """
    Check the shared secret sent by the database webhook.

    Always true when no webhook_secret is configured.
    """
    if not settings.webhook_secret:
        return True
    if not provided:
        return False
    return hmac.compare_digest(provided.encode(), settings.webhook_secret.encode())
