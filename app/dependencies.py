"""
Dependency injection for FastAPI routes.
Provides reusable dependencies for authentication, database sessions, etc.
"""
from typing import Optional

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.push_gateway import PushGatewayClient
from app.core.security import decode_token, extract_token_from_header, verify_webhook_secret
from app.models.profile import Profile
from app.repositories.profile_repo import ProfileRepository


async def get_current_user(
    authorization: Optional[str] = Header(None),
    db: AsyncSession = Depends(get_db)
) -> Profile:
    """
    Dependency to get the current authenticated user's profile.

    Decodes the bearer JWT locally and loads the profile named by its
    ``sub`` claim.

    Args:
        authorization: Authorization header containing Bearer token
        db: Database session

    Returns:
        The caller's Profile

    Raises:
        HTTPException: 401 if the token is missing or invalid, 404 if the
            profile does not exist yet

    Example:
        ```python
        @router.get("/protected")
        async def protected_route(current_user: Profile = Depends(get_current_user)):
            return {"id": current_user.id}
        ```
    """
    if not authorization:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing authorization header",
            headers={"WWW-Authenticate": "Bearer"},
        )

    token = extract_token_from_header(authorization)
    payload = decode_token(token)

    profile = await ProfileRepository(db).get(payload["sub"])
    if profile is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Profile not found"
        )

    return profile


async def require_webhook_secret(
    x_webhook_secret: Optional[str] = Header(None)
) -> None:
    """
    Dependency guarding the database webhook endpoints.

    Raises:
        HTTPException: 401 if a secret is configured and does not match
    """
    if not verify_webhook_secret(x_webhook_secret):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid webhook secret"
        )


def get_push_gateway() -> PushGatewayClient:
    """Push gateway client for one fan-out invocation (overridden in tests)."""
    return PushGatewayClient()
