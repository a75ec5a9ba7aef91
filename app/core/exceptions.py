"""
Domain exceptions for the social graph and messaging services.

Services raise these instead of HTTP errors; the API layer turns them
into JSON responses (see install_exception_handlers). Each exception
carries a machine-readable ``reason`` next to the human ``detail`` so
clients can tell, for example, a blocked send apart from any other
permission failure.
"""
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse


class SocialError(Exception):
    """Base class for social feature errors."""

    status_code: int = status.HTTP_400_BAD_REQUEST
    reason: str = "error"

    def __init__(self, detail: str | None = None, reason: str | None = None) -> None:
        self.detail = detail or self.reason
        if reason:
            self.reason = reason
        super().__init__(self.detail)


class ValidationFailed(SocialError):
    """Input is well-formed but not acceptable (empty message, self request)."""
    status_code = status.HTTP_400_BAD_REQUEST
    reason = "invalid"


class ConflictError(SocialError):
    """
    Entity already exists.

    Services resolve conflicts by returning the existing row; this only
    escapes when the existing row cannot be re-read.
    """
    status_code = status.HTTP_409_CONFLICT
    reason = "conflict"


class PermissionDenied(SocialError):
    """Caller is not allowed to perform the action."""
    status_code = status.HTTP_403_FORBIDDEN
    reason = "forbidden"


class BlockedError(PermissionDenied):
    """A block exists between the two users; retrying will not help."""
    reason = "blocked"


class NotFoundError(SocialError):
    """Target friendship, conversation or block does not exist."""
    status_code = status.HTTP_404_NOT_FOUND
    reason = "not_found"


def install_exception_handlers(app: FastAPI) -> None:
    """Register JSON error responses for domain exceptions."""

    @app.exception_handler(SocialError)
    async def social_error_handler(request: Request, exc: SocialError):
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.detail, "reason": exc.reason},
        )
