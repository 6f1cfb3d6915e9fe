"""Shared API dependencies for authentication and common functionality."""

from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from rhinoblog.core.security import decode_access_token
from rhinoblog.db.session import get_db
from rhinoblog.models import User
from rhinoblog.services.errors import (
    BlogError,
    GenerationError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from rhinoblog.services.generation import GenerationClient, get_generation_client
from rhinoblog.services.permissions import Permission, has_permission
from rhinoblog.services.scheduler import GenerationScheduler, get_generation_scheduler

# HTTP Bearer scheme for JWT authentication; missing credentials are handled below
bearer_scheme = HTTPBearer(auto_error=False)

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]
CredentialsDep = Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)]

_STATUS_BY_ERROR: tuple[tuple[type[BlogError], int], ...] = (
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (PermissionDeniedError, status.HTTP_403_FORBIDDEN),
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (GenerationError, status.HTTP_500_INTERNAL_SERVER_ERROR),
)


def http_error(err: BlogError) -> HTTPException:
    """Map a service-layer error onto the matching HTTP error."""
    for error_type, status_code in _STATUS_BY_ERROR:
        if isinstance(err, error_type):
            return HTTPException(status_code=status_code, detail=str(err))
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(err))


def _credentials_error(detail: str = "Could not validate credentials") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def _user_from_token(token: str, db: Session) -> User:
    payload = decode_access_token(token)
    if payload is None:
        raise _credentials_error()
    subject = payload.get("sub")
    if subject is None:
        raise _credentials_error()
    try:
        user_id = int(subject)
    except (TypeError, ValueError) as err:
        raise _credentials_error() from err

    user = db.get(User, user_id)
    if user is None:
        raise _credentials_error("User not found")
    return user


def get_current_user(credentials: CredentialsDep, db: SessionDep) -> User:
    """Get the current authenticated user from JWT token.

    Args:
        credentials: HTTP Bearer token credentials
        db: Database session

    Returns:
        User object for the authenticated user

    Raises:
        HTTPException: If the token is missing, invalid, or the user is gone
    """
    if credentials is None:
        raise _credentials_error("Not authenticated")
    return _user_from_token(credentials.credentials, db)


def get_optional_user(credentials: CredentialsDep, db: SessionDep) -> User | None:
    """Return the authenticated user when a valid token is sent, else None."""
    if credentials is None:
        return None
    payload = decode_access_token(credentials.credentials)
    if payload is None:
        return None
    try:
        return db.get(User, int(payload.get("sub", "")))
    except (TypeError, ValueError):
        return None


# Type alias for current user dependency
CurrentUserDep = Annotated[User, Depends(get_current_user)]
OptionalUserDep = Annotated[User | None, Depends(get_optional_user)]


def require_admin(current_user: CurrentUserDep) -> User:
    """Allow admins and superadmins only."""
    if not has_permission(current_user, Permission.MODERATE_CONTENT):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )
    return current_user


AdminUserDep = Annotated[User, Depends(require_admin)]


def get_generation_client_dep() -> GenerationClient:
    """Return the shared generation client."""
    return get_generation_client()


def get_scheduler_dep() -> GenerationScheduler:
    """Return the shared generation scheduler."""
    return get_generation_scheduler()


GenerationClientDep = Annotated[GenerationClient, Depends(get_generation_client_dep)]
SchedulerDep = Annotated[GenerationScheduler, Depends(get_scheduler_dep)]
