"""Shared API dependencies for authentication and common functionality."""

from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError
from sqlalchemy.orm import Session

from tribuna.core import messages
from tribuna.core.security import decode_subject
from tribuna.db.session import get_db
from tribuna.models import User

# HTTP Bearer scheme for JWT authentication; missing headers are handled below as 401.
bearer_scheme = HTTPBearer(auto_error=False)

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]
CredentialsDep = Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)]


def _unauthorized() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=messages.UNAUTHORIZED,
        headers={"WWW-Authenticate": "Bearer"},
    )


def _resolve_user(credentials: HTTPAuthorizationCredentials, db: Session) -> User | None:
    try:
        subject = decode_subject(credentials.credentials)
    except JWTError:
        return None
    if subject is None or not subject.isdigit():
        return None
    return db.get(User, int(subject))


def get_current_user(credentials: CredentialsDep, db: SessionDep) -> User:
    """Get the current authenticated user from JWT token.

    Args:
        credentials: HTTP Bearer token credentials
        db: Database session

    Returns:
        User object for the authenticated user

    Raises:
        HTTPException: 401 if the token is missing, invalid, or names no user
    """
    if credentials is None:
        raise _unauthorized()
    user = _resolve_user(credentials, db)
    if user is None:
        raise _unauthorized()
    return user


def get_optional_user(credentials: CredentialsDep, db: SessionDep) -> User | None:
    """Return the authenticated user, or None for anonymous or invalid credentials."""
    if credentials is None:
        return None
    return _resolve_user(credentials, db)


def require_moderator(user: User) -> None:
    if not user.is_moderator:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=messages.FORBIDDEN)


# Type alias for current user dependency
CurrentUserDep = Annotated[User, Depends(get_current_user)]
OptionalUserDep = Annotated[User | None, Depends(get_optional_user)]
