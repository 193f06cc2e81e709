"""Per-request authentication and role checks (HTTP Basic or bearer JWT, no sessions)."""

import logging
from collections.abc import Callable
from typing import Annotated

import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import (
    HTTPAuthorizationCredentials,
    HTTPBasic,
    HTTPBasicCredentials,
    HTTPBearer,
)
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.security import decode_access_token, verify_password
from app.models import User
from app.schemas.auth import CurrentUser
from app.services.accounts import ADMIN_ROLE, get_user_by_username, role_names

logger = logging.getLogger(__name__)

basic_security = HTTPBasic(auto_error=False, realm="warden")
bearer_security = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": 'Basic realm="warden", Bearer'},
    )


def authenticate(db: Session, username: str, password: str) -> User | None:
    """Return the user if username/password match a stored account, else None."""
    user = get_user_by_username(db, username)
    if user is None or not verify_password(password, user.password_hash):
        return None
    return user


def _user_from_basic(db: Session, credentials: HTTPBasicCredentials) -> User:
    user = authenticate(db, credentials.username, credentials.password)
    if user is None:
        logger.info("Rejected basic credentials", extra={"username": credentials.username})
        raise _unauthorized("Invalid username or password")
    return user


def _user_from_bearer(db: Session, token: str) -> User:
    try:
        payload = decode_access_token(token)
    except jwt.PyJWTError:
        raise _unauthorized("Invalid or expired token")
    try:
        user_id = int(payload.get("sub"))
    except (TypeError, ValueError):
        raise _unauthorized("Invalid token payload")
    user = db.get(User, user_id)
    if user is None:
        raise _unauthorized("User not found")
    return user


def get_current_user(
    basic: Annotated[HTTPBasicCredentials | None, Depends(basic_security)],
    bearer: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_security)],
    db: Annotated[Session, Depends(get_db)],
) -> CurrentUser:
    """
    Dependency: authenticate the request from its own credentials.

    Accepts either HTTP Basic (checked against the stored bcrypt hash) or a
    bearer JWT from POST /login. Roles are read from the database on every
    request, so a promotion applies to the very next call. Raises 401 with a
    WWW-Authenticate challenge when credentials are missing or invalid.
    """
    if basic is not None:
        user = _user_from_basic(db, basic)
    elif bearer is not None:
        user = _user_from_bearer(db, bearer.credentials)
    else:
        raise _unauthorized("Not authenticated")
    return CurrentUser(id=user.id, username=user.username, roles=role_names(user))


def require_role(role_name: str) -> Callable[[CurrentUser], CurrentUser]:
    """Build a dependency that requires the authenticated principal to hold role_name (403 otherwise)."""

    def _require_role(
        current_user: Annotated[CurrentUser, Depends(get_current_user)],
    ) -> CurrentUser:
        if not current_user.has_role(role_name):
            logger.info(
                "Rejected principal without required role",
                extra={"user_id": current_user.id, "required_role": role_name},
            )
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"{role_name} role required",
            )
        return current_user

    return _require_role


require_admin = require_role(ADMIN_ROLE)
