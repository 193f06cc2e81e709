"""User account workflows: registration with the default role and promotion to admin."""

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.security import (
    PASSWORD_MAX_LEN,
    PASSWORD_MIN_LEN,
    USERNAME_MAX_LEN,
    USERNAME_MIN_LEN,
    hash_password,
)
from app.models import User
from app.services.roles import find_or_create_role

logger = logging.getLogger(__name__)

DEFAULT_ROLE = "USER"
ADMIN_ROLE = "ADMIN"
USER_ID_MAX = 2**31 - 1


class AccountServiceError(Exception):
    """Base class for account workflow errors that the API maps to client statuses."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class UserNotFoundError(AccountServiceError):
    """Raised when no user exists with the requested id."""

    def __init__(self, user_id: int) -> None:
        self.user_id = user_id
        super().__init__(f"User {user_id} not found.")


class UsernameTakenError(AccountServiceError):
    """Raised when registering a username that already exists."""

    def __init__(self, username: str) -> None:
        self.username = username
        super().__init__(f"Username '{username}' is already taken.")


class InvalidCredentialsFormatError(AccountServiceError):
    """Raised when a username or password is outside the allowed lengths."""


def _validate_credentials(username: str, plain_password: str) -> None:
    if not (USERNAME_MIN_LEN <= len(username) <= USERNAME_MAX_LEN):
        raise InvalidCredentialsFormatError("Invalid username length.")
    if not (PASSWORD_MIN_LEN <= len(plain_password) <= PASSWORD_MAX_LEN):
        raise InvalidCredentialsFormatError("Invalid password length.")


def get_user(session: Session, user_id: int) -> User:
    """Load a user by id or raise UserNotFoundError."""
    # users.id is a 32-bit Integer; larger ids cannot exist and overflow some drivers.
    if not (1 <= user_id <= USER_ID_MAX):
        raise UserNotFoundError(user_id)
    user = session.get(User, user_id)
    if user is None:
        raise UserNotFoundError(user_id)
    return user


def get_user_by_username(session: Session, username: str) -> User | None:
    return session.query(User).filter(User.username == username).first()


def list_users(session: Session) -> list[User]:
    return session.query(User).order_by(User.id).all()


def role_names(user: User) -> list[str]:
    """Role names of user, ordered by role id (creation order)."""
    return [role.name for role in sorted(user.roles, key=lambda r: r.id)]


def _commit(session: Session) -> None:
    try:
        session.commit()
    except Exception:
        session.rollback()
        raise


def register_user(session: Session, username: str, plain_password: str) -> User:
    """
    Create a user holding only the default USER role.

    The password is bcrypt-hashed before it reaches the model; the plaintext
    is never stored. Raises UsernameTakenError if the name exists (checked up
    front and again via the unique index at commit time).
    """
    username = username.strip()
    _validate_credentials(username, plain_password)

    if get_user_by_username(session, username) is not None:
        raise UsernameTakenError(username)

    user = User(username=username, password_hash=hash_password(plain_password))
    user.roles = {find_or_create_role(session, DEFAULT_ROLE)}
    session.add(user)
    try:
        _commit(session)
    except IntegrityError as e:
        if get_user_by_username(session, username) is not None:
            raise UsernameTakenError(username) from e
        raise
    session.refresh(user)

    logger.info("Registered user", extra={"user_id": user.id, "username": user.username})
    return user


def promote_to_admin(session: Session, user_id: int) -> User:
    """
    Add the ADMIN role to an existing user.

    Idempotent: promoting a user who already holds ADMIN leaves the role set
    unchanged. Raises UserNotFoundError for an unknown id.
    """
    user = get_user(session, user_id)
    admin_role = find_or_create_role(session, ADMIN_ROLE)

    already_admin = admin_role in user.roles
    user.roles.add(admin_role)
    _commit(session)
    session.refresh(user)

    logger.info(
        "Promoted user to admin",
        extra={"user_id": user.id, "already_admin": already_admin},
    )
    return user
