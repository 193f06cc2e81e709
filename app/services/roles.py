"""Role lookup and idempotent find-or-create backed by the roles table."""

import logging
from collections.abc import Callable
from typing import Any

from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import Session

from app.models import Role
from app.models.role import ROLE_NAME_MAX_LEN

logger = logging.getLogger(__name__)

# Dialects accepted by DATABASE_URL; both support INSERT ... ON CONFLICT DO NOTHING.
_CONFLICT_AWARE_INSERTS: dict[str, Callable[..., Any]] = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


class InvalidRoleNameError(Exception):
    """Raised when a role name is empty, blank, or too long."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


def _validate_role_name(role_name: str) -> None:
    if not role_name or not role_name.strip():
        raise InvalidRoleNameError("Role name must be non-empty.")
    if len(role_name) > ROLE_NAME_MAX_LEN:
        raise InvalidRoleNameError(
            f"Role name must be at most {ROLE_NAME_MAX_LEN} characters."
        )


def find_role(session: Session, role_name: str) -> Role | None:
    """Return the role named exactly role_name (lowest id first), or None."""
    return (
        session.query(Role)
        .filter(Role.name == role_name)
        .order_by(Role.id)
        .first()
    )


def _insert_if_absent(session: Session, role_name: str) -> bool:
    """Insert a role row unless one with that name exists. Returns True if this call inserted it."""
    dialect = session.get_bind().dialect.name
    insert = _CONFLICT_AWARE_INSERTS.get(dialect)
    if insert is None:
        raise NotImplementedError(f"Role creation is not supported on the '{dialect}' dialect")
    stmt = (
        insert(Role)
        .values(name=role_name)
        .on_conflict_do_nothing(index_elements=["name"])
    )
    result = session.execute(stmt)
    return result.rowcount == 1


def find_or_create_role(session: Session, role_name: str) -> Role:
    """
    Return the role named role_name, creating it on first reference.

    The lookup is exact (case-sensitive). Creation goes through an
    insert-if-absent against the unique index on roles.name, so concurrent
    callers asking for the same unseen name end up sharing a single row.

    Flushes but does not commit; the caller owns the transaction. Storage
    errors propagate unchanged.
    """
    _validate_role_name(role_name)

    existing = find_role(session, role_name)
    if existing is not None:
        return existing

    created = _insert_if_absent(session, role_name)
    role = find_role(session, role_name)
    if role is None:
        # Only possible if the row vanished between insert and read; roles are never deleted.
        raise RuntimeError(f"Role '{role_name}' missing after insert")
    if created:
        logger.info("Created role", extra={"role_id": role.id, "role_name": role.name})
    return role


def list_roles(session: Session) -> list[Role]:
    """Return all roles ordered by id."""
    return session.query(Role).order_by(Role.id).all()
