"""ORM model for application users (auth and RBAC)."""

from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship

from app.models.base import Base
from app.models.role import user_roles


class User(Base):
    """
    User account authenticated per request (HTTP Basic or bearer JWT).

    roles is a set of Role rows; a role appears at most once per user.
    """

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)

    roles = relationship(
        "Role",
        secondary=user_roles,
        collection_class=set,
        lazy="selectin",
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username='{self.username}')>"
