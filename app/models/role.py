"""ORM model for roles and the user/role join table."""

from sqlalchemy import Column, ForeignKey, Integer, String, Table

from app.models.base import Base

ROLE_NAME_MAX_LEN = 64

user_roles = Table(
    "user_roles",
    Base.metadata,
    Column("user_id", Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
    Column("role_id", Integer, ForeignKey("roles.id", ondelete="CASCADE"), primary_key=True),
)


class Role(Base):
    """
    Named permission grouping (e.g. 'USER', 'ADMIN').

    name is unique and compared case-sensitively; rows are created on first
    reference and never changed afterwards.
    """

    __tablename__ = "roles"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(ROLE_NAME_MAX_LEN), nullable=False, unique=True)

    def __repr__(self) -> str:
        return f"<Role(id={self.id}, name='{self.name}')>"
