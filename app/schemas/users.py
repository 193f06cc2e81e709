"""Request/response schemas for user registration and role management."""

from pydantic import BaseModel, Field

from app.models import User
from app.services.accounts import role_names


class UserCreateRequest(BaseModel):
    """Body of POST /addUser."""

    username: str = Field(..., min_length=1, max_length=255, description="Unique username")
    password: str = Field(..., min_length=1, max_length=128, description="Plain-text password")


class UserResponse(BaseModel):
    """Public view of a user; never includes the password hash."""

    id: int
    username: str
    roles: list[str] = Field(..., description="Role names ordered by role creation")

    @classmethod
    def from_user(cls, user: User) -> "UserResponse":
        return cls(id=user.id, username=user.username, roles=role_names(user))


class UsersListResponse(BaseModel):
    """Response for GET /users (admin only)."""

    users: list[UserResponse]
