"""Pydantic request/response schemas."""

from app.schemas.auth import CurrentUser, LoginRequest, TokenResponse
from app.schemas.health import HealthResponse
from app.schemas.users import UserCreateRequest, UserResponse, UsersListResponse

__all__ = [
    "CurrentUser",
    "HealthResponse",
    "LoginRequest",
    "TokenResponse",
    "UserCreateRequest",
    "UserResponse",
    "UsersListResponse",
]
