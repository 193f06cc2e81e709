"""Request/response schemas for login and the authenticated principal."""

from pydantic import BaseModel, ConfigDict, Field


class LoginRequest(BaseModel):
    """Credentials exchanged for a bearer token."""

    username: str = Field(..., min_length=1, max_length=255, description="Username")
    password: str = Field(..., min_length=1, max_length=128, description="Password")


class TokenResponse(BaseModel):
    """JWT access token returned after successful login."""

    access_token: str = Field(..., description="JWT access token")
    token_type: str = Field(default="bearer", description="Token type")


class CurrentUser(BaseModel):
    """Authenticated principal (id, username, role names) for dependency injection."""

    model_config = ConfigDict(frozen=True)

    id: int
    username: str
    roles: list[str] = Field(default_factory=list)

    def has_role(self, role_name: str) -> bool:
        return role_name in self.roles
