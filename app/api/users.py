"""User registration and account listing endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.api.deps import get_current_user, require_admin
from app.core.database import get_db
from app.schemas.auth import CurrentUser
from app.schemas.users import UserCreateRequest, UserResponse, UsersListResponse
from app.services import accounts
from app.services.accounts import InvalidCredentialsFormatError, UsernameTakenError

router = APIRouter()


@router.post(
    "/addUser",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
)
def add_user(
    body: UserCreateRequest,
    db: Annotated[Session, Depends(get_db)],
) -> UserResponse:
    """Register a new user with the USER role. No authentication required."""
    try:
        user = accounts.register_user(db, body.username, body.password)
    except UsernameTakenError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=e.message) from e
    except InvalidCredentialsFormatError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=e.message
        ) from e
    return UserResponse.from_user(user)


@router.get("/me", response_model=UserResponse)
def get_me(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
) -> UserResponse:
    return UserResponse(
        id=current_user.id,
        username=current_user.username,
        roles=current_user.roles,
    )


@router.get("/users", response_model=UsersListResponse)
def list_users(
    _admin: Annotated[CurrentUser, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> UsersListResponse:
    """List all users (admin only)."""
    return UsersListResponse(
        users=[UserResponse.from_user(u) for u in accounts.list_users(db)]
    )
