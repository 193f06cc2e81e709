"""Admin-only role management endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.api.deps import require_admin
from app.core.database import get_db
from app.schemas.auth import CurrentUser
from app.schemas.users import UserResponse
from app.services.accounts import UserNotFoundError, promote_to_admin

router = APIRouter()


@router.post(
    "/admin/{user_id}",
    response_model=UserResponse,
    status_code=status.HTTP_202_ACCEPTED,
)
def make_admin(
    user_id: int,
    _admin: Annotated[CurrentUser, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> UserResponse:
    """
    Grant the ADMIN role to a user. Caller must hold ADMIN.

    Promoting a user who is already an admin returns the unchanged user.
    Unknown ids return 404.
    """
    try:
        user = promote_to_admin(db, user_id)
    except UserNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message) from e
    return UserResponse.from_user(user)
