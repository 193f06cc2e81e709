"""Plain-text greeting endpoints: one public, two behind authentication."""

from typing import Annotated

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse

from app.api.deps import get_current_user
from app.schemas.auth import CurrentUser

router = APIRouter()


@router.get("/hello", response_class=PlainTextResponse)
def hello() -> str:
    return "Hello"


@router.get("/user", response_class=PlainTextResponse)
def hello_user(
    _user: Annotated[CurrentUser, Depends(get_current_user)],
) -> str:
    return "Hello User"


@router.get("/admin", response_class=PlainTextResponse)
def hello_admin(
    _user: Annotated[CurrentUser, Depends(get_current_user)],
) -> str:
    # Any authenticated principal; only the promotion route enforces ADMIN.
    return "Hello Admin"
