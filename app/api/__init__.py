"""HTTP routes. Public: /addUser, /hello, /health, /login. Everything else requires credentials."""

from fastapi import APIRouter

from app.api import admin, auth, greet, health, users

router = APIRouter()
router.include_router(greet.router, tags=["greet"])
router.include_router(users.router, tags=["users"])
router.include_router(admin.router, tags=["admin"])
router.include_router(auth.router, tags=["auth"])
router.include_router(health.router, tags=["health"])
