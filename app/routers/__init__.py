"""API routers."""

from app.routers.auth import router as auth_router
from app.routers.email_verification import router as email_verification_router
from app.routers.users import router as users_router

__all__ = ["auth_router", "email_verification_router", "users_router"]
