"""Authentication API endpoints."""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import CurrentSession, get_current_session, get_notifier
from app.schemas.auth import LoginRequest, RegisterRequest
from app.schemas.user import UserResponse, envelope
from app.services.auth import get_auth_service
from app.services.notifications import UserNotifier
from app.services.storage import LocalStorage, get_storage
from app.services.tokens import TokenService, get_token_service

logger = logging.getLogger("focus_app")

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/register")
def register(
    body: RegisterRequest,
    db: Session = Depends(get_db),
    notifier: UserNotifier = Depends(get_notifier),
    storage: LocalStorage = Depends(get_storage),
) -> JSONResponse:
    """Register a new user account and send the verification email."""
    auth_service = get_auth_service()
    result = auth_service.register(db, body, notifier)
    user = UserResponse.from_user(result.user, storage)

    if not result.notification_sent:
        return JSONResponse(
            status_code=201,
            content=envelope("User created but email verification fail to send.", user=user),
        )

    logger.info("User %s registered", result.user.id)
    return JSONResponse(
        status_code=200,
        content=envelope("Registration successful! Please check your email for verification", user=user),
    )


@router.post("/login")
def login(
    body: LoginRequest,
    db: Session = Depends(get_db),
    tokens: TokenService = Depends(get_token_service),
    storage: LocalStorage = Depends(get_storage),
) -> dict:
    """Check credentials and issue a new bearer token."""
    auth_service = get_auth_service()
    user = auth_service.authenticate(db, body)
    issued = tokens.create_token(db, user)

    return envelope(
        "Login successful",
        access_token=issued.plain_text,
        token_type="Bearer",
        user=UserResponse.from_user(user, storage),
    )


@router.post("/logout")
def logout(
    session: CurrentSession = Depends(get_current_session),
    db: Session = Depends(get_db),
    tokens: TokenService = Depends(get_token_service),
) -> dict:
    """Revoke the token used for this request. Other tokens stay valid."""
    tokens.revoke(db, session.token)
    return envelope("Logout successful")
