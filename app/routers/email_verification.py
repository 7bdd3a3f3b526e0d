"""Email verification endpoints."""

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from app.config import get_settings
from app.database import get_db
from app.dependencies import get_current_user, get_notifier, require_signed_url
from app.models.user import User
from app.rate_limit import bearer_or_remote_address, limiter
from app.schemas.user import envelope
from app.services.auth import get_auth_service
from app.services.notifications import UserNotifier

router = APIRouter(prefix="/email", tags=["Email Verification"])


@router.get("/verify/{user_id}/{hash_value}", dependencies=[Depends(require_signed_url)])
def verify_email(
    user_id: int,
    hash_value: str,
    db: Session = Depends(get_db),
    notifier: UserNotifier = Depends(get_notifier),
) -> dict:
    """Verify an email address from a signed link."""
    auth_service = get_auth_service()
    if not auth_service.verify_email(db, user_id, hash_value, notifier):
        return envelope("Email already verified")
    return envelope("Email verified successfully")


@router.get("/verification-notification")
@limiter.limit(get_settings().VERIFICATION_RATE_LIMIT, key_func=bearer_or_remote_address)
def resend_verification_email(
    request: Request,
    user: User = Depends(get_current_user),
    notifier: UserNotifier = Depends(get_notifier),
) -> dict:
    """Send a fresh verification link to the authenticated user."""
    auth_service = get_auth_service()
    auth_service.resend_verification(user, notifier)
    return envelope("Verification email sent")
