"""Authentication service."""

import hmac
import logging
from dataclasses import dataclass
from datetime import datetime

import bcrypt
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.exceptions import AlreadyVerified, InvalidCredentials, InvalidLink, NotFound, PersistenceError, ValidationFailed
from app.models.user import User
from app.schemas.auth import LoginRequest, RegisterRequest
from app.services.notifications import UserNotifier, email_hash
from app.validation import validate_login, validate_registration

logger = logging.getLogger("focus_app")

TAKEN_ERRORS = {"email": ["The email has already been taken."]}


@dataclass
class RegistrationResult:
    """Outcome of a registration. ``notification_sent`` is False when the verification mail could not be queued."""

    user: User
    notification_sent: bool


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def check_password(password: str, password_hash: str) -> bool:
    # bcrypt rejects inputs over 72 bytes; no stored hash can match one
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        return False


class AuthService:
    """Handles registration, credential checks and email verification."""

    def register(self, db: Session, body: RegisterRequest, notifier: UserNotifier) -> RegistrationResult:
        """Validate and create a user, then send the verification notification."""
        errors = validate_registration(db, body)
        if errors:
            raise ValidationFailed(errors)

        user = User(
            username=body.username.strip(),
            email=body.email.lower().strip(),
            password=hash_password(body.password),
        )
        try:
            db.add(user)
            db.commit()
            db.refresh(user)
        except IntegrityError:
            # Lost a race with a concurrent registration for the same username or email
            db.rollback()
            raise ValidationFailed(validate_registration(db, body) or TAKEN_ERRORS) from None
        except SQLAlchemyError:
            db.rollback()
            logger.exception("Registration failed for username=%s", body.username)
            raise PersistenceError("Registration failed. Please try again.") from None

        # The account exists at this point; a notification failure only means the
        # user has to request a new link.
        try:
            notifier.registered(user)
        except Exception:
            logger.exception("Verification notification failed for user %s", user.id)
            return RegistrationResult(user=user, notification_sent=False)

        return RegistrationResult(user=user, notification_sent=True)

    def authenticate(self, db: Session, body: LoginRequest) -> User:
        """Return the user matching the credentials or raise InvalidCredentials."""
        errors = validate_login(body)
        if errors:
            raise ValidationFailed(errors)

        user = db.query(User).filter(User.username == body.username.strip()).first()
        if not user or not check_password(body.password, user.password):
            raise InvalidCredentials()
        return user

    def verify_email(self, db: Session, user_id: int, hash_value: str, notifier: UserNotifier) -> bool:
        """Mark the user's email as verified.

        Returns False without changing anything if the email was already
        verified. The hash must equal sha1(email) exactly.
        """
        user = db.get(User, user_id)
        if not user:
            raise NotFound("User not found")

        if user.has_verified_email:
            return False

        if not hmac.compare_digest(hash_value.encode("utf-8"), email_hash(user.email).encode("utf-8")):
            raise InvalidLink()

        user.email_verified_at = datetime.utcnow()
        db.commit()
        db.refresh(user)

        notifier.verified(user)
        return True

    def resend_verification(self, user: User, notifier: UserNotifier) -> None:
        if user.has_verified_email:
            raise AlreadyVerified()
        notifier.send_email_verification(user)


_auth_service: AuthService | None = None


def get_auth_service() -> AuthService:
    """Get singleton auth service instance."""
    global _auth_service
    if _auth_service is None:
        _auth_service = AuthService()
    return _auth_service
