"""Request dependencies: authentication and injected services."""

from dataclasses import dataclass

from fastapi import BackgroundTasks, Depends, Request
from sqlalchemy.orm import Session

from app.database import get_db
from app.exceptions import InvalidSignature, Unauthenticated
from app.models.auth_token import AuthToken
from app.models.user import User
from app.services.image import ImageService
from app.services.mail import get_mailer
from app.services.notifications import UserNotifier
from app.services.signed_url import SignedUrlService, get_signed_url_service
from app.services.storage import LocalStorage, get_storage
from app.services.tokens import TokenService, get_token_service
from app.services.user import UserRepository


@dataclass
class CurrentSession:
    """Authenticated user together with the token used on this request."""

    user: User
    token: AuthToken


def bearer_token(request: Request) -> str | None:
    auth_header = request.headers.get("Authorization")
    if auth_header and auth_header.startswith("Bearer "):
        return auth_header[7:].strip() or None
    return None


def get_current_session(
    request: Request,
    db: Session = Depends(get_db),
    tokens: TokenService = Depends(get_token_service),
) -> CurrentSession:
    """Resolve the bearer token to a session. Raises 401 if missing, unknown or expired."""
    plain_text = bearer_token(request)
    if not plain_text:
        raise Unauthenticated()

    token = tokens.find_token(db, plain_text)
    if token is None:
        raise Unauthenticated()

    tokens.touch(db, token)
    return CurrentSession(user=token.user, token=token)


def get_current_user(session: CurrentSession = Depends(get_current_session)) -> User:
    return session.user


def get_notifier(background_tasks: BackgroundTasks) -> UserNotifier:
    """Notifier that delivers mail after the response has been sent."""
    return UserNotifier(get_mailer(), get_signed_url_service(), background_tasks.add_task)


def get_user_repository(storage: LocalStorage = Depends(get_storage)) -> UserRepository:
    return UserRepository(ImageService(storage))


def require_signed_url(
    request: Request,
    signed_urls: SignedUrlService = Depends(get_signed_url_service),
) -> None:
    """Reject requests whose URL signature is missing, tampered with or expired."""
    if not signed_urls.has_valid_signature(
        request.url.path,
        request.query_params.get("expires"),
        request.query_params.get("signature"),
    ):
        raise InvalidSignature()
