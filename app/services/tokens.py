"""Bearer token store."""

import hashlib
import hmac
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta

from sqlalchemy.orm import Session

from app.config import get_settings
from app.models.auth_token import AuthToken
from app.models.user import User

MAX_TOKEN_ID_DIGITS = 18


def hash_token(secret: str) -> str:
    return hashlib.sha256(secret.encode("utf-8")).hexdigest()


@dataclass
class IssuedToken:
    """A freshly created token. ``plain_text`` is only available at creation time."""

    token: AuthToken
    plain_text: str


class TokenService:
    """Issues, resolves and revokes opaque bearer tokens."""

    def __init__(self, expire_minutes: int | None = None) -> None:
        if expire_minutes is None:
            expire_minutes = get_settings().TOKEN_EXPIRE_MINUTES
        self.expire_minutes = expire_minutes

    def create_token(self, db: Session, user: User, name: str = "auth_token") -> IssuedToken:
        """Create a new token for the user. Existing tokens are left untouched."""
        secret = secrets.token_urlsafe(30)
        expires_at = None
        if self.expire_minutes > 0:
            expires_at = datetime.utcnow() + timedelta(minutes=self.expire_minutes)

        token = AuthToken(user_id=user.id, name=name, token=hash_token(secret), expires_at=expires_at)
        db.add(token)
        db.commit()
        db.refresh(token)
        return IssuedToken(token=token, plain_text=f"{token.id}|{secret}")

    def find_token(self, db: Session, plain_text: str) -> AuthToken | None:
        """Look up a token from its plain-text form. Returns None if unknown or expired."""
        if "|" in plain_text:
            token_id, secret = plain_text.split("|", 1)
            # ids are SQLite INTEGERs: ASCII digits that fit in 64 bits
            if not (token_id.isascii() and token_id.isdigit()) or len(token_id) > MAX_TOKEN_ID_DIGITS:
                return None
            token = db.get(AuthToken, int(token_id))
            if token is None or not hmac.compare_digest(token.token, hash_token(secret)):
                return None
        else:
            token = db.query(AuthToken).filter(AuthToken.token == hash_token(plain_text)).first()

        if token is None or token.is_expired():
            return None
        return token

    def touch(self, db: Session, token: AuthToken) -> None:
        token.last_used_at = datetime.utcnow()
        db.commit()

    def revoke(self, db: Session, token: AuthToken) -> None:
        """Delete exactly this token."""
        db.delete(token)
        db.commit()


_token_service: TokenService | None = None


def get_token_service() -> TokenService:
    """Get singleton token service instance."""
    global _token_service
    if _token_service is None:
        _token_service = TokenService()
    return _token_service
