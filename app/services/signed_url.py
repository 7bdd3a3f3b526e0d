"""Signed URL service.

A signed URL carries ``expires`` and ``signature`` query parameters. The
signature is a JWT over the URL path and the expiry, so changing any path
segment or the expiry invalidates it.
"""

import time
from urllib.parse import urlencode

from jose import JWTError, jwt

from app.config import get_settings


class SignedUrlService:
    """Creates and validates temporary signed URLs."""

    def __init__(self) -> None:
        settings = get_settings()
        self.secret_key = settings.SIGNED_URL_SECRET_KEY
        self.algorithm = settings.SIGNED_URL_ALGORITHM
        self.expire_minutes = settings.VERIFICATION_EXPIRE_MINUTES
        self.base_url = settings.APP_URL

    def sign(self, path: str, expire_minutes: int | None = None) -> str:
        """Return an absolute URL for ``path`` that stays valid for the given minutes."""
        minutes = self.expire_minutes if expire_minutes is None else expire_minutes
        expires = int(time.time()) + minutes * 60
        signature = jwt.encode({"path": path, "exp": expires}, self.secret_key, algorithm=self.algorithm)
        query = urlencode({"expires": expires, "signature": signature})
        return f"{self.base_url}{path}?{query}"

    def has_valid_signature(self, path: str, expires: str | None, signature: str | None) -> bool:
        """Check a request path against its ``expires`` and ``signature`` query values."""
        if not expires or not signature:
            return False
        try:
            payload = jwt.decode(signature, self.secret_key, algorithms=[self.algorithm])
        except JWTError:
            return False
        return payload.get("path") == path and str(payload.get("exp")) == expires


_signed_url_service: SignedUrlService | None = None


def get_signed_url_service() -> SignedUrlService:
    """Get singleton signed URL service instance."""
    global _signed_url_service
    if _signed_url_service is None:
        _signed_url_service = SignedUrlService()
    return _signed_url_service
