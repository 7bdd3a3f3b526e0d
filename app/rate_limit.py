"""Shared slowapi limiter."""

from slowapi import Limiter
from slowapi.util import get_remote_address
from starlette.requests import Request


def bearer_or_remote_address(request: Request) -> str:
    """Key throttled routes by bearer token, falling back to client address."""
    auth_header = request.headers.get("Authorization")
    if auth_header and auth_header.startswith("Bearer "):
        return auth_header[7:]
    return get_remote_address(request)


limiter = Limiter(key_func=get_remote_address)
