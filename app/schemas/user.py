"""Pydantic schemas for user payloads."""

from datetime import datetime
from typing import TYPE_CHECKING

from pydantic import BaseModel

from app.models.user import User

if TYPE_CHECKING:
    from app.services.storage import LocalStorage


class UserResponse(BaseModel):
    """Public user representation. Credentials are never included."""

    id: int
    username: str
    email: str
    profile_image: str | None
    email_verified_at: datetime | None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_user(cls, user: User, storage: "LocalStorage") -> "UserResponse":
        """Build the response, turning the stored image path into a public URL."""
        return cls(
            id=user.id,
            username=user.username,
            email=user.email,
            profile_image=storage.url(user.profile_image) if user.profile_image else None,
            email_verified_at=user.email_verified_at,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )


def envelope(message: str, **data) -> dict:
    """Wrap a payload in the ``{"message", "data"}`` response envelope."""
    payload = {}
    for key, value in data.items():
        payload[key] = value.model_dump(mode="json") if isinstance(value, BaseModel) else value
    return {"message": message, "data": payload}
