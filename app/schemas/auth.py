"""Pydantic schemas for authentication endpoints.

Fields are optional at the schema level; presence and format rules live in
``app.validation`` so that failures come back as a field-keyed error map.
"""

from pydantic import BaseModel


class RegisterRequest(BaseModel):
    username: str | None = None
    email: str | None = None
    password: str | None = None
    password_confirmation: str | None = None


class LoginRequest(BaseModel):
    username: str | None = None
    password: str | None = None
