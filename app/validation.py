"""Request validators.

Each validator returns a field-keyed error map; an empty map means the input
is valid. Routes raise ``ValidationFailed`` with the map when it is not empty.
"""

import io
import re
from dataclasses import dataclass

from PIL import Image
from sqlalchemy import func
from sqlalchemy.orm import Session

from app.models.user import User
from app.schemas.auth import LoginRequest, RegisterRequest

USERNAME_PATTERN = re.compile(r"^[A-Za-z0-9_]+$")
EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
MAX_STRING_LENGTH = 255
MIN_PASSWORD_LENGTH = 8
# bcrypt only accepts this many bytes of input
MAX_PASSWORD_BYTES = 72

# Pillow format name -> stored file extension
IMAGE_FORMATS = {
    "JPEG": "jpg",
    "PNG": "png",
    "GIF": "gif",
    "BMP": "bmp",
    "WEBP": "webp",
}

FieldErrors = dict[str, list[str]]


def _add(errors: FieldErrors, field: str, message: str) -> None:
    errors.setdefault(field, []).append(message)


def _blank(value: str | None) -> bool:
    return value is None or value.strip() == ""


def validate_registration(db: Session, body: RegisterRequest) -> FieldErrors:
    errors: FieldErrors = {}

    if _blank(body.username):
        _add(errors, "username", "The username field is required.")
    else:
        username = body.username.strip()
        if len(username) > MAX_STRING_LENGTH:
            _add(errors, "username", f"The username field must not be greater than {MAX_STRING_LENGTH} characters.")
        if not USERNAME_PATTERN.match(username):
            _add(errors, "username", "The username field must only contain letters, numbers, and underscores.")
        elif db.query(User).filter(User.username == username).first():
            _add(errors, "username", "The username has already been taken.")

    if _blank(body.email):
        _add(errors, "email", "The email field is required.")
    else:
        email = body.email.strip()
        if len(email) > MAX_STRING_LENGTH:
            _add(errors, "email", f"The email field must not be greater than {MAX_STRING_LENGTH} characters.")
        if not EMAIL_PATTERN.match(email):
            _add(errors, "email", "The email field must be a valid email address.")
        elif db.query(User).filter(func.lower(User.email) == email.lower()).first():
            _add(errors, "email", "The email has already been taken.")

    if not body.password:
        _add(errors, "password", "The password field is required.")
    else:
        if len(body.password) < MIN_PASSWORD_LENGTH:
            _add(errors, "password", f"The password field must be at least {MIN_PASSWORD_LENGTH} characters.")
        if len(body.password.encode("utf-8")) > MAX_PASSWORD_BYTES:
            _add(errors, "password", f"The password field must not be greater than {MAX_PASSWORD_BYTES} bytes.")
        if body.password != body.password_confirmation:
            _add(errors, "password", "The password field confirmation does not match.")

    return errors


def validate_login(body: LoginRequest) -> FieldErrors:
    errors: FieldErrors = {}
    if _blank(body.username):
        _add(errors, "username", "The username field is required.")
    if not body.password:
        _add(errors, "password", "The password field is required.")
    return errors


@dataclass
class ImageInfo:
    extension: str
    width: int
    height: int


def inspect_image(content: bytes) -> ImageInfo | None:
    """Identify an image from its bytes. Returns None if Pillow cannot decode it."""
    try:
        with Image.open(io.BytesIO(content)) as img:
            image_format = img.format
            width, height = img.size
            img.verify()
    except (OSError, SyntaxError, ValueError):
        return None

    extension = IMAGE_FORMATS.get(image_format or "")
    if extension is None:
        return None
    return ImageInfo(extension=extension, width=width, height=height)


def validate_profile_image(
    content: bytes | None,
    content_type: str | None,
    max_kilobytes: int,
    min_dimension: int,
) -> FieldErrors:
    errors: FieldErrors = {}
    field = "profile_image"

    if not content:
        _add(errors, field, "The profile image field is required.")
        return errors

    if len(content) > max_kilobytes * 1024:
        _add(errors, field, f"The profile image field must not be greater than {max_kilobytes} kilobytes.")
        return errors

    info = inspect_image(content)
    if info is None or not (content_type or "").startswith("image/"):
        _add(errors, field, "The profile image field must be an image.")
        return errors

    if info.width < min_dimension or info.height < min_dimension:
        _add(errors, field, "The profile image field has invalid image dimensions.")

    return errors
