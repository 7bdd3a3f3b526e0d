"""User profile endpoints."""

from fastapi import APIRouter, Depends, File, UploadFile
from sqlalchemy.orm import Session

from app.config import get_settings
from app.database import get_db
from app.dependencies import get_current_user, get_user_repository
from app.exceptions import ValidationFailed
from app.models.user import User
from app.schemas.user import UserResponse, envelope
from app.services.image import ProfileImageData
from app.services.storage import LocalStorage, get_storage
from app.services.user import UserRepository
from app.validation import validate_profile_image

router = APIRouter(prefix="/user", tags=["User"])

CHUNK_SIZE = 1024 * 64


async def read_upload(upload: UploadFile, max_bytes: int) -> bytes:
    """Read an upload in chunks, stopping one chunk past ``max_bytes``."""
    chunks = []
    size = 0
    while True:
        chunk = await upload.read(CHUNK_SIZE)
        if not chunk:
            break
        chunks.append(chunk)
        size += len(chunk)
        if size > max_bytes:
            break
    return b"".join(chunks)


@router.get("")
def me(
    user: User = Depends(get_current_user),
    storage: LocalStorage = Depends(get_storage),
) -> dict:
    """Get the authenticated user's profile."""
    return envelope("Successfully retrieved user profile", user=UserResponse.from_user(user, storage))


@router.post("/profile-image")
async def upload_profile_image(
    profile_image: UploadFile | None = File(None),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    repository: UserRepository = Depends(get_user_repository),
    storage: LocalStorage = Depends(get_storage),
) -> dict:
    """Replace the authenticated user's profile image."""
    settings = get_settings()
    max_bytes = settings.PROFILE_IMAGE_MAX_KB * 1024

    content = await read_upload(profile_image, max_bytes) if profile_image else None
    errors = validate_profile_image(
        content,
        profile_image.content_type if profile_image else None,
        max_kilobytes=settings.PROFILE_IMAGE_MAX_KB,
        min_dimension=settings.PROFILE_IMAGE_MIN_DIMENSION,
    )
    if errors:
        raise ValidationFailed(errors)

    data = ProfileImageData.from_upload(content, profile_image.filename or "", profile_image.content_type)
    user = repository.update_profile_image(db, user, data)

    return envelope("Profile image uploaded successfully", user=UserResponse.from_user(user, storage))
