"""Profile image storage."""

import uuid
from dataclasses import dataclass

from app.config import get_settings
from app.services.storage import LocalStorage
from app.validation import inspect_image


@dataclass(frozen=True)
class ProfileImageData:
    """A validated profile image upload.

    ``resize_width``/``resize_height`` are the configured target dimensions.
    They are carried for callers but no resizing is performed.
    """

    content: bytes
    filename: str
    content_type: str | None
    storage_path: str = "profile_images"
    resize_width: int = 300
    resize_height: int = 300

    @classmethod
    def from_upload(cls, content: bytes, filename: str, content_type: str | None) -> "ProfileImageData":
        settings = get_settings()
        return cls(
            content=content,
            filename=filename,
            content_type=content_type,
            storage_path=settings.PROFILE_IMAGE_DIR,
            resize_width=settings.PROFILE_IMAGE_RESIZE_WIDTH,
            resize_height=settings.PROFILE_IMAGE_RESIZE_HEIGHT,
        )


@dataclass
class StoredImage:
    path: str
    url: str


class ImageService:
    """Writes and removes profile image files on a storage disk."""

    def __init__(self, storage: LocalStorage) -> None:
        self.storage = storage

    def generate_filename(self, data: ProfileImageData) -> str:
        """``profile-<uuid>.<ext>``, the extension taken from the decoded image format."""
        info = inspect_image(data.content)
        if info is None:
            raise ValueError("Profile image content is not a decodable image")
        return f"profile-{uuid.uuid4()}.{info.extension}"

    def upload_profile_image(self, data: ProfileImageData) -> StoredImage:
        path = f"{data.storage_path}/{self.generate_filename(data)}"
        self.storage.put(path, data.content)
        return StoredImage(path=path, url=self.storage.url(path))

    def delete_profile_image(self, path: str | None) -> bool:
        if not path:
            return False
        return self.storage.delete(path)
