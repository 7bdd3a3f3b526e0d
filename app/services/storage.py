"""Local disk storage for user uploads."""

import os
from pathlib import Path

from app.config import get_settings


class LocalStorage:
    """Stores files under a root directory and exposes them under a public URL.

    Paths passed in are relative to the root, e.g. ``profile_images/a.jpg``.
    """

    def __init__(self, root: str | Path, base_url: str) -> None:
        self.root = Path(root)
        self.base_url = base_url.rstrip("/")

    def path(self, relative_path: str) -> Path:
        """Resolve a relative path inside the root. Rejects traversal outside it."""
        root = self.root.resolve()
        full_path = (root / relative_path).resolve()
        if root != full_path and root not in full_path.parents:
            raise ValueError(f"Path '{relative_path}' escapes the storage root")
        return full_path

    def put(self, relative_path: str, content: bytes) -> None:
        """Write content to disk, creating parent directories as needed."""
        file_path = self.path(relative_path)
        file_path.parent.mkdir(parents=True, exist_ok=True)
        with open(file_path, "wb") as f:
            f.write(content)

    def exists(self, relative_path: str) -> bool:
        return self.path(relative_path).is_file()

    def delete(self, relative_path: str) -> bool:
        """Delete a file. Returns False if there was nothing to delete."""
        file_path = self.path(relative_path)
        if not file_path.exists():
            return False
        os.remove(file_path)
        return True

    def url(self, relative_path: str) -> str:
        return f"{self.base_url}/{relative_path.lstrip('/')}"


_storage: LocalStorage | None = None


def get_storage() -> LocalStorage:
    """Get singleton storage for the public disk."""
    global _storage
    if _storage is None:
        settings = get_settings()
        _storage = LocalStorage(settings.STORAGE_DIR, f"{settings.APP_URL}{settings.STORAGE_URL}")
    return _storage
