"""Configuration settings for the Focus App API."""

import os
import secrets
from functools import lru_cache

from dotenv import load_dotenv

load_dotenv()


class Settings:
    """Application settings loaded from environment variables."""

    # Database
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./focus_app.db")

    # Public base URL, used for verification links and storage URLs
    APP_URL: str = os.getenv("APP_URL", "http://localhost:8000").rstrip("/")

    # Bearer tokens (0 = tokens never expire)
    TOKEN_EXPIRE_MINUTES: int = int(os.getenv("TOKEN_EXPIRE_MINUTES", "480"))

    # Signed links
    SIGNED_URL_SECRET_KEY: str = os.getenv("SIGNED_URL_SECRET_KEY", secrets.token_urlsafe(32))
    SIGNED_URL_ALGORITHM: str = os.getenv("SIGNED_URL_ALGORITHM", "HS256")
    VERIFICATION_EXPIRE_MINUTES: int = int(os.getenv("VERIFICATION_EXPIRE_MINUTES", "60"))
    VERIFICATION_RATE_LIMIT: str = os.getenv("VERIFICATION_RATE_LIMIT", "6/minute")

    # File storage
    STORAGE_DIR: str = os.getenv("STORAGE_DIR", "storage/public")
    STORAGE_URL: str = os.getenv("STORAGE_URL", "/storage")

    # Profile images
    PROFILE_IMAGE_DIR: str = os.getenv("PROFILE_IMAGE_DIR", "profile_images")
    PROFILE_IMAGE_MAX_KB: int = int(os.getenv("PROFILE_IMAGE_MAX_KB", "2048"))
    PROFILE_IMAGE_MIN_DIMENSION: int = int(os.getenv("PROFILE_IMAGE_MIN_DIMENSION", "100"))
    PROFILE_IMAGE_RESIZE_WIDTH: int = int(os.getenv("PROFILE_IMAGE_RESIZE_WIDTH", "300"))
    PROFILE_IMAGE_RESIZE_HEIGHT: int = int(os.getenv("PROFILE_IMAGE_RESIZE_HEIGHT", "300"))

    # Mail (empty MAIL_HOST = log messages instead of sending)
    MAIL_HOST: str = os.getenv("MAIL_HOST", "")
    MAIL_PORT: int = int(os.getenv("MAIL_PORT", "587"))
    MAIL_USERNAME: str = os.getenv("MAIL_USERNAME", "")
    MAIL_PASSWORD: str = os.getenv("MAIL_PASSWORD", "")
    MAIL_FROM: str = os.getenv("MAIL_FROM", "noreply@focus-app.local")
    MAIL_FROM_NAME: str = os.getenv("MAIL_FROM_NAME", "Focus App")
    MAIL_STARTTLS: bool = os.getenv("MAIL_STARTTLS", "true").lower() == "true"

    # Application
    APP_NAME: str = os.getenv("APP_NAME", "Focus App")
    APP_ENV: str = os.getenv("APP_ENV", "development")
    DEBUG: bool = os.getenv("DEBUG", "false").lower() == "true"

    def validate(self) -> list[str]:
        """Validate settings and return list of warnings."""
        errors = []
        if not os.getenv("SIGNED_URL_SECRET_KEY"):
            errors.append("SIGNED_URL_SECRET_KEY is not set - verification links will not survive a restart")
        if not self.MAIL_HOST:
            errors.append("MAIL_HOST is not set - outgoing mail is written to the log")
        return errors


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
