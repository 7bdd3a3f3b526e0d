"""User profile operations."""

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.exceptions import PersistenceError, StorageError
from app.models.user import User
from app.services.image import ImageService, ProfileImageData

logger = logging.getLogger("focus_app")


class UserRepository:
    """Persists changes to user records."""

    def __init__(self, image_service: ImageService) -> None:
        self.image_service = image_service

    def update_profile_image(self, db: Session, user: User, data: ProfileImageData) -> User:
        """Replace the user's profile image.

        Old file removal, new file write and the database update are separate
        steps with no rollback between them. Failing to remove the old file is
        logged and does not stop the upload.
        """
        old_path = user.profile_image
        try:
            self.image_service.delete_profile_image(old_path)
        except (OSError, ValueError):
            logger.warning("Could not delete old profile image %s for user %s", old_path, user.id, exc_info=True)

        try:
            stored = self.image_service.upload_profile_image(data)
        except OSError:
            logger.exception("Failed to store profile image for user %s", user.id)
            raise StorageError("Failed to upload profile image. Please try again.") from None

        try:
            user.profile_image = stored.path
            db.commit()
        except SQLAlchemyError:
            db.rollback()
            logger.exception("Failed to save profile image path for user %s", user.id)
            raise PersistenceError("Failed to upload profile image. Please try again.") from None

        db.refresh(user)
        logger.info("Profile image for user %s replaced: %s -> %s", user.id, old_path, stored.path)
        return user
