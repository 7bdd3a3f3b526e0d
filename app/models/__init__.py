"""ORM models. Importing the package registers every table with Base.metadata."""

from app.models.auth_token import AuthToken
from app.models.focus_session import FocusSession
from app.models.notification import Notification
from app.models.user import User

__all__ = ["AuthToken", "FocusSession", "Notification", "User"]
