"""User notifications sent on account events."""

import hashlib
import logging
from collections.abc import Callable

from jinja2 import Environment

from app.config import get_settings
from app.models.user import User
from app.services.mail import MailMessage, Mailer
from app.services.signed_url import SignedUrlService

logger = logging.getLogger("focus_app")

_templates = Environment(autoescape=True)

VERIFY_EMAIL_TEMPLATE = _templates.from_string(
    """
<html>
<body style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto; padding: 20px;">
    <h2>Verify Your Email Address</h2>
    <p>Hi {{ username }},</p>
    <p>Thanks for signing up for {{ app_name }}. Please confirm your email address by clicking the link below.</p>
    <p><a href="{{ verification_url }}">Verify Email Address</a></p>
    <p>If you can't click the link, copy it into your browser:<br>{{ verification_url }}</p>
    <p>This link expires in {{ expire_minutes }} minutes. If you did not create an account, no further action is required.</p>
</body>
</html>
"""
)

EMAIL_VERIFIED_TEMPLATE = _templates.from_string(
    """
<html>
<body style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto; padding: 20px;">
    <h2>Email Verified</h2>
    <p>Hi {{ username }},</p>
    <p>Your email address {{ email }} has been verified. Welcome to {{ app_name }}!</p>
</body>
</html>
"""
)


def email_hash(email: str) -> str:
    """Hash embedded in verification links."""
    return hashlib.sha1(email.encode("utf-8")).hexdigest()


class UserNotifier:
    """Builds account notifications and hands them to ``dispatch`` for delivery.

    ``dispatch`` is called as ``dispatch(mailer.send, message)``; in requests it
    is ``BackgroundTasks.add_task`` so delivery happens after the response.
    """

    def __init__(self, mailer: Mailer, signed_urls: SignedUrlService, dispatch: Callable) -> None:
        self.mailer = mailer
        self.signed_urls = signed_urls
        self.dispatch = dispatch

    def verification_url(self, user: User) -> str:
        return self.signed_urls.sign(f"/email/verify/{user.id}/{email_hash(user.email)}")

    def send_email_verification(self, user: User) -> None:
        settings = get_settings()
        url = self.verification_url(user)
        html = VERIFY_EMAIL_TEMPLATE.render(
            username=user.username,
            app_name=settings.APP_NAME,
            verification_url=url,
            expire_minutes=self.signed_urls.expire_minutes,
        )
        if not self.mailer.enabled:
            logger.info("EMAIL VERIFICATION for user %s: %s", user.id, url)
        self.dispatch(self.mailer.send, MailMessage(to=user.email, subject="Verify Email Address", html=html))

    def registered(self, user: User) -> None:
        self.send_email_verification(user)

    def verified(self, user: User) -> None:
        settings = get_settings()
        html = EMAIL_VERIFIED_TEMPLATE.render(username=user.username, email=user.email, app_name=settings.APP_NAME)
        self.dispatch(self.mailer.send, MailMessage(to=user.email, subject="Email Verified", html=html))
