"""Outgoing mail."""

import logging
from dataclasses import dataclass

from app.config import Settings, get_settings

logger = logging.getLogger("focus_app")


@dataclass
class MailMessage:
    to: str
    subject: str
    html: str


class Mailer:
    """Sends mail over SMTP with fastapi-mail.

    When no MAIL_HOST is configured the message is written to the log instead,
    which is the development default.
    """

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or get_settings()
        self._client = None

    @property
    def enabled(self) -> bool:
        return bool(self.settings.MAIL_HOST)

    def _get_client(self):
        """Lazy-build the fastapi-mail client."""
        if self._client is None:
            from fastapi_mail import ConnectionConfig, FastMail

            config = ConnectionConfig(
                MAIL_USERNAME=self.settings.MAIL_USERNAME,
                MAIL_PASSWORD=self.settings.MAIL_PASSWORD,
                MAIL_FROM=self.settings.MAIL_FROM,
                MAIL_FROM_NAME=self.settings.MAIL_FROM_NAME,
                MAIL_PORT=self.settings.MAIL_PORT,
                MAIL_SERVER=self.settings.MAIL_HOST,
                MAIL_STARTTLS=self.settings.MAIL_STARTTLS,
                MAIL_SSL_TLS=False,
                USE_CREDENTIALS=bool(self.settings.MAIL_USERNAME),
                VALIDATE_CERTS=True,
            )
            self._client = FastMail(config)
        return self._client

    async def send(self, message: MailMessage) -> None:
        """Deliver a message. Runs as a background task, so failures are logged, not raised."""
        if not self.enabled:
            logger.info("MAIL (not sent, MAIL_HOST unset) to=%s subject=%r", message.to, message.subject)
            return

        from fastapi_mail import MessageSchema, MessageType

        schema = MessageSchema(
            subject=message.subject,
            recipients=[message.to],
            body=message.html,
            subtype=MessageType.html,
        )
        try:
            await self._get_client().send_message(schema)
        except Exception:
            logger.exception("Failed to send mail to %s (%s)", message.to, message.subject)
            return
        logger.info("Mail sent to %s: %s", message.to, message.subject)


_mailer: Mailer | None = None


def get_mailer() -> Mailer:
    """Get singleton mailer instance."""
    global _mailer
    if _mailer is None:
        _mailer = Mailer()
    return _mailer
