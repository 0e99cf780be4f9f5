from dataclasses import dataclass, field
from typing import List, Protocol

from fastapi import Depends
from fastapi_mail import ConnectionConfig, FastMail, MessageSchema, MessageType
import logging

from src.commonUtils.errors import MailConfigurationError
from src.config.settings import Settings, get_settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ContactEmail:
    sender: str
    recipients: List[str]
    subject: str
    html: str
    reply_to: List[str] = field(default_factory=list)


class MailTransport(Protocol):
    async def send(self, message: ContactEmail) -> None:
        """Deliver one message, raising on failure."""
        ...


def build_mail_config(settings: Settings) -> ConnectionConfig:
    missing = [name for name in ("SMTP_EMAIL", "SMTP_PASSWORD") if not getattr(settings, name)]
    if missing:
        raise MailConfigurationError(missing)

    return ConnectionConfig(
        MAIL_USERNAME=settings.SMTP_EMAIL,
        MAIL_PASSWORD=settings.SMTP_PASSWORD,
        MAIL_FROM=settings.SMTP_EMAIL,
        MAIL_PORT=settings.MAIL_PORT,
        MAIL_SERVER=settings.MAIL_SERVER,
        MAIL_STARTTLS=settings.MAIL_STARTTLS,
        MAIL_SSL_TLS=settings.MAIL_SSL_TLS,
        USE_CREDENTIALS=True
    )


class FastMailTransport:
    """SMTP delivery through fastapi-mail"""

    def __init__(self, conf: ConnectionConfig):
        self.fm = FastMail(conf)
        self.sender = str(conf.MAIL_FROM)

    async def send(self, message: ContactEmail) -> None:
        logger.info(f"📧 Sending email to {', '.join(message.recipients)} | Subject: {message.subject}")
        if message.sender.lower() != self.sender.lower():
            raise ValueError(f"Sender {message.sender} does not match the configured MAIL_FROM")

        try:
            # Raw header: reply_to would reject addresses the form pattern accepts
            msg = MessageSchema(
                subject=message.subject,
                recipients=message.recipients,
                body=message.html,
                subtype=MessageType.html,
                headers={"Reply-To": ", ".join(message.reply_to)} if message.reply_to else None,
            )
            await self.fm.send_message(msg)
            logger.info(f"Email sent successfully to {', '.join(message.recipients)}")
        except Exception as e:
            logger.error(f"Failed to send email to {', '.join(message.recipients)}: {str(e)}")
            raise


def get_mail_transport(settings: Settings = Depends(get_settings)) -> MailTransport:
    return FastMailTransport(build_mail_config(settings))
