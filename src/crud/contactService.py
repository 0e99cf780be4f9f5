from typing import Any, Optional

from pydantic import ValidationError
import logging

from src.commonUtils.email_renderer import get_contact_submission_email
from src.commonUtils.emailUtil import ContactEmail, MailTransport
from src.schemas.contactSchema import ContactForm

logger = logging.getLogger(__name__)


def parse_submission(data: Any) -> Optional[ContactForm]:
    """Validated submission, or None when any field fails validation."""
    if not isinstance(data, dict):
        logger.info(f"Validation failed: expected an object, got {type(data).__name__}")
        return None

    try:
        return ContactForm.model_validate(data)
    except ValidationError as e:
        first = e.errors()[0]
        field_name = ".".join(str(part) for part in first["loc"]) or "body"
        logger.info(f"Validation failed: {field_name}: {first['msg']}")
        return None


def validate_form_data(data: Any) -> bool:
    return parse_submission(data) is not None


def build_contact_email(form: ContactForm, account: str) -> ContactEmail:
    # Sent to the account owner, replies go to the submitter
    return ContactEmail(
        sender=account,
        recipients=[account],
        subject=f"New Contact Form Submission from {form.name}",
        html=get_contact_submission_email(form),
        reply_to=[form.email],
    )


async def submit_contact_form(form: ContactForm, account: str, transport: MailTransport) -> None:
    message = build_contact_email(form, account)
    logger.info("Sending email...")
    await transport.send(message)
    logger.info("Email sent successfully")
