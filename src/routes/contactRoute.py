import json
import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from starlette.formparsers import FormParser, MultiPartParser

from src.commonUtils.emailUtil import MailTransport, get_mail_transport
from src.commonUtils.errors import ContactFormValidationError, PayloadTooLargeError
from src.commonUtils.timeUtil import iso_timestamp
from src.config.settings import Settings, get_settings
from src.crud.contactService import parse_submission, submit_contact_form
from src.schemas.contactSchema import OPTIONAL_FIELDS, REQUIRED_FIELDS

logger = logging.getLogger(__name__)

router = APIRouter()

FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


async def read_body(request: Request, limit: int) -> bytes:
    """Read the body, stopping as soon as it grows past limit bytes."""
    chunks = []
    total = 0
    async for chunk in request.stream():
        total += len(chunk)
        if total > limit:
            logger.warning(f"⛔ Rejected body over {limit} bytes on {request.url.path}")
            raise PayloadTooLargeError(limit)
        chunks.append(chunk)
    return b"".join(chunks)


async def _replay(body: bytes):
    yield body


async def read_form_data(request: Request, limit: int):
    """Request body as a dict; repeated form keys become lists."""
    body = await read_body(request, limit)
    content_type = request.headers.get("content-type", "")
    if content_type.startswith(FORM_CONTENT_TYPES):
        if content_type.startswith("multipart/form-data"):
            parser = MultiPartParser(request.headers, _replay(body))
        else:
            parser = FormParser(request.headers, _replay(body))
        form = await parser.parse()
        data = {}
        for key in form.keys():
            values = form.getlist(key)
            data[key.removesuffix("[]")] = values if len(values) > 1 or key.endswith("[]") else values[0]
        return data

    if not body:
        return {}
    try:
        return json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError):
        logger.info("Validation failed: request body is not valid JSON")
        return None


@router.post("/contact")
async def submit_contact(
        request: Request,
        settings: Settings = Depends(get_settings),
        transport: MailTransport = Depends(get_mail_transport),
):
    """
        Validates a contact form submission and emails it to the site owner.
    """
    logger.info("POST request received at /api/contact")

    data = await read_form_data(request, settings.MAX_BODY_BYTES)
    form = parse_submission(data)
    if form is None:
        logger.info("Form validation failed")
        raise ContactFormValidationError()

    logger.info(f"Form validation passed for {form.email}")

    try:
        await submit_contact_form(form, settings.SMTP_EMAIL, transport)
    except Exception as e:
        logger.error(f"Error processing form submission: {str(e)}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content={
                "error": "Internal Server Error",
                "message": "Failed to submit form. Please try again later.",
            }
        )

    return {
        "success": True,
        "message": "Form submitted successfully!",
        "timestamp": iso_timestamp(),
    }


@router.get("/contact")
async def describe_contact():
    return {
        "message": "Contact Form API Endpoint",
        "method": "POST",
        "contentType": "application/json",
        "requiredFields": REQUIRED_FIELDS,
        "optionalFields": OPTIONAL_FIELDS,
    }
