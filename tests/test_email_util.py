import pytest
from fastapi_mail import ConnectionConfig

from src.commonUtils.emailUtil import ContactEmail, FastMailTransport, build_mail_config
from src.commonUtils.errors import MailConfigurationError
from src.crud.contactService import build_contact_email, parse_submission
from tests.conftest import OWNER_EMAIL, make_settings, valid_payload


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def transport():
    conf = ConnectionConfig(
        MAIL_USERNAME=OWNER_EMAIL,
        MAIL_PASSWORD="app-token",
        MAIL_FROM=OWNER_EMAIL,
        MAIL_PORT=587,
        MAIL_SERVER="smtp.gmail.com",
        MAIL_STARTTLS=True,
        MAIL_SSL_TLS=False,
        SUPPRESS_SEND=1,
    )
    return FastMailTransport(conf)


def test_missing_credentials_raise_without_values():
    with pytest.raises(MailConfigurationError) as excinfo:
        build_mail_config(make_settings(SMTP_PASSWORD=None))

    assert excinfo.value.missing == ["SMTP_PASSWORD"]
    assert "app-token" not in str(excinfo.value)


def test_mail_config_uses_gmail():
    conf = build_mail_config(make_settings())
    assert conf.MAIL_SERVER == "smtp.gmail.com"
    assert conf.MAIL_FROM == OWNER_EMAIL
    assert conf.USE_CREDENTIALS


@pytest.mark.anyio
async def test_fastmail_transport_sends_one_message(transport):
    message = ContactEmail(
        sender=OWNER_EMAIL,
        recipients=[OWNER_EMAIL],
        subject="New Contact Form Submission from Jane Doe",
        html="<h2>New Contact Form Submission</h2>",
        reply_to=["jane.doe@acme-marketing.io"],
    )

    with transport.fm.record_messages() as outbox:
        await transport.send(message)

    assert len(outbox) == 1
    assert outbox[0]["Subject"] == "New Contact Form Submission from Jane Doe"
    assert outbox[0]["Reply-To"] == "jane.doe@acme-marketing.io"


@pytest.mark.anyio
@pytest.mark.parametrize("email", ["jane@site.test", "a..b@example.org", "x@localhost.local", "a@b.c"])
async def test_pattern_valid_reply_to_is_delivered(transport, email):
    form = parse_submission(valid_payload(email=email))
    assert form is not None

    with transport.fm.record_messages() as outbox:
        await transport.send(build_contact_email(form, OWNER_EMAIL))

    assert len(outbox) == 1
    assert outbox[0]["Reply-To"] == email


@pytest.mark.anyio
async def test_sender_must_match_mail_from(transport):
    message = ContactEmail(
        sender="someone-else@heyprachar.com",
        recipients=[OWNER_EMAIL],
        subject="New Contact Form Submission from Jane Doe",
        html="<p>hi</p>",
    )

    with transport.fm.record_messages() as outbox:
        with pytest.raises(ValueError):
            await transport.send(message)

    assert outbox == []
