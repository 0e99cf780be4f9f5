import pytest
from fastapi.testclient import TestClient

from src.commonUtils.emailUtil import get_mail_transport
from src.config.settings import Settings
from src.main import create_app

OWNER_EMAIL = "owner@heyprachar.com"


class FakeTransport:
    def __init__(self, fail: bool = False):
        self.sent = []
        self.fail = fail

    async def send(self, message):
        if self.fail:
            raise ConnectionError("SMTP connection refused")
        self.sent.append(message)


def make_settings(**overrides) -> Settings:
    values = {
        "ENVIRONMENT": "development",
        "SMTP_EMAIL": OWNER_EMAIL,
        "SMTP_PASSWORD": "app-token",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


def valid_payload(**overrides) -> dict:
    payload = {
        "name": "Jane Doe",
        "email": "jane.doe@acme-marketing.io",
        "phone": "(555) 123-4567",
        "industry": "Retail",
        "targetAudience": "B2C",
        "businessName": "Acme Marketing",
        "yourRole": "Founder",
        "problemStatement": "We need more qualified leads.",
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def client(transport):
    app = create_app(make_settings())
    app.dependency_overrides[get_mail_transport] = lambda: transport
    with TestClient(app) as c:
        yield c
