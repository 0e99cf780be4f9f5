import json
import re
from typing import Annotated, Any, List, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, StrictStr, field_validator

EMAIL_PATTERN = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")
MIN_PHONE_DIGITS = 10

REQUIRED_FIELDS = [
    "name", "email", "phone", "industry", "targetAudience",
    "businessName", "yourRole", "problemStatement",
]

OPTIONAL_FIELDS = [
    "whatsapp", "customIndustry", "services", "customTargetAudience",
    "socialPlatforms", "howDidYouKnow", "meetingTime",
]


def display_text(value: Any) -> str:
    """Render any JSON value as the text shown in the email."""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, list):
        return ", ".join(display_text(item) for item in value)
    if isinstance(value, dict):
        return json.dumps(value)
    return str(value)


def required_text(value: Any) -> str:
    # Falsy values (null, 0, false, [], {}) count as missing; strings must not be blank
    if isinstance(value, str):
        if not value.strip():
            raise ValueError("must not be empty")
        return value
    if not value:
        raise ValueError("field required")
    return display_text(value)


def optional_text(value: Any) -> Optional[str]:
    if not value:
        return None
    return display_text(value)


def text_or_list(value: Any) -> Optional[str | List[str]]:
    if isinstance(value, list):
        return [display_text(item) for item in value]
    if isinstance(value, str):
        return value
    return None


RequiredText = Annotated[str, BeforeValidator(required_text)]
OptionalText = Annotated[Optional[str], BeforeValidator(optional_text)]
TextOrList = Annotated[Optional[str | List[str]], BeforeValidator(text_or_list)]


class ContactForm(BaseModel):
    """Schema for validating contact form submissions."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    name: RequiredText
    # Pattern and digit checks need real strings
    email: StrictStr
    phone: StrictStr
    industry: RequiredText
    custom_industry: OptionalText = Field(None, alias="customIndustry")
    target_audience: RequiredText = Field(..., alias="targetAudience")
    custom_target_audience: OptionalText = Field(None, alias="customTargetAudience")
    business_name: RequiredText = Field(..., alias="businessName")
    your_role: RequiredText = Field(..., alias="yourRole")
    problem_statement: RequiredText = Field(..., alias="problemStatement")
    whatsapp: OptionalText = None
    services: TextOrList = None
    social_platforms: TextOrList = Field(None, alias="socialPlatforms")
    how_did_you_know: OptionalText = Field(None, alias="howDidYouKnow")
    meeting_time: OptionalText = Field(None, alias="meetingTime")

    @field_validator("email", "phone")
    @classmethod
    def not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be empty")
        return value

    @field_validator("email")
    @classmethod
    def email_format(cls, value: str) -> str:
        if not EMAIL_PATTERN.fullmatch(value):
            raise ValueError("invalid email format")
        return value

    @field_validator("phone")
    @classmethod
    def phone_digits(cls, value: str) -> str:
        if len(re.sub(r"\D", "", value)) < MIN_PHONE_DIGITS:
            raise ValueError(f"phone must contain at least {MIN_PHONE_DIGITS} digits")
        return value
