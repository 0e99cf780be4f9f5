from src.commonUtils.email_renderer import format_array_or_string, get_contact_submission_email
from src.crud.contactService import build_contact_email
from src.schemas.contactSchema import ContactForm
from tests.conftest import valid_payload


def test_format_array_or_string():
    assert format_array_or_string(["SEO", "Ads"]) == "SEO, Ads"
    assert format_array_or_string("Branding") == "Branding"
    assert format_array_or_string(None) == "None"
    assert format_array_or_string("  ") == "None"
    assert format_array_or_string([]) == "None"


def test_placeholders_for_missing_optional_fields():
    html = get_contact_submission_email(ContactForm.model_validate(valid_payload()))

    assert "New Contact Form Submission" in html
    assert "Not provided" in html
    assert html.count("Not specified") == 2
    assert html.count(">None<") == 2
    assert "We need more qualified leads." in html


def test_services_and_custom_values_rendered():
    form = ContactForm.model_validate(valid_payload(
        services=["SEO", "Ads"],
        customIndustry="Pet food",
        customTargetAudience="Dog owners",
        whatsapp="+1 555 000 1111",
        meetingTime="Mornings",
    ))
    html = get_contact_submission_email(form)

    assert "SEO, Ads" in html
    assert "Retail (Pet food)" in html
    assert "B2C (Dog owners)" in html
    assert "+1 555 000 1111" in html
    assert "Mornings" in html


def test_submitted_markup_is_escaped():
    form = ContactForm.model_validate(valid_payload(problemStatement="<script>alert(1)</script>"))
    html = get_contact_submission_email(form)

    assert "<script>" not in html
    assert "&lt;script&gt;" in html


def test_contact_email_is_self_addressed():
    form = ContactForm.model_validate(valid_payload())
    message = build_contact_email(form, "owner@heyprachar.com")

    assert message.sender == "owner@heyprachar.com"
    assert message.recipients == ["owner@heyprachar.com"]
    assert message.reply_to == ["jane.doe@acme-marketing.io"]
    assert message.subject == "New Contact Form Submission from Jane Doe"
