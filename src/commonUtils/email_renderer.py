"""
Email template renderer using Jinja2 for easy maintenance
"""
from pathlib import Path
from typing import List, Optional, Tuple, Union

from jinja2 import Environment, FileSystemLoader, select_autoescape

from src.schemas.contactSchema import ContactForm

TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "templates" / "emails"


def format_array_or_string(value: Optional[Union[str, List[str]]]) -> str:
    """Join list values with commas; blank or missing values become 'None'."""
    if isinstance(value, list):
        return ", ".join(value) if value else "None"
    if isinstance(value, str) and value.strip():
        return value
    return "None"


def _with_custom(value: str, custom: Optional[str]) -> str:
    return f"{value} ({custom})" if custom else value


class EmailRenderer:
    """Renders email templates using Jinja2"""

    def __init__(self, template_dir: Path = TEMPLATE_DIR):
        """
        Initialize email renderer

        Args:
            template_dir: Directory containing email template files
        """
        self.template_dir = Path(template_dir)
        self.env = Environment(
            loader=FileSystemLoader(self.template_dir),
            autoescape=select_autoescape(['html', 'xml'])
        )

        self.brand_config = {
            'colors': {
                'stripe': '#f2f2f2',
            },
        }

    def render(self, template_name: str, **context) -> str:
        """
        Render an email template with context

        Args:
            template_name: Name of template file (e.g., 'contact_submission.html')
            **context: Variables to pass to template

        Returns:
            Rendered HTML string
        """
        template = self.env.get_template(template_name)

        # Merge brand config with user context
        full_context = {**self.brand_config, **context}

        return template.render(**full_context)

    @staticmethod
    def contact_rows(form: ContactForm) -> List[Tuple[str, str]]:
        """Label/value pairs in the order they appear in the email."""
        return [
            ("Name", form.name),
            ("Email", form.email),
            ("Phone", form.phone),
            ("WhatsApp", form.whatsapp or "Not provided"),
            ("Industry", _with_custom(form.industry, form.custom_industry)),
            ("Services Interested", format_array_or_string(form.services)),
            ("Target Audience", _with_custom(form.target_audience, form.custom_target_audience)),
            ("Business Name", form.business_name),
            ("Your Role", form.your_role),
            ("Social Platforms", format_array_or_string(form.social_platforms)),
            ("How Did You Know", form.how_did_you_know or "Not specified"),
            ("Meeting Time", form.meeting_time or "Not specified"),
            ("Problem Statement", form.problem_statement),
        ]

    def contact_submission_email(self, form: ContactForm) -> str:
        """Render the notification for a contact form submission"""
        return self.render('contact_submission.html', rows=self.contact_rows(form))


# Singleton instance
_renderer = None


def get_email_renderer() -> EmailRenderer:
    """Get or create email renderer instance"""
    global _renderer
    if _renderer is None:
        _renderer = EmailRenderer()
    return _renderer


def get_contact_submission_email(form: ContactForm) -> str:
    renderer = get_email_renderer()
    return renderer.contact_submission_email(form)
