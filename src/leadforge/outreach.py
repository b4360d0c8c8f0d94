"""Outbound deep links: WhatsApp chats and pre-filled emails."""

from dataclasses import dataclass
from typing import Optional
from urllib.parse import quote

from .config import config
from .models import Analysis
from .phone import is_reachable, normalize_phone

# Characters left alone by JavaScript's encodeURIComponent
_URI_COMPONENT_SAFE = "-_.!~*'()"


def encode_uri_component(value: str) -> str:
    """Percent-encode a string the way browsers encode query components."""
    return quote(value, safe=_URI_COMPONENT_SAFE)


def whatsapp_link(
    phone: Optional[str], text: str, base_url: Optional[str] = None
) -> Optional[str]:
    """Build a WhatsApp chat link with a pre-filled message.

    Args:
        phone: Free-text phone number of the lead.
        text: Message to pre-fill, usually the pitch.
        base_url: Messaging base URL; defaults to config.WHATSAPP_BASE_URL.

    Returns:
        ``<base>/<normalized-phone>?text=<encoded>``, or None when the phone
        is not reachable.
    """
    if not is_reachable(phone):
        return None
    base = (base_url or config.WHATSAPP_BASE_URL).rstrip("/")
    return f"{base}/{normalize_phone(phone)}?text={encode_uri_component(text)}"


def mailto_link(email: str, subject: str, body: str) -> str:
    return (
        f"mailto:{email}"
        f"?subject={encode_uri_component(subject)}"
        f"&body={encode_uri_component(body)}"
    )


@dataclass
class DirectEmail:
    """Subject and body of a founder-direct email."""

    subject: str
    body: str


def compose_direct_email(analysis: Analysis, sender: Optional[str] = None) -> DirectEmail:
    """Write the direct email offered on cards with a contact email."""
    audit = analysis.audit
    job_title = audit.job_title
    founder = audit.founder_name or "Founder"
    signature = sender or config.OUTREACH_SENDER_NAME

    subject = f"Regarding your {job_title or 'project'} proposal"
    body = (
        f"Hi {founder},\n\n"
        f"I saw your post regarding {job_title or 'hiring'}. Instead of a freelance "
        f"headache, my agency can deliver this project directly with 24/7 support.\n\n"
        f"Best regards,\n{signature}"
    )
    return DirectEmail(subject=subject, body=body)


def direct_email_link(analysis: Analysis, sender: Optional[str] = None) -> Optional[str]:
    """``mailto:`` link for the analysis' contact email, if it has one."""
    if not analysis.email:
        return None
    email = compose_direct_email(analysis, sender)
    return mailto_link(analysis.email, email.subject, email.body)
