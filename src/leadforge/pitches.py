"""Outreach pitch templates.

Each classifier rule renders its message through one of the functions
below. Templates are plain ``str.format`` strings so copy edits stay out of
the rule logic.

Premium leads rotate between several openers. The variant is picked by
``stable_variant`` from the lead id, so a card shows the same message on
every render instead of reshuffling.
"""

from typing import Optional, Sequence

from .models import Audit, Lead
from .sources import strip_name_prefix

DEFAULT_FOUNDER = "Founder"

REAL_ESTATE_ROLE_KEYWORDS = ("real estate", "property", "realty", "broker", "leasing")
TECH_ROLE_KEYWORDS = (
    "developer", "engineer", "react", "next.js", "nextjs", "full stack",
    "fullstack", "frontend", "front-end", "backend", "software", "web",
    "programmer",
)

CASH_BLEED_TEMPLATE = (
    "Hi {name}, I noticed your ads for \"{keyword}\" are live, but {reason}. "
    "Every click that lands there is budget burned. I can rebuild the landing "
    "page this week so the spend converts. Worth a quick look?"
)

HIRING_REAL_ESTATE_TEMPLATE = (
    "Hi {name}, I saw you're hiring a {role}. Before you add headcount: I build "
    "property portals with instant WhatsApp lead capture, so every listing "
    "enquiry reaches your agents in seconds. Can I show you a demo?"
)
HIRING_TECH_TEMPLATE = (
    "Hi {name}, I saw your opening for a {role}. Instead of a months-long hiring "
    "cycle, my team can ship the work directly, starting this week, with no "
    "recruitment overhead. Open to a 5-min call?"
)
HIRING_GENERIC_TEMPLATE = (
    "Hi {name}, I noticed you're hiring for {role}. A lot of that workload can be "
    "automated with a custom web system. Happy to show you how, open to a chat?"
)

PROJECT_PLACEHOLDER_TEMPLATE = "Custom pitch for {title} is being prepared..."

BYPASS_TEMPLATE = (
    "Hi {founder}, I saw {platform} mentioned that you're looking for a "
    "{job_title}. I'm a developer specializing in rapid high-performance builds. "
    "Skip the portal clutter, let's handle this direct. Open to a 2-min chat?"
)

PREMIUM_TEMPLATES: Sequence[str] = (
    "Hi {name}, I saw your profile on LinkedIn. I have a growth strategy "
    "specifically for your niche. Open to a 5-min audit chat?",
    "Hi {name}, I've been studying top performers in your space and put together "
    "three quick wins for your online presence. Can I send them over?",
    "Hi {name}, businesses at your level usually lose enquiries to slow, dated "
    "pages. I build premium sites that convert. Worth a short call this week?",
)

AUKAT_TEMPLATE = (
    "Hi {name}, I saw your legacy profile with {reviews} reviews and a {rating} "
    "star rating. You're a leader in the market, but your digital presence is "
    "missing. Can we talk about a high-end Next.js page?"
)

TOP_RATED_TEMPLATE = (
    "Hi {name}, I saw you're one of the top-rated in the area ({rating} Stars), "
    "but I couldn't find your website. Interested?"
)

NO_WEBSITE_TEMPLATE = (
    "Hi {name}, noticed you don't have a website listed on Maps. We build "
    "professional web pages. Can I send a demo?"
)

FUNDED_TEMPLATE = (
    "Hi {founder}, congratulations on the {amount} funding for {company}! I am a "
    "developer specializing in rapid React/Next.js scaling. Given your new growth "
    "phase, I can help you ship features faster while you build your core team. "
    "Open to a brief chat?"
)

OPTIMIZATION_TEMPLATE = (
    "Hi {name}, I help businesses optimize their digital presence. Open to a chat?"
)


def stable_variant(key: str, count: int) -> int:
    """Pick a template index that never changes for the same key.

    The index is the sum of the key's code points modulo ``count``, so
    re-rendering a lead shows the same pitch.

    Args:
        key: Stable identifier, normally the lead id.
        count: Number of variants to choose from.

    Returns:
        Index in ``range(count)``.
    """
    if count <= 0:
        raise ValueError("count must be positive")
    return sum(ord(ch) for ch in key) % count


def _format_rating(rating: float) -> str:
    return f"{rating:.1f}"


def display_name(lead: Lead) -> str:
    """Business name without scraper prefixes, or a neutral fallback."""
    return strip_name_prefix(lead.business_name) or "there"


def role_family(role: Optional[str]) -> str:
    """Classify a job title as ``real_estate``, ``tech`` or ``generic``."""
    lowered = (role or "").lower()
    if any(word in lowered for word in REAL_ESTATE_ROLE_KEYWORDS):
        return "real_estate"
    if any(word in lowered for word in TECH_ROLE_KEYWORDS):
        return "tech"
    return "generic"


def cash_bleed_pitch(lead: Lead, audit: Audit) -> str:
    return CASH_BLEED_TEMPLATE.format(
        name=display_name(lead),
        keyword=audit.keyword or "your offer",
        reason=audit.fail_reason or "the landing page is leaking clicks",
    )


def hiring_pitch(lead: Lead, audit: Audit) -> str:
    """Hiring-intent pitch, worded for the advertised role's field."""
    role = audit.role or audit.job_title
    family = role_family(role)
    if family == "real_estate":
        template = HIRING_REAL_ESTATE_TEMPLATE
    elif family == "tech":
        template = HIRING_TECH_TEMPLATE
    else:
        template = HIRING_GENERIC_TEMPLATE
    return template.format(name=display_name(lead), role=role or "this role")


def project_title(lead: Lead, audit: Audit) -> str:
    return audit.job_title or display_name(lead)


def project_pitch(lead: Lead, audit: Audit) -> str:
    if audit.ai_proposal:
        return audit.ai_proposal
    return PROJECT_PLACEHOLDER_TEMPLATE.format(title=project_title(lead, audit))


def founder_name(lead: Lead, audit: Audit) -> str:
    return audit.founder_name or lead.contact_name or DEFAULT_FOUNDER


def bypass_pitch(lead: Lead, audit: Audit, platform: str) -> str:
    if audit.connection_pitch:
        return audit.connection_pitch
    return BYPASS_TEMPLATE.format(
        founder=founder_name(lead, audit),
        platform=platform,
        job_title=audit.job_title or "Project",
    )


def premium_pitch(lead: Lead) -> str:
    template = PREMIUM_TEMPLATES[stable_variant(lead.id, len(PREMIUM_TEMPLATES))]
    return template.format(name=lead.contact_name or display_name(lead))


def aukat_pitch(lead: Lead) -> str:
    return AUKAT_TEMPLATE.format(
        name=display_name(lead),
        reviews=lead.review_count,
        rating=_format_rating(lead.rating),
    )


def top_rated_pitch(lead: Lead) -> str:
    return TOP_RATED_TEMPLATE.format(
        name=display_name(lead), rating=_format_rating(lead.rating)
    )


def no_website_pitch(lead: Lead) -> str:
    return NO_WEBSITE_TEMPLATE.format(name=display_name(lead))


def funded_pitch(lead: Lead, audit: Audit) -> str:
    return FUNDED_TEMPLATE.format(
        founder=lead.contact_name or DEFAULT_FOUNDER,
        amount=audit.funding_amount or "Seed",
        company=display_name(lead),
    )


def optimization_pitch(lead: Lead) -> str:
    return OPTIMIZATION_TEMPLATE.format(name=display_name(lead))
