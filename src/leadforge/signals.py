"""Reputation signals shared by source resolution and lead classification.

The dashboard's tab counts, stat tiles and card tags all ask the same
questions of a lead: does it have a website, how many reviews, how well
rated. The thresholds live here so those views cannot disagree.
"""

from typing import Tuple

from .models import Lead

# Classifier tiers for businesses without a website
STRIKE_MIN_RATING = 4.5
STRIKE_MIN_REVIEWS = 100
TOP_RATED_MIN_REVIEWS = 50

# Legacy sniper buckets for rows with no recorded source
SNIPER_MIN_REVIEWS = 100
SNIPER_MIN_RATING = 4.7
QUALITY_MIN_REVIEWS = 70

HIGH_VALUE_KEYWORDS: Tuple[str, ...] = (
    "luxury", "premium", "diamond", "gold", "jewel", "realty", "estate",
    "robotic", "implant", "architect", "villa", "residency", "heights",
    "developer", "associate", "international", "wedding", "event",
    "clinic", "fitness", "gym", "skin", "derma", "dental",
)


def has_high_value_keyword(name: str) -> bool:
    """Case-insensitive substring match against the high-value keyword list."""
    lowered = (name or "").lower()
    return any(keyword in lowered for keyword in HIGH_VALUE_KEYWORDS)


def is_aukat_strike(lead: Lead) -> bool:
    """Established, well-rated business with no website."""
    return (
        not lead.has_website
        and lead.rating >= STRIKE_MIN_RATING
        and lead.review_count >= STRIKE_MIN_REVIEWS
    )


def is_top_rated(lead: Lead) -> bool:
    return (
        not lead.has_website
        and lead.rating >= STRIKE_MIN_RATING
        and lead.review_count >= TOP_RATED_MIN_REVIEWS
    )


def _is_callable_without_site(lead: Lead) -> bool:
    return not lead.has_website and bool(lead.phone)


def is_high_value_sniper(lead: Lead) -> bool:
    """100+ review business with a phone, no site, and a premium niche or 4.7+ rating."""
    if not _is_callable_without_site(lead):
        return False
    if lead.review_count < SNIPER_MIN_REVIEWS:
        return False
    return (
        has_high_value_keyword(lead.business_name)
        or lead.rating >= SNIPER_MIN_RATING
    )


def is_quality_sniper(lead: Lead) -> bool:
    return (
        _is_callable_without_site(lead)
        and lead.review_count >= QUALITY_MIN_REVIEWS
        and lead.rating >= SNIPER_MIN_RATING
    )
