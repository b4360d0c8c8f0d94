"""Source resolution: which acquisition channel produced a lead.

``resolve_source`` walks an ordered list of checks and returns the first
channel that matches. Several checks overlap (a Gulf hunt lead usually has
a notes ``source`` too), so the order below is part of the contract.
"""

import re
from enum import Enum
from typing import Dict, Iterable, Optional, Tuple

from .models import Audit, Channel, HIRING_SOURCES, Lead
from .signals import is_high_value_sniper, is_quality_sniper

MAPS_PROFILE_MARKER = "google.com/maps"

# Bracketed name prefixes written by the HN/Reddit/funding/project scrapers
NAME_PREFIXES: Tuple[Tuple[str, str], ...] = (
    ("[HN]", Channel.HACKER_NEWS.value),
    ("[Reddit]", Channel.REDDIT.value),
    ("[FUNDED]", Channel.VERIFIED_FUNDING.value),
    ("[PROJECT]", Channel.HIGH_INTENT_PROJECT.value),
)

# Codes passed through unchanged as their own channel
CAMPAIGN_CODES = frozenset({
    Channel.AD_BURNER_HUNT.value,
    Channel.MISSION_CONTROL.value,
    Channel.VERIFIED_FUNDING.value,
    Channel.FUNDED.value,
    Channel.HIGH_INTENT_PROJECT.value,
    Channel.HIGH_VALUE_SNIPER.value,
    Channel.QUALITY_SNIPER.value,
    Channel.GOOGLE_MAPS.value,
})

# e.g. DUBAI_BLITZ_2026_01, SPA_RUN_20260115
DATE_CODED_CAMPAIGN = re.compile(r"^[A-Z][A-Z0-9]*(?:_[A-Z0-9]+)*_20\d{2}(?:_?\d{2}){0,2}$")


def is_campaign_code(source: Optional[str]) -> bool:
    """Check whether a raw source value is a recognized campaign code."""
    if not source:
        return False
    return source in CAMPAIGN_CODES or bool(DATE_CODED_CAMPAIGN.match(source))


def channel_from_name(business_name: str) -> Optional[str]:
    """Map a bracketed business-name prefix to its channel."""
    for prefix, channel in NAME_PREFIXES:
        if business_name.startswith(prefix):
            return channel
    return None


def strip_name_prefix(business_name: str) -> str:
    """Remove a leading source marker such as ``[FUNDED] `` from a name."""
    for prefix, _ in NAME_PREFIXES:
        if business_name.startswith(prefix):
            return business_name[len(prefix):].strip()
    return business_name


def resolve_source(lead: Lead, audit: Optional[Audit] = None) -> str:
    """Assign a lead to exactly one acquisition channel.

    Args:
        lead: The lead to resolve.
        audit: Pre-parsed notes; parsed from ``lead.notes`` when omitted.

    Returns:
        Channel code string, ``UNKNOWN`` when nothing matches.
    """
    if audit is None:
        audit = lead.audit

    if audit.source or lead.source in HIRING_SOURCES:
        return Channel.MONEY_HUNT.value

    if audit.market == "MIDDLE_EAST" or lead.source == Channel.GULF_SNIPER.value:
        return Channel.GULF.value

    if is_campaign_code(lead.source):
        return lead.source  # type: ignore[return-value]

    from_name = channel_from_name(lead.business_name)
    if from_name:
        return from_name

    if not lead.source:
        if is_high_value_sniper(lead):
            return Channel.HIGH_VALUE_SNIPER.value
        if is_quality_sniper(lead):
            return Channel.QUALITY_SNIPER.value

    if lead.google_maps_url and MAPS_PROFILE_MARKER in lead.google_maps_url:
        return Channel.GOOGLE_MAPS.value

    return Channel.UNKNOWN.value


class SourceTab(str, Enum):
    """Dashboard tabs that filter leads by resolved channel."""

    ALL = "ALL"
    MONEY_HUNT = "MONEY_HUNT"
    GULF = "GULF"
    GOOGLE_MAPS = "GOOGLE_MAPS"
    HACKER_NEWS = "HACKER_NEWS"
    REDDIT = "REDDIT"
    FUNDED = "FUNDED"
    SNIPER = "SNIPER"


TAB_CHANNELS: Dict[SourceTab, frozenset] = {
    SourceTab.MONEY_HUNT: frozenset({Channel.MONEY_HUNT.value}),
    SourceTab.GULF: frozenset({Channel.GULF.value, Channel.GULF_SNIPER.value}),
    SourceTab.GOOGLE_MAPS: frozenset({Channel.GOOGLE_MAPS.value}),
    SourceTab.HACKER_NEWS: frozenset({Channel.HACKER_NEWS.value}),
    SourceTab.REDDIT: frozenset({Channel.REDDIT.value}),
    SourceTab.FUNDED: frozenset({Channel.VERIFIED_FUNDING.value, Channel.FUNDED.value}),
    SourceTab.SNIPER: frozenset({
        Channel.HIGH_VALUE_SNIPER.value,
        Channel.QUALITY_SNIPER.value,
    }),
}


def matches_tab(channel: str, tab: SourceTab) -> bool:
    """Check whether a resolved channel belongs under a tab."""
    if tab == SourceTab.ALL:
        return True
    return channel in TAB_CHANNELS[tab]


def count_by_tab(channels: Iterable[str]) -> Dict[SourceTab, int]:
    """Count resolved channels per tab; ALL counts everything."""
    counts = {tab: 0 for tab in SourceTab}
    for channel in channels:
        counts[SourceTab.ALL] += 1
        for tab, members in TAB_CHANNELS.items():
            if channel in members:
                counts[tab] += 1
    return counts
