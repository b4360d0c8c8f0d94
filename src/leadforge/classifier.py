"""Lead classifier: the ordered decision table behind every lead card.

This module turns a lead and its parsed notes into an ``Analysis``: the tag
shown on the card, the outreach pitch, the contact target and the URLs
the operator acts on.

Rules are evaluated top to bottom and the first match wins. Each rule is a
``Rule`` (name, guard, builder) in ``RULES``, so precedence can be read and
tested one entry at a time. The last rule always matches, which makes
classification total for any combination of present or absent fields.
"""

from collections import Counter
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Sequence

from . import pitches
from .logging_utils import get_logger, lead_logger
from .models import (
    Analysis,
    Audit,
    Channel,
    ClassifiedLead,
    HIRING_SOURCES,
    Lead,
    LeadTag,
    PhoneType,
)
from .phone import is_reachable
from .signals import is_aukat_strike, is_top_rated
from .sources import resolve_source

DIRECT_DEVELOPER_NEED = "DIRECT_DEVELOPER_NEED"

HIRING_PLATFORMS = {
    Channel.INDEED_GULF_HUNT.value: "Indeed",
    Channel.LINKEDIN_AUTH_SNIPE.value: "LinkedIn",
    Channel.CENTURION_GULF_HUNT.value: "Job Board",
}

FUNDED_SOURCES = frozenset({Channel.VERIFIED_FUNDING.value, Channel.FUNDED.value})

Guard = Callable[[Lead, Audit], bool]
Builder = Callable[[Lead, Audit], Dict[str, Any]]


@dataclass(frozen=True)
class Rule:
    """One row of the decision table.

    Attributes:
        name: Stable identifier reported in ``Analysis.rule``.
        matches: Guard deciding whether the rule applies.
        build: Produces the tag, pitch and any field overrides.
    """

    name: str
    matches: Guard
    build: Builder


def _is_ad_burner(lead: Lead, audit: Audit) -> bool:
    return lead.source == Channel.AD_BURNER_HUNT.value


def _build_ad_burner(lead: Lead, audit: Audit) -> Dict[str, Any]:
    return {
        "tag": LeadTag.CASH_BLEED,
        "accent": "rose",
        "pitch": pitches.cash_bleed_pitch(lead, audit),
        "platform": audit.platform or "Social Ads",
        "website_url": audit.target_url or lead.website,
    }


def _is_hirer(lead: Lead, audit: Audit) -> bool:
    return lead.source in HIRING_SOURCES


def _build_hirer(lead: Lead, audit: Audit) -> Dict[str, Any]:
    gold = audit.is_gold_mine
    return {
        "tag": LeadTag.GOLD_MINE if gold else LeadTag.MONEY_HUNT_HIRER,
        "accent": "amber" if gold else "green",
        "pitch": pitches.hiring_pitch(lead, audit),
        "email": audit.founder_email or lead.email,
        "platform": audit.platform or HIRING_PLATFORMS.get(lead.source or "", "Job Board"),
        "source_url": audit.job_url or lead.google_maps_url,
    }


def _is_hot_project(lead: Lead, audit: Audit) -> bool:
    return (
        lead.source == Channel.HIGH_INTENT_PROJECT.value
        or audit.source == Channel.HIGH_INTENT_PROJECT.value
        or audit.intent == DIRECT_DEVELOPER_NEED
    )


def _build_hot_project(lead: Lead, audit: Audit) -> Dict[str, Any]:
    return {
        "tag": LeadTag.PROJECT_HOT,
        "accent": "orange",
        "pitch": pitches.project_pitch(lead, audit),
        "platform": audit.platform or "Freelancer",
        "source_url": audit.project_url or lead.google_maps_url,
        "budget": audit.budget or "Inquiry",
    }


def _is_bypass_mission(lead: Lead, audit: Audit) -> bool:
    return lead.source == Channel.MISSION_CONTROL.value or audit.has_founder_contact


def _build_bypass_mission(lead: Lead, audit: Audit) -> Dict[str, Any]:
    platform = audit.platform or "Job Board"
    return {
        "tag": LeadTag.BYPASS_MISSION,
        "accent": "red",
        "pitch": pitches.bypass_pitch(lead, audit, platform),
        "email": audit.founder_email or lead.email,
        "platform": platform,
        "source_url": audit.job_url or lead.google_maps_url,
    }


def _is_premium(lead: Lead, audit: Audit) -> bool:
    return lead.is_premium


def _build_premium(lead: Lead, audit: Audit) -> Dict[str, Any]:
    return {
        "tag": LeadTag.PREMIUM_TARGET,
        "accent": "yellow",
        "pitch": pitches.premium_pitch(lead),
        "platform": "LinkedIn",
    }


def _is_aukat(lead: Lead, audit: Audit) -> bool:
    return is_aukat_strike(lead)


def _build_aukat(lead: Lead, audit: Audit) -> Dict[str, Any]:
    return {
        "tag": LeadTag.AUKAT_STRIKE,
        "accent": "red",
        "pitch": pitches.aukat_pitch(lead),
        "platform": "Google Maps",
    }


def _is_top_rated(lead: Lead, audit: Audit) -> bool:
    return is_top_rated(lead)


def _build_top_rated(lead: Lead, audit: Audit) -> Dict[str, Any]:
    return {
        "tag": LeadTag.TOP_RATED,
        "accent": "purple",
        "pitch": pitches.top_rated_pitch(lead),
        "platform": "Google Maps",
    }


def _has_no_website(lead: Lead, audit: Audit) -> bool:
    return not lead.has_website


def _build_no_website(lead: Lead, audit: Audit) -> Dict[str, Any]:
    # A mobile line can take the WhatsApp pitch straight away
    gold = lead.phone_type == PhoneType.MOBILE and is_reachable(lead.phone)
    return {
        "tag": LeadTag.NO_WEBSITE_GOLD if gold else LeadTag.NO_WEBSITE,
        "accent": "emerald",
        "pitch": pitches.no_website_pitch(lead),
        "platform": "Google Maps",
    }


def _is_funded(lead: Lead, audit: Audit) -> bool:
    return (
        lead.source in FUNDED_SOURCES
        or audit.source == Channel.VERIFIED_FUNDING.value
        or lead.business_name.startswith("[FUNDED]")
        or bool(audit.funding_amount)
    )


def _always(lead: Lead, audit: Audit) -> bool:
    return True


def _build_default(lead: Lead, audit: Audit) -> Dict[str, Any]:
    if _is_funded(lead, audit):
        return {
            "tag": LeadTag.GROWTH_TARGET,
            "accent": "cyan",
            "pitch": pitches.funded_pitch(lead, audit),
            "platform": "Direct Email",
        }
    maps_url = lead.google_maps_url or ""
    return {
        "tag": LeadTag.OPTIMIZATION,
        "accent": "slate",
        "pitch": pitches.optimization_pitch(lead),
        "platform": "Google Maps" if "maps" in maps_url else "Source",
    }


RULES: Sequence[Rule] = (
    Rule("ad_burner", _is_ad_burner, _build_ad_burner),
    Rule("hiring_intent", _is_hirer, _build_hirer),
    Rule("hot_project", _is_hot_project, _build_hot_project),
    Rule("bypass_mission", _is_bypass_mission, _build_bypass_mission),
    Rule("premium", _is_premium, _build_premium),
    Rule("aukat_strike", _is_aukat, _build_aukat),
    Rule("top_rated", _is_top_rated, _build_top_rated),
    Rule("no_website", _has_no_website, _build_no_website),
    Rule("default", _always, _build_default),
)


def match_rule(lead: Lead, audit: Audit, rules: Sequence[Rule] = RULES) -> int:
    """Return the index of the first rule whose guard accepts the lead."""
    for index, rule in enumerate(rules):
        if rule.matches(lead, audit):
            return index
    raise LookupError("Rule table has no catch-all rule")


def analyze(lead: Lead, audit: Optional[Audit] = None, rules: Sequence[Rule] = RULES) -> Analysis:
    """Classify a single lead.

    Args:
        lead: The lead to classify.
        audit: Pre-parsed notes; parsed from ``lead.notes`` when omitted.
        rules: Decision table, ``RULES`` by default.

    Returns:
        Analysis bundle. Fields the matched rule does not set fall back to
        the lead's own email, website and maps profile.
    """
    if audit is None:
        audit = lead.audit

    index = match_rule(lead, audit, rules)
    rule = rules[index]

    fields: Dict[str, Any] = {
        "email": lead.email,
        "website_url": lead.website,
        "source_url": lead.google_maps_url,
        "is_pinned": audit.is_pinned,
        "audit": audit,
    }
    fields.update(rule.build(lead, audit))

    return Analysis(rule=rule.name, priority=index + 1, **fields)


class LeadClassifier:
    """Classifier combining source resolution and the rule table.

    Attributes:
        rules: The ordered decision table in use.
    """

    def __init__(self, rules: Optional[Sequence[Rule]] = None):
        self.logger = get_logger(__name__)
        self.rules: Sequence[Rule] = tuple(rules) if rules is not None else RULES

        if not self.rules or self.rules[-1].name != "default":
            self.logger.warning(
                "Rule table does not end with the default rule",
                extra={"rules": [rule.name for rule in self.rules]},
            )

    def classify(self, lead: Lead) -> ClassifiedLead:
        """Resolve the channel and analysis for one lead.

        The notes blob is parsed once and shared by both steps.
        """
        audit = lead.audit
        analysis = analyze(lead, audit, self.rules)
        channel = resolve_source(lead, audit)

        lead_logger(self.logger, lead.id, channel=channel).debug(
            "Lead classified",
            extra={"tag": analysis.tag.value, "rule": analysis.rule},
        )

        return ClassifiedLead(lead=lead, channel=channel, analysis=analysis)

    def classify_batch(self, leads: List[Lead]) -> List[ClassifiedLead]:
        """Classify leads, preserving input order."""
        results = [self.classify(lead) for lead in leads]

        self.logger.info(
            "Batch classification completed",
            extra={"total": len(results), "tags": dict(self.tag_counts(results))},
        )

        return results

    @staticmethod
    def tag_counts(classified: List[ClassifiedLead]) -> Counter:
        return Counter(item.analysis.tag.value for item in classified)

    def get_stats(self) -> dict:
        """Get classifier configuration."""
        return {
            "rules": [rule.name for rule in self.rules],
            "tags": [tag.value for tag in LeadTag],
        }
