"""Lead listings: visibility, deduplication, filtering, ordering and stats."""

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

from .classifier import LeadClassifier
from .models import ClassifiedLead, Lead, LeadStatus
from .signals import is_aukat_strike
from .sources import SourceTab, count_by_tab, matches_tab, resolve_source

# quality_score above which a lead counts as "hot" on the stat tiles
HOT_QUALITY_SCORE = 60


def visible_leads(leads: Iterable[Lead]) -> List[Lead]:
    """Drop trashed leads."""
    return [lead for lead in leads if lead.is_visible]


def dedupe_leads(leads: Iterable[Lead]) -> List[Lead]:
    """Keep the first lead seen for each normalized business name.

    Leads without a name have no name identity and are all kept.
    """
    seen: set = set()
    unique: List[Lead] = []

    for lead in leads:
        key = lead.normalized_name
        if key:
            if key in seen:
                continue
            seen.add(key)
        unique.append(lead)

    return unique


def sort_key(item: ClassifiedLead) -> Tuple[bool, bool, int]:
    """Composite key: pinned first, then Aukat strikes, then most reviewed."""
    return (
        not item.analysis.is_pinned,
        not item.is_aukat,
        -item.lead.review_count,
    )


def rank(items: Iterable[ClassifiedLead]) -> List[ClassifiedLead]:
    """Order classified leads for display; ties keep their input order."""
    return sorted(items, key=sort_key)


@dataclass
class LeadFilter:
    """Operator-selected listing filters.

    Attributes:
        tab: Source tab; ALL shows every channel.
        search: Case-insensitive business-name substring, or phone substring.
        premium_only: Only premium leads.
        campaign_id: Only leads of one campaign.
    """

    tab: SourceTab = SourceTab.ALL
    search: str = ""
    premium_only: bool = False
    campaign_id: Optional[str] = None

    def matches(self, item: ClassifiedLead) -> bool:
        lead = item.lead
        term = self.search.strip()
        if term:
            in_name = term.lower() in lead.business_name.lower()
            in_phone = bool(lead.phone) and term in lead.phone  # type: ignore[operator]
            if not (in_name or in_phone):
                return False
        if self.premium_only and not lead.is_premium:
            return False
        if self.campaign_id is not None and lead.campaign_id != self.campaign_id:
            return False
        return matches_tab(item.channel, self.tab)


def build_listing(
    leads: Iterable[Lead],
    classifier: Optional[LeadClassifier] = None,
    lead_filter: Optional[LeadFilter] = None,
) -> List[ClassifiedLead]:
    """Produce the ordered card list for the dashboard.

    Trashed leads are removed, duplicates collapsed, the rest classified,
    filtered and ranked.
    """
    classifier = classifier or LeadClassifier()
    lead_filter = lead_filter or LeadFilter()

    classified = classifier.classify_batch(dedupe_leads(visible_leads(leads)))
    return rank(item for item in classified if lead_filter.matches(item))


@dataclass
class DashboardStats:
    """Header tile counts."""

    total: int = 0
    qualified: int = 0
    contacted: int = 0
    premium: int = 0
    aukat: int = 0
    pinned: int = 0


def compute_stats(leads: Iterable[Lead]) -> DashboardStats:
    """Count visible, deduplicated leads for the header tiles."""
    stats = DashboardStats()
    for lead in dedupe_leads(visible_leads(leads)):
        stats.total += 1
        if lead.quality_score > HOT_QUALITY_SCORE:
            stats.qualified += 1
        if lead.status == LeadStatus.CONTACTED:
            stats.contacted += 1
        if lead.is_premium:
            stats.premium += 1
        if is_aukat_strike(lead):
            stats.aukat += 1
        if lead.audit.is_pinned:
            stats.pinned += 1
    return stats


def tab_counts(leads: Iterable[Lead]) -> Dict[SourceTab, int]:
    """Count badge per source tab over visible, deduplicated leads."""
    return count_by_tab(resolve_source(lead) for lead in dedupe_leads(visible_leads(leads)))
