"""
Unit tests for lead listings.

Tests cover:
- Trash hiding and name-based deduplication
- Ordering: pinned, then Aukat strikes, then review count
- Search, premium, campaign and tab filters
- Header stats and tab counts over the same visible set
"""
import json

import pytest

from leadforge.classifier import LeadClassifier
from leadforge.listing import (
    LeadFilter,
    build_listing,
    compute_stats,
    dedupe_leads,
    rank,
    tab_counts,
    visible_leads,
)
from leadforge.models import Lead, set_pinned
from leadforge.sources import SourceTab


def make_lead(lead_id: str, name: str, **overrides) -> Lead:
    fields = {"id": lead_id, "business_name": name, "website": "https://site.example"}
    fields.update(overrides)
    return Lead(**fields)


@pytest.fixture
def classifier():
    return LeadClassifier()


class TestVisibilityAndDedup:
    """Tests for trash hiding and deduplication."""

    @pytest.mark.unit
    def test_trash_is_hidden(self):
        leads = [make_lead("1", "Acme"), make_lead("2", "Beta", status="TRASH")]

        assert [lead.id for lead in visible_leads(leads)] == ["1"]

    @pytest.mark.unit
    def test_first_name_occurrence_wins(self):
        """Test names differing only by case and whitespace collapse."""
        leads = [make_lead("1", "Acme Corp"), make_lead("2", "  acme corp  ")]

        assert [lead.id for lead in dedupe_leads(leads)] == ["1"]

    @pytest.mark.unit
    def test_nameless_leads_are_all_kept(self):
        leads = [make_lead("1", ""), make_lead("2", "")]

        assert len(dedupe_leads(leads)) == 2

    @pytest.mark.unit
    def test_listing_dedupes(self, classifier):
        leads = [make_lead("1", "Acme Corp"), make_lead("2", "  acme corp  ")]

        listing = build_listing(leads, classifier)

        assert len(listing) == 1
        assert listing[0].lead.id == "1"

    @pytest.mark.unit
    def test_trashed_duplicate_does_not_shadow(self, classifier):
        """Test trash is removed before deduplication."""
        leads = [
            make_lead("1", "Acme Corp", status="TRASH"),
            make_lead("2", "Acme Corp"),
        ]

        listing = build_listing(leads, classifier)

        assert [item.lead.id for item in listing] == ["2"]


class TestOrdering:
    """Tests for listing order."""

    @pytest.mark.unit
    def test_pinned_first(self, classifier):
        leads = [
            make_lead("1", "Big", review_count=900),
            make_lead("2", "Pinned", review_count=3, notes=json.dumps({"is_pinned": True})),
        ]

        listing = build_listing(leads, classifier)

        assert [item.lead.id for item in listing] == ["2", "1"]

    @pytest.mark.unit
    def test_aukat_before_higher_reviews(self, classifier):
        leads = [
            make_lead("1", "Big Site", review_count=900, rating=4.9),
            make_lead("2", "Strike", website=None, review_count=120, rating=4.6),
        ]

        listing = build_listing(leads, classifier)

        assert [item.lead.id for item in listing] == ["2", "1"]

    @pytest.mark.unit
    def test_review_count_descending(self, classifier):
        leads = [
            make_lead("1", "Small", review_count=5),
            make_lead("2", "Large", review_count=50),
            make_lead("3", "Medium", review_count=20),
        ]

        listing = build_listing(leads, classifier)

        assert [item.lead.id for item in listing] == ["2", "3", "1"]

    @pytest.mark.unit
    def test_ties_keep_input_order(self, classifier):
        leads = [make_lead(str(i), f"Shop {i}", review_count=10) for i in range(4)]

        ranked = rank(classifier.classify_batch(leads))

        assert [item.lead.id for item in ranked] == ["0", "1", "2", "3"]

    @pytest.mark.unit
    def test_pin_toggle_round_trip(self, classifier):
        """Test pinning then unpinning restores the original position."""
        leads = [
            make_lead("1", "Top", review_count=100),
            make_lead("2", "Bottom", review_count=1),
        ]
        before = [item.lead.id for item in build_listing(leads, classifier)]

        pinned = leads[1].model_copy(update={"notes": set_pinned(leads[1].notes, True)})
        assert build_listing([leads[0], pinned], classifier)[0].lead.id == "2"

        unpinned = pinned.model_copy(update={"notes": set_pinned(pinned.notes, False)})
        after = [item.lead.id for item in build_listing([leads[0], unpinned], classifier)]

        assert after == before


class TestFilters:
    """Tests for LeadFilter."""

    @pytest.fixture
    def leads(self):
        return [
            make_lead("1", "Marina Dental", phone="+971 50 111 2222", campaign_id="c1"),
            make_lead("2", "Desert Gym", is_premium=True, campaign_id="c2"),
            make_lead("3", "[HN] Acme", phone="0509998888"),
            make_lead("4", "Gulf Hire", source="GULF_SNIPER"),
        ]

    @pytest.mark.unit
    def test_search_by_name(self, classifier, leads):
        listing = build_listing(leads, classifier, LeadFilter(search="dental"))

        assert [item.lead.id for item in listing] == ["1"]

    @pytest.mark.unit
    def test_search_by_phone(self, classifier, leads):
        listing = build_listing(leads, classifier, LeadFilter(search="999"))

        assert [item.lead.id for item in listing] == ["3"]

    @pytest.mark.unit
    def test_premium_only(self, classifier, leads):
        listing = build_listing(leads, classifier, LeadFilter(premium_only=True))

        assert [item.lead.id for item in listing] == ["2"]

    @pytest.mark.unit
    def test_campaign(self, classifier, leads):
        listing = build_listing(leads, classifier, LeadFilter(campaign_id="c1"))

        assert [item.lead.id for item in listing] == ["1"]

    @pytest.mark.unit
    def test_tab(self, classifier, leads):
        hn = build_listing(leads, classifier, LeadFilter(tab=SourceTab.HACKER_NEWS))
        gulf = build_listing(leads, classifier, LeadFilter(tab=SourceTab.GULF))

        assert [item.lead.id for item in hn] == ["3"]
        assert [item.lead.id for item in gulf] == ["4"]

    @pytest.mark.unit
    def test_default_filter_shows_everything(self, classifier, leads):
        assert len(build_listing(leads, classifier)) == 4


class TestStats:
    """Tests for compute_stats and tab_counts."""

    @pytest.mark.unit
    def test_compute_stats(self):
        leads = [
            make_lead("1", "Hot", quality_score=80, status="CONTACTED"),
            make_lead("2", "Cold", quality_score=60, is_premium=True),
            make_lead("3", "Strike", website=None, rating=4.8, review_count=200,
                      notes=json.dumps({"is_pinned": True})),
            make_lead("4", "hot  ", quality_score=99),
            make_lead("5", "Gone", status="TRASH", quality_score=99),
        ]

        stats = compute_stats(leads)

        assert stats.total == 3
        assert stats.qualified == 1
        assert stats.contacted == 1
        assert stats.premium == 1
        assert stats.aukat == 1
        assert stats.pinned == 1

    @pytest.mark.unit
    def test_tab_counts_skip_trash_and_duplicates(self):
        leads = [
            make_lead("1", "[HN] One"),
            make_lead("2", "[hn] one"),
            make_lead("3", "[Reddit] Two"),
            make_lead("4", "[Reddit] Three", status="TRASH"),
        ]

        counts = tab_counts(leads)

        assert counts[SourceTab.ALL] == 2
        assert counts[SourceTab.HACKER_NEWS] == 1
        assert counts[SourceTab.REDDIT] == 1
