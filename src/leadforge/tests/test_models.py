"""
Unit tests for LeadForge Pydantic models.

Tests cover:
- Audit parsing from notes, including malformed and wrongly typed JSON
- Pin write-back preserving other note keys
- Lead defaults and coercion of absent or odd column values
- Status toggle transitions
- DeleteRequest validation and target selection
"""
import json

import pytest

from leadforge.models import (
    Audit,
    DeleteRequest,
    Lead,
    LeadStatus,
    PhoneType,
    StatusTransitionError,
    next_contact_status,
    set_pinned,
)


class TestAuditFromNotes:
    """Tests for Audit.from_notes()."""

    @pytest.mark.unit
    def test_malformed_json_gives_empty_audit(self):
        """Test malformed JSON is treated as an empty object."""
        assert Audit.from_notes("{not json") == Audit()

    @pytest.mark.unit
    def test_absent_notes_give_empty_audit(self):
        """Test None and empty strings parse to an empty audit."""
        assert Audit.from_notes(None) == Audit()
        assert Audit.from_notes("") == Audit()

    @pytest.mark.unit
    def test_non_object_json_gives_empty_audit(self):
        """Test JSON arrays and scalars are ignored."""
        assert Audit.from_notes("[1, 2, 3]") == Audit()
        assert Audit.from_notes('"just text"') == Audit()
        assert Audit.from_notes("null") == Audit()

    @pytest.mark.unit
    def test_fields_are_read(self):
        """Test declared fields are populated from the notes object."""
        notes = json.dumps({
            "source": "INDEED_GULF_HUNT",
            "market": "MIDDLE_EAST",
            "job_title": "React Developer",
            "founder_email": "ceo@example.com",
            "issues": ["No SSL", "Slow LCP"],
            "is_pinned": True,
            "is_gold_mine": True,
            "score": 87,
        })
        audit = Audit.from_notes(notes)

        assert audit.source == "INDEED_GULF_HUNT"
        assert audit.market == "MIDDLE_EAST"
        assert audit.job_title == "React Developer"
        assert audit.founder_email == "ceo@example.com"
        assert audit.issues == ["No SSL", "Slow LCP"]
        assert audit.is_pinned is True
        assert audit.is_gold_mine is True
        assert audit.score == 87.0
        assert audit.has_founder_contact is True

    @pytest.mark.unit
    def test_wrong_types_are_coerced(self):
        """Test wrongly typed values are coerced instead of rejected."""
        notes = json.dumps({
            "budget": 5000,
            "funding_amount": 2.5,
            "issues": "Broken checkout",
            "is_pinned": "true",
            "score": "not a number",
            "job_title": {"nested": "object"},
            "source": "   ",
        })
        audit = Audit.from_notes(notes)

        assert audit.budget == "5000"
        assert audit.funding_amount == "2.5"
        assert audit.issues == ["Broken checkout"]
        assert audit.is_pinned is True
        assert audit.score is None
        assert audit.job_title is None
        assert audit.source is None

    @pytest.mark.unit
    def test_unknown_keys_are_kept_as_extra(self):
        """Test keys outside the declared schema survive parsing."""
        audit = Audit.from_notes('{"crawler_version": 3}')

        assert audit.model_extra == {"crawler_version": 3}


class TestSetPinned:
    """Tests for set_pinned()."""

    @pytest.mark.unit
    def test_preserves_other_keys(self):
        """Test pinning keeps the rest of the notes object."""
        notes = set_pinned('{"keyword": "villa", "issues": ["a"]}', True)

        assert json.loads(notes) == {"keyword": "villa", "issues": ["a"], "is_pinned": True}

    @pytest.mark.unit
    def test_unpin(self):
        """Test unpinning writes false."""
        notes = set_pinned('{"is_pinned": true}', False)

        assert json.loads(notes) == {"is_pinned": False}

    @pytest.mark.unit
    def test_malformed_notes_are_replaced(self):
        """Test malformed notes become a fresh object."""
        assert json.loads(set_pinned("{oops", True)) == {"is_pinned": True}
        assert json.loads(set_pinned(None, True)) == {"is_pinned": True}


class TestLeadModel:
    """Tests for the Lead model."""

    @pytest.mark.unit
    def test_minimal_lead_defaults(self):
        """Test a lead with only an id gets safe defaults."""
        lead = Lead(id="lead-1")

        assert lead.business_name == ""
        assert lead.status == LeadStatus.NEW
        assert lead.rating == 0.0
        assert lead.review_count == 0
        assert lead.is_premium is False
        assert lead.has_website is False
        assert lead.audit == Audit()

    @pytest.mark.unit
    def test_null_numeric_columns_default_to_zero(self):
        """Test null rating and review_count are read as 0."""
        lead = Lead.model_validate({
            "id": "lead-2",
            "business_name": "Acme",
            "rating": None,
            "review_count": None,
            "quality_score": None,
            "is_premium": None,
        })

        assert lead.rating == 0.0
        assert lead.review_count == 0
        assert lead.quality_score == 0
        assert lead.is_premium is False

    @pytest.mark.unit
    def test_negative_review_count_is_clamped(self):
        """Test review_count is never negative."""
        assert Lead(id="x", review_count=-5).review_count == 0

    @pytest.mark.unit
    def test_integer_id_is_stringified(self):
        """Test numeric ids from the store become strings."""
        assert Lead.model_validate({"id": 42}).id == "42"

    @pytest.mark.unit
    def test_status_is_case_insensitive(self):
        """Test lowercase statuses are accepted."""
        assert Lead(id="x", status="contacted").status == LeadStatus.CONTACTED

    @pytest.mark.unit
    def test_unknown_status_falls_back_to_new(self):
        """Test unrecognized statuses read as NEW."""
        assert Lead(id="x", status="ARCHIVED").status == LeadStatus.NEW

    @pytest.mark.unit
    def test_phone_type_parsing(self):
        """Test phone_type accepts any case and drops unknown values."""
        assert Lead(id="x", phone_type="mobile").phone_type == PhoneType.MOBILE
        assert Lead(id="x", phone_type="satellite").phone_type is None

    @pytest.mark.unit
    def test_normalized_name(self):
        """Test the dedup identity trims and case-folds the name."""
        assert Lead(id="x", business_name="  Acme CORP ").normalized_name == "acme corp"

    @pytest.mark.unit
    def test_blank_website_counts_as_missing(self):
        """Test whitespace-only websites are treated as absent."""
        assert Lead(id="x", website="   ").has_website is False
        assert Lead(id="x", website="acme.com").has_website is True

    @pytest.mark.unit
    def test_trash_is_not_visible(self):
        """Test trashed leads are hidden."""
        assert Lead(id="x", status="TRASH").is_visible is False
        assert Lead(id="x", status="MANUAL").is_visible is True

    @pytest.mark.unit
    def test_unknown_columns_are_ignored(self):
        """Test extra store columns do not break validation."""
        lead = Lead.model_validate({"id": "x", "instagram": "@acme", "contacted": True})

        assert lead.id == "x"


class TestNextContactStatus:
    """Tests for the contacted toggle state machine."""

    @pytest.mark.unit
    def test_new_becomes_contacted(self):
        assert next_contact_status(LeadStatus.NEW) == LeadStatus.CONTACTED

    @pytest.mark.unit
    def test_contacted_becomes_new(self):
        assert next_contact_status(LeadStatus.CONTACTED) == LeadStatus.NEW

    @pytest.mark.unit
    def test_double_toggle_is_identity(self):
        """Test toggling twice returns to the starting status."""
        status = LeadStatus.NEW
        assert next_contact_status(next_contact_status(status)) == status

    @pytest.mark.unit
    @pytest.mark.parametrize("status", [LeadStatus.MANUAL, LeadStatus.TRASH])
    def test_other_states_cannot_toggle(self, status):
        """Test MANUAL and TRASH leads reject the toggle."""
        with pytest.raises(StatusTransitionError):
            next_contact_status(status)


class TestDeleteRequest:
    """Tests for DeleteRequest."""

    @pytest.mark.unit
    def test_requires_id_or_name(self):
        """Test an empty request is rejected."""
        with pytest.raises(ValueError):
            DeleteRequest()

    @pytest.mark.unit
    def test_name_takes_precedence(self):
        """Test deletion targets the business name when present."""
        request = DeleteRequest(id="lead-1", business_name="Acme")

        assert request.target() == ("business_name", "Acme")

    @pytest.mark.unit
    def test_falls_back_to_id(self):
        """Test deletion targets the id when no name is given."""
        assert DeleteRequest(id="lead-1").target() == ("id", "lead-1")
