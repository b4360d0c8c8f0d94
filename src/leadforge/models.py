"""Pydantic models for LeadForge data structures."""

import json
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator


class LeadStatus(str, Enum):
    """Lifecycle status of a lead."""

    NEW = "NEW"
    CONTACTED = "CONTACTED"
    MANUAL = "MANUAL"
    TRASH = "TRASH"


class PhoneType(str, Enum):
    """Kind of phone line recorded for a lead."""

    MOBILE = "MOBILE"
    LANDLINE = "LANDLINE"


class Channel(str, Enum):
    """Acquisition channel and campaign codes."""

    # Raw campaign codes written by ingestion jobs
    AD_BURNER_HUNT = "AD_BURNER_HUNT"
    INDEED_GULF_HUNT = "INDEED_GULF_HUNT"
    LINKEDIN_AUTH_SNIPE = "LINKEDIN_AUTH_SNIPE"
    CENTURION_GULF_HUNT = "CENTURION_GULF_HUNT"
    MISSION_CONTROL = "MISSION_CONTROL"
    VERIFIED_FUNDING = "VERIFIED_FUNDING"
    FUNDED = "FUNDED"
    HIGH_INTENT_PROJECT = "HIGH_INTENT_PROJECT"
    GULF_SNIPER = "GULF_SNIPER"

    # Resolved channels
    MONEY_HUNT = "MONEY_HUNT"
    GULF = "GULF"
    HACKER_NEWS = "HACKER_NEWS"
    REDDIT = "REDDIT"
    GOOGLE_MAPS = "GOOGLE_MAPS"
    HIGH_VALUE_SNIPER = "HIGH_VALUE_SNIPER"
    QUALITY_SNIPER = "QUALITY_SNIPER"
    UNKNOWN = "UNKNOWN"


# Job-board hunts whose leads are companies hiring for a role
HIRING_SOURCES = frozenset({
    Channel.INDEED_GULF_HUNT.value,
    Channel.LINKEDIN_AUTH_SNIPE.value,
    Channel.CENTURION_GULF_HUNT.value,
})


class LeadTag(str, Enum):
    """Classification tags shown on lead cards."""

    CASH_BLEED = "Cash Bleed: Social Ads"
    GOLD_MINE = "Gold Mine"
    MONEY_HUNT_HIRER = "Money Hunt: Hirer"
    PROJECT_HOT = "Project: Hot"
    BYPASS_MISSION = "Bypass Mission"
    PREMIUM_TARGET = "Premium Target"
    AUKAT_STRIKE = "Aukat Strike Target"
    TOP_RATED = "Top Rated Target"
    NO_WEBSITE_GOLD = "No Website Gold"
    NO_WEBSITE = "No Website"
    GROWTH_TARGET = "Growth Target"
    OPTIMIZATION = "Optimization"


class StatusTransitionError(ValueError):
    """Raised when a lead status change is not allowed."""

    pass


def next_contact_status(status: LeadStatus) -> LeadStatus:
    """Return the status reached by the contacted toggle.

    Only NEW and CONTACTED flip into each other. MANUAL is assigned at
    creation and TRASH only by the delete path.

    Raises:
        StatusTransitionError: If the lead is not in a togglable state.
    """
    if status == LeadStatus.NEW:
        return LeadStatus.CONTACTED
    if status == LeadStatus.CONTACTED:
        return LeadStatus.NEW
    raise StatusTransitionError(
        f"Cannot toggle contacted state of a {LeadStatus(status).value} lead"
    )


_AUDIT_TEXT_FIELDS = (
    "source", "market", "intent", "job_title", "role", "budget",
    "founder_name", "founder_email", "founder_linkedin", "connection_pitch",
    "ai_proposal", "funding_amount", "keyword", "fail_reason", "target_url",
    "platform", "project_url", "job_url",
)


def _parse_notes_object(notes: Optional[str]) -> Dict[str, Any]:
    """Decode a notes blob into a dict, returning {} for anything else."""
    if not notes:
        return {}
    try:
        data = json.loads(notes)
    except (TypeError, ValueError):
        return {}
    return data if isinstance(data, dict) else {}


class Audit(BaseModel):
    """Typed view of the JSON annotation stored in a lead's notes.

    Every field is optional and defaulted. Values of the wrong type are
    coerced or dropped rather than rejected, so parsing never fails.
    """

    model_config = ConfigDict(extra="allow")

    source: Optional[str] = None
    market: Optional[str] = None
    intent: Optional[str] = None
    job_title: Optional[str] = None
    role: Optional[str] = None
    budget: Optional[str] = None
    founder_name: Optional[str] = None
    founder_email: Optional[str] = None
    founder_linkedin: Optional[str] = None
    connection_pitch: Optional[str] = None
    ai_proposal: Optional[str] = None
    funding_amount: Optional[str] = None
    keyword: Optional[str] = None
    fail_reason: Optional[str] = None
    target_url: Optional[str] = None
    platform: Optional[str] = None
    project_url: Optional[str] = None
    job_url: Optional[str] = None
    score: Optional[float] = None
    issues: List[str] = Field(default_factory=list)
    is_pinned: bool = False
    is_gold_mine: bool = False

    @field_validator(*_AUDIT_TEXT_FIELDS, mode="before")
    @classmethod
    def coerce_text(cls, v: Any) -> Optional[str]:
        """Stringify scalars and treat blanks as missing."""
        if isinstance(v, bool):
            return str(v).lower()
        if isinstance(v, (int, float)):
            return str(v)
        if isinstance(v, str):
            return v if v.strip() else None
        return None

    @field_validator("score", mode="before")
    @classmethod
    def coerce_score(cls, v: Any) -> Optional[float]:
        if v is None or isinstance(v, bool):
            return None
        try:
            return float(v)
        except (TypeError, ValueError):
            return None

    @field_validator("issues", mode="before")
    @classmethod
    def coerce_issues(cls, v: Any) -> List[str]:
        if isinstance(v, str):
            return [v] if v.strip() else []
        if isinstance(v, (list, tuple)):
            return [str(item) for item in v if item is not None]
        return []

    @field_validator("is_pinned", "is_gold_mine", mode="before")
    @classmethod
    def coerce_flag(cls, v: Any) -> bool:
        if isinstance(v, str):
            return v.strip().lower() in ("true", "1", "yes")
        return bool(v)

    @classmethod
    def from_notes(cls, notes: Optional[str]) -> "Audit":
        """Parse a notes blob, substituting an empty audit on any failure."""
        data = _parse_notes_object(notes)
        try:
            return cls.model_validate(data)
        except ValidationError:
            return cls()

    @property
    def has_founder_contact(self) -> bool:
        return bool(self.founder_linkedin or self.founder_email)


def set_pinned(notes: Optional[str], pinned: bool) -> str:
    """Return a notes blob with ``is_pinned`` set, keeping every other key.

    Malformed or non-object notes are replaced by a fresh object.
    """
    data = _parse_notes_object(notes)
    data["is_pinned"] = pinned
    return json.dumps(data)


class Lead(BaseModel):
    """A prospective business contact record as stored in the lead table."""

    model_config = ConfigDict(extra="ignore")

    id: str = Field(..., description="Opaque unique identifier")
    business_name: str = Field(default="", description="Display name")
    status: LeadStatus = Field(default=LeadStatus.NEW, description="Lifecycle status")

    # Contact channels
    phone: Optional[str] = Field(default=None, description="Free-text phone number")
    phone_type: Optional[PhoneType] = Field(default=None, description="Line type")
    email: Optional[str] = Field(default=None, description="Contact email")
    contact_name: Optional[str] = Field(default=None, description="Contact person")

    # Presence
    website: Optional[str] = Field(default=None, description="Business website")
    google_maps_url: Optional[str] = Field(default=None, description="Maps profile URL")
    address: Optional[str] = Field(default=None, description="Street address")

    # Reputation
    rating: float = Field(default=0.0, description="Star rating (0-5)")
    review_count: int = Field(default=0, description="Number of reviews")
    quality_score: int = Field(default=0, description="Ingestion quality score")

    # Provenance
    source: Optional[str] = Field(default=None, description="Acquisition channel code")
    notes: Optional[str] = Field(default=None, description="JSON-encoded audit")
    is_premium: bool = Field(default=False, description="Premium pitch flag")
    campaign_id: Optional[str] = Field(default=None, description="Owning campaign")
    created_at: Optional[datetime] = Field(default=None, description="Creation time")

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v: Any) -> Any:
        return str(v) if isinstance(v, int) else v

    @field_validator("business_name", mode="before")
    @classmethod
    def default_name(cls, v: Any) -> str:
        return "" if v is None else str(v)

    @field_validator("rating", mode="before")
    @classmethod
    def default_rating(cls, v: Any) -> float:
        try:
            return float(v) if v is not None else 0.0
        except (TypeError, ValueError):
            return 0.0

    @field_validator("review_count", "quality_score", mode="before")
    @classmethod
    def default_count(cls, v: Any) -> int:
        try:
            return max(0, int(v)) if v is not None else 0
        except (TypeError, ValueError):
            return 0

    @field_validator("is_premium", mode="before")
    @classmethod
    def default_premium(cls, v: Any) -> bool:
        return bool(v)

    @field_validator("status", mode="before")
    @classmethod
    def normalize_status(cls, v: Any) -> LeadStatus:
        if isinstance(v, LeadStatus):
            return v
        try:
            return LeadStatus(str(v).upper())
        except ValueError:
            return LeadStatus.NEW

    @field_validator("phone_type", mode="before")
    @classmethod
    def normalize_phone_type(cls, v: Any) -> Optional[PhoneType]:
        if v is None or isinstance(v, PhoneType):
            return v
        try:
            return PhoneType(str(v).upper())
        except ValueError:
            return None

    @property
    def audit(self) -> Audit:
        """Parsed notes; an empty audit when notes are absent or malformed."""
        return Audit.from_notes(self.notes)

    @property
    def normalized_name(self) -> str:
        """Deduplication identity: trimmed, case-folded business name."""
        return self.business_name.strip().casefold()

    @property
    def has_website(self) -> bool:
        return bool(self.website and self.website.strip())

    @property
    def is_visible(self) -> bool:
        return self.status != LeadStatus.TRASH


class Analysis(BaseModel):
    """Presentation bundle produced by the lead classifier."""

    tag: LeadTag = Field(..., description="Classification tag")
    pitch: str = Field(..., description="Synthesized outreach message")
    accent: str = Field(default="slate", description="Visual treatment key")
    rule: str = Field(..., description="Name of the rule that matched")
    priority: int = Field(..., ge=1, description="1-based rank of the matched rule")
    email: Optional[str] = Field(default=None, description="Contact email target")
    platform: Optional[str] = Field(default=None, description="Where the lead was found")
    source_url: Optional[str] = Field(default=None, description="Listing or profile URL")
    website_url: Optional[str] = Field(default=None, description="Site to audit")
    budget: Optional[str] = Field(default=None, description="Project budget")
    is_pinned: bool = Field(default=False, description="Operator pin flag")
    audit: Audit = Field(default_factory=Audit, description="Parsed notes")


class ClassifiedLead(BaseModel):
    """A lead combined with its resolved channel and analysis."""

    lead: Lead
    channel: str
    analysis: Analysis

    @property
    def is_aukat(self) -> bool:
        return self.analysis.tag == LeadTag.AUKAT_STRIKE


class DeleteRequest(BaseModel):
    """Payload of the privileged bulk-delete endpoint."""

    id: Optional[str] = None
    business_name: Optional[str] = None

    @model_validator(mode="after")
    def require_target(self) -> "DeleteRequest":
        if not self.id and not self.business_name:
            raise ValueError("Missing business_name or id")
        return self

    def target(self) -> Tuple[str, str]:
        """Column and value to match; the business name wins over the id."""
        if self.business_name:
            return "business_name", self.business_name
        return "id", self.id  # type: ignore[return-value]
