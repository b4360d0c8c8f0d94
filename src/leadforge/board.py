"""Operator lead board over an external lead store.

The board keeps a local cache of lead rows. Operator actions are applied
to the cache first, then persisted through the ``LeadStore``; when the
store call fails that action's own change is undone and
``PersistenceError`` is raised. Actions that overlap each other keep
their own outcome. Concurrent edits from other operators are left to the
store (last write wins).

Usage:
    >>> board = LeadBoard(store)
    >>> await board.refresh()
    >>> cards = board.listing(LeadFilter(tab=SourceTab.GULF))
    >>> await board.toggle_contacted(cards[0].lead.id)
"""

import base64
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Dict, List, Optional, Protocol, Set, Tuple

from pydantic import ValidationError

from .classifier import LeadClassifier
from .config import config
from .listing import DashboardStats, LeadFilter, build_listing, compute_stats, tab_counts
from .logging_utils import get_logger, lead_logger
from .models import (
    ClassifiedLead,
    DeleteRequest,
    Lead,
    LeadStatus,
    next_contact_status,
    set_pinned,
)
from .sources import SourceTab


class LeadNotFoundError(KeyError):
    """Raised when a lead id is not in the board cache."""

    pass


class PersistenceError(RuntimeError):
    """Raised when the store rejects a change; that change has been undone."""

    pass


class LeadStore(Protocol):
    """The external data store the board reads from and writes to."""

    async def fetch_leads(self) -> List[Dict[str, Any]]:
        """Return all lead rows, newest ``created_at`` first."""
        ...

    async def insert_lead(self, row: Dict[str, Any]) -> None:
        ...

    async def update_lead(self, lead_id: str, changes: Dict[str, Any]) -> None:
        ...

    async def purge_leads(self, request: DeleteRequest) -> int:
        """Delete every row matching the request target; return the row count."""
        ...


def manual_lead_id(business_name: str, created_at: datetime) -> str:
    """Synthesize the id of a manually entered lead.

    Base64 of the name followed by the creation time in epoch milliseconds.
    """
    millis = int(created_at.timestamp() * 1000)
    return base64.b64encode(f"{business_name}{millis}".encode("utf-8")).decode("ascii")


class LeadBoard:
    """Cached, optimistically updated view of the lead table."""

    def __init__(self, store: LeadStore, classifier: Optional[LeadClassifier] = None):
        self.logger = get_logger(__name__)
        self.store = store
        self.classifier = classifier or LeadClassifier()
        self._leads: List[Lead] = []

    @property
    def leads(self) -> List[Lead]:
        return list(self._leads)

    def get(self, lead_id: str) -> Lead:
        for lead in self._leads:
            if lead.id == lead_id:
                return lead
        raise LeadNotFoundError(lead_id)

    async def refresh(self) -> List[Lead]:
        """Reload the cache from the store.

        Rows that cannot be read as leads are skipped with a warning.

        Raises:
            PersistenceError: If the store cannot be read; the cache is kept.
        """
        try:
            rows = await self.store.fetch_leads()
        except Exception as e:
            self.logger.error(f"Failed to fetch leads: {e}")
            raise PersistenceError(f"Failed to fetch leads: {e}") from e

        leads: List[Lead] = []
        for row in rows:
            try:
                leads.append(Lead.model_validate(row))
            except ValidationError as e:
                self.logger.warning(
                    "Skipping unreadable lead row",
                    extra={"row_id": row.get("id"), "error": str(e)},
                )

        self._leads = leads
        self.logger.info("Lead cache refreshed", extra={"count": len(leads)})
        return self.leads

    def listing(self, lead_filter: Optional[LeadFilter] = None) -> List[ClassifiedLead]:
        return build_listing(self._leads, self.classifier, lead_filter)

    def stats(self) -> DashboardStats:
        return compute_stats(self._leads)

    def tab_counts(self) -> Dict[SourceTab, int]:
        return tab_counts(self._leads)

    async def toggle_contacted(self, lead_id: str) -> Lead:
        """Flip a lead between NEW and CONTACTED.

        Raises:
            LeadNotFoundError: Unknown lead id.
            StatusTransitionError: Lead is MANUAL or TRASH.
            PersistenceError: Store update failed; change reverted.
        """
        lead = self.get(lead_id)
        status = next_contact_status(lead.status)
        updated = lead.model_copy(update={"status": status})

        self._put(updated)
        await self._persist(
            self.store.update_lead(lead_id, {"status": status.value}),
            undo=lambda: self._restore_fields(lead_id, {"status": lead.status}),
            action="toggle_contacted",
            lead_id=lead_id,
        )
        return updated

    async def toggle_pin(self, lead_id: str) -> Lead:
        """Flip the ``is_pinned`` flag kept in the lead's notes."""
        lead = self.get(lead_id)
        notes = set_pinned(lead.notes, not lead.audit.is_pinned)
        updated = lead.model_copy(update={"notes": notes})

        self._put(updated)
        await self._persist(
            self.store.update_lead(lead_id, {"notes": notes}),
            undo=lambda: self._restore_fields(lead_id, {"notes": lead.notes}),
            action="toggle_pin",
            lead_id=lead_id,
        )
        return updated

    async def add_manual_lead(
        self,
        business_name: str,
        phone: Optional[str] = None,
        address: Optional[str] = None,
        created_at: Optional[datetime] = None,
    ) -> Lead:
        """Create an operator-entered lead with status MANUAL.

        Raises:
            ValueError: Blank business name.
            PersistenceError: Store insert failed; the lead is not kept.
        """
        name = business_name.strip()
        if not name:
            raise ValueError("Business name is required")

        created_at = created_at or datetime.now(timezone.utc)
        row: Dict[str, Any] = {
            "id": manual_lead_id(name, created_at),
            "business_name": name,
            "phone": phone or None,
            "address": address or None,
            "status": LeadStatus.MANUAL.value,
            "quality_score": config.MANUAL_QUALITY_SCORE,
            "created_at": created_at.isoformat(),
        }
        lead = Lead.model_validate(row)

        self._leads = [lead] + self._leads
        await self._persist(
            self.store.insert_lead(row),
            undo=lambda: self._drop_ids({lead.id}),
            action="add_manual_lead",
            lead_id=lead.id,
        )
        return lead

    async def delete_lead(self, lead_id: str) -> int:
        """Delete a lead and every row sharing its business name.

        The caller is expected to have confirmed the deletion with the
        operator. Falls back to deleting by id when the lead has no name.

        Returns:
            Number of rows the store reported deleted.
        """
        lead = self.get(lead_id)
        request = DeleteRequest(id=lead.id, business_name=lead.business_name or None)
        column, value = request.target()

        removed = [
            (index, other) for index, other in enumerate(self._leads)
            if getattr(other, column) == value
        ]

        self._drop_ids({other.id for _, other in removed})
        count = await self._persist(
            self.store.purge_leads(request),
            undo=lambda: self._reinsert(removed),
            action="delete_lead",
            lead_id=lead_id,
        )
        lead_logger(self.logger, lead_id, action="delete_lead").info(
            "Leads deleted", extra={"column": column, "count": count}
        )
        return count

    def _put(self, updated: Lead) -> None:
        self._leads = [updated if lead.id == updated.id else lead for lead in self._leads]

    def _restore_fields(self, lead_id: str, fields: Dict[str, Any]) -> None:
        """Put back the given fields on the cached lead, leaving other edits alone."""
        for lead in self._leads:
            if lead.id == lead_id:
                self._put(lead.model_copy(update=fields))
                return

    def _drop_ids(self, lead_ids: Set[str]) -> None:
        self._leads = [lead for lead in self._leads if lead.id not in lead_ids]

    def _reinsert(self, removed: List[Tuple[int, Lead]]) -> None:
        """Return deleted rows to their former positions."""
        leads = list(self._leads)
        present = {lead.id for lead in leads}
        for index, lead in removed:
            if lead.id not in present:
                leads.insert(min(index, len(leads)), lead)
        self._leads = leads

    async def _persist(
        self,
        call: Awaitable[Any],
        undo: Callable[[], None],
        action: str,
        lead_id: str,
    ) -> Any:
        """Await a store call whose change is already shown in the cache.

        On failure only this action's change is undone; edits made by other
        actions while the call was pending are kept.
        """
        try:
            return await call
        except Exception as e:
            undo()
            log = lead_logger(self.logger, lead_id, action=action)
            log.error(f"Store rejected {action}, change reverted: {e}")
            raise PersistenceError(f"{action} failed for lead {lead_id}: {e}") from e
