"""In-memory lead board for buyer interest submissions."""

from collections import Counter
from datetime import datetime, timezone
from typing import Iterable, Optional, Union
from ulid import ULID
from rems.models.lead import InterestSubmission, Lead, LeadStatus
from rems.utils.errors import FormValidationError, NotFoundError
from rems.utils.logging import get_structured_logger, mask_user_id

logger = get_structured_logger(__name__)


def generate_lead_id() -> str:
    """Generate a text-based lead ID (ULID format)."""
    return str(ULID())


class LeadStore:
    """
    Leads for one session.

    Nothing is persisted: dropping the store drops its leads. Callers own the
    instance and pass it to whatever needs it.
    """

    def __init__(self, leads: Optional[Iterable[Lead]] = None):
        self._leads: dict[str, Lead] = {lead.id: lead for lead in leads or ()}

    def __len__(self) -> int:
        return len(self._leads)

    def all(self) -> list[Lead]:
        return list(self._leads.values())

    def add_lead(self, property_id: str, buyer_id: str, submission: InterestSubmission) -> Lead:
        lead = Lead(
            id=generate_lead_id(),
            property_id=property_id,
            buyer_id=buyer_id,
            buyer_name=submission.name,
            buyer_email=submission.email,
            buyer_phone=submission.phone,
            message=submission.message,
            status=LeadStatus.NEW,
            created_at=datetime.now(timezone.utc).isoformat(),
        )
        self._leads[lead.id] = lead
        logger.info(
            "Lead recorded",
            lead_id=lead.id,
            property_id=property_id,
            buyer_id=mask_user_id(buyer_id),
        )
        return lead

    def get(self, lead_id: str) -> Lead:
        try:
            return self._leads[lead_id]
        except KeyError:
            raise NotFoundError("leads", lead_id)

    def leads_for_property(self, property_id: str) -> list[Lead]:
        return [lead for lead in self._leads.values() if lead.property_id == property_id]

    def leads_for_properties(self, property_ids: Iterable[str]) -> list[Lead]:
        wanted = set(property_ids)
        return [lead for lead in self._leads.values() if lead.property_id in wanted]

    def set_status(self, lead_id: str, status: Union[LeadStatus, str]) -> Lead:
        """Move a lead to any status, in any direction."""
        try:
            new_status = LeadStatus(status)
        except ValueError:
            raise FormValidationError(f"Unknown lead status: {status}", field="status")

        lead = self.get(lead_id)
        updated = lead.model_copy(update={"status": new_status})
        self._leads[lead_id] = updated
        logger.info(
            "Lead status changed",
            lead_id=lead_id,
            from_status=lead.status.value,
            to_status=new_status.value,
        )
        return updated


def status_counts(leads: Iterable[Lead]) -> dict[str, int]:
    """Per-status totals for the lead board header, every status present."""
    counts = Counter(lead.status for lead in leads)
    return {status.value: counts.get(status, 0) for status in LeadStatus}
