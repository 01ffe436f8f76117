"""Visit scheduling and the agent-facing leads table."""

from typing import Optional
from rems.models.profile import AuthUser, UserRole
from rems.models.visit import AgentLead, ScheduledVisit
from rems.services.auth import require_role
from rems.services.supabase_client import insert_row, select_rows
from rems.utils.errors import AuthenticationError, FormValidationError
from rems.utils.logging import get_structured_logger, mask_user_id
from rems.utils.logging_config import AppConfig

logger = get_structured_logger(__name__)


async def schedule_visit(
    user: Optional[AuthUser],
    property_id: str,
    visit_date: str,
    notes: Optional[str] = None,
) -> ScheduledVisit:
    """
    Book a viewing.

    No double-booking, past-date or agent-availability checks are made; the
    date only has to be present.
    """
    if user is None:
        raise AuthenticationError("You must be logged in to schedule a visit")
    if not visit_date:
        raise FormValidationError("Visit date is required", field="visit_date")

    row = await insert_row("scheduled_visits", {
        "user_id": user.id,
        "property_id": property_id,
        "visit_date": visit_date,
        "notes": notes,
        "status": AppConfig.DEFAULT_VISIT_STATUS,
    })
    logger.info(
        "Visit scheduled",
        visit_id=row.get("id"),
        property_id=property_id,
        user_id=mask_user_id(user.id),
        visit_date=visit_date,
    )
    return ScheduledVisit(**row)


async def list_user_visits(user: AuthUser) -> list[ScheduledVisit]:
    """The customer's own visits, soonest first."""
    rows = await select_rows("scheduled_visits", {"user_id": user.id}, order_by="visit_date")
    return [ScheduledVisit(**row) for row in rows]


async def get_agent_property_ids(agent_id: str) -> list[str]:
    rows = await select_rows("properties", {"agent_id": agent_id}, columns="id")
    return [row["id"] for row in rows]


async def list_agent_leads(user: AuthUser) -> list[AgentLead]:
    """Visits booked on properties the agent owns, latest visit date first."""
    await require_role(user, UserRole.AGENT, UserRole.ADMIN)

    properties = await select_rows("properties", {"agent_id": user.id})
    if not properties:
        return []
    by_id = {p["id"]: p for p in properties}

    visits = await select_rows(
        "scheduled_visits",
        in_filters={"property_id": list(by_id)},
        order_by="visit_date",
        descending=True,
    )

    leads = []
    for visit in visits:
        prop = by_id.get(visit["property_id"], {})
        leads.append(AgentLead(
            id=visit["id"],
            visit_date=visit["visit_date"],
            notes=visit.get("notes"),
            status=visit.get("status"),
            customer_id=visit["user_id"],
            property_id=visit["property_id"],
            property_title=prop.get("title"),
            property_address=prop.get("address"),
            property_city=prop.get("city"),
        ))
    logger.debug("Agent leads loaded", agent_id=mask_user_id(user.id), count=len(leads))
    return leads
