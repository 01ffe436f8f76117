"""Role-specific dashboards. ``dashboard_for`` picks the variant from the profile role."""

from abc import ABC, abstractmethod
from typing import Any
from rems.models.profile import Profile, UserRole
from rems.models.property import Property
from rems.services.supabase_client import count_rows, select_rows
from rems.services.visits import get_agent_property_ids
from rems.utils.logging import get_structured_logger, log_timing, mask_user_id
from rems.utils.logging_config import AppConfig

logger = get_structured_logger(__name__)

RECENT_LISTINGS_LIMIT = 6


class Dashboard(ABC):
    """Base dashboard; subclasses fill in ``render``."""

    role: UserRole

    def __init__(self, profile: Profile):
        self.profile = profile

    @abstractmethod
    async def render(self) -> dict[str, Any]:
        ...

    async def build(self) -> dict[str, Any]:
        with log_timing(
            "render_dashboard",
            logger=logger,
            role=self.role.value,
            user_id=mask_user_id(self.profile.id),
        ):
            body = await self.render()
        return {"role": self.role.value, "profile": self.profile.model_dump(mode="json"), **body}


class CustomerDashboard(Dashboard):
    role = UserRole.CUSTOMER

    async def render(self) -> dict[str, Any]:
        favorites = await count_rows("favorites", {"user_id": self.profile.id})
        visits = await count_rows("scheduled_visits", {"user_id": self.profile.id})
        rows = await select_rows(
            "properties",
            {"approved": True, "status": AppConfig.PUBLIC_LISTING_STATUS},
            order_by="created_at",
            descending=True,
        )
        recent = [Property(**row).model_dump(mode="json") for row in rows[:RECENT_LISTINGS_LIMIT]]
        return {
            "stats": {"favorites": favorites, "visits": visits},
            "recent_listings": recent,
        }


class AgentDashboard(Dashboard):
    role = UserRole.AGENT

    async def render(self) -> dict[str, Any]:
        property_ids = await get_agent_property_ids(self.profile.id)
        leads = 0
        if property_ids:
            leads = await count_rows("scheduled_visits", in_filters={"property_id": property_ids})
        return {
            "stats": {"listings": len(property_ids), "leads": leads},
            "verified": self.profile.verified,
        }


class AdminDashboard(Dashboard):
    role = UserRole.ADMIN

    async def render(self) -> dict[str, Any]:
        pending_listings = await count_rows("properties", {"approved": False})
        pending_reviews = await count_rows("reviews", {"approved": False})
        unverified_agents = await count_rows(
            "profiles", {"role": UserRole.AGENT.value, "verified": False}
        )
        users = await count_rows("profiles")
        return {
            "stats": {
                "pending_listings": pending_listings,
                "pending_reviews": pending_reviews,
                "unverified_agents": unverified_agents,
                "users": users,
            }
        }


DASHBOARDS: dict[UserRole, type[Dashboard]] = {
    UserRole.CUSTOMER: CustomerDashboard,
    UserRole.AGENT: AgentDashboard,
    UserRole.ADMIN: AdminDashboard,
}


def dashboard_for(profile: Profile) -> Dashboard:
    return DASHBOARDS[profile.role](profile)
