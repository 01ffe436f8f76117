"""Property listings: creation, public search, detail view, agent management."""

from typing import Optional
from pydantic import BaseModel, ValidationError
from rems.models.profile import AuthUser, UserRole
from rems.models.property import Property, PropertyCreate, PropertyFilters, PropertyStatus
from rems.models.review import Review
from rems.services.auth import require_role
from rems.services.favorites import is_favorite
from rems.services.reviews import list_public_reviews
from rems.services.supabase_client import (
    delete_row,
    get_row,
    insert_row,
    select_rows,
    update_row,
)
from rems.utils.errors import FormValidationError, NotFoundError, form_error
from rems.utils.logging import get_structured_logger, log_timing, mask_user_id
from rems.utils.logging_config import AppConfig

logger = get_structured_logger(__name__)


class PropertyDetail(BaseModel):
    """Everything the property page shows."""
    property: Property
    reviews: list[Review]
    is_favorite: bool = False


async def create_listing(user: AuthUser, form: dict) -> Property:
    """
    Create a listing owned by the calling agent.

    New listings always start unapproved and wait in the admin queue; there
    is no path that inserts a pre-approved listing.
    """
    await require_role(user, UserRole.AGENT, UserRole.ADMIN)
    try:
        data = PropertyCreate(**form)
    except ValidationError as e:
        raise form_error(e)

    row = data.model_dump()
    row.update({
        "agent_id": user.id,
        "approved": False,
        "status": PropertyStatus.AVAILABLE.value,
    })
    created = await insert_row("properties", row)
    logger.info(
        "Listing created",
        property_id=created.get("id"),
        agent_id=mask_user_id(user.id),
        approved=False,
    )
    return Property(**created)


async def list_public_listings(filters: Optional[PropertyFilters] = None) -> list[Property]:
    """Approved listings on the market, newest first, narrowed by filters."""
    filters = filters or PropertyFilters()
    with log_timing("list_public_listings", logger=logger):
        rows = await select_rows(
            "properties",
            {"approved": True, "status": AppConfig.PUBLIC_LISTING_STATUS},
            order_by="created_at",
            descending=True,
        )
    properties = [Property(**row) for row in rows]
    return [p for p in properties if filters.matches(p)]


async def get_property(property_id: str) -> Property:
    row = await get_row("properties", property_id)
    if row is None:
        raise NotFoundError("properties", property_id)
    return Property(**row)


async def get_property_detail(property_id: str, user: Optional[AuthUser] = None) -> PropertyDetail:
    """
    Property page data.

    Unapproved listings are only shown to their agent and to admins. Reviews
    are limited to approved ones for every viewer.
    """
    prop = await get_property(property_id)

    if not prop.approved:
        if user is None:
            raise NotFoundError("properties", property_id)
        if user.id != prop.agent_id:
            # Raises AuthorizationError for anyone who is not an admin
            await require_role(user, UserRole.ADMIN)

    reviews = await list_public_reviews(property_id)
    favorite = await is_favorite(user.id, property_id) if user else False
    return PropertyDetail(property=prop, reviews=reviews, is_favorite=favorite)


async def list_agent_listings(user: AuthUser) -> list[Property]:
    """The agent's own listings, approved or not, newest first."""
    await require_role(user, UserRole.AGENT, UserRole.ADMIN)
    rows = await select_rows(
        "properties", {"agent_id": user.id}, order_by="created_at", descending=True
    )
    return [Property(**row) for row in rows]


async def delete_listing(user: AuthUser, property_id: str) -> None:
    """Delete one of the agent's listings. Admins may delete any listing."""
    profile = await require_role(user, UserRole.AGENT, UserRole.ADMIN)
    if profile.role == UserRole.ADMIN:
        await delete_row("properties", property_id)
    else:
        await delete_row("properties", property_id, agent_id=user.id)
    logger.info("Listing deleted", property_id=property_id, by=mask_user_id(user.id))


async def update_listing_status(user: AuthUser, property_id: str, status: str) -> Property:
    """Change the market status of an owned listing. Approval is left untouched."""
    await require_role(user, UserRole.AGENT, UserRole.ADMIN)
    try:
        new_status = PropertyStatus(status)
    except ValueError:
        raise FormValidationError(f"Unknown status: {status}", field="status")

    row = await update_row(
        "properties", property_id, {"status": new_status.value}, agent_id=user.id
    )
    logger.info("Listing status changed", property_id=property_id, status=new_status.value)
    return Property(**row)
