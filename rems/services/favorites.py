"""Favorites: per-user bookmarks on properties."""

from rems.models.favorite import Favorite
from rems.models.profile import AuthUser
from rems.models.property import Property
from rems.services.supabase_client import SupabaseClient, insert_row, select_rows
from rems.utils.errors import SupabaseError
from rems.utils.logging import get_structured_logger, mask_user_id

logger = get_structured_logger(__name__)


async def is_favorite(user_id: str, property_id: str) -> bool:
    rows = await select_rows(
        "favorites", {"user_id": user_id, "property_id": property_id}, columns="property_id"
    )
    return len(rows) > 0


async def toggle_favorite(user: AuthUser, property_id: str) -> bool:
    """Add or remove the bookmark; returns the new state."""
    if await is_favorite(user.id, property_id):
        async with SupabaseClient() as client:
            try:
                client.table("favorites").delete().eq("user_id", user.id).eq(
                    "property_id", property_id
                ).execute()
            except Exception as e:
                raise SupabaseError(f"Failed to remove favorite: {e}")
        logger.info("Favorite removed", user_id=mask_user_id(user.id), property_id=property_id)
        return False

    await insert_row("favorites", {"user_id": user.id, "property_id": property_id})
    logger.info("Favorite added", user_id=mask_user_id(user.id), property_id=property_id)
    return True


async def list_favorites(user: AuthUser) -> list[Property]:
    """The user's bookmarked properties. Deleted properties drop out."""
    rows = await select_rows("favorites", {"user_id": user.id})
    property_ids = [Favorite(**row).property_id for row in rows]
    if not property_ids:
        return []
    rows = await select_rows("properties", in_filters={"id": property_ids})
    return [Property(**row) for row in rows]
