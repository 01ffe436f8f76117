"""Profile reads and self-service updates."""

from typing import Optional
from rems.models.profile import Profile, ProfileUpdate
from rems.services.supabase_client import get_row, select_rows, update_row
from rems.utils.errors import NotFoundError
from rems.utils.logging import get_structured_logger, mask_user_id

logger = get_structured_logger(__name__)


async def get_profile(user_id: str) -> Optional[Profile]:
    row = await get_row("profiles", user_id)
    return Profile(**row) if row else None


async def update_profile(user_id: str, updates: dict) -> Profile:
    """
    Update the caller's own profile.

    Only the fields of ProfileUpdate are written; role is fixed at sign-up and
    verified is admin-only, so both are dropped silently.
    """
    allowed = ProfileUpdate(**{k: v for k, v in updates.items() if k in ProfileUpdate.model_fields})
    changes = allowed.model_dump(exclude_unset=True)
    if not changes:
        profile = await get_profile(user_id)
        if profile is None:
            raise NotFoundError("profiles", user_id)
        return profile

    row = await update_row("profiles", user_id, changes)
    logger.info("Profile updated", user_id=mask_user_id(user_id), fields=sorted(changes))
    return Profile(**row)


async def list_users() -> list[Profile]:
    """All profiles, newest first (admin users page)."""
    rows = await select_rows("profiles", order_by="created_at", descending=True)
    return [Profile(**row) for row in rows]
