"""Customer reviews. Submissions wait for moderation before going public."""

from typing import Any, Optional
from pydantic import ValidationError
from rems.models.profile import AuthUser
from rems.models.review import Review, ReviewCreate, MIN_RATING, MAX_RATING
from rems.services.supabase_client import insert_row, select_rows
from rems.utils.errors import FormValidationError, form_error
from rems.utils.logging import get_structured_logger, mask_user_id, sanitize_message_text

logger = get_structured_logger(__name__)


async def submit_review(
    user: AuthUser,
    property_id: str,
    rating: Any,
    comment: Optional[str] = None,
) -> Review:
    """
    Validate and store a review as unapproved.

    ``rating`` is passed through as received so that fractional or boolean
    values are rejected rather than coerced.
    """
    try:
        form = ReviewCreate(property_id=property_id, rating=rating, comment=comment)
    except ValidationError as e:
        error = form_error(e)
        if error.field == "rating":
            raise FormValidationError(
                f"Rating must be a whole number between {MIN_RATING} and {MAX_RATING}",
                field="rating",
            )
        raise error

    row = await insert_row("reviews", {
        "user_id": user.id,
        "property_id": form.property_id,
        "rating": form.rating,
        "comment": form.comment,
        "approved": False,
    })
    logger.info(
        "Review submitted for moderation",
        review_id=row.get("id"),
        property_id=property_id,
        user_id=mask_user_id(user.id),
        rating=form.rating,
        comment_preview=sanitize_message_text(comment, max_length=100),
    )
    return Review(**row)


async def list_public_reviews(property_id: str) -> list[Review]:
    """Approved reviews for a property, newest first."""
    rows = await select_rows(
        "reviews",
        {"property_id": property_id, "approved": True},
        order_by="created_at",
        descending=True,
    )
    return [Review(**row) for row in rows]
