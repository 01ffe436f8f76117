"""Reviews endpoint."""

from rems.models.notice import Notice
from rems.services.auth import require_user
from rems.services.reviews import list_public_reviews, submit_review
from rems.utils.errors import FormValidationError
from rems.utils.http import JsonHandler


class handler(JsonHandler):
    """GET ?property_id: approved reviews. POST: submit a review for moderation."""

    async def get(self):
        property_id = self.query_params().get("property_id")
        if not property_id:
            raise FormValidationError("property_id is required", field="property_id")
        return 200, {"reviews": await list_public_reviews(property_id)}

    async def post(self):
        user = await require_user(self.access_token())
        body = self.read_json()
        if not body.get("property_id"):
            raise FormValidationError("property_id is required", field="property_id")
        review = await submit_review(
            user, body["property_id"], body.get("rating"), body.get("comment")
        )
        return 201, {
            "review": review,
            "notice": Notice.success("Review submitted for moderation"),
        }
