"""Favorites endpoint."""

from rems.services.auth import require_user
from rems.services.favorites import list_favorites, toggle_favorite
from rems.utils.errors import FormValidationError
from rems.utils.http import JsonHandler


class handler(JsonHandler):
    """GET: favorite properties. POST {property_id}: toggle."""

    async def get(self):
        user = await require_user(self.access_token())
        return 200, {"favorites": await list_favorites(user)}

    async def post(self):
        user = await require_user(self.access_token())
        property_id = self.read_json().get("property_id")
        if not property_id:
            raise FormValidationError("property_id is required", field="property_id")
        return 200, {"property_id": property_id, "favorite": await toggle_favorite(user, property_id)}
