"""Property listings endpoint."""

from pydantic import ValidationError
from rems.models.property import PropertyFilters
from rems.services.auth import get_current_user, require_user
from rems.services.listings import (
    create_listing,
    delete_listing,
    get_property_detail,
    list_agent_listings,
    list_public_listings,
    update_listing_status,
)
from rems.utils.errors import FormValidationError, form_error
from rems.utils.http import JsonHandler

FILTER_PARAMS = ("search_term", "min_price", "max_price", "bedrooms", "bathrooms")


class handler(JsonHandler):
    """
    GET ?id=<uuid>      property detail (approved reviews only)
    GET ?mine=1         the calling agent's listings
    GET [filters]       public listings
    POST                create a listing (agent)
    PATCH {id, status}  change market status (owning agent)
    DELETE ?id=<uuid>   delete a listing (owning agent or admin)
    """

    async def get(self):
        params = self.query_params()
        if params.get("id"):
            user = await get_current_user(self.access_token())
            return 200, await get_property_detail(params["id"], user)

        if params.get("mine"):
            user = await require_user(self.access_token())
            return 200, {"listings": await list_agent_listings(user)}

        try:
            filters = PropertyFilters(**{k: v for k, v in params.items() if k in FILTER_PARAMS})
        except ValidationError as e:
            raise form_error(e)
        return 200, {"listings": await list_public_listings(filters)}

    async def post(self):
        user = await require_user(self.access_token())
        body = self.read_json()
        return 201, await create_listing(user, body)

    async def patch(self):
        user = await require_user(self.access_token())
        body = self.read_json()
        if not body.get("id") or not body.get("status"):
            raise FormValidationError("id and status are required")
        return 200, await update_listing_status(user, body["id"], body["status"])

    async def delete(self):
        user = await require_user(self.access_token())
        property_id = self.query_params().get("id")
        if not property_id:
            raise FormValidationError("id is required", field="id")
        await delete_listing(user, property_id)
        return 200, {"ok": True}
