"""Chat history and send endpoint. Live delivery goes over Supabase realtime."""

from rems.services.auth import require_user
from rems.services.chat import load_history, send_message
from rems.utils.errors import FormValidationError
from rems.utils.http import JsonHandler


class handler(JsonHandler):
    """GET ?property_id[&counterpart_id]: history. POST: send a message."""

    async def get(self):
        user = await require_user(self.access_token())
        params = self.query_params()
        if not params.get("property_id"):
            raise FormValidationError("property_id is required", field="property_id")
        counterpart = params.get("counterpart_id")
        history = await load_history(
            params["property_id"], user.id if counterpart else None, counterpart
        )
        return 200, {"messages": history}

    async def post(self):
        user = await require_user(self.access_token())
        body = self.read_json()
        if not body.get("property_id"):
            raise FormValidationError("property_id is required", field="property_id")
        message = await send_message(
            body["property_id"],
            user.id,
            body.get("receiver_id"),
            body.get("content") or "",
            message_id=body.get("id"),
        )
        return 201, {"message": message}
