"""Admin moderation endpoint for listings, reviews and agent verification."""

from rems.models.notice import Notice
from rems.models.profile import UserRole
from rems.services.auth import require_role, require_user
from rems.services.moderation import ModerationQueue, get_gate
from rems.utils.errors import FormValidationError
from rems.utils.http import JsonHandler

ACTIONS = ("approve", "reject")


class handler(JsonHandler):
    """
    GET ?queue=listings|reviews|agents        pending rows
    POST {queue, action: approve|reject, id}  moderate one row
    """

    async def _require_admin(self):
        user = await require_user(self.access_token())
        await require_role(user, UserRole.ADMIN)

    async def get(self):
        await self._require_admin()
        queue = ModerationQueue(get_gate(self.query_params().get("queue", "listings")))
        notice = await queue.load()
        if notice is not None:
            return 502, {"items": [], "notice": notice}
        return 200, {"queue": queue.gate.name, "items": queue.items}

    async def post(self):
        await self._require_admin()
        body = self.read_json()
        action = body.get("action")
        if action not in ACTIONS:
            raise FormValidationError("action must be approve or reject", field="action")
        if not body.get("id"):
            raise FormValidationError("id is required", field="id")

        gate = get_gate(body.get("queue", "listings"))
        if action == "approve":
            await gate.approve(body["id"])
            notice = Notice.success(f"{gate.label} approved")
        else:
            await gate.reject(body["id"])
            notice = Notice.success(f"{gate.label} rejected")
        return 200, {"id": body["id"], "action": action, "notice": notice}
