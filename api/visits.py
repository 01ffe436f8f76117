"""Scheduled visits endpoint."""

from rems.models.notice import Notice
from rems.services.auth import get_current_user, require_user
from rems.services.visits import list_agent_leads, list_user_visits, schedule_visit
from rems.utils.errors import FormValidationError
from rems.utils.http import JsonHandler


class handler(JsonHandler):
    """GET: own visits, or ?view=leads for an agent. POST: schedule a visit."""

    async def get(self):
        user = await require_user(self.access_token())
        if self.query_params().get("view") == "leads":
            return 200, {"leads": await list_agent_leads(user)}
        return 200, {"visits": await list_user_visits(user)}

    async def post(self):
        user = await get_current_user(self.access_token())
        body = self.read_json()
        if not body.get("property_id"):
            raise FormValidationError("property_id is required", field="property_id")
        visit = await schedule_visit(
            user, body["property_id"], body.get("visit_date"), body.get("notes")
        )
        return 201, {"visit": visit, "notice": Notice.success("Visit scheduled successfully")}
