"""Role dashboard endpoint."""

from rems.services.auth import require_role, require_user
from rems.services.dashboards import dashboard_for
from rems.utils.http import JsonHandler


class handler(JsonHandler):
    """GET: the dashboard matching the caller's role."""

    async def get(self):
        user = await require_user(self.access_token())
        profile = await require_role(user)
        return 200, await dashboard_for(profile).build()
