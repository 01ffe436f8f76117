"""Own-profile endpoint."""

from rems.services.auth import require_user
from rems.services.profiles import get_profile, update_profile
from rems.utils.errors import NotFoundError
from rems.utils.http import JsonHandler
from rems.models.notice import Notice


class handler(JsonHandler):

    async def get(self):
        user = await require_user(self.access_token())
        profile = await get_profile(user.id)
        if profile is None:
            raise NotFoundError("profiles", user.id)
        return 200, profile

    async def post(self):
        user = await require_user(self.access_token())
        profile = await update_profile(user.id, self.read_json())
        return 200, {"profile": profile, "notice": Notice.success("Profile updated successfully")}
