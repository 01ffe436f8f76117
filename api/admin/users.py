"""Admin user list endpoint."""

from rems.models.profile import UserRole
from rems.services.auth import require_role, require_user
from rems.services.profiles import list_users
from rems.utils.http import JsonHandler


class handler(JsonHandler):

    async def get(self):
        user = await require_user(self.access_token())
        await require_role(user, UserRole.ADMIN)
        return 200, {"users": await list_users()}
