"""Sign-up endpoint."""

from rems.services.auth import sign_up
from rems.utils.http import JsonHandler


class handler(JsonHandler):
    """POST {email, password, repeat_password, role}."""

    async def post(self):
        body = self.read_json()
        user = await sign_up(
            body.get("email") or "",
            body.get("password") or "",
            body.get("repeat_password") or "",
            body.get("role") or "customer",
            redirect_to=body.get("redirect_to"),
        )
        return 201, {"user": user, "next": "/auth/sign-up-success"}
