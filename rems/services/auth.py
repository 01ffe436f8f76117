"""Authentication and role guards on top of Supabase Auth."""

from typing import Optional
from rems.models.profile import AuthUser, Profile, UserRole
from rems.services.supabase_client import SupabaseClient, get_row
from rems.utils.errors import (
    AuthenticationError,
    AuthorizationError,
    FormValidationError,
    SupabaseError,
)
from rems.utils.logging import get_structured_logger, mask_user_id

logger = get_structured_logger(__name__)

MIN_PASSWORD_LENGTH = 6

# Admins are provisioned out of band, never through self-service sign-up
SIGNUP_ROLES = (UserRole.CUSTOMER, UserRole.AGENT)


async def get_current_user(access_token: Optional[str]) -> Optional[AuthUser]:
    """
    Resolve a bearer token to the signed-in user.

    Returns None for a missing or rejected token; the auth provider being
    unreachable is a data-store failure and raises SupabaseError.
    """
    if not access_token:
        return None

    async with SupabaseClient() as client:
        try:
            response = client.auth.get_user(access_token)
        except Exception as e:
            message = str(e).lower()
            if "invalid" in message or "expired" in message or "jwt" in message:
                logger.info("Access token rejected", error=str(e))
                return None
            raise SupabaseError(f"Failed to get current user: {e}")

    user = getattr(response, "user", None) if response else None
    if user is None:
        return None
    return AuthUser(id=str(user.id), email=getattr(user, "email", None))


async def require_user(access_token: Optional[str]) -> AuthUser:
    """Get the current user or raise AuthenticationError."""
    user = await get_current_user(access_token)
    if user is None:
        raise AuthenticationError("You must be logged in")
    return user


async def require_role(user: AuthUser, *roles: UserRole) -> Profile:
    """Load the user's profile and check it holds one of ``roles``."""
    row = await get_row("profiles", user.id)
    if row is None:
        logger.warning("Authenticated user has no profile", user_id=mask_user_id(user.id))
        raise AuthorizationError("Profile not found")

    profile = Profile(**row)
    if roles and profile.role not in roles:
        logger.info(
            "Role check failed",
            user_id=mask_user_id(user.id),
            role=profile.role.value,
            required=[r.value for r in roles],
        )
        raise AuthorizationError(f"Requires role: {', '.join(r.value for r in roles)}")
    return profile


async def sign_up(
    email: str,
    password: str,
    repeat_password: str,
    role: str = UserRole.CUSTOMER.value,
    redirect_to: Optional[str] = None,
) -> AuthUser:
    """
    Register a new account.

    The role is stored as user metadata; a database trigger creates the
    profile row from it, so the role cannot be changed afterwards through
    this service.
    """
    if not email or "@" not in email:
        raise FormValidationError("A valid email is required", field="email")
    if len(password or "") < MIN_PASSWORD_LENGTH:
        raise FormValidationError(
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters", field="password"
        )
    if password != repeat_password:
        raise FormValidationError("Passwords do not match", field="repeat_password")
    try:
        user_role = UserRole(role)
    except ValueError:
        raise FormValidationError(f"Unknown role: {role}", field="role")
    if user_role not in SIGNUP_ROLES:
        raise FormValidationError(f"Cannot sign up as {user_role.value}", field="role")

    options: dict = {"data": {"role": user_role.value}}
    if redirect_to:
        options["email_redirect_to"] = redirect_to

    async with SupabaseClient() as client:
        try:
            response = client.auth.sign_up({
                "email": email,
                "password": password,
                "options": options,
            })
        except Exception as e:
            raise SupabaseError(f"Failed to sign up: {e}")

    user = getattr(response, "user", None)
    if user is None:
        raise SupabaseError("Failed to sign up: no user returned")

    logger.info("User signed up", user_id=mask_user_id(str(user.id)), role=user_role.value)
    return AuthUser(id=str(user.id), email=getattr(user, "email", email))


async def sign_out() -> None:
    """End the current auth session."""
    async with SupabaseClient() as client:
        try:
            client.auth.sign_out()
        except Exception as e:
            raise SupabaseError(f"Failed to sign out: {e}")
