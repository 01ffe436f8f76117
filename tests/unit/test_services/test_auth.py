"""Tests for authentication and role guards."""

import pytest
from rems.models.profile import AuthUser, UserRole
from rems.services.auth import get_current_user, require_role, require_user, sign_out, sign_up
from rems.utils.errors import (
    AuthenticationError,
    AuthorizationError,
    FormValidationError,
    SupabaseError,
)


@pytest.mark.unit
@pytest.mark.asyncio
async def test_current_user_from_token(fake_supabase):
    user, token = fake_supabase.add_user("customer")

    current = await get_current_user(token)

    assert current.id == user.id
    assert current.email == user.email


@pytest.mark.unit
@pytest.mark.asyncio
@pytest.mark.parametrize("token", [None, "", "not-a-real-token"])
async def test_missing_or_rejected_token(fake_supabase, token):
    assert await get_current_user(token) is None


@pytest.mark.unit
@pytest.mark.asyncio
async def test_require_user_raises(fake_supabase):
    with pytest.raises(AuthenticationError):
        await require_user(None)


@pytest.mark.unit
@pytest.mark.asyncio
async def test_auth_outage_is_store_error(fake_supabase, monkeypatch):
    def _down(jwt=None):
        raise Exception("503 Service Unavailable")

    monkeypatch.setattr(fake_supabase.auth, "get_user", _down)

    with pytest.raises(SupabaseError):
        await get_current_user("token-anything")


@pytest.mark.unit
@pytest.mark.asyncio
async def test_require_role(fake_supabase, agent, customer):
    profile = await require_role(agent, UserRole.AGENT)
    assert profile.role == UserRole.AGENT

    with pytest.raises(AuthorizationError):
        await require_role(customer, UserRole.AGENT, UserRole.ADMIN)


@pytest.mark.unit
@pytest.mark.asyncio
async def test_require_role_without_profile(fake_supabase):
    with pytest.raises(AuthorizationError):
        await require_role(AuthUser(id="no-profile"))


@pytest.mark.unit
@pytest.mark.asyncio
async def test_sign_up_stores_role(fake_supabase):
    user = await sign_up("new.agent@example.com", "secret123", "secret123", role="agent")

    profile = next(r for r in fake_supabase.rows("profiles") if r["id"] == user.id)
    assert profile["role"] == "agent"
    assert profile["verified"] is False


@pytest.mark.unit
@pytest.mark.asyncio
@pytest.mark.parametrize("email,password,repeat,role,field", [
    ("not-an-email", "secret123", "secret123", "customer", "email"),
    ("a@example.com", "short", "short", "customer", "password"),
    ("a@example.com", "secret123", "secret124", "customer", "repeat_password"),
    ("a@example.com", "secret123", "secret123", "landlord", "role"),
    ("a@example.com", "secret123", "secret123", "admin", "role"),
])
async def test_sign_up_validation(fake_supabase, email, password, repeat, role, field):
    with pytest.raises(FormValidationError) as exc_info:
        await sign_up(email, password, repeat, role=role)

    assert exc_info.value.field == field
    assert fake_supabase.rows("profiles") == []


@pytest.mark.unit
@pytest.mark.asyncio
async def test_sign_out(fake_supabase):
    await sign_out()

    assert fake_supabase.auth.signed_out is True
