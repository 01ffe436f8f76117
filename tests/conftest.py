"""Shared pytest fixtures and configuration."""

import os
import pytest
from freezegun import freeze_time

# Set test environment variables
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("SUPABASE_URL", "https://test.supabase.co")
os.environ.setdefault("SUPABASE_SERVICE_ROLE_KEY", "test-key")
os.environ.setdefault("LOG_FORMAT", "text")

from rems.models.profile import AuthUser
from tests.utils.fake_supabase import FakeSupabase


@pytest.fixture
def fake_supabase(monkeypatch):
    """In-memory Supabase wired into every service."""
    fake = FakeSupabase()

    async def _async_client():
        return fake

    monkeypatch.setattr("rems.services.supabase_client.get_supabase_client", lambda: fake)
    monkeypatch.setattr("rems.services.chat.get_async_supabase_client", _async_client)
    return fake


def _auth_user(fake: FakeSupabase, role: str, **profile) -> AuthUser:
    user, _ = fake.add_user(role, **profile)
    return AuthUser(id=user.id, email=user.email)


@pytest.fixture
def customer(fake_supabase) -> AuthUser:
    return _auth_user(fake_supabase, "customer", full_name="John Buyer")


@pytest.fixture
def agent(fake_supabase) -> AuthUser:
    return _auth_user(fake_supabase, "agent", full_name="Sarah Agent")


@pytest.fixture
def admin(fake_supabase) -> AuthUser:
    return _auth_user(fake_supabase, "admin", full_name="Site Admin")


@pytest.fixture
def sample_property(fake_supabase, agent) -> dict:
    """An approved, available listing owned by ``agent``."""
    return fake_supabase.seed("properties", {
        "agent_id": agent.id,
        "title": "Modern Downtown Loft",
        "description": "Beautiful modern loft in the heart of downtown with stunning city views.",
        "address": "123 Main Street",
        "city": "San Francisco",
        "price": 450000,
        "bedrooms": 2,
        "bathrooms": 2,
        "square_feet": 1200,
        "approved": True,
        "status": "available",
    })[0]


@pytest.fixture
def freeze_time_fixture():
    """Fixture for freezing time in tests."""
    with freeze_time("2024-12-09 12:00:00") as frozen_time:
        yield frozen_time
