"""Profile model - one row per authenticated user (public.profiles)."""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field


class UserRole(str, Enum):
    """Roles assigned at sign-up."""
    CUSTOMER = "customer"
    AGENT = "agent"
    ADMIN = "admin"


class AuthUser(BaseModel):
    """Identity returned by the auth provider."""
    id: str = Field(..., description="Auth user ID (uuid)")
    email: Optional[str] = Field(None, description="Email address")


class Profile(BaseModel):
    """Profile row; id matches the auth user id."""
    id: str = Field(..., description="Profile ID (uuid from auth.users)")
    role: UserRole = Field(default=UserRole.CUSTOMER, description="customer, agent or admin")
    verified: bool = Field(default=False, description="Set by an admin for agents")
    full_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    bio: Optional[str] = None
    avatar_url: Optional[str] = None
    created_at: Optional[str] = None


class ProfileUpdate(BaseModel):
    """Fields a user may change on their own profile."""
    full_name: Optional[str] = None
    phone: Optional[str] = None
    bio: Optional[str] = None
    avatar_url: Optional[str] = None
