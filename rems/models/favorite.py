"""Favorite model."""

from typing import Optional
from pydantic import BaseModel, Field


class Favorite(BaseModel):
    """(user, property) bookmark."""
    user_id: str = Field(..., description="Profile ID")
    property_id: str = Field(..., description="Property ID")
    created_at: Optional[str] = None
