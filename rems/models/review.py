"""Review models."""

from typing import Optional
from pydantic import BaseModel, Field, field_validator

MIN_RATING = 1
MAX_RATING = 5


class Review(BaseModel):
    """Review row (public.reviews). Hidden from the public until approved."""
    id: str = Field(..., description="Review ID (uuid)")
    user_id: str = Field(..., description="Author profile ID")
    property_id: str = Field(..., description="Reviewed property ID")
    rating: int = Field(..., ge=MIN_RATING, le=MAX_RATING, description="Rating 1-5")
    comment: Optional[str] = None
    approved: bool = Field(default=False, description="Admin moderation gate")
    created_at: Optional[str] = None


class ReviewCreate(BaseModel):
    """Review submission form."""
    property_id: str
    rating: int = Field(..., ge=MIN_RATING, le=MAX_RATING)
    comment: Optional[str] = None

    @field_validator("rating", mode="before")
    @classmethod
    def rating_not_bool(cls, value):
        if isinstance(value, bool):
            raise ValueError("rating must be a whole number")
        return value
