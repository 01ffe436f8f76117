"""Property models."""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field, field_validator


class PropertyStatus(str, Enum):
    """Market status. Independent of the admin approval flag."""
    AVAILABLE = "available"
    PENDING = "pending"
    UNDER_CONTRACT = "under_contract"
    SOLD = "sold"


class Property(BaseModel):
    """Property listing row (public.properties)."""
    id: str = Field(..., description="Property ID (uuid)")
    agent_id: str = Field(..., description="Owning agent profile ID")
    title: str = Field(..., description="Listing title")
    description: Optional[str] = None
    address: str = Field(..., description="Street address")
    city: str = Field(..., description="City")
    price: float = Field(..., description="Asking price")
    bedrooms: int = 0
    bathrooms: int = 0
    square_feet: int = 0
    property_type: Optional[str] = None
    status: PropertyStatus = Field(default=PropertyStatus.AVAILABLE, description="Market status")
    approved: bool = Field(default=False, description="Admin content gate")
    created_at: Optional[str] = None


class PropertyCreate(BaseModel):
    """New listing form."""
    title: str = Field(..., min_length=1)
    address: str = Field(..., min_length=1)
    city: str = Field(..., min_length=1)
    price: float = Field(..., gt=0)
    description: Optional[str] = None
    bedrooms: int = Field(default=0, ge=0)
    bathrooms: int = Field(default=0, ge=0)
    square_feet: int = Field(default=0, ge=0)
    property_type: Optional[str] = None

    @field_validator("title", "address", "city")
    @classmethod
    def not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value


class PropertyFilters(BaseModel):
    """Search filters for the public listings page."""
    search_term: str = ""
    min_price: float = 0
    max_price: float = 2_000_000
    bedrooms: Optional[int] = Field(None, description="Minimum bedrooms")
    bathrooms: Optional[int] = Field(None, description="Minimum bathrooms")

    def matches(self, prop: Property) -> bool:
        term = self.search_term.strip().lower()
        if term and not any(
            term in (value or "").lower()
            for value in (prop.title, prop.address, prop.city, prop.description)
        ):
            return False
        if prop.price < self.min_price or prop.price > self.max_price:
            return False
        if self.bedrooms is not None and prop.bedrooms < self.bedrooms:
            return False
        if self.bathrooms is not None and prop.bathrooms < self.bathrooms:
            return False
        return True
