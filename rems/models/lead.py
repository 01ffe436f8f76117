"""Lead models (in-memory lead board)."""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field


class LeadStatus(str, Enum):
    """Lead pipeline status. Any value may follow any other."""
    NEW = "new"
    CONTACTED = "contacted"
    VIEWING = "viewing"
    OFFER = "offer"
    CLOSED = "closed"


class InterestSubmission(BaseModel):
    """'Show interest' form on a property page."""
    name: str = Field(..., min_length=1)
    email: str = Field(..., min_length=3)
    phone: str = Field(..., min_length=1)
    message: str = ""


class Lead(BaseModel):
    """Buyer interest in a property."""
    id: str = Field(..., description="Lead ID (ULID)")
    property_id: str
    buyer_id: str
    buyer_name: str
    buyer_email: str
    buyer_phone: str
    message: str = ""
    status: LeadStatus = LeadStatus.NEW
    created_at: Optional[str] = None
