"""Scheduled visit models."""

from typing import Optional
from pydantic import BaseModel, Field


class ScheduledVisit(BaseModel):
    """Customer-requested viewing (public.scheduled_visits)."""
    id: str = Field(..., description="Visit ID (uuid)")
    user_id: str = Field(..., description="Customer profile ID")
    property_id: str = Field(..., description="Property ID")
    visit_date: str = Field(..., description="Requested date/time (ISO string)")
    notes: Optional[str] = None
    status: Optional[str] = Field(None, description="Free-text status")
    created_at: Optional[str] = None


class AgentLead(BaseModel):
    """A visit on one of the agent's properties, as shown in the leads table."""
    id: str
    visit_date: str
    notes: Optional[str] = None
    status: Optional[str] = None
    customer_id: str
    property_id: str
    property_title: Optional[str] = None
    property_address: Optional[str] = None
    property_city: Optional[str] = None
