"""Chat message model."""

from typing import Optional
from pydantic import BaseModel, Field, field_validator


class Message(BaseModel):
    """Per-property chat message (public.messages). Never edited or deleted."""
    id: str = Field(..., description="Message ID (client-generated uuid)")
    property_id: str = Field(..., description="Property the conversation is about")
    sender_id: str = Field(..., description="Sender profile ID")
    receiver_id: str = Field(..., description="Receiver profile ID (required)")
    content: str = Field(..., description="Message text")
    created_at: Optional[str] = None

    @field_validator("content")
    @classmethod
    def content_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("message content must not be blank")
        return value

    def is_between(self, user_a: str, user_b: str) -> bool:
        """True when the message belongs to the conversation of the two users."""
        return {self.sender_id, self.receiver_id} == {user_a, user_b}
