"""Booking message schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class MessageCreate(BaseModel):
    """Schema for sending a message on a booking."""

    message: str = Field(..., min_length=1, max_length=2000)


class MessageResponse(BaseModel):
    """Schema for message response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    booking_id: UUID
    sender_id: UUID
    message: str
    is_read: bool
    created_at: datetime


class MessageListResponse(BaseModel):
    """Schema for a booking's communication log."""

    messages: list[MessageResponse]
    unread_count: int


class MarkReadResponse(BaseModel):
    """Schema for mark-as-read result."""

    marked_read: int
