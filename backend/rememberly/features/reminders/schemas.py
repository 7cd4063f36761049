"""
Reminders feature: Schemas for request/response models.
"""

from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, Field, field_validator


class Priority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class ReminderCreate(BaseModel):
    """Request to create a reminder (optionally linked to a note)."""
    title: str = Field(min_length=1)
    description: str = ""
    remind_at: datetime
    priority: Priority = Priority.MEDIUM
    note_id: str | None = None

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Please enter a reminder title")
        return v

    @field_validator("remind_at")
    @classmethod
    def as_utc(cls, v: datetime) -> datetime:
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v.astimezone(timezone.utc)


class SnoozeRequest(BaseModel):
    minutes: int = Field(default=15, gt=0)


class PushTokenRequest(BaseModel):
    push_token: str


class Reminder(BaseModel):
    """A row of the reminders table."""
    id: str
    user_id: str
    note_id: str | None = None
    title: str
    description: str | None = None
    remind_at: datetime
    priority: Priority = Priority.MEDIUM
    is_completed: bool = False
    notification_id: str | None = None
    natural_input: str = ""
    created_at: datetime | None = None
