# =============================================================================
# core/models/message.py - Contact Message Schemas
# =============================================================================
# - Message: a stored contact form submission
# - MessageStatus: unread -> read, the only transition
# - MessageSubmission: the public contact form body
# =============================================================================

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, field_validator

from .base import StoredRecord


class MessageStatus(str, Enum):
    """
    Lifecycle of a contact message.

    Flow: unread -> read (once). Deletion is explicit and separate.
    """
    UNREAD = "unread"
    READ = "read"


class Message(StoredRecord):
    """Schema for returning a contact message to the admin dashboard."""

    name: str
    email: str
    subject: str = ""
    message: str
    status: MessageStatus = MessageStatus.UNREAD
    created_at: datetime | None = None

    @field_validator("subject", mode="before")
    @classmethod
    def _null_to_empty(cls, value: Any) -> Any:
        return "" if value is None else value


class MessageSubmission(BaseModel):
    """
    Body of POST /api/messages.

    Fields default to empty so a missing field is reported with the same
    "All fields are required" error as a blank one.

    Example:
        {
            "name": "Maria",
            "email": "maria@example.com",
            "message": "Do you ship to Cebu?"
        }
    """

    name: str = Field(default="", max_length=200)
    email: str = Field(default="", max_length=320)
    subject: str = Field(default="", max_length=200)
    message: str = Field(default="", max_length=5000)

    @field_validator("name", "email", "subject", "message", mode="before")
    @classmethod
    def _strip(cls, value: Any) -> Any:
        if value is None:
            return ""
        return value.strip() if isinstance(value, str) else value

    def is_complete(self) -> bool:
        return bool(self.name and self.email and self.message)
