# =============================================================================
# core/models/subscriber.py - Newsletter Subscriber Schemas
# =============================================================================

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, field_validator

from .base import StoredRecord


class SubscriberStatus(str, Enum):
    """Only ACTIVE is produced today; INACTIVE is reserved for unsubscribes."""
    ACTIVE = "active"
    INACTIVE = "inactive"


class Subscriber(StoredRecord):
    """Schema for returning a newsletter subscriber."""

    email: str
    status: SubscriberStatus = SubscriberStatus.ACTIVE
    subscribed_at: datetime | None = None


class SubscriptionRequest(BaseModel):
    """Body of POST /api/subscribers."""

    email: str = ""

    @field_validator("email", mode="before")
    @classmethod
    def _normalize(cls, value: Any) -> Any:
        # Emails are unique case-insensitively
        if value is None:
            return ""
        return value.strip().lower() if isinstance(value, str) else value
