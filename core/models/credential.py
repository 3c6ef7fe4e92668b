# =============================================================================
# core/models/credential.py - Admin Credential Schemas
# =============================================================================
# The stored credential carries a bcrypt hash and is never returned by the
# API. The request bodies mirror what the admin dashboard posts.
# =============================================================================

from datetime import datetime

from pydantic import BaseModel, Field

from .base import StoredRecord


class Credential(StoredRecord):
    """The admin login. `password` is a bcrypt hash, never cleartext."""

    username: str
    password: str = Field(..., repr=False)
    created_at: datetime | None = None


class LoginRequest(BaseModel):
    """Body of POST /api/admin/login."""

    username: str = ""
    password: str = ""


class ChangePasswordRequest(BaseModel):
    """
    Body of POST /api/admin/change-password.

    Example:
        {"currentPassword": "admin123", "newPassword": "s3cret-beads"}
    """

    current_password: str = Field(default="", alias="currentPassword")
    new_password: str = Field(default="", alias="newPassword")
    username: str | None = None

    model_config = {"populate_by_name": True}
