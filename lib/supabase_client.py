# =============================================================================
# lib/supabase_client.py - Supabase Client Wrapper
# =============================================================================
# This module owns the connection to a hosted Supabase project. One wrapper
# instance is built when the app starts and shared by the Supabase record
# store and the Supabase image store, so both talk to the same project
# through the same client.
#
# It also knows how to recognize a Postgres unique_violation (23505), which
# the stores turn into a duplicate username or email error.
#
# Usage:
#   from lib.supabase_client import SupabaseClient
#   supabase = SupabaseClient(url, service_key)
#   rows = supabase.get_client().table("products").select("*").execute().data
# =============================================================================

from __future__ import annotations

import logging
import re
from typing import Any

from supabase import create_client, Client

# Set up logging for this module
logger = logging.getLogger(__name__)

UNIQUE_VIOLATION = "23505"

# Postgres reports the violated key as: Key (email)=(a@b.com) already exists.
_KEY_PATTERN = re.compile(r"Key \((?P<column>[^)]+)\)=")


class SupabaseClientError(Exception):
    """
    Error during Supabase client setup.

    Provides actionable error messages: errors should tell HOW to fix,
    not just WHAT failed.
    """

    def __init__(
        self,
        message: str,
        code: str = "SUPABASE_ERROR",
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.suggestion = suggestion
        self.details = details or {}

    def __str__(self) -> str:
        result = f"[{self.code}] {self.message}"
        if self.suggestion:
            result += f" Suggestion: {self.suggestion}"
        return result


class SupabaseClient:
    """
    Lazily-created Supabase client for one project.

    Uses the service_role key, which bypasses Row Level Security (RLS).
    This is appropriate for server-side operations.

    Example:
        supabase = SupabaseClient("https://xxx.supabase.co", "service-key")
        client = supabase.get_client()
    """

    def __init__(self, url: str, service_key: str):
        self.url = url.rstrip("/")
        self._service_key = service_key
        self._client: Client | None = None

    @classmethod
    def from_settings(cls, settings) -> "SupabaseClient":
        """Build the wrapper from application settings."""
        if not settings.SUPABASE_URL or not settings.SUPABASE_SERVICE_KEY:
            raise SupabaseClientError(
                message="Supabase credentials are not configured",
                code="MISSING_CREDENTIALS",
                suggestion="Set SUPABASE_URL and SUPABASE_SERVICE_KEY in your .env file",
            )
        return cls(settings.SUPABASE_URL, settings.SUPABASE_SERVICE_KEY)

    def get_client(self) -> Client:
        """
        Get or create the Supabase client.

        Returns:
            Client: Supabase client instance

        Raises:
            SupabaseClientError: If client creation fails
        """
        if self._client is None:
            try:
                self._client = create_client(self.url, self._service_key)
                logger.info("Supabase client initialized successfully")
            except Exception as e:
                raise SupabaseClientError(
                    message=f"Failed to create Supabase client: {e}",
                    code="CLIENT_INIT_FAILED",
                    suggestion="Check SUPABASE_URL and SUPABASE_SERVICE_KEY in your .env file"
                ) from e
        return self._client

    def close(self) -> None:
        """Drop the client so a later call builds a fresh one."""
        self._client = None


# =============================================================================
# Error Inspection
# =============================================================================

def _error_code(exc: Exception) -> str | None:
    code = getattr(exc, "code", None)
    return str(code) if code is not None else None


def is_unique_violation(exc: Exception) -> bool:
    """Check whether a PostgREST error is a Postgres unique_violation."""
    return _error_code(exc) == UNIQUE_VIOLATION


def violated_column(exc: Exception) -> str | None:
    """
    Extract the column name from a unique_violation error.

    Returns None when the error text does not name a key.
    """
    text = " ".join(
        str(part) for part in (getattr(exc, "details", None), getattr(exc, "message", None), exc)
        if part
    )
    match = _KEY_PATTERN.search(text)
    return match.group("column") if match else None
