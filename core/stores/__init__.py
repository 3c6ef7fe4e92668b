# =============================================================================
# core/stores/ - Record Store Backends
# =============================================================================
# - base.py: RecordStore / Repository contract and table definitions
# - file_store.py: single local JSON file
# - sqlite_store.py: embedded SQLite database
# - supabase_store.py: hosted Supabase/Postgres
#
# build_record_store() picks the backend named by STORAGE_BACKEND.
# =============================================================================

from __future__ import annotations

from app.config import Settings
from lib.supabase_client import SupabaseClient

from .base import (
    ALL_TABLES,
    CREDENTIALS,
    MESSAGES,
    PRODUCTS,
    SUBSCRIBERS,
    RecordStore,
    Repository,
    TableSpec,
)
from .file_store import FileRecordStore
from .sqlite_store import SqliteRecordStore
from .supabase_store import SupabaseRecordStore


def build_record_store(settings: Settings, supabase: SupabaseClient | None = None) -> RecordStore:
    """
    Construct (but don't initialize) the configured record store.

    Args:
        settings: Application settings
        supabase: Shared Supabase client, built from settings if omitted

    Returns:
        An uninitialized RecordStore; call init() before use
    """
    if settings.STORAGE_BACKEND == "sqlite":
        return SqliteRecordStore(settings.data_path / settings.SQLITE_FILENAME)
    if settings.STORAGE_BACKEND == "supabase":
        return SupabaseRecordStore(supabase or SupabaseClient.from_settings(settings))
    return FileRecordStore(settings.data_path / settings.STORE_FILENAME)


__all__ = [
    "ALL_TABLES",
    "CREDENTIALS",
    "MESSAGES",
    "PRODUCTS",
    "SUBSCRIBERS",
    "RecordStore",
    "Repository",
    "TableSpec",
    "FileRecordStore",
    "SqliteRecordStore",
    "SupabaseRecordStore",
    "build_record_store",
]
