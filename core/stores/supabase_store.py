# =============================================================================
# core/stores/supabase_store.py - Hosted Postgres Record Store (Supabase)
# =============================================================================
# The four entity tables live in a Supabase Postgres project and are reached
# through the Supabase table API. Each call is one PostgREST request, which
# Postgres runs as one statement.
#
# Expected schema (booleans are native):
#   admins(id bigserial pk, username text unique, password text, created_at timestamptz)
#   products(id bigserial pk, name, description, price numeric, category, image,
#            in_stock bool, featured bool, created_at timestamptz, updated_at timestamptz)
#   messages(id bigserial pk, name, email, subject, message, status, created_at timestamptz)
#   subscribers(id bigserial pk, email text unique, status, subscribed_at timestamptz)
# =============================================================================

from __future__ import annotations

import logging
from typing import Any

from app.exceptions import BackendUnavailableError
from lib.supabase_client import (
    SupabaseClient,
    SupabaseClientError,
    is_unique_violation,
    violated_column,
)

from .base import ALL_TABLES, RecordStore, Repository, TableSpec

logger = logging.getLogger(__name__)

BACKEND = "supabase"


class SupabaseRepository(Repository):
    """Repository over one Supabase table."""

    def __init__(self, spec: TableSpec, supabase: SupabaseClient):
        super().__init__(spec)
        self._supabase = supabase

    def _table(self):
        try:
            client = self._supabase.get_client()
        except SupabaseClientError as e:
            raise BackendUnavailableError(BACKEND, str(e)) from e
        return client.table(self.spec.name)

    def _execute(self, query, pending: dict[str, Any] | None = None):
        """Run a query, mapping PostgREST errors to store errors."""
        try:
            return query.execute()
        except Exception as e:
            if is_unique_violation(e):
                column = violated_column(e)
                raise self._duplicate(column, (pending or {}).get(column)) from e
            logger.error(f"Supabase {self.spec.name} query failed: {e}")
            raise BackendUnavailableError(BACKEND, str(e)) from e

    def _select(self, filters: dict[str, Any]) -> list[dict[str, Any]]:
        query = self._table().select("*")
        for column, value in filters.items():
            query = query.eq(column, value)
        query = query.order(self.spec.created_field, desc=True).order("id", desc=True)
        response = self._execute(query)
        return list(response.data or [])

    def _select_one(self, field_name: str, value: Any) -> dict[str, Any] | None:
        query = self._table().select("*").eq(field_name, value).limit(1)
        response = self._execute(query)
        return response.data[0] if response.data else None

    def _count(self) -> int:
        response = self._execute(self._table().select("id", count="exact"))
        return response.count or 0

    def _insert(self, row: dict[str, Any]) -> dict[str, Any]:
        response = self._execute(self._table().insert(row), pending=row)
        if not response.data:
            raise BackendUnavailableError(BACKEND, f"insert into {self.spec.name} returned no data")
        return response.data[0]

    def _update(self, record_id: int, changes: dict[str, Any]) -> dict[str, Any] | None:
        response = self._execute(self._table().update(changes).eq("id", record_id), pending=changes)
        return response.data[0] if response.data else None

    def _delete(self, record_id: int) -> bool:
        response = self._execute(self._table().delete().eq("id", record_id))
        return bool(response.data)


class SupabaseRecordStore(RecordStore):
    """
    Record store backed by a hosted Supabase/Postgres project.

    The schema is managed in Supabase (see the module header); init() only
    verifies that the tables are reachable.
    """

    backend = BACKEND

    def __init__(self, supabase: SupabaseClient):
        self.supabase = supabase

        repos = {spec.name: SupabaseRepository(spec, supabase) for spec in ALL_TABLES}
        self.credentials = repos["admins"]
        self.products = repos["products"]
        self.messages = repos["messages"]
        self.subscribers = repos["subscribers"]

    def init(self) -> None:
        self.ping()
        logger.info(f"Supabase record store ready at {self.supabase.url}")

    def close(self) -> None:
        self.supabase.close()
