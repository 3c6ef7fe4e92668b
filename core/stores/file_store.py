# =============================================================================
# core/stores/file_store.py - JSON File Record Store
# =============================================================================
# Keeps all four tables in a single JSON document on local disk:
#
#   {
#     "tables":    {"admins": [...], "products": [...], ...},
#     "sequences": {"admins": 1, "products": 3, ...}
#   }
#
# Every write reads the document, changes it and replaces the file
# atomically (temp file + os.replace), all under one process-local lock.
# =============================================================================

from __future__ import annotations

import json
import logging
import os
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

from app.exceptions import BackendUnavailableError

from .base import ALL_TABLES, RecordStore, Repository, TableSpec

logger = logging.getLogger(__name__)

BACKEND = "file"


class JsonDocument:
    """A whole-file JSON document with atomic replacement."""

    def __init__(self, path: Path):
        self.path = path
        self._lock = threading.RLock()

    def ensure(self, table_names: list[str]) -> None:
        """Create the file, and any missing tables, if needed."""
        with self.transaction() as doc:
            for name in table_names:
                doc["tables"].setdefault(name, [])
                doc["sequences"].setdefault(name, 0)

    def read(self) -> dict[str, Any]:
        try:
            with open(self.path, encoding="utf-8") as handle:
                doc = json.load(handle)
        except FileNotFoundError:
            doc = {}
        except (OSError, json.JSONDecodeError) as e:
            raise BackendUnavailableError(BACKEND, f"cannot read {self.path}: {e}") from e

        doc.setdefault("tables", {})
        doc.setdefault("sequences", {})
        return doc

    def write(self, doc: dict[str, Any]) -> None:
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp_path, "w", encoding="utf-8") as handle:
                json.dump(doc, handle, indent=2, ensure_ascii=False)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(tmp_path, self.path)
        except OSError as e:
            raise BackendUnavailableError(BACKEND, f"cannot write {self.path}: {e}") from e

    @contextmanager
    def transaction(self) -> Iterator[dict[str, Any]]:
        """
        Read-modify-write under the lock.

        The document is written only if the block finishes without raising.
        """
        with self._lock:
            doc = self.read()
            yield doc
            self.write(doc)


class FileRepository(Repository):
    """Repository over one array of the JSON document."""

    def __init__(self, spec: TableSpec, document: JsonDocument):
        super().__init__(spec)
        self._doc = document

    def _rows(self, doc: dict[str, Any]) -> list[dict[str, Any]]:
        return doc["tables"].setdefault(self.spec.name, [])

    def _check_unique(self, rows: list[dict[str, Any]], row: dict[str, Any], skip_id: int | None = None) -> None:
        for column in self.spec.unique_fields:
            if column not in row:
                continue
            for existing in rows:
                if existing["id"] != skip_id and existing.get(column) == row[column]:
                    raise self._duplicate(column, row[column])

    def _select(self, filters: dict[str, Any]) -> list[dict[str, Any]]:
        rows = [
            dict(row) for row in self._rows(self._doc.read())
            if all(row.get(key) == value for key, value in filters.items())
        ]
        return self._sort_newest_first(rows, self.spec.created_field)

    def _select_one(self, field_name: str, value: Any) -> dict[str, Any] | None:
        for row in self._rows(self._doc.read()):
            if row.get(field_name) == value:
                return dict(row)
        return None

    def _count(self) -> int:
        return len(self._rows(self._doc.read()))

    def _insert(self, row: dict[str, Any]) -> dict[str, Any]:
        with self._doc.transaction() as doc:
            rows = self._rows(doc)
            self._check_unique(rows, row)

            next_id = max(doc["sequences"].get(self.spec.name, 0), max((r["id"] for r in rows), default=0)) + 1
            doc["sequences"][self.spec.name] = next_id

            stored = {"id": next_id, **row}
            rows.append(stored)
        return dict(stored)

    def _update(self, record_id: int, changes: dict[str, Any]) -> dict[str, Any] | None:
        with self._doc.transaction() as doc:
            rows = self._rows(doc)
            for row in rows:
                if row["id"] == record_id:
                    self._check_unique(rows, changes, skip_id=record_id)
                    row.update(changes)
                    return dict(row)
        return None

    def _delete(self, record_id: int) -> bool:
        with self._doc.transaction() as doc:
            rows = self._rows(doc)
            remaining = [row for row in rows if row["id"] != record_id]
            if len(remaining) == len(rows):
                return False
            doc["tables"][self.spec.name] = remaining
        return True


class FileRecordStore(RecordStore):
    """
    Record store backed by one local JSON file.

    Suited to a single-process development server; the lock does not
    protect against a second process writing the same file.
    """

    backend = BACKEND

    def __init__(self, path: Path | str):
        self.path = Path(path)
        self.document = JsonDocument(self.path)

        repos = {spec.name: FileRepository(spec, self.document) for spec in ALL_TABLES}
        self.credentials = repos["admins"]
        self.products = repos["products"]
        self.messages = repos["messages"]
        self.subscribers = repos["subscribers"]

    def init(self) -> None:
        self.document.ensure([spec.name for spec in ALL_TABLES])
        logger.info(f"File record store ready at {self.path}")
