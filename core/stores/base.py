# =============================================================================
# core/stores/base.py - Record Store Contract
# =============================================================================
# One storage interface for the four entity kinds (products, messages,
# subscribers, admin credentials). Each backend (file, sqlite, supabase)
# implements a handful of raw row operations; everything callers see
# (defaults, timestamps, boolean normalization, NotFound/ConstraintViolation)
# is decided here, once, so the backends stay functionally identical.
#
# Every successful write is committed before the method returns. Nothing
# is retried: an engine error surfaces as BackendUnavailableError.
# =============================================================================

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

from pydantic import ValidationError

from app.exceptions import ConstraintViolationError, InvalidInputError, NotFoundError
from core.models import Credential, Message, Product, StoredRecord, Subscriber
from lib.utils import utc_now_iso

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=StoredRecord)


# =============================================================================
# Table Definitions
# =============================================================================

@dataclass(frozen=True)
class TableSpec(Generic[ModelT]):
    """
    Describes one entity table independently of the backend.

    Attributes:
        name: Table (or JSON collection) name
        entity: Human name used in error messages
        model: Pydantic model rows are converted to
        columns: Writable columns, in schema order
        created_field: Timestamp set on insert, used for newest-first order
        updated_field: Timestamp refreshed on every update (optional)
        unique_fields: Columns whose values must be unique
        boolean_fields: Columns holding booleans (0/1 on SQLite)
        defaults: Values applied on insert when a column is not given
    """

    name: str
    entity: str
    model: type[ModelT]
    columns: tuple[str, ...]
    created_field: str = "created_at"
    updated_field: str | None = None
    unique_fields: tuple[str, ...] = ()
    boolean_fields: tuple[str, ...] = ()
    defaults: Mapping[str, Any] = field(default_factory=dict)

    @property
    def timestamp_fields(self) -> tuple[str, ...]:
        if self.updated_field:
            return (self.created_field, self.updated_field)
        return (self.created_field,)

    @property
    def all_fields(self) -> tuple[str, ...]:
        return ("id",) + self.columns + self.timestamp_fields


PRODUCTS = TableSpec(
    name="products",
    entity="product",
    model=Product,
    columns=("name", "description", "price", "category", "image", "in_stock", "featured"),
    updated_field="updated_at",
    boolean_fields=("in_stock", "featured"),
    defaults={"description": "", "image": "", "in_stock": True, "featured": False},
)

MESSAGES = TableSpec(
    name="messages",
    entity="message",
    model=Message,
    columns=("name", "email", "subject", "message", "status"),
    defaults={"subject": "", "status": "unread"},
)

SUBSCRIBERS = TableSpec(
    name="subscribers",
    entity="subscriber",
    model=Subscriber,
    columns=("email", "status"),
    created_field="subscribed_at",
    unique_fields=("email",),
    defaults={"status": "active"},
)

CREDENTIALS = TableSpec(
    name="admins",
    entity="credential",
    model=Credential,
    columns=("username", "password"),
    unique_fields=("username",),
)

ALL_TABLES: tuple[TableSpec, ...] = (CREDENTIALS, PRODUCTS, MESSAGES, SUBSCRIBERS)


# =============================================================================
# Repository
# =============================================================================

class Repository(ABC, Generic[ModelT]):
    """
    CRUD over one entity table.

    Public methods take and return Python values and pydantic models.
    Backends implement the underscore hooks, which take and return plain
    row dicts in the backend's own representation.
    """

    # SQLite has no boolean type; it stores 0/1
    native_booleans: bool = True

    def __init__(self, spec: TableSpec[ModelT]):
        self.spec = spec

    # -------------------------------------------------------------------------
    # Public API
    # -------------------------------------------------------------------------

    def get_all(self, **filters: Any) -> list[ModelT]:
        """
        All records matching the equality filters, newest first.

        Example:
            store.products.get_all(category="bags", featured=True)
        """
        self._check_fields(filters)
        rows = self._select(self._encode(filters))
        return [self._to_model(row) for row in rows]

    def get_by_id(self, record_id: int) -> ModelT | None:
        """The record with this id, or None if it doesn't exist."""
        return self.find_by("id", record_id)

    def find_by(self, field_name: str, value: Any) -> ModelT | None:
        """The first record whose field equals value, or None."""
        self._check_fields({field_name: value})
        row = self._select_one(field_name, self._encode({field_name: value})[field_name])
        return self._to_model(row) if row is not None else None

    def count(self) -> int:
        return self._count()

    def create(self, fields: Mapping[str, Any]) -> ModelT:
        """
        Insert a record and return it with its id and timestamps.

        Raises:
            InvalidInputError: If the row would not load back as a record
            ConstraintViolationError: If a unique field value already exists
        """
        now = utc_now_iso()
        row = {column: self.spec.defaults.get(column) for column in self.spec.columns}
        row.update(self._writable(fields))
        for timestamp in self.spec.timestamp_fields:
            row[timestamp] = fields.get(timestamp) or now

        self._validate(row)
        created = self._to_model(self._insert(self._encode(row)))
        logger.info(f"Created {self.spec.entity} {created.id}")
        return created

    def update(self, record_id: int, fields: Mapping[str, Any]) -> ModelT:
        """
        Change the given fields of a record.

        Raises:
            NotFoundError: If no record has this id
            InvalidInputError: If the changed record would not load back
            ConstraintViolationError: If a unique field value already exists
        """
        changes = self._writable(fields)
        if self.spec.updated_field:
            changes[self.spec.updated_field] = utc_now_iso()

        existing = self.get_by_id(record_id)
        if existing is None:
            raise NotFoundError(self.spec.entity, record_id)
        if not changes:
            return existing

        self._validate({**existing.model_dump(), **changes})
        row = self._update(record_id, self._encode(changes))
        if row is None:
            raise NotFoundError(self.spec.entity, record_id)

        logger.info(f"Updated {self.spec.entity} {record_id}: {sorted(changes)}")
        return self._to_model(row)

    def delete(self, record_id: int) -> None:
        """
        Remove a record.

        Raises:
            NotFoundError: If no record has this id
        """
        if not self._delete(record_id):
            raise NotFoundError(self.spec.entity, record_id)
        logger.info(f"Deleted {self.spec.entity} {record_id}")

    # -------------------------------------------------------------------------
    # Helpers shared by backends
    # -------------------------------------------------------------------------

    def _writable(self, fields: Mapping[str, Any]) -> dict[str, Any]:
        """Keep only writable columns, unwrapping enums to their values."""
        row = {}
        for column in self.spec.columns:
            if column in fields:
                value = fields[column]
                row[column] = getattr(value, "value", value)
        return row

    def _encode(self, values: Mapping[str, Any]) -> dict[str, Any]:
        encoded = {key: getattr(value, "value", value) for key, value in values.items()}
        if not self.native_booleans:
            for column in self.spec.boolean_fields:
                if encoded.get(column) is not None:
                    encoded[column] = 1 if encoded[column] else 0
        return encoded

    def _to_model(self, row: Mapping[str, Any]) -> ModelT:
        data = dict(row)
        for column in self.spec.boolean_fields:
            if data.get(column) is not None:
                data[column] = bool(data[column])
        return self.spec.model.model_validate(data)

    def _validate(self, row: Mapping[str, Any]) -> None:
        """Reject a row that _to_model could not read back, before it is written."""
        try:
            self.spec.model.model_validate({"id": 0, **row})
        except ValidationError as e:
            error = e.errors()[0]
            field_name = ".".join(str(part) for part in error["loc"]) or None
            raise InvalidInputError(
                f"Invalid {self.spec.entity} {field_name}: {error['msg']}",
                field=field_name,
            ) from e

    def _check_fields(self, values: Mapping[str, Any]) -> None:
        # Column names reach SQL text in the sqlite backend
        unknown = set(values) - set(self.spec.all_fields)
        if unknown:
            raise ValueError(f"Unknown {self.spec.entity} field(s): {sorted(unknown)}")

    def _duplicate(self, field_name: str | None, value: Any = None) -> ConstraintViolationError:
        field_name = field_name or (self.spec.unique_fields[0] if self.spec.unique_fields else "id")
        return ConstraintViolationError(self.spec.entity, field_name, value)

    @staticmethod
    def _sort_newest_first(rows: list[dict[str, Any]], created_field: str) -> list[dict[str, Any]]:
        return sorted(rows, key=lambda row: (row.get(created_field) or "", row["id"]), reverse=True)

    # -------------------------------------------------------------------------
    # Backend hooks
    # -------------------------------------------------------------------------

    @abstractmethod
    def _select(self, filters: dict[str, Any]) -> list[dict[str, Any]]:
        """Rows matching all filters, newest first (ties: highest id first)."""

    @abstractmethod
    def _select_one(self, field_name: str, value: Any) -> dict[str, Any] | None:
        """The first row whose field equals value."""

    @abstractmethod
    def _count(self) -> int:
        ...

    @abstractmethod
    def _insert(self, row: dict[str, Any]) -> dict[str, Any]:
        """Insert and return the stored row including its new id."""

    @abstractmethod
    def _update(self, record_id: int, changes: dict[str, Any]) -> dict[str, Any] | None:
        """Apply changes and return the stored row, or None if id is absent."""

    @abstractmethod
    def _delete(self, record_id: int) -> bool:
        """Remove the row; False if id is absent."""


# =============================================================================
# Record Store
# =============================================================================

class RecordStore(ABC):
    """
    The four entity repositories of one backend, plus its lifecycle.

    Constructed once at application startup and injected into request
    handlers. init() must be called before use and close() on shutdown.

    Example:
        store = build_record_store(settings)
        store.init()
        product = store.products.create({"name": "Pearl Bag", "price": 1299, "category": "bags"})
        store.close()
    """

    backend: str = "abstract"

    products: Repository[Product]
    messages: Repository[Message]
    subscribers: Repository[Subscriber]
    credentials: Repository[Credential]

    @abstractmethod
    def init(self) -> None:
        """Create the schema/file if missing. Safe to call more than once."""

    def close(self) -> None:
        """Release backend resources."""

    def ping(self) -> None:
        """
        Cheap read used by the readiness check.

        Raises:
            BackendUnavailableError: If the backend cannot be read
        """
        self.credentials.count()

    def __enter__(self) -> "RecordStore":
        self.init()
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
