# =============================================================================
# core/models/base.py - Shared Record Configuration
# =============================================================================
# Every record returned by a store is a pydantic model with snake_case
# attributes and camelCase JSON aliases (inStock, createdAt, ...), which is
# the shape the storefront and admin dashboard already consume.
# =============================================================================

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class StoredRecord(BaseModel):
    """
    Base class for all persisted entities.

    - Accepts both snake_case names and camelCase aliases on input
    - Serializes with camelCase aliases in API responses
    - Coerces backend representations (0/1 integers, ISO strings) into
      Python bools and datetimes
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )

    id: int
