# =============================================================================
# core/models/product.py - Product Schemas
# =============================================================================
# These models define the API contract for catalog operations:
# - Product: a stored catalog entry as returned to clients
# - ProductInput: the validated field set of a create/update request
#
# The image field is handled by the product service, not here, because it
# can come from an uploaded file or an external URL.
# =============================================================================

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field, ValidationError, field_validator

from app.exceptions import InvalidInputError
from lib.utils import parse_form_bool, parse_price

from .base import StoredRecord


class Product(StoredRecord):
    """
    Schema for returning product data to clients.

    Example:
        {
            "id": 1,
            "name": "Pearl White Beaded Bag",
            "description": "Elegant white beaded handbag...",
            "price": 1299.0,
            "category": "bags",
            "image": "/uploads/20240115T103000123456-9f2c...-pearl.jpg",
            "inStock": true,
            "featured": true,
            "createdAt": "2024-01-15T10:30:00.123456Z",
            "updatedAt": "2024-01-15T10:30:00.123456Z"
        }
    """

    name: str = Field(..., description="Display name")

    description: str = Field(default="", description="Long description")

    price: float = Field(..., ge=0, description="Unit price")

    category: str = Field(..., description="Free-text category tag (e.g. bags)")

    # Either a URL issued by the image store or an externally supplied URL
    image: str = Field(default="", description="Image URL, or empty")

    in_stock: bool = Field(default=True, description="Whether the product can be ordered")

    featured: bool = Field(default=False, description="Whether the product is highlighted")

    created_at: datetime | None = Field(default=None, description="When the product was created")

    updated_at: datetime | None = Field(default=None, description="When the product was last changed")

    @field_validator("description", "image", mode="before")
    @classmethod
    def _null_to_empty(cls, value: Any) -> Any:
        # SQL backends store missing text as NULL
        return "" if value is None else value


class ProductInput(BaseModel):
    """
    Validated product fields from a create or update request.

    All fields are optional here; for_create() and for_update() decide
    which ones are required.
    """

    name: str | None = None
    description: str | None = None
    price: float | None = Field(default=None, ge=0)
    category: str | None = None
    in_stock: bool | None = None
    featured: bool | None = None

    @field_validator("name", "category", "description", mode="before")
    @classmethod
    def _strip(cls, value: Any) -> Any:
        return value.strip() if isinstance(value, str) else value

    @classmethod
    def from_form(
        cls,
        name: str | None = None,
        description: str | None = None,
        price: str | float | None = None,
        category: str | None = None,
        in_stock: str | bool | None = None,
        featured: str | bool | None = None,
    ) -> "ProductInput":
        """
        Parse raw multipart form values.

        Raises:
            InvalidInputError: If price or a boolean flag cannot be parsed
        """
        try:
            parsed_price = parse_price(price)
        except ValueError:
            raise InvalidInputError("Price must be a non-negative number", field="price")

        flags = {}
        for field_name, raw in (("in_stock", in_stock), ("featured", featured)):
            try:
                flags[field_name] = parse_form_bool(raw)
            except ValueError:
                raise InvalidInputError(f"Invalid value for {field_name}", field=field_name)

        try:
            return cls(
                name=name,
                description=description,
                price=parsed_price,
                category=category,
                **flags,
            )
        except ValidationError as e:
            raise InvalidInputError(f"Invalid product fields: {e.errors()[0]['msg']}")

    def for_create(self) -> dict[str, Any]:
        """
        Field values for a new product.

        Raises:
            InvalidInputError: If name, price or category is missing
        """
        for field_name in ("name", "price", "category"):
            value = getattr(self, field_name)
            if value is None or value == "":
                raise InvalidInputError(f"{field_name.capitalize()} is required", field=field_name)

        return {
            "name": self.name,
            "description": self.description or "",
            "price": self.price,
            "category": self.category,
            "in_stock": True if self.in_stock is None else self.in_stock,
            "featured": False if self.featured is None else self.featured,
        }

    def for_update(self) -> dict[str, Any]:
        """
        Only the fields present in the request.

        Raises:
            InvalidInputError: If name or category is sent empty
        """
        changes = self.model_dump(exclude_none=True)
        for field_name in ("name", "category"):
            if field_name in changes and not changes[field_name]:
                raise InvalidInputError(f"{field_name.capitalize()} must not be empty", field=field_name)
        return changes
