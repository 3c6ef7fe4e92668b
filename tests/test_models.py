# =============================================================================
# tests/test_models.py - Pydantic Model Tests
# =============================================================================
# Unit tests for the models and form parsing helpers to ensure:
# - Form strings are parsed into typed product fields
# - Required fields are enforced on create, optional on update
# - Records serialize to camelCase JSON
# - Request bodies are normalized (trimmed, lowercased emails)
#
# Run with: pytest tests/test_models.py -v
# =============================================================================

from datetime import datetime

import pytest

from app.exceptions import InvalidInputError
from core.models import (
    ChangePasswordRequest,
    Credential,
    Message,
    MessageStatus,
    MessageSubmission,
    Product,
    ProductInput,
    Subscriber,
    SubscriptionRequest,
)
from lib.utils import parse_form_bool, parse_price, to_utc_iso


# =============================================================================
# Form Parsing Helpers
# =============================================================================

class TestParseFormBool:
    """Tests for checkbox-style form values."""

    @pytest.mark.parametrize("raw", ["true", "True", "1", "on", "yes"])
    def test_true_values(self, raw):
        assert parse_form_bool(raw) is True

    @pytest.mark.parametrize("raw", ["false", "FALSE", "0", "off", "no"])
    def test_false_values(self, raw):
        assert parse_form_bool(raw) is False

    def test_missing_is_none(self):
        assert parse_form_bool(None) is None
        assert parse_form_bool("  ") is None

    def test_garbage_rejected(self):
        with pytest.raises(ValueError):
            parse_form_bool("maybe")


class TestParsePrice:
    """Tests for price parsing."""

    def test_integer_string(self):
        assert parse_price("1299") == 1299.0

    def test_decimal_string(self):
        assert parse_price(" 12.50 ") == 12.5

    def test_missing_is_none(self):
        assert parse_price(None) is None
        assert parse_price("") is None

    @pytest.mark.parametrize("raw", ["-1", "abc", "nan", "inf"])
    def test_invalid_rejected(self, raw):
        with pytest.raises(ValueError):
            parse_price(raw)


# =============================================================================
# Timestamp Helpers
# =============================================================================

class TestToUtcIso:
    """Tests for re-emitting timestamps as fixed-width UTC."""

    @pytest.mark.parametrize("raw, expected", [
        ("2024-01-15T10:30:00.000Z", "2024-01-15T10:30:00.000000+00:00"),
        ("2024-01-15T10:30:00", "2024-01-15T10:30:00.000000+00:00"),
        ("2024-01-15T12:30:00.500+02:00", "2024-01-15T10:30:00.500000+00:00"),
    ])
    def test_strings(self, raw, expected):
        assert to_utc_iso(raw) == expected

    def test_datetime(self):
        assert to_utc_iso(datetime(2024, 1, 15, 10, 30)) == "2024-01-15T10:30:00.000000+00:00"

    def test_garbage_rejected(self):
        with pytest.raises(ValueError):
            to_utc_iso("last tuesday")

    def test_non_timestamp_rejected(self):
        with pytest.raises(TypeError):
            to_utc_iso(1705314600000)


# =============================================================================
# Product Model Tests
# =============================================================================

class TestProductInput:
    """Tests for ProductInput parsing and create/update field sets."""

    def test_from_form_parses_strings(self):
        """Test that form strings become typed values."""
        fields = ProductInput.from_form(
            name="  Pearl Bag ",
            price="1299",
            category="bags",
            in_stock="false",
            featured="true",
        )

        assert fields.name == "Pearl Bag"
        assert fields.price == 1299.0
        assert fields.in_stock is False
        assert fields.featured is True

    def test_for_create_applies_defaults(self):
        """Test that inStock defaults true and featured false on create."""
        values = ProductInput.from_form(name="Pearl Bag", price="1299", category="bags").for_create()

        assert values["in_stock"] is True
        assert values["featured"] is False
        assert values["description"] == ""

    @pytest.mark.parametrize("missing", ["name", "price", "category"])
    def test_for_create_requires_fields(self, missing):
        form = {"name": "Pearl Bag", "price": "1299", "category": "bags"}
        form[missing] = ""

        with pytest.raises(InvalidInputError) as exc_info:
            ProductInput.from_form(**form).for_create()

        assert exc_info.value.status_code == 400

    def test_bad_price_is_invalid_input(self):
        with pytest.raises(InvalidInputError) as exc_info:
            ProductInput.from_form(name="x", price="twelve", category="bags")

        assert exc_info.value.details["field"] == "price"

    def test_bad_flag_is_invalid_input(self):
        with pytest.raises(InvalidInputError):
            ProductInput.from_form(name="x", price="1", category="bags", featured="sometimes")

    def test_for_update_keeps_only_sent_fields(self):
        """Test that an update only carries the fields that were sent."""
        changes = ProductInput.from_form(price="999", featured="true").for_update()

        assert changes == {"price": 999.0, "featured": True}

    def test_for_update_rejects_empty_name(self):
        with pytest.raises(InvalidInputError):
            ProductInput.from_form(name="   ").for_update()


class TestProduct:
    """Tests for Product serialization."""

    def test_dumps_camel_case(self):
        product = Product(id=1, name="Pearl Bag", price=1299, category="bags", in_stock=False)

        data = product.model_dump(by_alias=True)

        assert data["inStock"] is False
        assert data["featured"] is False
        assert "createdAt" in data and "updatedAt" in data

    def test_accepts_camel_case(self):
        product = Product.model_validate(
            {"id": 2, "name": "Bag", "price": 10, "category": "bags", "inStock": True}
        )

        assert product.in_stock is True

    def test_null_text_becomes_empty(self):
        product = Product(id=3, name="Bag", price=10, category="bags", description=None, image=None)

        assert product.description == ""
        assert product.image == ""

    def test_negative_price_rejected(self):
        with pytest.raises(ValueError):
            Product(id=4, name="Bag", price=-1, category="bags")


# =============================================================================
# Message / Subscriber / Credential Model Tests
# =============================================================================

class TestMessageModels:
    """Tests for contact message schemas."""

    def test_submission_is_trimmed(self):
        body = MessageSubmission(name=" Maria ", email="maria@example.com", message=" Hi ")

        assert body.name == "Maria"
        assert body.message == "Hi"
        assert body.is_complete()

    def test_submission_missing_message_is_incomplete(self):
        body = MessageSubmission(name="Maria", email="maria@example.com")

        assert not body.is_complete()

    def test_message_defaults(self):
        message = Message(id=1, name="Maria", email="m@example.com", message="Hi")

        assert message.status == MessageStatus.UNREAD
        assert message.subject == ""


class TestSubscriberModels:
    """Tests for newsletter subscriber schemas."""

    def test_email_normalized(self):
        assert SubscriptionRequest(email="  A@B.com ").email == "a@b.com"

    def test_dumps_subscribed_at_alias(self):
        data = Subscriber(id=1, email="a@b.com").model_dump(by_alias=True, mode="json")

        assert data["status"] == "active"
        assert "subscribedAt" in data


class TestCredentialModels:
    """Tests for admin credential schemas."""

    def test_hash_not_in_repr(self):
        credential = Credential(id=1, username="admin", password="$2b$04$secret")

        assert "secret" not in repr(credential)

    def test_change_password_accepts_camel_case(self):
        body = ChangePasswordRequest.model_validate(
            {"currentPassword": "admin123", "newPassword": "beads-2024"}
        )

        assert body.current_password == "admin123"
        assert body.new_password == "beads-2024"
        assert body.username is None
