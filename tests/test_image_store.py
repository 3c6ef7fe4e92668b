# =============================================================================
# tests/test_image_store.py - Image Store Tests
# =============================================================================
# This module contains tests for:
# - Upload validation (type, extension, size, empty payload)
# - Collision-resistant object names
# - Managed URL classification and delete-by-URL
# - The Supabase bucket backend with a mocked client
# =============================================================================

from __future__ import annotations

import re
from unittest.mock import MagicMock

import pytest

from app.exceptions import (
    ImageUploadError,
    InvalidInputError,
    PayloadTooLargeError,
    UnsupportedMediaTypeError,
)
from core.images import ImageStore, LocalImageStore, SupabaseImageStore, build_image_store

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


# =============================================================================
# Object Names
# =============================================================================

class TestObjectNames:
    """Test generate_object_name()."""

    def test_format(self):
        name = ImageStore.generate_object_name("Pearl Bag.JPG")

        assert re.fullmatch(r"\d{8}T\d{12}-[0-9a-f]{16}-Pearl-Bag\.jpg", name)

    def test_unique_for_same_input(self):
        names = {ImageStore.generate_object_name("bag.png") for _ in range(50)}

        assert len(names) == 50

    def test_path_components_stripped(self):
        name = ImageStore.generate_object_name("../../etc/passwd.png")

        assert "/" not in name
        assert name.endswith("-passwd.png")

    def test_missing_name(self):
        assert ImageStore.generate_object_name("").endswith("-image")


# =============================================================================
# Local Image Store
# =============================================================================

class TestLocalImageStore:
    """Test the local uploads directory backend."""

    def test_upload_writes_file(self, image_store):
        uploaded = image_store.upload(PNG_BYTES, "bag.png", "image/png")

        assert uploaded.url == f"/uploads/{uploaded.object_name}"
        assert image_store.path_for(uploaded.object_name).read_bytes() == PNG_BYTES
        assert uploaded.size == len(PNG_BYTES)

    def test_non_image_rejected_without_file(self, image_store):
        with pytest.raises(UnsupportedMediaTypeError) as exc_info:
            image_store.upload(b"hello", "notes.txt", "text/plain")

        assert exc_info.value.status_code == 415
        assert list(image_store.directory.iterdir()) == []

    def test_image_mime_with_wrong_extension_rejected(self, image_store):
        with pytest.raises(UnsupportedMediaTypeError):
            image_store.upload(PNG_BYTES, "bag.exe", "image/png")

    def test_svg_rejected(self, image_store):
        with pytest.raises(UnsupportedMediaTypeError):
            image_store.upload(b"<svg/>", "logo.svg", "image/svg+xml")

    def test_too_large_rejected(self, tmp_path):
        store = LocalImageStore(tmp_path / "small", max_size_bytes=1024 * 1024)
        store.init()

        with pytest.raises(PayloadTooLargeError) as exc_info:
            store.upload(b"\x00" * (1024 * 1024 + 1), "big.jpg", "image/jpeg")

        assert exc_info.value.status_code == 413
        assert list(store.directory.iterdir()) == []

    def test_empty_rejected(self, image_store):
        with pytest.raises(InvalidInputError):
            image_store.upload(b"", "bag.png", "image/png")

    def test_is_managed_url(self, image_store):
        assert image_store.is_managed_url("/uploads/20240115T103000123456-abc-bag.png")
        assert not image_store.is_managed_url("https://via.placeholder.com/400x500")
        assert not image_store.is_managed_url("https://cdn.example.com/uploads/bag.png")
        assert not image_store.is_managed_url("/uploads/../secrets.txt")
        assert not image_store.is_managed_url("")

    def test_delete_removes_file(self, image_store):
        uploaded = image_store.upload(PNG_BYTES, "bag.png", "image/png")

        assert image_store.delete(uploaded.url) is True
        assert not image_store.path_for(uploaded.object_name).exists()

    def test_delete_missing_is_success(self, image_store):
        assert image_store.delete("/uploads/never-existed.png") is True

    def test_delete_unmanaged_returns_false(self, image_store):
        assert image_store.delete("https://via.placeholder.com/400x500") is False

    def test_backend_failure_is_upload_error(self, image_store, monkeypatch):
        def fail(*args, **kwargs):
            raise OSError("disk full")

        monkeypatch.setattr(image_store, "_put", fail)

        with pytest.raises(ImageUploadError) as exc_info:
            image_store.upload(PNG_BYTES, "bag.png", "image/png")

        assert exc_info.value.status_code == 502


# =============================================================================
# Supabase Image Store
# =============================================================================

@pytest.fixture
def bucket():
    bucket = MagicMock()
    bucket.get_public_url.side_effect = lambda name: (
        f"https://test-project.supabase.co/storage/v1/object/public/product-images/{name}?"
    )
    return bucket


@pytest.fixture
def supabase_images(bucket):
    supabase = MagicMock()
    supabase.url = "https://test-project.supabase.co"
    supabase.get_client.return_value.storage.from_.return_value = bucket
    return SupabaseImageStore(supabase, bucket="product-images")


class TestSupabaseImageStore:
    """Test the Supabase Storage backend with a mocked client."""

    def test_upload(self, supabase_images, bucket):
        uploaded = supabase_images.upload(PNG_BYTES, "bag.png", "image/png")

        kwargs = bucket.upload.call_args.kwargs
        assert kwargs["path"] == uploaded.object_name
        assert kwargs["file"] == PNG_BYTES
        assert kwargs["file_options"]["content-type"] == "image/png"
        assert kwargs["file_options"]["upsert"] == "false"
        assert uploaded.url.endswith(uploaded.object_name)

    def test_rejected_upload_never_reaches_bucket(self, supabase_images, bucket):
        with pytest.raises(UnsupportedMediaTypeError):
            supabase_images.upload(b"%PDF", "doc.pdf", "application/pdf")

        bucket.upload.assert_not_called()

    def test_storage_error_is_upload_error(self, supabase_images, bucket):
        bucket.upload.side_effect = RuntimeError("bucket not found")

        with pytest.raises(ImageUploadError):
            supabase_images.upload(PNG_BYTES, "bag.png", "image/png")

    def test_delete_by_url(self, supabase_images, bucket):
        url = "https://test-project.supabase.co/storage/v1/object/public/product-images/123-abc-bag.png"

        assert supabase_images.delete(url) is True
        bucket.remove.assert_called_once_with(["123-abc-bag.png"])

    def test_delete_foreign_url_skipped(self, supabase_images, bucket):
        assert supabase_images.delete("https://other.supabase.co/storage/v1/object/public/product-images/x.png") is False
        bucket.remove.assert_not_called()

    def test_delete_failure_returns_false(self, supabase_images, bucket):
        bucket.remove.side_effect = RuntimeError("permission denied")
        url = supabase_images.public_prefix + "123-abc-bag.png"

        assert supabase_images.delete(url) is False


class TestBuildImageStore:
    """Test backend selection from settings."""

    def test_local_by_default(self, settings):
        store = build_image_store(settings)

        assert isinstance(store, LocalImageStore)
        assert store.max_size_bytes == 5 * 1024 * 1024

    def test_supabase(self, settings):
        supabase_settings = settings.model_copy(update={
            "IMAGE_BACKEND": "supabase",
            "SUPABASE_URL": "https://test-project.supabase.co",
            "SUPABASE_SERVICE_KEY": "test-service-key",
        })

        store = build_image_store(supabase_settings)

        assert isinstance(store, SupabaseImageStore)
        assert store.bucket == "product-images"
