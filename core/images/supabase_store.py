# =============================================================================
# core/images/supabase_store.py - Supabase Storage Image Store
# =============================================================================
# Stores images in a public Supabase Storage bucket (default
# "product-images"). Public URLs look like:
#   https://<project>.supabase.co/storage/v1/object/public/product-images/<object name>
# =============================================================================

from __future__ import annotations

import logging
from urllib.parse import unquote, urlsplit

from lib.supabase_client import SupabaseClient

from .base import DEFAULT_MAX_SIZE_BYTES, ImageStore

logger = logging.getLogger(__name__)

# Storage bucket name
BUCKET_NAME = "product-images"


class SupabaseImageStore(ImageStore):
    """
    Image store backed by a Supabase Storage bucket.

    Uploads never upsert: a name clash is an upload error rather than a
    silent overwrite of another product's image.
    """

    backend = "supabase"

    def __init__(
        self,
        supabase: SupabaseClient,
        bucket: str = BUCKET_NAME,
        allowed_types: list[str] | None = None,
        max_size_bytes: int = DEFAULT_MAX_SIZE_BYTES,
    ):
        super().__init__(allowed_types=allowed_types, max_size_bytes=max_size_bytes)
        self.supabase = supabase
        self.bucket = bucket

    @property
    def public_prefix(self) -> str:
        return f"{self.supabase.url}/storage/v1/object/public/{self.bucket}/"

    def _bucket(self):
        return self.supabase.get_client().storage.from_(self.bucket)

    def ping(self) -> None:
        self.supabase.get_client().storage.list_buckets()

    def is_managed_url(self, url: str) -> bool:
        return self.object_name_from_url(url) is not None

    def object_name_from_url(self, url: str) -> str | None:
        if not url or not url.startswith(self.public_prefix):
            return None
        name = unquote(urlsplit(url[len(self.public_prefix):]).path)
        return name or None

    def _put(self, object_name: str, data: bytes, mime_type: str) -> str:
        bucket = self._bucket()
        bucket.upload(
            path=object_name,
            file=data,
            file_options={"content-type": mime_type, "upsert": "false"},
        )
        # Some client versions append a bare "?" to public URLs
        return bucket.get_public_url(object_name).rstrip("?")

    def _remove(self, object_name: str) -> None:
        # Removing a missing object returns an empty list, not an error
        self._bucket().remove([object_name])
