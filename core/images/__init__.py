# =============================================================================
# core/images/ - Image Store Backends
# =============================================================================
# - base.py: ImageStore contract, validation and object naming
# - local_store.py: images in a local uploads directory
# - supabase_store.py: images in a Supabase Storage bucket
#
# build_image_store() picks the backend named by IMAGE_BACKEND.
# =============================================================================

from __future__ import annotations

from app.config import Settings
from lib.supabase_client import SupabaseClient

from .base import ImageFile, ImageStore, UploadedImage
from .local_store import LocalImageStore
from .supabase_store import SupabaseImageStore


def build_image_store(settings: Settings, supabase: SupabaseClient | None = None) -> ImageStore:
    """Construct (but don't initialize) the configured image store."""
    limits = {
        "allowed_types": settings.allowed_image_types_list,
        "max_size_bytes": settings.max_image_size_bytes,
    }
    if settings.IMAGE_BACKEND == "supabase":
        return SupabaseImageStore(
            supabase or SupabaseClient.from_settings(settings),
            bucket=settings.IMAGE_BUCKET,
            **limits,
        )
    return LocalImageStore(settings.uploads_path, public_path=settings.PUBLIC_UPLOADS_PATH, **limits)


__all__ = [
    "ImageFile",
    "ImageStore",
    "UploadedImage",
    "LocalImageStore",
    "SupabaseImageStore",
    "build_image_store",
]
