# =============================================================================
# core/images/base.py - Image Store Contract
# =============================================================================
# Uploads product images, hands back a public URL, and deletes by URL.
#
# - upload(): validates type and size, then stores under a fresh object name
# - delete(): best-effort cleanup; a missing object counts as deleted
# - is_managed_url(): True only for URLs this store issued, so externally
#   supplied image URLs are never passed to delete()
# =============================================================================

from __future__ import annotations

import logging
import re
import secrets
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import PurePosixPath

from app.exceptions import (
    ImageUploadError,
    InvalidInputError,
    PayloadTooLargeError,
    UnsupportedMediaTypeError,
)
from lib.utils import utc_now

logger = logging.getLogger(__name__)

DEFAULT_IMAGE_TYPES = ["jpeg", "jpg", "png", "gif", "webp"]
DEFAULT_MAX_SIZE_BYTES = 5 * 1024 * 1024

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9_-]+")


@dataclass(frozen=True)
class ImageFile:
    """An image received in a request, not yet stored."""
    data: bytes
    filename: str
    content_type: str


@dataclass(frozen=True)
class UploadedImage:
    """A stored image and where it can be fetched from."""
    url: str
    object_name: str
    size: int
    content_type: str


class ImageStore(ABC):
    """
    Base class for image backends.

    Subclasses implement _put/_remove and the URL <-> object name mapping;
    validation, naming and error handling live here.
    """

    backend: str = "abstract"

    def __init__(
        self,
        allowed_types: list[str] | None = None,
        max_size_bytes: int = DEFAULT_MAX_SIZE_BYTES,
    ):
        self.allowed_types = [kind.lower() for kind in (allowed_types or DEFAULT_IMAGE_TYPES)]
        self.max_size_bytes = max_size_bytes

    # -------------------------------------------------------------------------
    # Public API
    # -------------------------------------------------------------------------

    def upload(self, data: bytes, original_name: str, mime_type: str) -> UploadedImage:
        """
        Validate and store an image.

        Args:
            data: Raw file bytes
            original_name: Filename from the client (used for the extension
                and a readable suffix only)
            mime_type: Content type from the client, e.g. "image/png"

        Returns:
            UploadedImage with the public URL

        Raises:
            UnsupportedMediaTypeError: If the type or extension is not an allowed image
            PayloadTooLargeError: If the file exceeds the size limit
            InvalidInputError: If the file is empty
            ImageUploadError: If the backend fails to store the file
        """
        self.validate(data, original_name, mime_type)
        object_name = self.generate_object_name(original_name)

        try:
            url = self._put(object_name, data, mime_type)
        except Exception as e:
            logger.error(f"Image upload failed ({self.backend}): {e}")
            raise ImageUploadError(str(e)) from e

        logger.info(f"Uploaded image {object_name} ({len(data)} bytes)")
        return UploadedImage(url=url, object_name=object_name, size=len(data), content_type=mime_type)

    def delete(self, url: str) -> bool:
        """
        Delete the object behind a managed URL.

        Returns:
            True if the object is gone (including when it never existed),
            False if the URL is not managed or the backend refused
        """
        if not url or not self.is_managed_url(url):
            logger.debug(f"Not deleting unmanaged image URL: {url!r}")
            return False

        object_name = self.object_name_from_url(url)
        if not object_name:
            logger.warning(f"Could not extract an object name from {url!r}")
            return False

        try:
            self._remove(object_name)
        except Exception as e:
            logger.warning(f"Failed to delete image {object_name}: {e}")
            return False

        logger.info(f"Deleted image {object_name}")
        return True

    def validate(self, data: bytes, original_name: str, mime_type: str) -> None:
        """
        Check the upload against the allowed types and the size ceiling.

        Both the MIME subtype and the filename extension must be allowed.
        """
        filename = original_name or ""
        mime = (mime_type or "").lower()
        mime_kind, _, subtype = mime.partition("/")
        extension = PurePosixPath(filename).suffix.lower().lstrip(".")

        if mime_kind != "image" or subtype not in self.allowed_types or extension not in self.allowed_types:
            raise UnsupportedMediaTypeError(filename, mime_type, self.allowed_types)

        if len(data) > self.max_size_bytes:
            raise PayloadTooLargeError(len(data) / (1024 * 1024), self.max_size_bytes // (1024 * 1024))

        if not data:
            raise InvalidInputError("Image file is empty", field="image")

    @staticmethod
    def generate_object_name(original_name: str) -> str:
        """
        Collision-resistant object name that keeps a readable suffix.

        Example:
            generate_object_name("Pearl Bag.JPG")
            # "20240115T103000123456-3f9a0c1b2d4e5f60-Pearl-Bag.jpg"
        """
        path = PurePosixPath((original_name or "").replace("\\", "/"))
        stem = _UNSAFE_CHARS.sub("-", path.stem).strip("-")[:60] or "image"
        timestamp = utc_now().strftime("%Y%m%dT%H%M%S%f")
        return f"{timestamp}-{secrets.token_hex(8)}-{stem}{path.suffix.lower()}"

    # -------------------------------------------------------------------------
    # Backend hooks
    # -------------------------------------------------------------------------

    def init(self) -> None:
        """Prepare the backend (create directories, ...)."""

    def ping(self) -> None:
        """Cheap check used by the readiness endpoint; raises on failure."""

    @abstractmethod
    def is_managed_url(self, url: str) -> bool:
        ...

    @abstractmethod
    def object_name_from_url(self, url: str) -> str | None:
        ...

    @abstractmethod
    def _put(self, object_name: str, data: bytes, mime_type: str) -> str:
        """Store the bytes and return the public URL."""

    @abstractmethod
    def _remove(self, object_name: str) -> None:
        """Remove the object; must not fail if it doesn't exist."""
