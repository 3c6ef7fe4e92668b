# =============================================================================
# core/images/local_store.py - Local Disk Image Store
# =============================================================================
# Writes images into UPLOADS_DIR; the API serves that directory at
# PUBLIC_UPLOADS_PATH (default /uploads), so a stored image's URL is
# "/uploads/<object name>".
# =============================================================================

from __future__ import annotations

import logging
from pathlib import Path
from urllib.parse import unquote, urlsplit

from .base import DEFAULT_MAX_SIZE_BYTES, ImageStore

logger = logging.getLogger(__name__)


class LocalImageStore(ImageStore):
    """Image store backed by a local directory."""

    backend = "local"

    def __init__(
        self,
        directory: Path | str,
        public_path: str = "/uploads",
        allowed_types: list[str] | None = None,
        max_size_bytes: int = DEFAULT_MAX_SIZE_BYTES,
    ):
        super().__init__(allowed_types=allowed_types, max_size_bytes=max_size_bytes)
        self.directory = Path(directory)
        self.public_path = "/" + public_path.strip("/")

    def init(self) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        logger.info(f"Local image store ready at {self.directory}")

    def ping(self) -> None:
        if not self.directory.is_dir():
            raise FileNotFoundError(f"Uploads directory missing: {self.directory}")

    def path_for(self, object_name: str) -> Path:
        return self.directory / object_name

    def is_managed_url(self, url: str) -> bool:
        return self.object_name_from_url(url) is not None

    def object_name_from_url(self, url: str) -> str | None:
        parts = urlsplit(url or "")
        # Issued URLs are site-relative; anything with a host is external
        if parts.scheme or parts.netloc:
            return None
        path = unquote(parts.path)
        prefix = self.public_path + "/"
        if not path.startswith(prefix):
            return None
        name = path[len(prefix):]
        # Only flat names inside the uploads directory
        if not name or "/" in name or "\\" in name or name in (".", ".."):
            return None
        return name

    def _put(self, object_name: str, data: bytes, mime_type: str) -> str:
        self.directory.mkdir(parents=True, exist_ok=True)
        # "xb" refuses to overwrite an existing object
        with open(self.path_for(object_name), "xb") as handle:
            handle.write(data)
        return f"{self.public_path}/{object_name}"

    def _remove(self, object_name: str) -> None:
        self.path_for(object_name).unlink(missing_ok=True)
