# =============================================================================
# core/services/product_service.py - Product Lifecycle
# =============================================================================
# Keeps product rows and stored image objects consistent:
#
# - Create: upload first, then write the row that references the new URL.
# - Update: upload first, write the row, then delete the replaced image.
# - Delete: remove the row, then delete its image.
#
# A product row never points at an image that doesn't exist yet. The price
# is a possible orphaned image object (a failed cleanup), which is logged
# and accepted rather than rolled back.
# =============================================================================

import logging
from typing import Any

from app.exceptions import NotFoundError
from core.images import ImageFile, ImageStore
from core.models import Product, ProductInput
from core.stores import RecordStore

logger = logging.getLogger(__name__)


# Catalog inserted into an empty store on first start
SAMPLE_PRODUCTS: list[dict[str, Any]] = [
    {
        "name": "Pearl White Beaded Bag",
        "description": "Elegant white beaded handbag crafted with premium pearl beads. "
                       "Perfect for formal events and special occasions.",
        "price": 1299,
        "category": "bags",
        "image": "https://via.placeholder.com/400x500/E8D5C4/8B4513?text=Beaded+Bag+1",
        "in_stock": True,
        "featured": True,
    },
    {
        "name": "Sky Blue Beaded Bag",
        "description": "Tranquil blue beaded clutch that brings a sense of calm elegance. "
                       "Ideal for both casual and semi-formal occasions.",
        "price": 1199,
        "category": "bags",
        "image": "https://via.placeholder.com/400x500/D4E8E8/4682B4?text=Beaded+Bag+2",
        "in_stock": True,
        "featured": False,
    },
    {
        "name": "Classic Beaded Necklace",
        "description": "Handwoven beaded necklace featuring intricate patterns and high-quality beads.",
        "price": 599,
        "category": "jewelry",
        "image": "https://via.placeholder.com/400x500/F5E6D3/DAA520?text=Beaded+Necklace",
        "in_stock": True,
        "featured": False,
    },
]


class ProductService:
    """
    Product operations that span the record store and the image store.

    Provides a clean interface between API routes and storage.
    """

    def __init__(self, store: RecordStore, images: ImageStore):
        self.store = store
        self.images = images

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def list_products(self, category: str | None = None, featured: bool | None = None) -> list[Product]:
        """All products, newest first, optionally filtered."""
        filters: dict[str, Any] = {}
        if category:
            filters["category"] = category
        if featured is not None:
            filters["featured"] = featured
        return self.store.products.get_all(**filters)

    def get_product(self, product_id: int) -> Product:
        """
        Raises:
            NotFoundError: If the product doesn't exist
        """
        product = self.store.products.get_by_id(product_id)
        if product is None:
            raise NotFoundError("product", product_id)
        return product

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    def create_product(
        self,
        fields: ProductInput,
        image: ImageFile | None = None,
        image_url: str | None = None,
    ) -> Product:
        """
        Create a product, uploading its image first.

        Args:
            fields: Validated form fields
            image: Uploaded image file (takes precedence over image_url)
            image_url: Externally hosted image URL

        Returns:
            The created product

        Raises:
            InvalidInputError: If a required field is missing
            UnsupportedMediaTypeError / PayloadTooLargeError: If the image is rejected
        """
        values = fields.for_create()

        uploaded_url = self._upload(image)
        values["image"] = uploaded_url or (image_url or "").strip()

        try:
            product = self.store.products.create(values)
        except Exception:
            # The row never existed, so the fresh object would be orphaned
            if uploaded_url:
                self._cleanup(uploaded_url, reason="product insert failed")
            raise

        logger.info(f"Created product {product.id}: {product.name}")
        return product

    def update_product(
        self,
        product_id: int,
        fields: ProductInput,
        image: ImageFile | None = None,
        image_url: str | None = None,
    ) -> Product:
        """
        Update a product; only the fields present are changed.

        A new image file replaces the current image; otherwise a non-empty
        image_url replaces it; otherwise the image is kept. The replaced
        image is deleted only after the row points at the new one.

        Raises:
            NotFoundError: If the product doesn't exist
        """
        current = self.get_product(product_id)
        changes = fields.for_update()

        uploaded_url = self._upload(image)
        if uploaded_url:
            changes["image"] = uploaded_url
        elif image_url and image_url.strip():
            changes["image"] = image_url.strip()

        try:
            product = self.store.products.update(product_id, changes)
        except Exception:
            if uploaded_url:
                self._cleanup(uploaded_url, reason="product update failed")
            raise

        if "image" in changes and current.image and current.image != product.image:
            self._cleanup(current.image, reason=f"replaced on product {product_id}")

        logger.info(f"Updated product {product_id}")
        return product

    def delete_product(self, product_id: int) -> None:
        """
        Delete a product and then its image.

        The row is gone even if the image can't be deleted.

        Raises:
            NotFoundError: If the product doesn't exist
        """
        product = self.get_product(product_id)
        self.store.products.delete(product_id)

        if product.image:
            self._cleanup(product.image, reason=f"product {product_id} deleted")

        logger.info(f"Deleted product {product_id}")

    def seed_samples(self) -> int:
        """
        Insert the sample catalog if there are no products.

        Returns:
            Number of products inserted
        """
        if self.store.products.count() > 0:
            return 0
        for sample in SAMPLE_PRODUCTS:
            self.store.products.create(sample)
        logger.info(f"Seeded {len(SAMPLE_PRODUCTS)} sample products")
        return len(SAMPLE_PRODUCTS)

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _upload(self, image: ImageFile | None) -> str | None:
        if image is None:
            return None
        return self.images.upload(image.data, image.filename, image.content_type).url

    def _cleanup(self, url: str, reason: str) -> None:
        """Best-effort image delete; failures leave an orphan and a log line."""
        if not self.images.is_managed_url(url):
            return
        try:
            deleted = self.images.delete(url)
        except Exception as e:
            logger.warning(f"Orphaned image {url} ({reason}): {e}")
            return
        if not deleted:
            logger.warning(f"Orphaned image {url} ({reason}): delete was refused")
