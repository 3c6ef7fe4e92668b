# =============================================================================
# app/routers/products.py - Product Catalog Endpoints
# =============================================================================
# Public listing plus the admin dashboard's create/update/delete.
#
# Create and update take multipart form data: the product fields, plus
# either an "image" file or an "imageUrl" pointing at an external image.
# =============================================================================

from typing import Annotated

from fastapi import APIRouter, File, Form, Path, Query, UploadFile

from app.dependencies import ProductServiceDep
from app.exceptions import PayloadTooLargeError
from core.images import ImageFile
from core.models import Product, ProductInput

router = APIRouter()


# =============================================================================
# Helper Functions
# =============================================================================

def _image_from_upload(upload: UploadFile | None, max_size_bytes: int) -> ImageFile | None:
    """
    Read the uploaded file; an empty file input counts as no file.

    At most max_size_bytes + 1 bytes are read, so an oversized upload is
    rejected without loading it whole.

    Raises:
        PayloadTooLargeError: If the file exceeds max_size_bytes
    """
    if upload is None or not upload.filename:
        return None

    max_mb = max_size_bytes // (1024 * 1024)
    if upload.size is not None and upload.size > max_size_bytes:
        raise PayloadTooLargeError(upload.size / (1024 * 1024), max_mb)

    data = upload.file.read(max_size_bytes + 1)
    if len(data) > max_size_bytes:
        raise PayloadTooLargeError(len(data) / (1024 * 1024), max_mb)

    return ImageFile(
        data=data,
        filename=upload.filename,
        content_type=upload.content_type or "",
    )


# =============================================================================
# Endpoints
# =============================================================================

@router.get("", response_model=list[Product])
def list_products(
    service: ProductServiceDep,
    category: Annotated[str | None, Query(description="Only products in this category")] = None,
    featured: Annotated[bool | None, Query(description="Only featured (or non-featured) products")] = None,
):
    """
    List products, newest first.
    """
    return service.list_products(category=category, featured=featured)


@router.get("/{product_id}", response_model=Product)
def get_product(
    product_id: Annotated[int, Path(description="Product ID")],
    service: ProductServiceDep,
):
    """
    Get one product.

    Returns 404 if it doesn't exist.
    """
    return service.get_product(product_id)


@router.post("")
def create_product(
    service: ProductServiceDep,
    name: Annotated[str | None, Form()] = None,
    description: Annotated[str | None, Form()] = None,
    price: Annotated[str | None, Form()] = None,
    category: Annotated[str | None, Form()] = None,
    in_stock: Annotated[str | None, Form(alias="inStock")] = None,
    featured: Annotated[str | None, Form()] = None,
    image_url: Annotated[str | None, Form(alias="imageUrl")] = None,
    image: Annotated[UploadFile | None, File(description="Product image")] = None,
):
    """
    Create a product.

    The image file, if present, is uploaded before the row is written.
    Without a file, imageUrl (or nothing) is used as the image.
    """
    fields = ProductInput.from_form(
        name=name,
        description=description,
        price=price,
        category=category,
        in_stock=in_stock,
        featured=featured,
    )
    product = service.create_product(
        fields,
        image=_image_from_upload(image, service.images.max_size_bytes),
        image_url=image_url,
    )
    return {"success": True, "product": product}


@router.put("/{product_id}")
def update_product(
    product_id: Annotated[int, Path(description="Product ID")],
    service: ProductServiceDep,
    name: Annotated[str | None, Form()] = None,
    description: Annotated[str | None, Form()] = None,
    price: Annotated[str | None, Form()] = None,
    category: Annotated[str | None, Form()] = None,
    in_stock: Annotated[str | None, Form(alias="inStock")] = None,
    featured: Annotated[str | None, Form()] = None,
    image_url: Annotated[str | None, Form(alias="imageUrl")] = None,
    image: Annotated[UploadFile | None, File(description="Replacement image")] = None,
):
    """
    Update a product.

    Only the fields sent are changed. A new image replaces the old one,
    which is deleted after the row is saved.
    """
    fields = ProductInput.from_form(
        name=name,
        description=description,
        price=price,
        category=category,
        in_stock=in_stock,
        featured=featured,
    )
    product = service.update_product(
        product_id,
        fields,
        image=_image_from_upload(image, service.images.max_size_bytes),
        image_url=image_url,
    )
    return {"success": True, "product": product}


@router.delete("/{product_id}")
def delete_product(
    product_id: Annotated[int, Path(description="Product ID")],
    service: ProductServiceDep,
):
    """
    Delete a product and its stored image.
    """
    service.delete_product(product_id)
    return {"success": True, "message": "Product deleted successfully"}
