# =============================================================================
# core/services/__init__.py - Service Layer Exports
# =============================================================================

from .admin_service import AdminService
from .product_service import SAMPLE_PRODUCTS, ProductService

__all__ = [
    "AdminService",
    "ProductService",
    "SAMPLE_PRODUCTS",
]
