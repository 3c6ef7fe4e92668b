# =============================================================================
# app/dependencies.py - Shared Dependencies
# =============================================================================
# FastAPI dependency injection for shared resources.
# These are injected into route handlers using Depends().
#
# The stores are built once in the application lifespan and kept on
# app.state; handlers never reach for module-level globals.
# =============================================================================

from typing import Annotated

from fastapi import Depends, Request

from app.config import Settings
from core.images import ImageStore
from core.services import AdminService, ProductService
from core.stores import RecordStore


def get_app_settings(request: Request) -> Settings:
    """Settings the running app was created with."""
    return request.app.state.settings


def get_record_store(request: Request) -> RecordStore:
    """The initialized record store."""
    return request.app.state.record_store


def get_image_store(request: Request) -> ImageStore:
    """The initialized image store."""
    return request.app.state.image_store


# Type aliases for dependency injection
SettingsDep = Annotated[Settings, Depends(get_app_settings)]
RecordStoreDep = Annotated[RecordStore, Depends(get_record_store)]
ImageStoreDep = Annotated[ImageStore, Depends(get_image_store)]


def get_product_service(store: RecordStoreDep, images: ImageStoreDep) -> ProductService:
    return ProductService(store, images)


def get_admin_service(store: RecordStoreDep, settings: SettingsDep) -> AdminService:
    return AdminService.from_settings(store, settings)


ProductServiceDep = Annotated[ProductService, Depends(get_product_service)]
AdminServiceDep = Annotated[AdminService, Depends(get_admin_service)]
