# =============================================================================
# app/main.py - FastAPI Application Entry Point
# =============================================================================
# This is the main entry point for the Storefront Catalog API.
# It configures the FastAPI application with middleware, routers, and handlers.
#
# Usage:
#   uvicorn app.main:app --reload
#
# The record store and image store are built in create_app() and
# initialized/closed by the lifespan handler. Tests pass their own.
# =============================================================================

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from app.config import Settings, get_settings
from app.exceptions import (
    StorefrontException,
    storefront_exception_handler,
    unhandled_exception_handler,
    validation_exception_handler,
)
from app.routers import admin, health, messages, products, subscribers
from core.images import ImageStore, LocalImageStore, build_image_store
from core.services import AdminService, ProductService
from core.stores import RecordStore, build_record_store
from lib.supabase_client import SupabaseClient

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Runs on startup and shutdown:
    - Startup: Initialize stores, create the default admin, seed products
    - Shutdown: Close store connections
    """
    settings: Settings = app.state.settings
    record_store: RecordStore = app.state.record_store
    image_store: ImageStore = app.state.image_store

    # Startup
    logger.info(f"Starting Storefront Catalog API in {settings.ENVIRONMENT} mode")
    logger.info(f"Record store: {record_store.backend}, image store: {image_store.backend}")

    record_store.init()
    image_store.init()

    AdminService.from_settings(record_store, settings).ensure_default_admin()
    if settings.SEED_SAMPLE_PRODUCTS:
        ProductService(record_store, image_store).seed_samples()

    yield

    # Shutdown
    logger.info("Shutting down Storefront Catalog API")
    record_store.close()


def create_app(
    settings: Settings | None = None,
    record_store: RecordStore | None = None,
    image_store: ImageStore | None = None,
) -> FastAPI:
    """
    Build the application.

    Args:
        settings: Settings to use (defaults to get_settings())
        record_store: Pre-built record store (built from settings if omitted)
        image_store: Pre-built image store (built from settings if omitted)
    """
    settings = settings or get_settings()

    # Configure logging
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    # One Supabase client shared by both stores when both use it
    supabase = None
    if settings.STORAGE_BACKEND == "supabase" or settings.IMAGE_BACKEND == "supabase":
        if record_store is None or image_store is None:
            supabase = SupabaseClient.from_settings(settings)

    record_store = record_store or build_record_store(settings, supabase)
    image_store = image_store or build_image_store(settings, supabase)

    app = FastAPI(
        title="Storefront Catalog API",
        description="""
## Product catalog, contact messages and newsletter subscribers

Backs the storefront pages and the admin dashboard.

- **Products**: public listing; create/update/delete with image upload
- **Messages**: public contact form; admin inbox
- **Subscribers**: newsletter sign-ups
- **Admin**: login check and password change

Records live in a local JSON file, SQLite or Supabase (`STORAGE_BACKEND`);
images live in a local uploads directory or a Supabase bucket (`IMAGE_BACKEND`).
""",
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
        openapi_tags=[
            {
                "name": "Products",
                "description": "Catalog listing and management",
            },
            {
                "name": "Admin",
                "description": "Admin credential checks",
            },
            {
                "name": "Messages",
                "description": "Contact form messages",
            },
            {
                "name": "Subscribers",
                "description": "Newsletter subscribers",
            },
            {
                "name": "Health",
                "description": "API health and readiness checks",
            },
        ],
    )

    app.state.settings = settings
    app.state.record_store = record_store
    app.state.image_store = image_store

    # =========================================================================
    # Middleware
    # =========================================================================

    # CORS middleware - allows cross-origin requests
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list if settings.is_production else ["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # =========================================================================
    # Exception Handlers
    # =========================================================================

    app.add_exception_handler(StorefrontException, storefront_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    # =========================================================================
    # Routers
    # =========================================================================

    # Health check endpoints
    app.include_router(
        health.router,
        prefix="/api",
        tags=["Health"]
    )

    # Product catalog endpoints
    app.include_router(
        products.router,
        prefix="/api/products",
        tags=["Products"]
    )

    # Admin credential endpoints
    app.include_router(
        admin.router,
        prefix="/api/admin",
        tags=["Admin"]
    )

    # Contact message endpoints
    app.include_router(
        messages.router,
        prefix="/api/messages",
        tags=["Messages"]
    )

    # Newsletter subscriber endpoints
    app.include_router(
        subscribers.router,
        prefix="/api/subscribers",
        tags=["Subscribers"]
    )

    # Locally stored images are served by the API itself
    if isinstance(image_store, LocalImageStore):
        app.mount(
            image_store.public_path,
            StaticFiles(directory=image_store.directory, check_dir=False),
            name="uploads",
        )

    # =========================================================================
    # Root Endpoint
    # =========================================================================

    @app.get("/", tags=["Root"])
    async def root():
        """
        Root endpoint - returns API info.
        """
        return {
            "name": "Storefront Catalog API",
            "version": "1.0.0",
            "docs": "/docs",
            "health": "/api/health",
        }

    return app


app = create_app()
