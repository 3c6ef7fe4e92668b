# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# This module provides pytest fixtures and configuration for all tests.
#
# Key features:
# - Sets up environment variables before any imports
# - Local record stores (file and sqlite) and image store in tmp_path
# - A TestClient running the full app, lifespan included
# =============================================================================

import os

# =============================================================================
# Set up test environment BEFORE any imports
# =============================================================================
# app.main builds a module-level app from the environment on import

os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DEBUG", "true")
os.environ.setdefault("STORAGE_BACKEND", "file")
os.environ.setdefault("IMAGE_BACKEND", "local")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

import pytest
from fastapi.testclient import TestClient

from app.config import Settings
from app.main import create_app
from core.images import LocalImageStore
from core.stores import FileRecordStore, SqliteRecordStore


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def settings(tmp_path) -> Settings:
    """Settings pointing every local backend at tmp_path."""
    return Settings(
        _env_file=None,
        STORAGE_BACKEND="file",
        IMAGE_BACKEND="local",
        DATA_DIR=str(tmp_path / "data"),
        UPLOADS_DIR=str(tmp_path / "uploads"),
        BCRYPT_ROUNDS=4,
        SEED_SAMPLE_PRODUCTS=False,
    )


@pytest.fixture
def file_store(tmp_path):
    store = FileRecordStore(tmp_path / "data" / "store.json")
    store.init()
    yield store
    store.close()


@pytest.fixture
def sqlite_store(tmp_path):
    store = SqliteRecordStore(tmp_path / "data" / "storefront.db")
    store.init()
    yield store
    store.close()


@pytest.fixture(params=["file", "sqlite"])
def record_store(request, tmp_path):
    """Each local backend in turn, so contract tests run against both."""
    if request.param == "sqlite":
        store = SqliteRecordStore(tmp_path / "data" / "storefront.db")
    else:
        store = FileRecordStore(tmp_path / "data" / "store.json")
    store.init()
    yield store
    store.close()


@pytest.fixture
def image_store(tmp_path) -> LocalImageStore:
    store = LocalImageStore(tmp_path / "uploads", public_path="/uploads")
    store.init()
    return store


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    """TestClient with startup (default admin) and shutdown run."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def sample_product_fields() -> dict:
    return {
        "name": "Pearl Bag",
        "description": "White beaded handbag",
        "price": 1299,
        "category": "bags",
    }
