# =============================================================================
# app/config.py - Application Settings
# =============================================================================
# This module loads configuration from environment variables using pydantic-settings.
# It provides a single Settings class with all configuration values.
#
# Usage:
#   from app.config import get_settings
#   settings = get_settings()
#   print(settings.STORAGE_BACKEND)
#
# Environment variables are loaded from:
# 1. System environment variables
# 2. .env file in project root (if exists)
#
# The record store and image store backends are chosen here, so switching
# from the local JSON file to SQLite or Supabase is a configuration change.
# =============================================================================

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Every value has a development default, so the API starts with the
    local file store and local image uploads when nothing is configured.
    The Supabase credentials become required only when one of the
    Supabase backends is selected.
    """

    # -------------------------------------------------------------------------
    # Application Settings
    # -------------------------------------------------------------------------

    ENVIRONMENT: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Current environment"
    )

    DEBUG: bool = Field(
        default=False,
        description="Enable debug mode (verbose logging)"
    )

    LOG_LEVEL: str = Field(
        default="INFO",
        description="Root log level when DEBUG is off"
    )

    API_HOST: str = Field(
        default="0.0.0.0",
        description="Host to bind the API server to"
    )

    API_PORT: int = Field(
        default=3000,
        ge=1,
        le=65535,
        description="Port for the API server"
    )

    # CORS origins (comma-separated string that gets parsed)
    CORS_ORIGINS: str = Field(
        default="http://localhost:3000",
        description="Allowed CORS origins (comma-separated)"
    )

    # -------------------------------------------------------------------------
    # Record Store
    # -------------------------------------------------------------------------

    STORAGE_BACKEND: Literal["file", "sqlite", "supabase"] = Field(
        default="file",
        description="Which record store backend to use"
    )

    DATA_DIR: str = Field(
        default="data",
        description="Directory holding the local store file or SQLite database"
    )

    STORE_FILENAME: str = Field(
        default="store.json",
        description="File name of the JSON document used by the file backend"
    )

    SQLITE_FILENAME: str = Field(
        default="storefront.db",
        description="File name of the SQLite database used by the sqlite backend"
    )

    # -------------------------------------------------------------------------
    # Supabase Configuration
    # -------------------------------------------------------------------------
    # Only required when STORAGE_BACKEND or IMAGE_BACKEND is "supabase"

    SUPABASE_URL: str | None = Field(
        default=None,
        description="Supabase project URL (e.g., https://xxx.supabase.co)"
    )

    SUPABASE_SERVICE_KEY: str | None = Field(
        default=None,
        description="Supabase service_role key (bypasses RLS)"
    )

    # -------------------------------------------------------------------------
    # Image Store
    # -------------------------------------------------------------------------

    IMAGE_BACKEND: Literal["local", "supabase"] = Field(
        default="local",
        description="Where product images are stored"
    )

    IMAGE_BUCKET: str = Field(
        default="product-images",
        description="Supabase Storage bucket for product images"
    )

    UPLOADS_DIR: str = Field(
        default="uploads",
        description="Directory for locally stored product images"
    )

    PUBLIC_UPLOADS_PATH: str = Field(
        default="/uploads",
        description="URL path under which local images are served"
    )

    MAX_IMAGE_SIZE_MB: int = Field(
        default=5,
        ge=1,
        le=50,
        description="Maximum image upload size in MB"
    )

    ALLOWED_IMAGE_TYPES: str = Field(
        default="jpeg,jpg,png,gif,webp",
        description="Allowed image subtypes/extensions (comma-separated)"
    )

    # -------------------------------------------------------------------------
    # Admin Credential
    # -------------------------------------------------------------------------

    ADMIN_USERNAME: str = Field(
        default="admin",
        min_length=1,
        description="Username of the single admin credential"
    )

    ADMIN_DEFAULT_PASSWORD: str = Field(
        default="admin123",
        min_length=1,
        description="Password used when the admin credential is first created"
    )

    MIN_PASSWORD_LENGTH: int = Field(
        default=6,
        ge=1,
        description="Minimum length accepted when changing the admin password"
    )

    BCRYPT_ROUNDS: int = Field(
        default=10,
        ge=4,
        le=16,
        description="bcrypt cost factor for password hashes"
    )

    SEED_SAMPLE_PRODUCTS: bool = Field(
        default=True,
        description="Insert the sample catalog when the product table is empty"
    )

    # -------------------------------------------------------------------------
    # Pydantic Settings Configuration
    # -------------------------------------------------------------------------

    model_config = SettingsConfigDict(
        # Load from .env file in project root
        env_file=".env",
        env_file_encoding="utf-8",
        # Empty values in the environment fall back to defaults
        env_ignore_empty=True,
        # Case-sensitive environment variable names
        case_sensitive=True,
    )

    @model_validator(mode="after")
    def _require_supabase_credentials(self) -> "Settings":
        """Fail at startup if a Supabase backend is selected without credentials."""
        uses_supabase = (
            self.STORAGE_BACKEND == "supabase" or self.IMAGE_BACKEND == "supabase"
        )
        if uses_supabase and not (self.SUPABASE_URL and self.SUPABASE_SERVICE_KEY):
            raise ValueError(
                "SUPABASE_URL and SUPABASE_SERVICE_KEY are required when a "
                "supabase backend is selected"
            )
        return self

    # -------------------------------------------------------------------------
    # Computed Properties
    # -------------------------------------------------------------------------

    @property
    def cors_origins_list(self) -> list[str]:
        """
        Parse CORS_ORIGINS string into a list.

        Example: "http://localhost:3000, https://shop.example" -> ["http://localhost:3000", "https://shop.example"]
        """
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]

    @property
    def allowed_image_types_list(self) -> list[str]:
        """
        Parse ALLOWED_IMAGE_TYPES string into a list.

        Example: "jpeg, png" -> ["jpeg", "png"]
        """
        return [kind.strip().lower().lstrip(".") for kind in self.ALLOWED_IMAGE_TYPES.split(",") if kind.strip()]

    @property
    def max_image_size_bytes(self) -> int:
        """Convert MB to bytes for upload size validation."""
        return self.MAX_IMAGE_SIZE_MB * 1024 * 1024

    @property
    def data_path(self) -> Path:
        return Path(self.DATA_DIR)

    @property
    def uploads_path(self) -> Path:
        return Path(self.UPLOADS_DIR)

    @property
    def log_level(self) -> str:
        return "DEBUG" if self.DEBUG else self.LOG_LEVEL.upper()

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.ENVIRONMENT == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.ENVIRONMENT == "production"


@lru_cache
def get_settings() -> Settings:
    """
    Get cached Settings instance.

    Using lru_cache ensures we only parse .env and validate once,
    not on every access. This is the recommended pattern for
    pydantic-settings.

    Returns:
        Settings: The application settings instance
    """
    return Settings()
