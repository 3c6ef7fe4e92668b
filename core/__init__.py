# =============================================================================
# core/ - Business Logic Package
# =============================================================================
# This package contains the storage and business logic:
# - models/: Pydantic schemas for records and request bodies
# - stores/: Record store backends (file, sqlite, supabase)
# - images/: Image store backends (local, supabase)
# - services/: Product lifecycle and admin credential operations
#
# Code in this package does not define routes; stores and services are
# constructed by the app and passed in, so they can be tested directly.
# =============================================================================
