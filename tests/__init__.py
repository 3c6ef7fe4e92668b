# =============================================================================
# tests/ - Test Suite
# =============================================================================
# This package contains all tests for the Storefront Catalog API:
# - test_models.py: Pydantic model validation and form parsing
# - test_record_store.py: Record store contract, file and sqlite backends
# - test_supabase_store.py: Supabase record store with a mocked client
# - test_image_store.py: Local and Supabase image stores
# - test_services.py: Product lifecycle and admin credential services
# - test_api.py: End-to-end API tests
# - test_migrate_store.py: Local JSON data migration
#
# Run tests with: pytest
# =============================================================================
