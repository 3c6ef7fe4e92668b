# =============================================================================
# lib/ - Standalone Utility Modules
# =============================================================================
# This package contains reusable utilities:
# - supabase_client.py: Supabase client wrapper and PostgREST error helpers
# - passwords.py: bcrypt hashing for the admin credential
# - utils.py: Timestamps and form value parsing
#
# These modules are self-contained and can be tested in isolation.
# =============================================================================

from lib.supabase_client import SupabaseClient, SupabaseClientError
from lib.passwords import hash_password, verify_password
from lib.utils import parse_form_bool, parse_price, to_utc_iso, utc_now, utc_now_iso

__all__ = [
    # Supabase
    "SupabaseClient",
    "SupabaseClientError",
    # Passwords
    "hash_password",
    "verify_password",
    # Utils
    "parse_form_bool",
    "parse_price",
    "to_utc_iso",
    "utc_now",
    "utc_now_iso",
]
