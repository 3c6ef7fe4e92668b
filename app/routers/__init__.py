# =============================================================================
# app/routers/ - API Route Definitions
# =============================================================================
# This package contains FastAPI routers organized by feature:
# - health.py: Health check endpoints
# - products.py: Product catalog and image upload endpoints
# - admin.py: Admin login and password change
# - messages.py: Contact form submission and admin inbox
# - subscribers.py: Newsletter subscriptions
#
# Each router is mounted in main.py with a URL prefix.
# =============================================================================

from . import health
from . import products
from . import admin
from . import messages
from . import subscribers

__all__ = [
    "health",
    "products",
    "admin",
    "messages",
    "subscribers",
]
