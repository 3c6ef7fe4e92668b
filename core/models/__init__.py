# =============================================================================
# core/models/ - Pydantic Data Models
# =============================================================================
# This package contains Pydantic schemas for data validation:
# - base.py: StoredRecord, the shared camelCase record configuration
# - product.py: Product and ProductInput
# - message.py: Contact message schemas
# - subscriber.py: Newsletter subscriber schemas
# - credential.py: Admin credential and login/password bodies
#
# These models define the "contract" between API and clients.
# =============================================================================

from .base import StoredRecord

from .product import Product, ProductInput

from .message import Message, MessageStatus, MessageSubmission

from .subscriber import Subscriber, SubscriberStatus, SubscriptionRequest

from .credential import ChangePasswordRequest, Credential, LoginRequest

__all__ = [
    "StoredRecord",
    # Product
    "Product",
    "ProductInput",
    # Message
    "Message",
    "MessageStatus",
    "MessageSubmission",
    # Subscriber
    "Subscriber",
    "SubscriberStatus",
    "SubscriptionRequest",
    # Credential
    "ChangePasswordRequest",
    "Credential",
    "LoginRequest",
]
