# =============================================================================
# app/routers/subscribers.py - Newsletter Subscriber Endpoints
# =============================================================================

import logging
from typing import Annotated

from fastapi import APIRouter, Path, status

from app.dependencies import RecordStoreDep
from app.exceptions import ConstraintViolationError, InvalidInputError
from core.models import Subscriber, SubscriberStatus, SubscriptionRequest

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=list[Subscriber])
def list_subscribers(store: RecordStoreDep):
    """List subscribers, newest first."""
    return store.subscribers.get_all()


@router.post("", status_code=status.HTTP_201_CREATED)
def subscribe(body: SubscriptionRequest, store: RecordStoreDep):
    """
    Subscribe an email address to the newsletter.

    Returns 409 if the address is already subscribed.
    """
    if not body.email:
        raise InvalidInputError("Email is required", field="email")

    try:
        subscriber = store.subscribers.create({
            "email": body.email,
            "status": SubscriberStatus.ACTIVE,
        })
    except ConstraintViolationError:
        raise ConstraintViolationError(
            "subscriber", "email", body.email, message="Email already subscribed"
        )

    logger.info(f"New subscriber {subscriber.id}")
    return {"success": True, "message": "Subscribed successfully"}


@router.delete("/{subscriber_id}")
def delete_subscriber(
    subscriber_id: Annotated[int, Path(description="Subscriber ID")],
    store: RecordStoreDep,
):
    """Remove a subscriber. Returns 404 if it doesn't exist."""
    store.subscribers.delete(subscriber_id)
    return {"success": True}
