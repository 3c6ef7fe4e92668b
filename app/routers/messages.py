# =============================================================================
# app/routers/messages.py - Contact Message Endpoints
# =============================================================================
# POST is the public contact form; the rest serve the admin inbox.
# =============================================================================

import logging
from typing import Annotated

from fastapi import APIRouter, Path, status

from app.dependencies import RecordStoreDep
from app.exceptions import InvalidInputError
from core.models import Message, MessageStatus, MessageSubmission

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=list[Message])
def list_messages(store: RecordStoreDep):
    """List messages, newest first."""
    return store.messages.get_all()


@router.post("", status_code=status.HTTP_201_CREATED)
def submit_message(body: MessageSubmission, store: RecordStoreDep):
    """
    Submit the contact form.

    Name, email and message are required; subject is optional.
    """
    if not body.is_complete():
        raise InvalidInputError("All fields are required")

    message = store.messages.create({
        "name": body.name,
        "email": body.email,
        "subject": body.subject,
        "message": body.message,
        "status": MessageStatus.UNREAD,
    })
    logger.info(f"Contact message {message.id} received from {message.email}")
    return {"success": True, "message": "Message sent successfully"}


@router.patch("/{message_id}")
def mark_message_read(
    message_id: Annotated[int, Path(description="Message ID")],
    store: RecordStoreDep,
):
    """Mark a message as read. Returns 404 if it doesn't exist."""
    message = store.messages.update(message_id, {"status": MessageStatus.READ})
    return {"success": True, "data": message}


@router.delete("/{message_id}")
def delete_message(
    message_id: Annotated[int, Path(description="Message ID")],
    store: RecordStoreDep,
):
    """Delete a message. Returns 404 if it doesn't exist."""
    store.messages.delete(message_id)
    return {"success": True}
