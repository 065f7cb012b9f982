# =============================================================================
# app/routers/hooks.py - Database Webhook Endpoints
# =============================================================================
# Supabase calls POST /hooks/messages for every row inserted into messages.
# The row is queued for the Push Dispatcher; the response does not wait for
# delivery.
# =============================================================================

import hmac
import logging
from typing import Callable, Optional

from fastapi import APIRouter, Depends, Header, status

from app.config import settings
from app.dependencies import get_push_enqueuer
from app.exceptions import WebhookAuthError
from core.models.push import MessageWebhook

logger = logging.getLogger(__name__)

router = APIRouter()


def verify_webhook_secret(
    x_webhook_secret: Optional[str] = Header(None),
) -> None:
    """Reject requests without the shared secret (when one is configured)."""
    expected = settings.WEBHOOK_SECRET
    if not expected:
        return
    if not x_webhook_secret or not hmac.compare_digest(x_webhook_secret, expected):
        logger.warning("Rejected database webhook with invalid secret")
        raise WebhookAuthError()


@router.post(
    "/messages",
    status_code=status.HTTP_202_ACCEPTED,
    dependencies=[Depends(verify_webhook_secret)],
)
async def message_created(
    event: MessageWebhook,
    enqueue: Callable = Depends(get_push_enqueuer),
) -> dict:
    """
    Queue a push notification for a new chat message.

    Non-INSERT events and events without a record are acknowledged and ignored.
    """
    if event.type.upper() != "INSERT" or not event.record:
        logger.debug(f"Ignoring {event.type} webhook on {event.table}")
        return {"queued": False}

    try:
        enqueue(event.record)
    except Exception as e:
        logger.error(f"Failed to queue push for message {event.record.get('id')}: {e}")
        return {"queued": False}

    logger.info(f"Queued push for message {event.record.get('id')}")
    return {"queued": True}
