# =============================================================================
# workers/tasks.py - Celery Task Definitions
# =============================================================================
# Defines background tasks.
#
# Tasks:
# - send_push_notification: Push Dispatcher for one new messages row
# =============================================================================

import logging
from typing import Any

from celery import shared_task

from core.services.push_dispatcher import PushDispatcher

logger = logging.getLogger(__name__)


@shared_task(name="workers.tasks.send_push_notification", ignore_result=True, max_retries=0)
def send_push_notification(message: dict[str, Any]) -> bool:
    """
    Send a push notification for a newly inserted chat message.

    Fire-and-forget: PushDispatcher logs and swallows every failure, so the
    task never errors and is never retried.

    Args:
        message: The inserted messages row from the database webhook

    Returns:
        True if the push provider accepted the message
    """
    logger.debug(f"Dispatching push for message {message.get('id')}")
    return PushDispatcher().dispatch(message)
