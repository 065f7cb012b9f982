# =============================================================================
# core/services/push_dispatcher.py - Push Dispatcher
# =============================================================================
# Turns a newly inserted chat message into one device notification.
#
# Delivery is fire-and-forget and at-most-once: a missing token is a no-op
# and a provider failure is logged and dropped. Nothing here raises.
# =============================================================================

import logging
from typing import Any

from app.config import settings
from core.models.push import PushMessage
from lib.push_client import PushClient
from lib.supabase_client import SupabaseClient

logger = logging.getLogger(__name__)


class PushDispatcher:
    """
    Looks up the recipient's push token and sends the notification.

    Args:
        supabase: Server-side Supabase wrapper (class with fetch_push_recipient)
        push_client: Client for the push provider
    """

    def __init__(
        self,
        supabase: type[SupabaseClient] = SupabaseClient,
        push_client: PushClient | None = None,
    ):
        self.supabase = supabase
        self.push_client = push_client or PushClient()

    def dispatch(self, message: dict[str, Any]) -> bool:
        """
        Send a push notification for one messages row.

        Args:
            message: The inserted row (needs receiver_id; uses content/text,
                title and sender_id when present)

        Returns:
            True if the provider accepted the message, False otherwise
        """
        receiver_id = message.get("receiver_id")
        if not receiver_id:
            logger.info("No receiver_id in message, skipping notification")
            return False

        try:
            recipient = self.supabase.fetch_push_recipient(receiver_id)
        except Exception as e:
            logger.error(f"Error fetching push recipient {receiver_id}: {e}")
            return False

        token = (recipient or {}).get("fcm_token")
        if not token:
            logger.info(f"No push token found for receiver {receiver_id}")
            return False

        push = self.build_message(message, token)

        try:
            self.push_client.send(push)
        except Exception as e:
            logger.error(f"Error sending push to {receiver_id}: {e}")
            return False

        logger.info(f"Notification sent to {recipient.get('full_name') or receiver_id}")
        return True

    @staticmethod
    def build_message(message: dict[str, Any], token: str) -> PushMessage:
        """Build the provider payload for a messages row."""
        body = message.get("content") or message.get("text") or "You have a new message"
        data = {
            key: str(message[key])
            for key in ("sender_id", "receiver_id", "id")
            if message.get(key) is not None
        }
        return PushMessage(
            recipient_token=token,
            title=message.get("title") or settings.PUSH_DEFAULT_TITLE,
            body=body,
            data=data,
        )
