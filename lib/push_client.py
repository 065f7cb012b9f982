# =============================================================================
# lib/push_client.py - Push Provider Client
# =============================================================================
# Thin HTTP client for the Firebase Cloud Messaging send endpoint.
#
# One call = one POST. There is no retry, backoff or acknowledgement
# tracking; callers decide what to do with a PushClientError.
#
# Usage:
#   from lib.push_client import PushClient
#   PushClient().send(PushMessage(recipient_token=..., title=..., body=...))
# =============================================================================

from __future__ import annotations

import logging
from typing import Any

import httpx

from app.config import settings
from core.models.push import PushMessage
from lib.utils import ApplicationError

logger = logging.getLogger(__name__)


class PushClientError(ApplicationError):
    """Raised when the push provider rejects or cannot receive a message."""

    def __init__(self, message: str, **kwargs):
        super().__init__(message, code=kwargs.pop("code", "PUSH_SEND_FAILED"), **kwargs)


class PushClient:
    """
    Sends push messages with the server key as a bearer token.

    Args:
        server_key: Provider server key (defaults to settings.FCM_SERVER_KEY)
        send_url: Provider endpoint (defaults to settings.FCM_SEND_URL)
        http: Optional httpx.Client, injected by tests
    """

    def __init__(
        self,
        server_key: str | None = None,
        send_url: str | None = None,
        http: httpx.Client | None = None,
    ):
        self.server_key = server_key if server_key is not None else settings.FCM_SERVER_KEY
        self.send_url = send_url or settings.FCM_SEND_URL
        self._http = http

    def send(self, message: PushMessage) -> dict[str, Any]:
        """
        POST a single message to the provider.

        Returns:
            The provider's JSON response

        Raises:
            PushClientError: Missing key, transport failure or non-2xx status
        """
        if not self.server_key:
            raise PushClientError(
                "Push provider server key is not configured",
                code="PUSH_NOT_CONFIGURED",
                suggestion="Set FCM_SERVER_KEY in your .env file",
            )

        headers = {
            "Authorization": f"Bearer {self.server_key}",
            "Content-Type": "application/json",
        }
        http = self._http or httpx.Client(timeout=settings.PUSH_TIMEOUT_SECONDS)

        try:
            response = http.post(self.send_url, json=message.to_provider_body(), headers=headers)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise PushClientError(
                f"Push provider returned {e.response.status_code}",
                details={"status_code": e.response.status_code, "body": e.response.text[:200]},
            )
        except httpx.HTTPError as e:
            raise PushClientError(f"Failed to reach push provider: {e}")
        finally:
            if self._http is None:
                http.close()

        try:
            result = response.json()
        except ValueError:
            result = {}
        logger.debug(f"Push provider response: {result}")
        return result
