# =============================================================================
# core/models/push.py - Push Message Schemas
# =============================================================================
# PushMessage is built per outgoing chat message and handed to the push
# provider. It is ephemeral and never persisted.
# =============================================================================

from typing import Any

from pydantic import BaseModel, Field


class PushMessage(BaseModel):
    """One device notification to deliver."""

    recipient_token: str = Field(..., min_length=1, description="Device/app push token")
    title: str
    body: str
    data: dict[str, str] = Field(
        default_factory=dict,
        description="String key/values delivered alongside the notification"
    )

    def to_provider_body(self) -> dict[str, Any]:
        """Request body for the push provider's send endpoint."""
        return {
            "to": self.recipient_token,
            "notification": {
                "title": self.title,
                "body": self.body,
            },
            "data": dict(self.data),
        }


class MessageWebhook(BaseModel):
    """
    Supabase database webhook payload for a row change.

    Example:
        {
            "type": "INSERT",
            "table": "messages",
            "schema": "public",
            "record": {"id": 7, "sender_id": "...", "receiver_id": "...", "content": "hi"},
            "old_record": null
        }
    """

    type: str
    table: str
    schema_name: str = Field(default="public", alias="schema")
    record: dict[str, Any] | None = None
    old_record: dict[str, Any] | None = None

    model_config = {"populate_by_name": True}
