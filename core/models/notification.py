# =============================================================================
# core/models/notification.py - Notification Schemas
# =============================================================================
# NotificationEvent mirrors a row of the notifications table. Rows are
# appended, never mutated; the backend table is the source of truth.
# =============================================================================

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from lib.utils import parse_timestamp, utcnow

# Columns lifted out of a row; everything else lands in payload
_CORE_COLUMNS = ("id", "user_id", "created_at")


class NotificationEvent(BaseModel):
    """
    A single notification for a user.

    Example:
        {
            "id": "42",
            "user_id": "550e8400-...",
            "payload": {"title": "Order shipped", "is_read": false},
            "created_at": "2024-01-15T10:30:00Z"
        }
    """

    id: str = Field(..., description="Notification row id")
    user_id: str = Field(..., description="Recipient user id")
    payload: dict[str, Any] = Field(
        default_factory=dict,
        description="Remaining row columns (title, message, type, ...)"
    )
    created_at: datetime = Field(default_factory=utcnow)

    model_config = {"frozen": True}

    @classmethod
    def from_db_row(cls, row: dict[str, Any]) -> "NotificationEvent":
        """
        Create a NotificationEvent from a notifications row.

        Works for both PostgREST select results and realtime INSERT records.
        A missing or unparseable created_at falls back to the arrival time.
        """
        payload = {k: v for k, v in row.items() if k not in _CORE_COLUMNS}
        created_at = parse_timestamp(row.get("created_at")) or utcnow()
        return cls(
            id=str(row["id"]),
            user_id=str(row["user_id"]),
            payload=payload,
            created_at=created_at,
        )


class NotificationList(BaseModel):
    """Response for GET /notifications."""

    notifications: list[NotificationEvent]
    total: int
