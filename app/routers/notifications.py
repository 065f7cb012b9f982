# =============================================================================
# app/routers/notifications.py - Notification Endpoints
# =============================================================================
# Server-side read of the current user's notifications. Live updates go
# through Supabase Realtime on the client (NotificationChannel).
# =============================================================================

import logging

from fastapi import APIRouter, Depends, Query

from app.auth import AuthUser, get_current_user
from app.dependencies import SupabaseDep
from app.exceptions import UpstreamError
from core.models.notification import NotificationEvent, NotificationList
from lib.supabase_client import SupabaseClientError

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=NotificationList)
async def list_notifications(
    supabase: SupabaseDep,
    limit: int = Query(50, ge=1, le=200),
    user: AuthUser = Depends(get_current_user),
) -> NotificationList:
    """
    List the current user's notifications, newest first.

    Raises:
        401: If not authenticated
        502: If the database query fails
    """
    try:
        rows = supabase.fetch_notifications(user.id, limit=limit)
    except SupabaseClientError as e:
        raise UpstreamError("notifications", e.message)

    events = [NotificationEvent.from_db_row(row) for row in rows]
    return NotificationList(notifications=events, total=len(events))
