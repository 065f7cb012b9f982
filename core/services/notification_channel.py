# =============================================================================
# core/services/notification_channel.py - Notification Channel
# =============================================================================
# Keeps a local, newest-first cache of a user's notifications:
# - fetch_notifications(): initial load from the notifications table
# - listen_for_notifications(): realtime INSERT subscription for that user
# - unsubscribe(): tears the subscription down
#
# Fetch results and realtime events are merged by id and re-sorted by
# created_at, so a realtime event that lands before the initial fetch
# finishes is neither duplicated nor misplaced.
#
# Subscribe and teardown are serialized by one lock; when bound to a
# SessionStore, results for a user that is no longer signed in are dropped.
# =============================================================================

from __future__ import annotations

import asyncio
import logging
from typing import Any

from supabase import AsyncClient

from core.models.notification import NotificationEvent
from core.models.session import Session
from core.services.session_store import SessionStore

logger = logging.getLogger(__name__)

NOTIFICATIONS_TABLE = "notifications"
DEFAULT_MAX_CACHED = 200


def extract_record(payload: Any) -> dict[str, Any] | None:
    """
    Pull the inserted row out of a realtime postgres_changes payload.

    realtime-py wraps the row as payload["data"]["record"]; the JS-style
    shape payload["new"] is accepted too.
    """
    if not isinstance(payload, dict):
        return None
    data = payload.get("data")
    if isinstance(data, dict) and isinstance(data.get("record"), dict):
        return data["record"]
    for key in ("new", "record"):
        if isinstance(payload.get(key), dict):
            return payload[key]
    return None



class NotificationChannel:
    """
    Local notification cache plus one realtime subscription.

    Args:
        client: Async Supabase client (shares auth with the SessionStore)
        max_cached: Oldest entries beyond this count are dropped after each merge
    """

    def __init__(self, client: AsyncClient, max_cached: int = DEFAULT_MAX_CACHED):
        self._client = client
        self.max_cached = max_cached
        self.notifications: list[NotificationEvent] = []
        self.loading = False
        self._subscriptions: dict[str, Any] = {}
        self._lock = asyncio.Lock()
        self._bound = False
        self._bound_user: str | None = None

    @property
    def active_user(self) -> str | None:
        """User id of the live subscription, if any."""
        return next(iter(self._subscriptions), None)

    # -------------------------------------------------------------------------
    # Fetch
    # -------------------------------------------------------------------------

    async def fetch_notifications(self, user_id: str) -> list[NotificationEvent]:
        """
        Load all notifications for a user, newest first.

        On error the cache is left empty and the error is logged. When bound
        to a SessionStore, a result for a user who signed out meanwhile is
        discarded.
        """
        self.loading = True
        try:
            response = await (
                self._client.table(NOTIFICATIONS_TABLE)
                .select("*")
                .eq("user_id", user_id)
                .order("created_at", desc=True)
                .execute()
            )
            rows = response.data or []
        except Exception as e:
            logger.error(f"Error fetching notifications for user {user_id}: {e}")
            if not self._is_stale(user_id):
                self.notifications = []
            return []
        finally:
            self.loading = False

        if self._is_stale(user_id):
            logger.debug(f"Discarding notifications fetched for signed-out user {user_id}")
            return []

        events = [NotificationEvent.from_db_row(row) for row in rows]
        # Keep realtime events that arrived while the fetch was in flight
        pending = [n for n in self.notifications if n.user_id == user_id]
        self.notifications = []
        self._merge(events + pending)
        logger.debug(f"Fetched {len(events)} notifications for user {user_id}")
        return self.notifications

    # -------------------------------------------------------------------------
    # Realtime
    # -------------------------------------------------------------------------

    async def listen_for_notifications(self, user_id: str) -> None:
        """
        Subscribe to INSERTs on notifications for one user.

        Any previous subscription (this user or another) is torn down first.
        """
        async with self._lock:
            await self._subscribe(user_id)

    async def unsubscribe(self) -> None:
        """Remove every open subscription. Safe to call when none is open."""
        async with self._lock:
            await self._remove_all()

    async def _subscribe(self, user_id: str) -> None:
        await self._remove_all()

        channel = self._client.channel(f"notifications:user:{user_id}")
        channel.on_postgres_changes(
            "INSERT",
            schema="public",
            table=NOTIFICATIONS_TABLE,
            filter=f"user_id=eq.{user_id}",
            callback=lambda payload: self._on_insert(user_id, payload),
        )
        # Registered before the handshake so early INSERTs are kept
        self._subscriptions[user_id] = channel
        try:
            await channel.subscribe()
        except Exception:
            del self._subscriptions[user_id]
            raise
        logger.info(f"Listening for notifications for user {user_id}")

    async def _remove_all(self) -> None:
        for user_id, channel in list(self._subscriptions.items()):
            del self._subscriptions[user_id]
            try:
                await self._client.remove_channel(channel)
                logger.info(f"Stopped listening for notifications for user {user_id}")
            except Exception as e:
                logger.warning(f"Failed to remove notification channel for user {user_id}: {e}")

    def _on_insert(self, user_id: str, payload: Any) -> None:
        record = extract_record(payload)
        if record is None:
            logger.warning(f"Ignoring realtime payload without a record: {payload!r}")
            return
        if (
            str(record.get("user_id")) != user_id
            or user_id not in self._subscriptions
            or self._is_stale(user_id)
        ):
            logger.debug(f"Ignoring notification for another user: {record.get('user_id')}")
            return
        try:
            event = NotificationEvent.from_db_row(record)
        except Exception as e:
            logger.warning(f"Ignoring malformed notification record: {e}")
            return
        logger.info(f"New notification {event.id} for user {user_id}")
        self._merge([event])

    def _merge(self, events: list[NotificationEvent]) -> None:
        by_id = {n.id: n for n in self.notifications}
        for event in events:
            by_id.setdefault(event.id, event)
        merged = sorted(by_id.values(), key=lambda n: n.created_at, reverse=True)
        self.notifications = merged[: self.max_cached]

    # -------------------------------------------------------------------------
    # Session Binding
    # -------------------------------------------------------------------------

    def bind(self, store: SessionStore) -> None:
        """Follow a SessionStore: load + listen on sign-in, tear down on sign-out."""
        self._bound = True
        store.add_listener(self._on_session_change)

    def _is_stale(self, user_id: str) -> bool:
        return self._bound and self._bound_user != user_id

    async def _on_session_change(self, session: Session | None) -> None:
        user_id = session.user_id if session else None
        if user_id == self._bound_user:
            return
        self._bound_user = user_id
        self.notifications = []

        await self.unsubscribe()
        if user_id is None or self._bound_user != user_id:
            return

        await self.fetch_notifications(user_id)
        async with self._lock:
            # Signed out (or switched user) while the fetch was in flight
            if self._bound_user != user_id:
                return
            await self._subscribe(user_id)
