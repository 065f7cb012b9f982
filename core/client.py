# =============================================================================
# core/client.py - Marketplace Client Core
# =============================================================================
# Wires the per-app-instance state together: one SessionStore injected into
# the RouteGuard and the NotificationChannel, plus the local Cart.
#
# Usage:
#   core = await MarketplaceClient.create()
#   result = await core.guard.evaluate("/homepage")
#   await core.store.sign_in(email, password)   # notifications start listening
#   await core.close()
# =============================================================================

import logging

from supabase import AsyncClient

from core.services.cart import Cart
from core.services.notification_channel import NotificationChannel
from core.services.route_guard import RouteGuard, RouteTable
from core.services.session_store import SessionStore
from lib.supabase_client import SupabaseClient

logger = logging.getLogger(__name__)


class MarketplaceClient:
    """Owns the client-side state for one signed-in (or anonymous) user."""

    def __init__(self, client: AsyncClient, routes: RouteTable | None = None):
        self.client = client
        self.store = SessionStore(client)
        self.guard = RouteGuard(self.store, routes)
        self.notifications = NotificationChannel(client)
        self.cart = Cart()

        self.notifications.bind(self.store)
        self.store.add_listener(self._clear_cart_on_sign_out)

    @classmethod
    async def create(cls, routes: RouteTable | None = None) -> "MarketplaceClient":
        """Create the async Supabase client and initialize the session."""
        core = cls(await SupabaseClient.create_async_client(), routes)
        await core.start()
        return core

    async def start(self) -> None:
        """Register the auth listener and hydrate once."""
        await self.store.init()
        self.guard.initialized = True
        logger.info(f"Client core started (signed in: {self.store.is_logged_in})")

    async def close(self) -> None:
        """Tear down realtime subscriptions and the auth listener."""
        await self.notifications.unsubscribe()
        self.store.close()

    async def _clear_cart_on_sign_out(self, session) -> None:
        if session is None:
            self.cart.clear()
