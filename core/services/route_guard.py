# =============================================================================
# core/services/route_guard.py - Route Guard
# =============================================================================
# Per-navigation authorization check for the marketplace client.
#
# Rules, first match wins:
#   1. requires_auth is False             -> allow
#   2. signed in and target is login/register -> home
#   3. signed out and target requires auth -> login
#   4. requires_admin and role != admin    -> home
#   5. otherwise                           -> allow
#
# The role is read from the already-hydrated SessionStore. The very first
# navigation waits for one hydrate(); every error fails closed to login.
#
# Usage:
#   guard = RouteGuard(store, RouteTable.default())
#   result = await guard.evaluate("/admin-dashboard")
#   if not result.allowed:
#       navigate(result.redirect_to)
# =============================================================================

from __future__ import annotations

import asyncio
import logging

from core.models.routing import GuardDecision, GuardResult, Route, RouteMeta
from core.services.session_store import SessionStore

logger = logging.getLogger(__name__)

LOGIN_PATH = "/"
HOME_PATH = "/homepage"


class RouteTable:
    """
    Static route table keyed by path.

    Paths that are not in the table get an empty RouteMeta.
    """

    def __init__(self, routes: list[Route]):
        self._routes = {route.path: route for route in routes}

    def get(self, path: str) -> Route | None:
        return self._routes.get(self._normalize(path))

    def meta_for(self, path: str) -> RouteMeta:
        route = self.get(path)
        return route.meta if route else RouteMeta()

    def is_entry(self, path: str) -> bool:
        route = self.get(path)
        return bool(route and route.entry)

    def __iter__(self):
        return iter(self._routes.values())

    def __len__(self) -> int:
        return len(self._routes)

    @staticmethod
    def _normalize(path: str) -> str:
        # Drop query/fragment and trailing slash ("/homepage/?x=1" -> "/homepage")
        path = path.split("?", 1)[0].split("#", 1)[0] or "/"
        if len(path) > 1:
            path = path.rstrip("/") or "/"
        return path

    @classmethod
    def default(cls) -> "RouteTable":
        """The marketplace's client routes."""
        authed = RouteMeta(requires_auth=True)
        return cls([
            Route(path=LOGIN_PATH, name="login", entry=True),
            Route(path="/register", name="register", entry=True),
            Route(path="/register-success", name="confirm-email", meta=RouteMeta(requires_auth=False)),
            Route(path=HOME_PATH, name="homepage", meta=authed),
            Route(path="/mapsearch", name="mapsearch", meta=authed),
            Route(path="/cartview", name="cartview", meta=authed),
            Route(path="/messageview", name="messageview", meta=authed),
            Route(path="/profileview", name="profileview", meta=authed),
            Route(path="/notificationview", name="notificationview", meta=authed),
            Route(path="/shop-build", name="shop-build", meta=authed),
            Route(
                path="/admin-dashboard",
                name="admin-dashboard",
                meta=RouteMeta(requires_auth=True, requires_admin=True),
            ),
        ])


class RouteGuard:
    """
    Evaluates navigation attempts against a RouteTable and a SessionStore.

    Args:
        store: Hydrated (or about to be hydrated) session store
        routes: Route table, defaults to RouteTable.default()
        login_path: Redirect target for deny-to-login
        home_path: Redirect target for deny-to-home
    """

    def __init__(
        self,
        store: SessionStore,
        routes: RouteTable | None = None,
        login_path: str = LOGIN_PATH,
        home_path: str = HOME_PATH,
    ):
        self.store = store
        self.routes = routes or RouteTable.default()
        self.login_path = login_path
        self.home_path = home_path
        self.initialized = False
        self.state: GuardDecision | None = None
        self._init_lock = asyncio.Lock()

    async def evaluate(self, path: str) -> GuardResult:
        """
        Decide one navigation attempt. Never raises.

        `state` reads CHECKING until the decision is made, then holds it.

        Returns:
            GuardResult with decision and redirect target
        """
        self.state = GuardDecision.CHECKING
        try:
            result = await self._evaluate(path)
        except Exception as e:
            logger.exception(f"Route guard failed for {path}: {e}")
            result = self._deny_to_login()
        self.state = result.decision
        return result

    async def _evaluate(self, path: str) -> GuardResult:
        meta = self.routes.meta_for(path)

        if meta.requires_auth is False:
            return self._allow()

        await self._ensure_initialized()
        logged_in = await self.store.is_authenticated()

        if logged_in and self.routes.is_entry(path):
            return self._deny_to_home()

        if not logged_in and meta.requires_auth:
            return self._deny_to_login()

        if meta.requires_admin and not self.store.is_admin:
            logger.info(f"Denied admin route {path} for user {self.store.user_id}")
            return self._deny_to_home()

        return self._allow()

    async def _ensure_initialized(self) -> None:
        if self.initialized:
            return
        async with self._init_lock:
            if self.initialized:
                return
            await self.store.hydrate()
            self.initialized = True

    def _allow(self) -> GuardResult:
        return GuardResult(decision=GuardDecision.ALLOW)

    def _deny_to_login(self) -> GuardResult:
        return GuardResult(decision=GuardDecision.DENY_TO_LOGIN, redirect_to=self.login_path)

    def _deny_to_home(self) -> GuardResult:
        return GuardResult(decision=GuardDecision.DENY_TO_HOME, redirect_to=self.home_path)
