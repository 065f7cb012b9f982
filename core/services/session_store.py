# =============================================================================
# core/services/session_store.py - Session Store
# =============================================================================
# Holds the current user's identity and role for one app instance and keeps
# it in sync with Supabase Auth.
#
# Lifecycle:
#   store = SessionStore(client)
#   await store.init()      # registers the auth listener once, then hydrates
#   ...
#   await store.reset()     # clears everything (sign-out path)
#
# The role comes from a separate profiles lookup. Every lookup is tagged
# with a generation number and results from superseded lookups are
# dropped, so a slow fetch can never overwrite a newer session view.
# =============================================================================

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable

from supabase import AsyncClient

from core.models.session import Session, UserRole
from lib.supabase_client import is_not_found
from lib.utils import ApplicationError

logger = logging.getLogger(__name__)

SessionListener = Callable[[Session | None], Awaitable[None]]


class AuthError(ApplicationError):
    """Raised when Supabase Auth rejects a sign-in, sign-up or sign-out."""

    def __init__(self, message: str, **kwargs):
        super().__init__(message, code=kwargs.pop("code", "AUTH_ERROR"), **kwargs)


class SessionStore:
    """
    Process-scoped owner of the cached Session.

    The store is injected into the Route Guard and the Notification Channel
    instead of being reached as a global.

    Attributes:
        session: Current Session, or None when signed out
        profile: Last profile row fetched for the session user
        loading: True while hydrate/sign-out is in flight
        error: Last error message, if any
    """

    def __init__(self, client: AsyncClient):
        self._client = client
        self.session: Session | None = None
        self.profile: dict[str, Any] | None = None
        self.loading = False
        self.error: str | None = None

        self._generation = 0
        self._auth_subscription = None
        self._listeners: list[SessionListener] = []
        self._pending: set[asyncio.Task] = set()

    # -------------------------------------------------------------------------
    # Derived State
    # -------------------------------------------------------------------------

    @property
    def is_logged_in(self) -> bool:
        return self.session is not None

    @property
    def is_admin(self) -> bool:
        return self.session is not None and self.session.is_admin

    @property
    def user_id(self) -> str | None:
        return self.session.user_id if self.session else None

    @property
    def role(self) -> UserRole | None:
        return self.session.role if self.session else None

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    async def init(self) -> bool:
        """
        Register the auth-state listener (once) and hydrate.

        Returns:
            True if a session was found
        """
        if self._auth_subscription is None:
            self._auth_subscription = self._client.auth.on_auth_state_change(
                self._on_auth_state_change
            )
            logger.debug("Registered auth state listener")
        return await self.hydrate()

    async def reset(self) -> None:
        """Clear session, profile and error, then notify listeners."""
        self._clear()
        self.error = None
        await self._notify()

    def close(self) -> None:
        """Detach the auth-state listener."""
        if self._auth_subscription is not None:
            self._auth_subscription.unsubscribe()
            self._auth_subscription = None

    def add_listener(self, listener: SessionListener) -> None:
        """Call `listener(session)` after every session change."""
        self._listeners.append(listener)

    # -------------------------------------------------------------------------
    # Session
    # -------------------------------------------------------------------------

    async def hydrate(self) -> bool:
        """
        Load the current session from Supabase Auth.

        No session clears the store. A transport error also clears the store
        and is logged; it is not raised.

        Returns:
            True if authenticated after hydration
        """
        self.loading = True
        try:
            auth_session = await self._client.auth.get_session()
        except Exception as e:
            logger.error(f"hydrate failed: {e}")
            self._clear()
            self.error = str(e)
            await self._notify()
            return False
        finally:
            self.loading = False

        user = getattr(auth_session, "user", None) if auth_session else None
        if user is None:
            await self.reset()
            return False

        await self._set_user(user)
        await self.load_profile(user.id)
        return True

    async def is_authenticated(self, revalidate: bool = False) -> bool:
        """
        True iff a session is cached.

        With revalidate=True the backend is asked as well; a missing backend
        session resets the store. Errors during revalidation count as "not
        authenticated" but leave the cache untouched.
        """
        if not revalidate:
            return self.session is not None

        try:
            auth_session = await self._client.auth.get_session()
        except Exception as e:
            logger.error(f"is_authenticated error: {e}")
            return False

        if not auth_session or getattr(auth_session, "user", None) is None:
            if self.session is not None:
                await self.reset()
            return False
        return self.session is not None

    async def load_profile(self, user_id: str | None = None) -> dict[str, Any] | None:
        """
        Fetch the profile row and trust its role.

        A missing row or a failed query leaves the role untrusted; both are
        logged, not raised. Results from a superseded call are discarded.
        """
        user_id = user_id or self.user_id
        if not user_id:
            return None

        self._generation += 1
        generation = self._generation

        try:
            response = await (
                self._client.table("profiles")
                .select("*")
                .eq("id", user_id)
                .single()
                .execute()
            )
            profile = response.data
        except Exception as e:
            if is_not_found(e):
                logger.warning(f"No profile row for user {user_id}")
            else:
                logger.error(f"load_profile error: {e}")
            return None

        if generation != self._generation or self.user_id != user_id:
            logger.debug(f"Discarding stale profile fetch for user {user_id} (generation {generation})")
            return None

        self.profile = profile
        if self.session is not None and profile is not None:
            self.session = self.session.model_copy(
                update={"role": UserRole.parse(profile.get("role")), "loaded": True}
            )
            await self._notify()
        return profile

    # -------------------------------------------------------------------------
    # Auth Actions
    # -------------------------------------------------------------------------

    async def sign_in(self, email: str, password: str) -> Any:
        """
        Sign in with email and password, then load the profile.

        Raises:
            AuthError: If Supabase rejects the credentials
        """
        self.error = None
        try:
            response = await self._client.auth.sign_in_with_password(
                {"email": email, "password": password}
            )
        except Exception as e:
            self.error = str(e)
            raise AuthError(
                f"Sign in failed: {e}",
                suggestion="Check the email and password",
                details={"email": email},
            ) from e

        user = getattr(response, "user", None)
        if user is None:
            raise AuthError("Sign in returned no user", details={"email": email})

        await self._set_user(user)
        await self.load_profile(user.id)
        return response

    async def sign_up(self, email: str, password: str) -> Any:
        """
        Register a new account.

        With email confirmation on, the profile row is created by a database
        trigger after confirmation; the store stays signed out until then.

        Raises:
            AuthError: If Supabase rejects the registration
        """
        self.error = None
        try:
            return await self._client.auth.sign_up({"email": email, "password": password})
        except Exception as e:
            self.error = str(e)
            raise AuthError(f"Sign up failed: {e}", details={"email": email}) from e

    async def sign_out(self) -> bool:
        """
        Clear local state, then sign out on the backend.

        Local state is cleared before the backend call starts.

        Raises:
            AuthError: If the backend sign-out fails (no retry)
        """
        self._clear()
        self.error = None
        self.loading = True
        try:
            await self._notify()
            await self._client.auth.sign_out()
        except Exception as e:
            self.error = str(e) or "Logout failed"
            raise AuthError(f"Sign out failed: {e}", code="SIGN_OUT_FAILED") from e
        finally:
            self.loading = False
        return True

    async def send_password_reset(self, email: str, redirect_to: str | None = None) -> str:
        """
        Send a password reset email.

        Raises:
            AuthError: If Supabase rejects the request
        """
        options = {"redirect_to": redirect_to} if redirect_to else {}
        try:
            await self._client.auth.reset_password_for_email(email, options)
        except Exception as e:
            raise AuthError(f"Password reset failed: {e}", details={"email": email}) from e
        return "Password reset link sent. Check your email."

    async def update_password(self, new_password: str) -> Any:
        """
        Set a new password for the user holding the recovery session.

        Raises:
            AuthError: If Supabase rejects the update
        """
        try:
            response = await self._client.auth.update_user({"password": new_password})
        except Exception as e:
            raise AuthError(f"Password update failed: {e}") from e
        return getattr(response, "user", None)

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _clear(self) -> None:
        self._generation += 1
        self.session = None
        self.profile = None

    async def _set_user(self, user: Any) -> None:
        user_id = str(user.id)
        if self.session is not None and self.session.user_id == user_id:
            return
        self.session = Session(user_id=user_id, email=getattr(user, "email", None))
        self.profile = None
        await self._notify()

    async def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                await listener(self.session)
            except Exception as e:
                logger.error(f"Session listener failed: {e}")

    def _on_auth_state_change(self, event: str, auth_session: Any) -> None:
        """Supabase callback; schedules a re-hydrate or a reset."""
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.warning(f"Auth event {event} received outside an event loop, ignoring")
            return

        logger.debug(f"Auth state changed: {event}")
        if auth_session is not None and getattr(auth_session, "user", None) is not None:
            task = loop.create_task(self.hydrate())
        else:
            task = loop.create_task(self.reset())
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
