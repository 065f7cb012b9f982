# =============================================================================
# lib/supabase_client.py - Supabase Client Wrapper
# =============================================================================
# This module provides a typed wrapper for Supabase database operations.
# It implements the singleton pattern to reuse a single server-side client
# and provides specialized methods for fetching:
# - User profiles (role, display name, push token)
# - Notifications for a user
# - Table row counts for the admin dashboard
#
# The client core (Session Store, Notification Channel) runs against an
# async client created with the anon key, see create_async_client().
#
# Usage:
#   from lib.supabase_client import SupabaseClient
#   profile = SupabaseClient.fetch_profile(user_id)
# =============================================================================

from __future__ import annotations

import logging
from typing import Any
from uuid import UUID

from supabase import AsyncClient, Client, acreate_client, create_client

from app.config import settings
from lib.utils import ApplicationError, normalize_uuid

# Set up logging for this module
logger = logging.getLogger(__name__)

# PostgREST error code returned by .single() when zero (or many) rows match
NOT_FOUND_CODE = "PGRST116"

# Tables shown on the admin dashboard
MARKETPLACE_TABLES = ("profiles", "shops", "products", "cart_items", "notifications")


def is_not_found(error: Exception) -> bool:
    """True if the error is PostgREST's "exactly one row" violation."""
    code = getattr(error, "code", None)
    return code == NOT_FOUND_CODE or NOT_FOUND_CODE in str(error)


class SupabaseClientError(ApplicationError):
    """
    Error during Supabase operations.

    Provides actionable error messages following the principle:
    "Errors should tell HOW to fix, not just WHAT failed."
    """

    def __init__(
        self,
        message: str,
        code: str = "SUPABASE_ERROR",
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, code=code, suggestion=suggestion, details=details)

    def __str__(self) -> str:
        result = f"[{self.code}] {self.message}"
        if self.suggestion:
            result += f" Suggestion: {self.suggestion}"
        return result


class SupabaseClient:
    """
    Typed wrapper for server-side Supabase operations.

    Implements singleton pattern - one client instance is shared across
    the API process and the Celery worker. All methods are class methods
    for easy access without instantiation.

    Example:
        recipient = SupabaseClient.fetch_push_recipient(receiver_id)
        token = recipient.get("fcm_token") if recipient else None
    """

    _instance: Client | None = None

    @classmethod
    def get_client(cls) -> Client:
        """
        Get or create the singleton Supabase client.

        Uses service_role key which bypasses Row Level Security (RLS).
        This is appropriate for server-side operations only.

        Raises:
            SupabaseClientError: If client creation fails
        """
        if cls._instance is None:
            try:
                cls._instance = create_client(
                    settings.SUPABASE_URL,
                    settings.SUPABASE_SERVICE_KEY
                )
                logger.info("Supabase client initialized successfully")
            except Exception as e:
                raise SupabaseClientError(
                    message=f"Failed to create Supabase client: {e}",
                    code="CLIENT_INIT_FAILED",
                    suggestion="Check SUPABASE_URL and SUPABASE_SERVICE_KEY in your .env file"
                )
        return cls._instance

    @classmethod
    async def create_async_client(cls) -> AsyncClient:
        """
        Create an async client bound to the anon key.

        Each client core (one per signed-in app instance) owns its own
        async client, because the auth session lives on the client.

        Raises:
            SupabaseClientError: If client creation fails
        """
        try:
            client = await acreate_client(
                settings.SUPABASE_URL,
                settings.SUPABASE_ANON_KEY
            )
        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to create async Supabase client: {e}",
                code="ASYNC_CLIENT_INIT_FAILED",
                suggestion="Check SUPABASE_URL and SUPABASE_ANON_KEY in your .env file"
            )
        logger.debug("Async Supabase client created")
        return client

    # -------------------------------------------------------------------------
    # Profiles
    # -------------------------------------------------------------------------

    @classmethod
    def fetch_profile(cls, user_id: str | UUID) -> dict[str, Any] | None:
        """
        Fetch a user's profile row by ID.

        Returns:
            Profile dict with all fields, or None if not found

        Raises:
            SupabaseClientError: If query fails
        """
        client = cls.get_client()
        user_id_str = normalize_uuid(user_id)

        try:
            response = (
                client.table("profiles")
                .select("*")
                .eq("id", user_id_str)
                .single()
                .execute()
            )
            return response.data

        except Exception as e:
            if is_not_found(e):
                return None
            raise SupabaseClientError(
                message=f"Failed to fetch profile: {e}",
                code="FETCH_PROFILE_FAILED",
                suggestion="Check that the profiles table is accessible",
                details={"user_id": user_id_str}
            )

    @classmethod
    def fetch_push_recipient(cls, user_id: str | UUID) -> dict[str, Any] | None:
        """
        Fetch only the push token and display name for a user.

        Returns:
            Dict with fcm_token and full_name, or None if the user has no profile

        Raises:
            SupabaseClientError: If query fails
        """
        client = cls.get_client()
        user_id_str = normalize_uuid(user_id)

        try:
            response = (
                client.table("profiles")
                .select("fcm_token, full_name")
                .eq("id", user_id_str)
                .single()
                .execute()
            )
            return response.data

        except Exception as e:
            if is_not_found(e):
                return None
            raise SupabaseClientError(
                message=f"Failed to fetch push recipient: {e}",
                code="FETCH_RECIPIENT_FAILED",
                details={"user_id": user_id_str}
            )

    # -------------------------------------------------------------------------
    # Notifications
    # -------------------------------------------------------------------------

    @classmethod
    def fetch_notifications(
        cls,
        user_id: str | UUID,
        limit: int = 50,
    ) -> list[dict[str, Any]]:
        """
        Fetch notifications for a user, newest first.

        Raises:
            SupabaseClientError: If query fails
        """
        client = cls.get_client()
        user_id_str = normalize_uuid(user_id)

        try:
            response = (
                client.table("notifications")
                .select("*")
                .eq("user_id", user_id_str)
                .order("created_at", desc=True)
                .limit(limit)
                .execute()
            )
            rows = response.data or []
            logger.debug(f"Fetched {len(rows)} notifications for user {user_id_str}")
            return rows

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to fetch notifications: {e}",
                code="FETCH_NOTIFICATIONS_FAILED",
                details={"user_id": user_id_str, "limit": limit}
            )

    # -------------------------------------------------------------------------
    # Admin Dashboard
    # -------------------------------------------------------------------------

    @classmethod
    def count_rows(cls, table: str) -> int:
        """
        Count rows in a table using PostgREST's exact count.

        Raises:
            SupabaseClientError: If query fails
        """
        client = cls.get_client()

        try:
            response = (
                client.table(table)
                .select("id", count="exact")
                .limit(1)
                .execute()
            )
            return response.count or 0

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to count rows in {table}: {e}",
                code="COUNT_ROWS_FAILED",
                details={"table": table}
            )
