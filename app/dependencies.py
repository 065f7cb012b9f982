# =============================================================================
# app/dependencies.py - Shared Dependencies
# =============================================================================
# FastAPI dependency injection for shared resources.
# These are injected into route handlers using Depends() and overridden in
# tests through app.dependency_overrides.
# =============================================================================

from typing import Annotated

from fastapi import Depends

from core.services.geocoding_service import GeocodingService
from lib.supabase_client import SupabaseClient


def get_supabase_client() -> type[SupabaseClient]:
    """
    Get Supabase client wrapper.

    Returns the singleton client wrapper.
    """
    return SupabaseClient


def get_geocoding_service() -> GeocodingService:
    """Geocoder bound to settings."""
    return GeocodingService()


def get_push_enqueuer():
    """
    Callable that queues a push dispatch for one messages row.

    Imported lazily so the API does not need Celery loaded at import time.
    """
    from workers.tasks import send_push_notification
    return send_push_notification.delay


# Type alias for dependency injection
SupabaseDep = Annotated[type[SupabaseClient], Depends(get_supabase_client)]
