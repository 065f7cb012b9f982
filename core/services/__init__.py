# =============================================================================
# core/services/__init__.py - Service Layer Exports
# =============================================================================

from .session_store import AuthError, SessionStore
from .route_guard import RouteGuard, RouteTable
from .notification_channel import NotificationChannel
from .push_dispatcher import PushDispatcher
from .cart import Cart
from .geocoding_service import GeocodingError, GeocodingService

__all__ = [
    "AuthError",
    "SessionStore",
    "RouteGuard",
    "RouteTable",
    "NotificationChannel",
    "PushDispatcher",
    "Cart",
    "GeocodingError",
    "GeocodingService",
]
