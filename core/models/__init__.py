# =============================================================================
# core/models/ - Pydantic Data Models
# =============================================================================
# This package contains Pydantic schemas for data validation:
# - session.py: Cached session identity and roles
# - routing.py: Route table and guard outcome schemas
# - notification.py: Notification rows
# - push.py: Push messages and database webhook payloads
# - cart.py: Local cart lines
#
# These models define the "contract" between the client core, API and clients.
# =============================================================================

# -----------------------------------------------------------------------------
# Session Models - Authenticated identity
# -----------------------------------------------------------------------------
from .session import Session, UserRole

# -----------------------------------------------------------------------------
# Routing Models - Route Guard
# -----------------------------------------------------------------------------
from .routing import GuardDecision, GuardResult, Route, RouteMeta

# -----------------------------------------------------------------------------
# Notification Models - Realtime notifications
# -----------------------------------------------------------------------------
from .notification import NotificationEvent, NotificationList

# -----------------------------------------------------------------------------
# Push Models - Push Dispatcher
# -----------------------------------------------------------------------------
from .push import MessageWebhook, PushMessage

# -----------------------------------------------------------------------------
# Cart Models
# -----------------------------------------------------------------------------
from .cart import CartItem

__all__ = [
    # Session
    "Session",
    "UserRole",
    # Routing
    "GuardDecision",
    "GuardResult",
    "Route",
    "RouteMeta",
    # Notification
    "NotificationEvent",
    "NotificationList",
    # Push
    "MessageWebhook",
    "PushMessage",
    # Cart
    "CartItem",
]
