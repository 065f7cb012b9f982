# =============================================================================
# app/routers/ - API Route Definitions
# =============================================================================
# This package contains FastAPI routers organized by feature:
# - health.py: Health check endpoints
# - notifications.py: Current user's notifications
# - admin.py: Admin dashboard data (admin role only)
# - hooks.py: Supabase database webhooks (push dispatch trigger)
# - geocode.py: Geocoding proxy
#
# Each router is mounted in main.py with a URL prefix.
# =============================================================================

from . import health
from . import notifications
from . import admin
from . import hooks
from . import geocode

__all__ = [
    "health",
    "notifications",
    "admin",
    "hooks",
    "geocode",
]
