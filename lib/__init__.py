# =============================================================================
# lib/ - Standalone Utility Modules
# =============================================================================
# This package contains reusable utilities:
# - supabase_client.py: Typed Supabase wrapper for database operations
# - push_client.py: Push provider (FCM) HTTP client
# - utils.py: Shared utilities (error handling, UUID/timestamp normalization)
#
# These modules are self-contained and can be tested in isolation.
# =============================================================================

from lib.supabase_client import SupabaseClient, SupabaseClientError, is_not_found
from lib.push_client import PushClient, PushClientError
from lib.utils import ApplicationError, normalize_uuid, parse_timestamp

__all__ = [
    # Supabase
    "SupabaseClient",
    "SupabaseClientError",
    "is_not_found",
    # Push
    "PushClient",
    "PushClientError",
    # Utils
    "ApplicationError",
    "normalize_uuid",
    "parse_timestamp",
]
