# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# This module provides pytest fixtures and configuration for all tests.
#
# Key features:
# - Sets up mock environment variables before any imports
# - Provides fake Supabase clients (see tests/fakes.py) for the client core
# =============================================================================

import os

# =============================================================================
# Set up test environment BEFORE any imports
# =============================================================================
# This must happen before importing app.config which loads settings immediately

os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_ANON_KEY", "test-anon-key")
os.environ.setdefault("SUPABASE_SERVICE_KEY", "test-service-key")
os.environ.setdefault("SUPABASE_JWT_SECRET", "test-jwt-secret-with-enough-length")
os.environ.setdefault("FCM_SERVER_KEY", "test-fcm-key")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DEBUG", "true")

import pytest

from tests.fakes import FakeQuery, make_async_client, make_auth_session


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def admin_profile():
    """Profile row for an admin."""
    return {"id": "user-1", "full_name": "Ada Admin", "role": "admin", "fcm_token": None}


@pytest.fixture
def user_profile():
    """Profile row for a regular buyer."""
    return {"id": "user-1", "full_name": "Bob Buyer", "role": "user", "fcm_token": "device-token-1"}


@pytest.fixture
def signed_out_client():
    """Fake client with no auth session."""
    return make_async_client(session=None)


@pytest.fixture
def signed_in_client(user_profile):
    """Fake client with a session for user-1 (role user)."""
    return make_async_client(
        tables={"profiles": FakeQuery(data=user_profile)},
        session=make_auth_session(),
    )


@pytest.fixture
def admin_client(admin_profile):
    """Fake client with a session for user-1 (role admin)."""
    return make_async_client(
        tables={"profiles": FakeQuery(data=admin_profile)},
        session=make_auth_session(),
    )


@pytest.fixture
def sample_notification_rows():
    """Two notification rows, newest first."""
    return [
        {
            "id": 2,
            "user_id": "user-1",
            "title": "Order shipped",
            "is_read": False,
            "created_at": "2024-01-15T10:30:00+00:00",
        },
        {
            "id": 1,
            "user_id": "user-1",
            "title": "Welcome to CloseShop",
            "is_read": True,
            "created_at": "2024-01-14T08:00:00+00:00",
        },
    ]
