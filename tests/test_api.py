# =============================================================================
# tests/test_api.py - API Endpoint Tests
# =============================================================================
# Tests for the FastAPI surface:
# - JWT verification (HS256 tokens signed with SUPABASE_JWT_SECRET)
# - /auth/me, /notifications, /admin/overview
# - the database webhook that queues push notifications
# - the geocoding proxy
# - health endpoints
#
# Dependencies are swapped through app.dependency_overrides.
# =============================================================================

import time
from unittest.mock import MagicMock, patch
from uuid import uuid4

import httpx
import pytest
from fastapi.testclient import TestClient
from jose import jwt

from app.auth import AuthUser, get_current_user
from app.auth.dependencies import decode_access_token
from app.config import settings
from app.dependencies import get_geocoding_service, get_push_enqueuer, get_supabase_client
from app.main import app
from core.services.geocoding_service import GeocodingService
from lib.supabase_client import SupabaseClientError


USER_ID = uuid4()


def make_token(sub=None, exp_offset=3600, **claims):
    """HS256 token shaped like a Supabase access token."""
    payload = {
        "sub": str(sub or USER_ID),
        "email": "buyer@example.com",
        "aud": "authenticated",
        "exp": int(time.time()) + exp_offset,
        **claims,
    }
    return jwt.encode(payload, settings.SUPABASE_JWT_SECRET, algorithm="HS256")


@pytest.fixture
def client():
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def as_user():
    app.dependency_overrides[get_current_user] = lambda: AuthUser(id=USER_ID, email="buyer@example.com")


# =============================================================================
# Token Verification
# =============================================================================

class TestDecodeAccessToken:
    """Test JWT verification."""

    def test_valid_token(self):
        user = decode_access_token(make_token())

        assert user.id == USER_ID
        assert user.email == "buyer@example.com"

    def test_expired_token(self):
        from fastapi import HTTPException

        with pytest.raises(HTTPException) as exc_info:
            decode_access_token(make_token(exp_offset=-60))

        assert exc_info.value.status_code == 401
        assert exc_info.value.detail == "Token has expired"

    def test_wrong_audience(self):
        from fastapi import HTTPException

        with pytest.raises(HTTPException):
            decode_access_token(make_token(aud="anon"))

    def test_malformed_sub(self):
        from fastapi import HTTPException

        with pytest.raises(HTTPException) as exc_info:
            decode_access_token(make_token(sub="not-a-uuid"))

        assert "malformed" in exc_info.value.detail


class TestAuthPackage:
    """Test what app.auth exposes to routers."""

    def test_public_dependencies(self):
        import app.auth

        assert set(app.auth.__all__) == {"get_current_user", "require_admin", "AuthUser", "UserResponse"}
        assert not hasattr(app.auth.dependencies, "security_optional")


# =============================================================================
# Auth Routes
# =============================================================================

class TestAuthRoutes:
    """Test /api/v1/auth endpoints."""

    def test_verify(self, client):
        response = client.get(
            "/api/v1/auth/verify",
            headers={"Authorization": f"Bearer {make_token()}"},
        )

        assert response.status_code == 200
        assert response.json()["user_id"] == str(USER_ID)

    def test_verify_without_token(self, client):
        response = client.get("/api/v1/auth/verify")

        assert response.status_code in (401, 403)

    def test_me_includes_role(self, client, as_user):
        profile = {"id": str(USER_ID), "full_name": "Ada", "role": "admin"}
        with patch("app.auth.routes.SupabaseClient.fetch_profile", return_value=profile):
            response = client.get("/api/v1/auth/me")

        assert response.status_code == 200
        assert response.json()["role"] == "admin"
        assert response.json()["email"] == "buyer@example.com"

    def test_me_without_profile(self, client, as_user):
        with patch("app.auth.routes.SupabaseClient.fetch_profile", return_value=None):
            response = client.get("/api/v1/auth/me")

        assert response.status_code == 200
        assert response.json()["role"] == "user"


# =============================================================================
# Notifications
# =============================================================================

class TestNotificationsEndpoint:
    """Test GET /api/v1/notifications."""

    def test_lists_newest_first(self, client, as_user, sample_notification_rows):
        supabase = MagicMock()
        supabase.fetch_notifications.return_value = sample_notification_rows
        app.dependency_overrides[get_supabase_client] = lambda: supabase

        response = client.get("/api/v1/notifications?limit=10")

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 2
        assert [n["id"] for n in data["notifications"]] == ["2", "1"]
        supabase.fetch_notifications.assert_called_once_with(USER_ID, limit=10)

    def test_database_error(self, client, as_user):
        supabase = MagicMock()
        supabase.fetch_notifications.side_effect = SupabaseClientError("timeout")
        app.dependency_overrides[get_supabase_client] = lambda: supabase

        response = client.get("/api/v1/notifications")

        assert response.status_code == 502
        assert response.json()["code"] == "UPSTREAM_ERROR"


# =============================================================================
# Admin
# =============================================================================

class TestAdminEndpoint:
    """Test GET /api/v1/admin/overview."""

    def test_admin_sees_counts(self, client, as_user):
        supabase = MagicMock()
        supabase.count_rows.return_value = 3
        app.dependency_overrides[get_supabase_client] = lambda: supabase

        with patch("app.auth.dependencies.SupabaseClient.fetch_profile", return_value={"role": "admin"}):
            response = client.get("/api/v1/admin/overview")

        assert response.status_code == 200
        assert response.json()["counts"]["products"] == 3

    @pytest.mark.parametrize("profile", [{"role": "user"}, {"role": None}, None])
    def test_non_admin_forbidden(self, client, as_user, profile):
        with patch("app.auth.dependencies.SupabaseClient.fetch_profile", return_value=profile):
            response = client.get("/api/v1/admin/overview")

        assert response.status_code == 403
        assert response.json()["code"] == "ADMIN_REQUIRED"

    def test_profile_lookup_error(self, client, as_user):
        with patch(
            "app.auth.dependencies.SupabaseClient.fetch_profile",
            side_effect=SupabaseClientError("down"),
        ):
            response = client.get("/api/v1/admin/overview")

        assert response.status_code == 502


# =============================================================================
# Database Webhook
# =============================================================================

class TestMessageWebhook:
    """Test POST /api/v1/hooks/messages."""

    INSERT_EVENT = {
        "type": "INSERT",
        "table": "messages",
        "schema": "public",
        "record": {"id": 7, "sender_id": "user-2", "receiver_id": "user-1", "content": "hi"},
        "old_record": None,
    }

    def _enqueuer(self):
        enqueue = MagicMock()
        app.dependency_overrides[get_push_enqueuer] = lambda: enqueue
        return enqueue

    def test_insert_is_queued(self, client):
        enqueue = self._enqueuer()

        response = client.post("/api/v1/hooks/messages", json=self.INSERT_EVENT)

        assert response.status_code == 202
        assert response.json() == {"queued": True}
        enqueue.assert_called_once_with(self.INSERT_EVENT["record"])

    def test_update_is_ignored(self, client):
        enqueue = self._enqueuer()

        response = client.post("/api/v1/hooks/messages", json={**self.INSERT_EVENT, "type": "UPDATE"})

        assert response.json() == {"queued": False}
        enqueue.assert_not_called()

    def test_queue_failure_is_not_an_error(self, client):
        enqueue = self._enqueuer()
        enqueue.side_effect = ConnectionError("redis down")

        response = client.post("/api/v1/hooks/messages", json=self.INSERT_EVENT)

        assert response.status_code == 202
        assert response.json() == {"queued": False}

    def test_secret_required_when_configured(self, client, monkeypatch):
        monkeypatch.setattr(settings, "WEBHOOK_SECRET", "s3cret")
        enqueue = self._enqueuer()

        rejected = client.post("/api/v1/hooks/messages", json=self.INSERT_EVENT)
        accepted = client.post(
            "/api/v1/hooks/messages",
            json=self.INSERT_EVENT,
            headers={"X-Webhook-Secret": "s3cret"},
        )

        assert rejected.status_code == 401
        assert rejected.json()["code"] == "WEBHOOK_UNAUTHORIZED"
        assert accepted.status_code == 202
        assert enqueue.call_count == 1


# =============================================================================
# Geocoding Proxy
# =============================================================================

class TestGeocoding:
    """Test /api/geocode and /api/reverse-geocode."""

    def _geocoder(self, handler):
        service = GeocodingService(base_url="https://geo.test", transport=httpx.MockTransport(handler))
        app.dependency_overrides[get_geocoding_service] = lambda: service

    def test_reverse_geocode(self, client):
        seen = {}

        def handler(request):
            seen["path"] = request.url.path
            seen["params"] = dict(request.url.params)
            seen["agent"] = request.headers["User-Agent"]
            return httpx.Response(200, json={"display_name": "Main St 1"})

        self._geocoder(handler)

        response = client.get("/api/reverse-geocode?lat=52.52&lon=13.40")

        assert response.status_code == 200
        assert response.json() == {"display_name": "Main St 1"}
        assert seen["path"] == "/reverse"
        assert seen["params"]["addressdetails"] == "1"
        assert seen["agent"] == settings.GEOCODER_USER_AGENT

    def test_search(self, client):
        self._geocoder(lambda request: httpx.Response(200, json=[{"lat": "1", "lon": "2"}]))

        response = client.get("/api/geocode", params={"q": "Main St 1"})

        assert response.json() == [{"lat": "1", "lon": "2"}]

    def test_missing_parameters(self, client):
        response = client.get("/api/reverse-geocode?lat=52.52")

        assert response.status_code == 400
        assert response.json()["details"]["missing"] == ["lon"]

    def test_missing_query(self, client):
        assert client.get("/api/geocode").status_code == 400

    def test_upstream_failure(self, client):
        self._geocoder(lambda request: httpx.Response(503))

        response = client.get("/api/reverse-geocode?lat=1&lon=2")

        assert response.status_code == 502
        assert response.json()["details"]["service"] == "geocoder"


# =============================================================================
# Health
# =============================================================================

class TestHealth:
    """Test health endpoints."""

    def test_health(self, client):
        response = client.get("/api/v1/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_live(self, client):
        assert client.get("/api/v1/health/live").json()["status"] == "alive"

    def test_ready_degraded_when_database_down(self, client):
        with patch(
            "app.routers.health.SupabaseClient.get_client",
            side_effect=SupabaseClientError("no db"),
        ):
            response = client.get("/api/v1/health/ready")

        data = response.json()
        assert data["status"] == "degraded"
        assert data["checks"]["database"].startswith("unhealthy")
        assert data["checks"]["push"] == "healthy"

    def test_root(self, client):
        assert client.get("/").json()["name"] == "CloseShop API"
