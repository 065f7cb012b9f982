# =============================================================================
# tests/ - Test Suite
# =============================================================================
# This package contains all tests for the CloseShop backend:
# - test_session_store.py / test_route_guard.py: client-side session and guard
# - test_notification_channel.py: notification cache and realtime handling
# - test_push_dispatcher.py: push dispatch, push client and worker task
# - test_cart.py / test_client.py: cart and client-core wiring
# - test_models.py: Unit tests for Pydantic model validation
# - test_api.py: Integration tests for API endpoints
# - fakes.py: in-memory Supabase stand-ins
#
# Run tests with: poetry run pytest
# =============================================================================
