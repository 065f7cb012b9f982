# =============================================================================
# core/ - Business Logic Package
# =============================================================================
# This package contains framework-agnostic business logic:
# - models/: Pydantic schemas for data validation
# - services/: Session Store, Route Guard, Notification Channel,
#   Push Dispatcher, Cart, geocoding
# - client.py: Wires the client-side services for one app instance
#
# Code in this package should NOT import from FastAPI or Celery.
# This keeps the logic testable and reusable.
# =============================================================================
