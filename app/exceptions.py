# =============================================================================
# app/exceptions.py - Custom Exception Handlers
# =============================================================================
# Centralized exception handling for the API.
# Following the principle: "Errors should tell HOW to fix, not just WHAT failed."
# =============================================================================

from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse


class CloseShopException(Exception):
    """
    Base exception for the CloseShop API.

    All custom exceptions inherit from this class.
    Provides structured error responses with actionable suggestions.
    """

    def __init__(
        self,
        message: str,
        code: str = "CLOSESHOP_ERROR",
        status_code: int = 500,
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.suggestion = suggestion
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to API response dict."""
        result = {
            "detail": self.message,
            "code": self.code,
        }
        if self.suggestion:
            result["suggestion"] = self.suggestion
        if self.details:
            result["details"] = self.details
        return result


# =============================================================================
# Authorization Exceptions
# =============================================================================

class AdminRequiredError(CloseShopException):
    """Raised when a non-admin user calls an admin endpoint."""

    def __init__(self, user_id: str):
        super().__init__(
            message="Admin role required",
            code="ADMIN_REQUIRED",
            status_code=403,
            suggestion="Ask an administrator to set your profile role to 'admin'",
            details={"user_id": user_id}
        )


class WebhookAuthError(CloseShopException):
    """Raised when a database webhook carries a wrong or missing secret."""

    def __init__(self):
        super().__init__(
            message="Invalid webhook secret",
            code="WEBHOOK_UNAUTHORIZED",
            status_code=401,
            suggestion="Send the configured WEBHOOK_SECRET in the X-Webhook-Secret header",
        )


# =============================================================================
# Proxy Exceptions
# =============================================================================

class MissingParameterError(CloseShopException):
    """Raised when a required query parameter is missing."""

    def __init__(self, params: list[str]):
        super().__init__(
            message=f"Missing {', '.join(params)}",
            code="MISSING_PARAMETER",
            status_code=400,
            details={"missing": params}
        )


class UpstreamError(CloseShopException):
    """Raised when an upstream service (geocoder, database) fails."""

    def __init__(self, service: str, error: str):
        super().__init__(
            message=f"Failed to fetch from {service}",
            code="UPSTREAM_ERROR",
            status_code=502,
            suggestion="Try again later or contact support if the issue persists",
            details={"service": service, "error": error}
        )


# =============================================================================
# Exception Handlers
# =============================================================================

async def closeshop_exception_handler(
    request: Request,
    exc: CloseShopException
) -> JSONResponse:
    """
    Convert CloseShopException to JSON response.

    Returns structured error with:
    - detail: Human-readable message
    - code: Machine-readable error code
    - suggestion: How to fix (if available)
    - details: Additional context
    """
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )
