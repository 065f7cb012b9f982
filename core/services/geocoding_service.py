# =============================================================================
# core/services/geocoding_service.py - Geocoding Proxy Logic
# =============================================================================
# Pass-through to the public Nominatim service. The browser cannot set the
# User-Agent header Nominatim requires, so the API forwards requests here.
# =============================================================================

import logging
from typing import Any

import httpx

from app.config import settings
from lib.utils import ApplicationError

logger = logging.getLogger(__name__)


class GeocodingError(ApplicationError):
    """Raised when the upstream geocoder fails or returns invalid JSON."""

    def __init__(self, message: str, **kwargs):
        super().__init__(message, code="GEOCODING_FAILED", **kwargs)


class GeocodingService:
    """
    Forward search and reverse lookups to the geocoder.

    Args:
        base_url: Geocoder base URL (defaults to settings.GEOCODER_BASE_URL)
        transport: Optional httpx transport, injected by tests
    """

    def __init__(
        self,
        base_url: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = (base_url or settings.GEOCODER_BASE_URL).rstrip("/")
        self._transport = transport

    async def search(self, query: str) -> Any:
        """Address -> list of candidate places."""
        return await self._get("/search", {"format": "json", "q": query})

    async def reverse(self, lat: float, lon: float) -> Any:
        """Coordinates -> address details."""
        return await self._get(
            "/reverse",
            {"format": "json", "lat": lat, "lon": lon, "addressdetails": 1},
        )

    async def _get(self, path: str, params: dict[str, Any]) -> Any:
        url = f"{self.base_url}{path}"
        try:
            async with httpx.AsyncClient(
                timeout=settings.GEOCODER_TIMEOUT_SECONDS,
                headers={"User-Agent": settings.GEOCODER_USER_AGENT},
                transport=self._transport,
            ) as client:
                response = await client.get(url, params=params)
                response.raise_for_status()
                return response.json()
        except httpx.HTTPError as e:
            logger.error(f"Geocoder request to {path} failed: {e}")
            raise GeocodingError(f"Geocoder request failed: {e}", details={"path": path})
        except ValueError as e:
            logger.error(f"Geocoder returned invalid JSON for {path}: {e}")
            raise GeocodingError("Geocoder returned invalid JSON", details={"path": path})
