# =============================================================================
# app/routers/geocode.py - Geocoding Proxy Endpoints
# =============================================================================
# GET /api/geocode?q=<address>
# GET /api/reverse-geocode?lat=<lat>&lon=<lon>
#
# Thin pass-through to Nominatim; the upstream JSON is returned unchanged.
# =============================================================================

import logging
from typing import Any, Optional

from fastapi import APIRouter, Depends, Query

from app.dependencies import get_geocoding_service
from app.exceptions import MissingParameterError, UpstreamError
from core.services.geocoding_service import GeocodingError, GeocodingService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/geocode")
async def geocode(
    q: Optional[str] = Query(None, description="Free-form address"),
    service: GeocodingService = Depends(get_geocoding_service),
) -> Any:
    """Address -> candidate coordinates."""
    if not q or not q.strip():
        raise MissingParameterError(["q"])

    try:
        return await service.search(q.strip())
    except GeocodingError as e:
        raise UpstreamError("geocoder", e.message)


@router.get("/reverse-geocode")
async def reverse_geocode(
    lat: Optional[float] = Query(None, ge=-90, le=90),
    lon: Optional[float] = Query(None, ge=-180, le=180),
    service: GeocodingService = Depends(get_geocoding_service),
) -> Any:
    """Coordinates -> address details."""
    missing = [name for name, value in (("lat", lat), ("lon", lon)) if value is None]
    if missing:
        raise MissingParameterError(missing)

    try:
        return await service.reverse(lat, lon)
    except GeocodingError as e:
        raise UpstreamError("geocoder", e.message)
