"""
Address geocoding through the Google Maps Geocoding API.
"""
import logging
from typing import Tuple
import httpx
from app.core.config import settings
from app.core.exceptions import ExternalServiceError

logger = logging.getLogger(__name__)


def geocode_address(address: str) -> Tuple[float, float]:
    """Resolve an address to (latitude, longitude)."""
    if not settings.GOOGLE_MAPS_API_KEY:
        logger.error("GOOGLE_MAPS_API_KEY is not configured. Please set it in .env file.")
        raise ExternalServiceError("Google Maps API key is not set")

    try:
        response = httpx.get(
            settings.GEOCODE_API_URL,
            params={"address": address, "key": settings.GOOGLE_MAPS_API_KEY},
            timeout=10.0
        )
        response.raise_for_status()
        data = response.json()
    except httpx.HTTPStatusError as e:
        logger.error(f"Geocoding HTTP error: {e.response.status_code} - {e.response.text}")
        raise ExternalServiceError("Failed to geocode address")
    except httpx.HTTPError as e:
        logger.error(f"Geocoding network error: {e}")
        raise ExternalServiceError("Failed to geocode address")

    results = data.get("results") or []
    if not results:
        logger.warning(f"No geocoding results for '{address}' (status {data.get('status')})")
        raise ExternalServiceError("Failed to geocode address")

    location = results[0]["geometry"]["location"]
    return float(location["lat"]), float(location["lng"])
