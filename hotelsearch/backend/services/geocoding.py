"""Reverse geocoding provider interface and implementations."""
from abc import ABC, abstractmethod
from typing import Optional
import aiohttp
from aiohttp import ClientTimeout
import logging
from hotelsearch.backend.core.config import Settings, settings as default_settings
from hotelsearch.backend.schemas.hotel import GeocodeResult


class GeocodingProvider(ABC):
    """Abstract base class for reverse geocoders."""

    @abstractmethod
    async def reverse_geocode(self, latitude: float, longitude: float) -> GeocodeResult:
        """
        Resolve a coordinate pair into an address.

        Args:
            latitude: Latitude in degrees
            longitude: Longitude in degrees

        Returns:
            GeocodeResult; ``valid`` is False when the point cannot be resolved
        """
        pass


class MockGeocoder(GeocodingProvider):
    """Deterministic geocoder that never calls out."""

    async def reverse_geocode(self, latitude: float, longitude: float) -> GeocodeResult:
        return GeocodeResult(
            valid=True,
            address=f"{latitude:.5f}, {longitude:.5f}",
            city=None,
            country=None
        )


class MapsCoGeocoder(GeocodingProvider):
    """geocode.maps.co reverse geocoding."""

    def __init__(self, api_key: Optional[str], base_url: str = "https://geocode.maps.co", timeout_seconds: float = 10):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = ClientTimeout(total=timeout_seconds)
        self.logger = logging.getLogger(__name__)

    async def reverse_geocode(self, latitude: float, longitude: float) -> GeocodeResult:
        params = {"lat": str(latitude), "lon": str(longitude)}
        if self.api_key:
            params["api_key"] = self.api_key

        try:
            async with aiohttp.ClientSession(timeout=self.timeout) as session:
                async with session.get(f"{self.base_url}/reverse", params=params) as resp:
                    if resp.status != 200:
                        error_text = await resp.text()
                        self.logger.warning(f"Geocoding failed: {resp.status} - {error_text}")
                        return GeocodeResult(valid=False)
                    data = await resp.json()
        except (aiohttp.ClientError, TimeoutError, ValueError) as e:
            self.logger.warning(f"Geocoding request failed ({str(e)})")
            return GeocodeResult(valid=False)

        if not data or "error" in data:
            return GeocodeResult(valid=False)

        address = data.get("address") or {}
        return GeocodeResult(
            valid=True,
            address=data.get("display_name"),
            city=address.get("city") or address.get("town"),
            country=address.get("country")
        )


def build_geocoder(settings: Optional[Settings] = None) -> GeocodingProvider:
    """Select the geocoder configured in settings."""
    settings = settings or default_settings
    if settings.geocoder_provider == "maps_co":
        return MapsCoGeocoder(settings.geocode_api_key, settings.geocode_api_base)
    return MockGeocoder()


def get_geocoder() -> GeocodingProvider:
    """Dependency for FastAPI to get the geocoder."""
    return build_geocoder()
