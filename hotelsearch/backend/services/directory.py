"""Hotel directory administration."""
import logging
from typing import List
from hotelsearch.backend.core.errors import ConflictError, InvalidInputError, not_found
from hotelsearch.backend.db.models import Hotel, hotel_name_key
from hotelsearch.backend.db.store import HotelStore
from hotelsearch.backend.schemas.hotel import Coordinates, HotelCreate, HotelUpdate
from hotelsearch.backend.services.geo import validate_coordinates
from hotelsearch.backend.services.geocoding import GeocodingProvider

logger = logging.getLogger(__name__)


class HotelDirectoryService:
    """Service for creating and maintaining hotel records."""

    def __init__(self, store: HotelStore, geocoder: GeocodingProvider):
        self.store = store
        self.geocoder = geocoder

    def _check_name_available(self, name: str, hotel_id: str = None) -> str:
        name_key = hotel_name_key(name)
        existing = self.store.get_hotel_by_name_key(name_key)
        if existing and existing.id != hotel_id:
            raise ConflictError(f"Hotel with name '{name}' already exists")
        return name_key

    async def _resolve_address(self, coordinates: Coordinates) -> str:
        validate_coordinates(coordinates.latitude, coordinates.longitude)
        geo_data = await self.geocoder.reverse_geocode(coordinates.latitude, coordinates.longitude)
        if not geo_data.valid:
            raise InvalidInputError("Invalid coordinates provided")
        return geo_data.address

    async def create_hotel(self, data: HotelCreate, actor: str) -> Hotel:
        """
        Register a new hotel.

        The name is checked against the dedup key before geocoding, and the
        geocoded address replaces any address supplied by the client.
        """
        name_key = self._check_name_available(data.name)
        address = await self._resolve_address(data.coordinates)

        hotel = Hotel(
            name=data.name.strip(),
            name_key=name_key,
            longitude=data.coordinates.longitude,
            latitude=data.coordinates.latitude,
            address=address or data.address,
            rooms_available=data.rooms_available,
            default_price_per_night=data.default_price_per_night,
            photos=list(data.photos),
            amenities=list(data.amenities),
            created_by=actor,
            modified_by=actor
        )
        hotel = self.store.add_hotel(hotel)
        logger.info("Hotel %s (%s) created by %s", hotel.id, hotel.name, actor)
        return hotel

    async def update_hotel(self, hotel_id: str, update: HotelUpdate, actor: str) -> Hotel:
        """Apply a partial update; renames are dedup-checked and moves re-geocoded."""
        hotel = self.get_hotel(hotel_id)
        changes = update.model_dump(exclude_unset=True)

        if update.name is not None:
            hotel.name_key = self._check_name_available(update.name, hotel_id=hotel.id)
            hotel.name = update.name.strip()

        if update.coordinates is not None:
            hotel.address = await self._resolve_address(update.coordinates)
            hotel.longitude = update.coordinates.longitude
            hotel.latitude = update.coordinates.latitude
        elif update.address is not None:
            hotel.address = update.address

        for key in ("rooms_available", "default_price_per_night", "photos", "amenities"):
            if key in changes and changes[key] is not None:
                setattr(hotel, key, changes[key])

        hotel.modified_by = actor
        hotel = self.store.save_hotel(hotel)
        logger.info("Hotel %s updated by %s (%s)", hotel.id, actor, ", ".join(sorted(changes)))
        return hotel

    def get_hotel(self, hotel_id: str) -> Hotel:
        hotel = self.store.get_hotel(hotel_id)
        if not hotel:
            raise not_found("Hotel", hotel_id)
        return hotel

    def list_hotels(self, skip: int = 0, limit: int = 100) -> List[Hotel]:
        return self.store.list_hotels(skip, limit)
