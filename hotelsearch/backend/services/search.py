"""Geospatial hotel search with nightly pricing."""
import logging
from datetime import date, datetime
from typing import Optional
from hotelsearch.backend.core.clock import Clock, SystemClock
from hotelsearch.backend.core.config import Settings, settings as default_settings
from hotelsearch.backend.core.errors import InfrastructureError, InvalidInputError
from hotelsearch.backend.db.store import HotelStore
from hotelsearch.backend.schemas.search import HotelSearchResponse, HotelSearchResult
from hotelsearch.backend.services.geo import validate_coordinates
from hotelsearch.backend.services.pricing import PriceResolutionService, stay_nights

logger = logging.getLogger(__name__)


class HotelSearchService:
    """Finds available hotels near a point, ranked by distance."""

    def __init__(
        self,
        store: HotelStore,
        clock: Optional[Clock] = None,
        settings: Optional[Settings] = None
    ):
        self.store = store
        self.clock = clock or SystemClock()
        self.settings = settings or default_settings
        self.pricing = PriceResolutionService(store)

    def search(
        self,
        latitude: float,
        longitude: float,
        from_date: date,
        to_date: date,
        radius_m: Optional[float] = None,
        name_filter: Optional[str] = None,
        page: Optional[int] = None,
        limit: Optional[int] = None,
        deadline: Optional[datetime] = None
    ) -> HotelSearchResponse:
        """
        Search hotels within a radius and price each night of the stay.

        Args:
            latitude: Center latitude
            longitude: Center longitude
            from_date: Check-in date
            to_date: Check-out date (not priced)
            radius_m: Radius in meters, defaults to settings.default_search_radius_m
            name_filter: Case-insensitive substring of the hotel name
            page: 1-based page number
            limit: Page size, at most settings.max_page_limit
            deadline: Abort with InfrastructureError once the clock passes it

        Returns:
            HotelSearchResponse with total_count computed before pagination
        """
        validate_coordinates(latitude, longitude)
        stay_nights(from_date, to_date)

        if radius_m is None:
            radius_m = self.settings.default_search_radius_m
        if radius_m < 0:
            raise InvalidInputError(f"Radius must be >= 0, got {radius_m}")

        page = self.settings.default_page if page is None else page
        limit = self.settings.default_page_limit if limit is None else limit
        if page < 1:
            raise InvalidInputError(f"Page must be >= 1, got {page}")
        if not 1 <= limit <= self.settings.max_page_limit:
            raise InvalidInputError(
                f"Limit must be between 1 and {self.settings.max_page_limit}, got {limit}"
            )

        name_filter = name_filter or None

        matches = self.store.find_hotels_near(
            latitude,
            longitude,
            radius_m,
            self.settings.earth_radius_m,
            name_filter=name_filter
        )
        total_count = len(matches)
        skip = (page - 1) * limit
        page_matches = matches[skip:skip + limit]

        self._check_deadline(deadline)

        prices = self.pricing.resolve_for_hotels(
            [hotel for hotel, _ in page_matches], from_date, to_date
        )

        results = [
            HotelSearchResult(
                id=hotel.id,
                name=hotel.name,
                location=hotel.location,
                address=hotel.address,
                rooms_available=hotel.rooms_available,
                default_price_per_night=hotel.default_price_per_night,
                photos=hotel.photos or [],
                amenities=hotel.amenities or [],
                distance=distance,
                price_by_dates=prices[hotel.id]
            )
            for hotel, distance in page_matches
        ]

        logger.debug(
            "Search at (%s, %s) r=%sm matched %d hotels, returning page %d",
            latitude, longitude, radius_m, total_count, page
        )

        return HotelSearchResponse(
            page=page,
            limit=limit,
            total_count=total_count,
            results=results
        )

    def _check_deadline(self, deadline: Optional[datetime]) -> None:
        if deadline is not None and self.clock.now() >= deadline:
            raise InfrastructureError("Search deadline exceeded before prices were resolved")
