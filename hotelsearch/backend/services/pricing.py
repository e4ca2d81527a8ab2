"""Nightly price resolution from default and special prices."""
from datetime import date, timedelta
from typing import Dict, Iterable, List, Mapping, Sequence
from hotelsearch.backend.core.errors import InvalidRangeError, not_found
from hotelsearch.backend.db.models import Hotel, SpecialPrice
from hotelsearch.backend.db.store import HotelStore


def stay_nights(from_date: date, to_date: date) -> List[date]:
    """
    Nights of a stay as the half-open range [from_date, to_date).

    The checkout day ``to_date`` is not a night.
    """
    if to_date < from_date:
        raise InvalidRangeError(
            f"Check-out {to_date.isoformat()} is before check-in {from_date.isoformat()}"
        )
    return [from_date + timedelta(days=offset) for offset in range((to_date - from_date).days)]


def build_price_map(
    default_price: float,
    nights: Iterable[date],
    overrides: Mapping[date, float]
) -> Dict[str, float]:
    """One entry per night: the override when present, else the default."""
    return {
        night.isoformat(): overrides.get(night, default_price)
        for night in nights
    }


class PriceResolutionService:
    """Resolves per-night prices for hotels over a stay window."""

    def __init__(self, store: HotelStore):
        self.store = store

    def resolve_prices(
        self,
        hotel_id: str,
        from_date: date,
        to_date: date
    ) -> Dict[str, float]:
        """
        Price every night of a stay for a single hotel.

        Args:
            hotel_id: Hotel ID
            from_date: Check-in date (first priced night)
            to_date: Check-out date (not priced)

        Returns:
            Mapping of ISO date to price, in ascending date order
        """
        stay_nights(from_date, to_date)
        hotel = self.store.get_hotel(hotel_id)
        if not hotel:
            raise not_found("Hotel", hotel_id)

        return self.resolve_for_hotels([hotel], from_date, to_date)[hotel.id]

    def resolve_for_hotels(
        self,
        hotels: Sequence[Hotel],
        from_date: date,
        to_date: date
    ) -> Dict[str, Dict[str, float]]:
        """
        Price a batch of hotels with a single special-price lookup.

        Returns:
            Mapping of hotel id to its price map
        """
        nights = stay_nights(from_date, to_date)
        if not hotels:
            return {}

        overrides_by_hotel: Dict[str, Dict[date, float]] = {hotel.id: {} for hotel in hotels}
        if nights:
            special_prices: List[SpecialPrice] = self.store.find_special_prices(
                [hotel.id for hotel in hotels], from_date, to_date
            )
            for special_price in special_prices:
                overrides_by_hotel[special_price.hotel_id][special_price.date] = (
                    special_price.special_price_per_night
                )

        return {
            hotel.id: build_price_map(hotel.default_price_per_night, nights, overrides_by_hotel[hotel.id])
            for hotel in hotels
        }
