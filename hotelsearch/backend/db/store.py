"""Store interface the search and pricing engines run against."""
from abc import ABC, abstractmethod
from datetime import date
from typing import Iterable, List, Optional, Sequence, Tuple
from hotelsearch.backend.db.models import Hotel, SpecialPrice


class HotelStore(ABC):
    """
    Abstract persistence for hotels and special prices.

    Implementations serialize individual operations but are not expected to
    provide transactions across calls. Failures surface as
    ``InfrastructureError``.
    """

    @abstractmethod
    def get_hotel(self, hotel_id: str) -> Optional[Hotel]:
        """Point lookup by id."""
        pass

    @abstractmethod
    def get_hotel_by_name_key(self, name_key: str) -> Optional[Hotel]:
        """Unique-field lookup by the hotel dedup key."""
        pass

    @abstractmethod
    def list_hotels(self, skip: int, limit: int) -> List[Hotel]:
        pass

    @abstractmethod
    def add_hotel(self, hotel: Hotel) -> Hotel:
        pass

    @abstractmethod
    def save_hotel(self, hotel: Hotel) -> Hotel:
        pass

    @abstractmethod
    def find_hotels_near(
        self,
        latitude: float,
        longitude: float,
        radius_m: float,
        earth_radius_m: float,
        name_filter: Optional[str] = None
    ) -> List[Tuple[Hotel, float]]:
        """
        Geospatial range query.

        Returns every hotel with rooms available within ``radius_m`` of the
        center, paired with its distance in meters, ordered by distance then
        hotel id.
        """
        pass

    @abstractmethod
    def find_special_prices(
        self,
        hotel_ids: Sequence[str],
        from_date: date,
        to_date: date
    ) -> List[SpecialPrice]:
        """Overrides for the given hotels with ``from_date <= date < to_date``."""
        pass

    @abstractmethod
    def upsert_special_price(
        self,
        hotel_id: str,
        day: date,
        price: float,
        reason: str,
        actor: str
    ) -> SpecialPrice:
        """Insert or update the override keyed on (hotel_id, day) and commit it."""
        pass

    @abstractmethod
    def upsert_special_prices(
        self,
        hotel_id: str,
        days: Iterable[date],
        price: float,
        reason: str,
        actor: str
    ) -> int:
        """Upsert one override per day in a single transaction; all or nothing."""
        pass
