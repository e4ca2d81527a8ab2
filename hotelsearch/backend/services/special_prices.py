"""Special price ledger: idempotent per-date price overrides."""
import logging
from datetime import date, timedelta
from typing import List, Optional
from hotelsearch.backend.core.clock import Clock, SystemClock
from hotelsearch.backend.core.config import Settings, settings as default_settings
from hotelsearch.backend.core.errors import (
    InfrastructureError,
    InvalidInputError,
    InvalidPriceError,
    InvalidRangeError,
    SpecialPriceRangeError,
    not_found,
)
from hotelsearch.backend.db.models import Hotel, SpecialPrice
from hotelsearch.backend.db.store import HotelStore

logger = logging.getLogger(__name__)


def inclusive_dates(start_date: date, end_date: date) -> List[date]:
    """Every calendar date of the closed interval [start_date, end_date]."""
    if start_date > end_date:
        raise InvalidRangeError(
            f"Start date {start_date.isoformat()} is after end date {end_date.isoformat()}"
        )
    return [start_date + timedelta(days=offset) for offset in range((end_date - start_date).days + 1)]


class SpecialPriceService:
    """Service for writing special prices."""

    def __init__(
        self,
        store: HotelStore,
        clock: Optional[Clock] = None,
        settings: Optional[Settings] = None
    ):
        self.store = store
        self.clock = clock or SystemClock()
        self.settings = settings or default_settings

    def _load_hotel(self, hotel_id: str) -> Hotel:
        hotel = self.store.get_hotel(hotel_id)
        if not hotel:
            raise not_found("Hotel", hotel_id)
        return hotel

    def _check_price(self, hotel: Hotel, price: float) -> None:
        if price <= hotel.default_price_per_night:
            raise InvalidPriceError(
                f"Special price {price} must be greater than the default price "
                f"{hotel.default_price_per_night}"
            )

    def _check_not_past(self, first_date: date) -> None:
        if self.settings.allow_past_special_prices:
            return
        today = self.clock.today()
        if first_date < today:
            raise InvalidInputError(
                f"Past dates are not allowed: {first_date.isoformat()} is before {today.isoformat()}"
            )

    def upsert_one(
        self,
        hotel_id: str,
        day: date,
        price: float,
        reason: str,
        actor: str
    ) -> SpecialPrice:
        """
        Create or overwrite the special price for one night.

        Args:
            hotel_id: Hotel ID
            day: Night to override
            price: Price per night, must exceed the hotel's default
            reason: Reason shown to admins
            actor: User performing the write

        Returns:
            The stored SpecialPrice
        """
        hotel = self._load_hotel(hotel_id)
        self._check_price(hotel, price)
        self._check_not_past(day)

        record = self.store.upsert_special_price(hotel.id, day, price, reason, actor)
        logger.info("Special price set for hotel %s on %s by %s", hotel.id, day.isoformat(), actor)
        return record

    def upsert_range(
        self,
        hotel_id: str,
        start_date: date,
        end_date: date,
        price: float,
        reason: str,
        actor: str
    ) -> int:
        """
        Apply the same special price to every night of [start_date, end_date].

        All validation happens before the first write. With the ``atomic``
        strategy the range is written in one transaction. With ``per_date``
        each night is committed on its own and a failure leaves the earlier
        nights written; the raised SpecialPriceRangeError names the failed
        date. Re-running the whole range is always safe.

        Returns:
            Number of dates written
        """
        days = inclusive_dates(start_date, end_date)
        hotel = self._load_hotel(hotel_id)
        self._check_price(hotel, price)
        self._check_not_past(days[0])

        if self.settings.special_price_range_strategy == "atomic":
            written = self.store.upsert_special_prices(hotel.id, days, price, reason, actor)
        else:
            written = self._upsert_per_date(hotel.id, days, price, reason, actor)

        logger.info(
            "Special price set for hotel %s from %s to %s (%d dates) by %s",
            hotel.id, start_date.isoformat(), end_date.isoformat(), written, actor
        )
        return written

    def _upsert_per_date(
        self,
        hotel_id: str,
        days: List[date],
        price: float,
        reason: str,
        actor: str
    ) -> int:
        written = 0
        for day in days:
            try:
                self.store.upsert_special_price(hotel_id, day, price, reason, actor)
            except InfrastructureError as e:
                logger.error(
                    "Range upsert for hotel %s stopped at %s after %d dates",
                    hotel_id, day.isoformat(), written
                )
                raise SpecialPriceRangeError(
                    f"Failed to write special price for {day.isoformat()}; "
                    f"{written} earlier dates were written",
                    failed_date=day,
                    written_count=written
                ) from e
            written += 1
        return written
