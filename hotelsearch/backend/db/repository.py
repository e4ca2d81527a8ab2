"""SQLAlchemy implementation of the hotel store."""
import logging
from contextlib import contextmanager
from datetime import date
from typing import Iterable, List, Optional, Sequence, Tuple
from sqlalchemy import and_, or_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
from hotelsearch.backend.core.errors import ConflictError, InfrastructureError
from hotelsearch.backend.db.models import Hotel, SpecialPrice
from hotelsearch.backend.db.store import HotelStore
from hotelsearch.backend.services.geo import bounding_boxes, haversine_distance_m

logger = logging.getLogger(__name__)


class SqlAlchemyHotelStore(HotelStore):
    """Hotel store backed by a SQLAlchemy session."""

    def __init__(self, db: Session):
        self.db = db

    @contextmanager
    def _guard(self, operation: str):
        """Roll back and convert driver failures into InfrastructureError."""
        try:
            yield
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error("Store operation %s failed: %s", operation, e)
            raise InfrastructureError(f"Store unavailable during {operation}") from e

    def get_hotel(self, hotel_id: str) -> Optional[Hotel]:
        with self._guard("get_hotel"):
            return self.db.query(Hotel).filter_by(id=hotel_id).first()

    def get_hotel_by_name_key(self, name_key: str) -> Optional[Hotel]:
        with self._guard("get_hotel_by_name_key"):
            return self.db.query(Hotel).filter_by(name_key=name_key).first()

    def list_hotels(self, skip: int, limit: int) -> List[Hotel]:
        with self._guard("list_hotels"):
            return (
                self.db.query(Hotel)
                .order_by(Hotel.created_at, Hotel.id)
                .offset(skip)
                .limit(limit)
                .all()
            )

    def add_hotel(self, hotel: Hotel) -> Hotel:
        self.db.add(hotel)
        return self._commit_hotel(hotel, "add_hotel")

    def save_hotel(self, hotel: Hotel) -> Hotel:
        return self._commit_hotel(hotel, "save_hotel")

    def _commit_hotel(self, hotel: Hotel, operation: str) -> Hotel:
        name = hotel.name
        with self._guard(operation):
            try:
                self.db.commit()
            except IntegrityError as e:
                self.db.rollback()
                raise ConflictError(f"Hotel with name '{name}' already exists") from e
            self.db.refresh(hotel)
        return hotel

    def find_hotels_near(
        self,
        latitude: float,
        longitude: float,
        radius_m: float,
        earth_radius_m: float,
        name_filter: Optional[str] = None
    ) -> List[Tuple[Hotel, float]]:
        with self._guard("find_hotels_near"):
            query = self.db.query(Hotel).filter(Hotel.rooms_available > 0)

            boxes = bounding_boxes(latitude, longitude, radius_m, earth_radius_m)
            if boxes is not None:
                query = query.filter(or_(*[
                    and_(
                        Hotel.latitude.between(min_lat, max_lat),
                        Hotel.longitude.between(min_lon, max_lon)
                    )
                    for min_lat, max_lat, min_lon, max_lon in boxes
                ]))

            candidates = query.all()

        # SQLite's lower() only folds ASCII, so names are compared here
        if name_filter:
            needle = name_filter.casefold()
            candidates = [hotel for hotel in candidates if needle in hotel.name.casefold()]

        matches = []
        for hotel in candidates:
            distance = haversine_distance_m(
                latitude, longitude, hotel.latitude, hotel.longitude, earth_radius_m
            )
            if distance <= radius_m:
                matches.append((hotel, distance))

        matches.sort(key=lambda match: (match[1], match[0].id))
        return matches

    def find_special_prices(
        self,
        hotel_ids: Sequence[str],
        from_date: date,
        to_date: date
    ) -> List[SpecialPrice]:
        if not hotel_ids or from_date >= to_date:
            return []
        with self._guard("find_special_prices"):
            return (
                self.db.query(SpecialPrice)
                .filter(
                    SpecialPrice.hotel_id.in_(list(hotel_ids)),
                    SpecialPrice.date >= from_date,
                    SpecialPrice.date < to_date
                )
                .order_by(SpecialPrice.hotel_id, SpecialPrice.date)
                .all()
            )

    def _find_special_price(self, hotel_id: str, day: date) -> Optional[SpecialPrice]:
        return self.db.query(SpecialPrice).filter_by(hotel_id=hotel_id, date=day).first()

    def _apply_upsert(
        self,
        existing: Optional[SpecialPrice],
        hotel_id: str,
        day: date,
        price: float,
        reason: str,
        actor: str
    ) -> SpecialPrice:
        if existing is None:
            record = SpecialPrice(
                hotel_id=hotel_id,
                date=day,
                special_price_per_night=price,
                special_price_reason=reason,
                created_by=actor,
                modified_by=actor
            )
            self.db.add(record)
            return record

        # created_by is kept from the original insert
        existing.special_price_per_night = price
        existing.special_price_reason = reason
        existing.modified_by = actor
        return existing

    def upsert_special_price(
        self,
        hotel_id: str,
        day: date,
        price: float,
        reason: str,
        actor: str
    ) -> SpecialPrice:
        for attempt in range(2):
            try:
                existing = self._find_special_price(hotel_id, day)
                record = self._apply_upsert(existing, hotel_id, day, price, reason, actor)
                self.db.commit()
                self.db.refresh(record)
                return record
            except IntegrityError as e:
                self.db.rollback()
                if attempt:
                    raise InfrastructureError(
                        f"Could not upsert special price for {day.isoformat()}"
                    ) from e
                # A concurrent writer inserted the key first; retry as an update
                logger.info("Special price %s/%s inserted concurrently, retrying", hotel_id, day)
            except SQLAlchemyError as e:
                self.db.rollback()
                logger.error("Special price upsert for %s/%s failed: %s", hotel_id, day, e)
                raise InfrastructureError(
                    f"Store unavailable while writing special price for {day.isoformat()}"
                ) from e

    def upsert_special_prices(
        self,
        hotel_id: str,
        days: Iterable[date],
        price: float,
        reason: str,
        actor: str
    ) -> int:
        days = sorted(set(days))
        if not days:
            return 0
        with self._guard("upsert_special_prices"):
            existing = {
                record.date: record
                for record in self.db.query(SpecialPrice).filter(
                    SpecialPrice.hotel_id == hotel_id,
                    SpecialPrice.date.in_(days)
                )
            }
            for day in days:
                self._apply_upsert(existing.get(day), hotel_id, day, price, reason, actor)
            self.db.commit()
        return len(days)
