"""Tests for the special price ledger."""
import pytest
from datetime import date
from sqlalchemy.exc import OperationalError
from hotelsearch.backend.core.errors import (
    InfrastructureError,
    InvalidInputError,
    InvalidPriceError,
    InvalidRangeError,
    NotFoundError,
    SpecialPriceRangeError,
)
from hotelsearch.backend.db.models import SpecialPrice
from hotelsearch.backend.db.repository import SqlAlchemyHotelStore
from hotelsearch.backend.services.special_prices import SpecialPriceService, inclusive_dates


class FlakyStore(SqlAlchemyHotelStore):
    """Store whose writes fail on one specific date."""

    def __init__(self, db, failing_date):
        super().__init__(db)
        self.failing_date = failing_date

    def _apply_upsert(self, existing, hotel_id, day, price, reason, actor):
        if day == self.failing_date:
            raise OperationalError("UPSERT special_prices", {}, Exception("database is locked"))
        return super()._apply_upsert(existing, hotel_id, day, price, reason, actor)


class RacingStore(SqlAlchemyHotelStore):
    """Store that misses existing rows on its first lookups, as if a concurrent insert just landed."""

    def __init__(self, db, missed_lookups=1):
        super().__init__(db)
        self.missed_lookups = missed_lookups
        self.lookups = 0

    def _find_special_price(self, hotel_id, day):
        self.lookups += 1
        if self.lookups <= self.missed_lookups:
            return None
        return super()._find_special_price(hotel_id, day)


def stored_prices(db_session, hotel_id):
    return db_session.query(SpecialPrice).filter_by(hotel_id=hotel_id).order_by(SpecialPrice.date).all()


def test_upsert_one_creates_record(store, clock, test_settings, make_hotel):
    """A new override records the actor as creator and modifier."""
    hotel = make_hotel("Hotel H", default_price=100.0)
    service = SpecialPriceService(store, clock=clock, settings=test_settings)

    record = service.upsert_one(hotel.id, date(2025, 9, 21), 150.0, "Festival", "alice")

    assert record.date == date(2025, 9, 21)
    assert record.special_price_per_night == 150.0
    assert record.created_by == "alice"
    assert record.modified_by == "alice"


def test_upsert_one_is_idempotent_per_key(store, db_session, clock, test_settings, make_hotel):
    """Second upsert overwrites price but keeps the original creator."""
    hotel = make_hotel("Hotel H", default_price=100.0)
    service = SpecialPriceService(store, clock=clock, settings=test_settings)

    service.upsert_one(hotel.id, date(2025, 9, 21), 150.0, "Festival", "alice")
    service.upsert_one(hotel.id, date(2025, 9, 21), 175.0, "Festival extended", "bob")

    records = stored_prices(db_session, hotel.id)
    assert len(records) == 1
    assert records[0].special_price_per_night == 175.0
    assert records[0].special_price_reason == "Festival extended"
    assert records[0].created_by == "alice"
    assert records[0].modified_by == "bob"


@pytest.mark.parametrize("price", [99.0, 100.0])
def test_price_not_above_default_is_rejected(store, db_session, clock, test_settings, make_hotel, price):
    """Special price must be strictly greater than the default."""
    hotel = make_hotel("Hotel H", default_price=100.0)
    service = SpecialPriceService(store, clock=clock, settings=test_settings)

    with pytest.raises(InvalidPriceError):
        service.upsert_one(hotel.id, date(2025, 9, 21), price, "Festival", "alice")
    with pytest.raises(InvalidPriceError):
        service.upsert_range(hotel.id, date(2025, 9, 20), date(2025, 9, 22), price, "Festival", "alice")

    assert stored_prices(db_session, hotel.id) == []


def test_price_just_above_default_succeeds(store, clock, test_settings, make_hotel):
    hotel = make_hotel("Hotel H", default_price=100.0)
    service = SpecialPriceService(store, clock=clock, settings=test_settings)
    record = service.upsert_one(hotel.id, date(2025, 9, 21), 100.01, "Festival", "alice")
    assert record.special_price_per_night == 100.01


def test_unknown_hotel(store, clock, test_settings):
    service = SpecialPriceService(store, clock=clock, settings=test_settings)
    with pytest.raises(NotFoundError):
        service.upsert_one("missing", date(2025, 9, 21), 150.0, "Festival", "alice")
    with pytest.raises(NotFoundError):
        service.upsert_range("missing", date(2025, 9, 20), date(2025, 9, 22), 150.0, "Festival", "alice")


def test_past_dates_are_rejected(store, clock, test_settings, make_hotel):
    """Dates before the clock's today cannot be priced."""
    hotel = make_hotel("Hotel H")
    service = SpecialPriceService(store, clock=clock, settings=test_settings)

    with pytest.raises(InvalidInputError):
        service.upsert_one(hotel.id, date(2025, 8, 31), 150.0, "Festival", "alice")
    with pytest.raises(InvalidInputError):
        service.upsert_range(hotel.id, date(2025, 8, 30), date(2025, 9, 2), 150.0, "Festival", "alice")

    # Today itself is allowed
    service.upsert_one(hotel.id, date(2025, 9, 1), 150.0, "Festival", "alice")


def test_past_dates_allowed_by_setting(store, clock, test_settings, make_hotel):
    hotel = make_hotel("Hotel H")
    settings = test_settings.model_copy(update={"allow_past_special_prices": True})
    service = SpecialPriceService(store, clock=clock, settings=settings)

    record = service.upsert_one(hotel.id, date(2024, 1, 1), 150.0, "Backfill", "alice")
    assert record.date == date(2024, 1, 1)


def test_upsert_range_is_inclusive(store, db_session, clock, test_settings, make_hotel):
    """A range writes both endpoints and every date between."""
    hotel = make_hotel("Hotel H")
    service = SpecialPriceService(store, clock=clock, settings=test_settings)

    written = service.upsert_range(hotel.id, date(2025, 9, 20), date(2025, 9, 22), 150.0, "Festival", "alice")

    records = stored_prices(db_session, hotel.id)
    assert written == 3
    assert [r.date for r in records] == [date(2025, 9, 20), date(2025, 9, 21), date(2025, 9, 22)]
    assert {r.special_price_per_night for r in records} == {150.0}
    assert {r.created_by for r in records} == {"alice"}


def test_upsert_range_single_day(store, clock, test_settings, make_hotel):
    hotel = make_hotel("Hotel H")
    service = SpecialPriceService(store, clock=clock, settings=test_settings)
    assert service.upsert_range(hotel.id, date(2025, 9, 20), date(2025, 9, 20), 150.0, "Gala", "alice") == 1


def test_upsert_range_overwrites_existing_dates(store, db_session, clock, test_settings, make_hotel):
    """Range upserts keep creators of dates that already existed."""
    hotel = make_hotel("Hotel H")
    service = SpecialPriceService(store, clock=clock, settings=test_settings)
    service.upsert_one(hotel.id, date(2025, 9, 21), 150.0, "Festival", "alice")

    service.upsert_range(hotel.id, date(2025, 9, 20), date(2025, 9, 22), 200.0, "Race week", "bob")

    records = stored_prices(db_session, hotel.id)
    assert len(records) == 3
    assert [r.created_by for r in records] == ["bob", "alice", "bob"]
    assert {r.modified_by for r in records} == {"bob"}
    assert {r.special_price_per_night for r in records} == {200.0}


def test_upsert_range_inverted(store, clock, test_settings, make_hotel):
    hotel = make_hotel("Hotel H")
    service = SpecialPriceService(store, clock=clock, settings=test_settings)
    with pytest.raises(InvalidRangeError):
        service.upsert_range(hotel.id, date(2025, 9, 22), date(2025, 9, 20), 150.0, "Festival", "alice")


def test_atomic_range_rolls_back_on_failure(db_session, clock, test_settings, make_hotel):
    """With the atomic strategy a failure writes nothing."""
    hotel = make_hotel("Hotel H")
    flaky = FlakyStore(db_session, failing_date=date(2025, 9, 21))
    service = SpecialPriceService(flaky, clock=clock, settings=test_settings)

    with pytest.raises(InfrastructureError):
        service.upsert_range(hotel.id, date(2025, 9, 20), date(2025, 9, 22), 150.0, "Festival", "alice")

    assert stored_prices(db_session, hotel.id) == []


def test_per_date_range_reports_failed_date(db_session, clock, test_settings, make_hotel):
    """With per-date writes earlier nights stay written and the failure is reported."""
    hotel = make_hotel("Hotel H")
    settings = test_settings.model_copy(update={"special_price_range_strategy": "per_date"})
    flaky = FlakyStore(db_session, failing_date=date(2025, 9, 22))
    service = SpecialPriceService(flaky, clock=clock, settings=settings)

    with pytest.raises(SpecialPriceRangeError) as excinfo:
        service.upsert_range(hotel.id, date(2025, 9, 20), date(2025, 9, 23), 150.0, "Festival", "alice")

    assert excinfo.value.failed_date == date(2025, 9, 22)
    assert excinfo.value.written_count == 2
    assert excinfo.value.retryable
    assert [r.date for r in stored_prices(db_session, hotel.id)] == [date(2025, 9, 20), date(2025, 9, 21)]

    # Retrying the whole range once the store recovers completes it
    recovered = SpecialPriceService(SqlAlchemyHotelStore(db_session), clock=clock, settings=settings)
    assert recovered.upsert_range(hotel.id, date(2025, 9, 20), date(2025, 9, 23), 150.0, "Festival", "alice") == 4
    assert len(stored_prices(db_session, hotel.id)) == 4


def test_inclusive_dates():
    assert inclusive_dates(date(2025, 2, 27), date(2025, 3, 1)) == [
        date(2025, 2, 27), date(2025, 2, 28), date(2025, 3, 1)
    ]


def test_lost_insert_race_is_retried_as_update(db_session, clock, test_settings, make_hotel):
    """A duplicate-key insert is retried once and updates the existing row."""
    hotel = make_hotel("Hotel H")
    SpecialPriceService(SqlAlchemyHotelStore(db_session), clock=clock, settings=test_settings).upsert_one(
        hotel.id, date(2025, 9, 21), 150.0, "Festival", "alice"
    )
    racing = RacingStore(db_session)
    service = SpecialPriceService(racing, clock=clock, settings=test_settings)

    record = service.upsert_one(hotel.id, date(2025, 9, 21), 180.0, "Festival extended", "bob")

    assert racing.lookups == 2
    assert record.special_price_per_night == 180.0
    records = stored_prices(db_session, hotel.id)
    assert len(records) == 1
    assert records[0].special_price_per_night == 180.0
    assert records[0].created_by == "alice"
    assert records[0].modified_by == "bob"


def test_repeated_insert_race_raises_infrastructure(db_session, clock, test_settings, make_hotel):
    hotel = make_hotel("Hotel H")
    SpecialPriceService(SqlAlchemyHotelStore(db_session), clock=clock, settings=test_settings).upsert_one(
        hotel.id, date(2025, 9, 21), 150.0, "Festival", "alice"
    )
    racing = RacingStore(db_session, missed_lookups=2)
    service = SpecialPriceService(racing, clock=clock, settings=test_settings)

    with pytest.raises(InfrastructureError):
        service.upsert_one(hotel.id, date(2025, 9, 21), 180.0, "Festival extended", "bob")

    records = stored_prices(db_session, hotel.id)
    assert len(records) == 1
    assert records[0].special_price_per_night == 150.0
    assert records[0].created_by == "alice"
