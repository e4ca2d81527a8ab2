"""Pytest configuration and fixtures."""
import pytest
from datetime import datetime, timezone
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from hotelsearch.backend.core.clock import FixedClock, get_clock
from hotelsearch.backend.core.config import Settings
from hotelsearch.backend.db.models import Base, Hotel, hotel_name_key
from hotelsearch.backend.db.repository import SqlAlchemyHotelStore
from hotelsearch.backend.db.session import get_db
from hotelsearch.backend.main import app
from hotelsearch.backend.services.geocoding import MockGeocoder, get_geocoder
from fastapi.testclient import TestClient
import tempfile
import os


# Center used across search tests (Paris)
CENTER_LAT = 48.8566
CENTER_LON = 2.3522


@pytest.fixture(scope="function")
def db_session():
    """Create a test database session."""
    # Create temporary SQLite database
    db_fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(db_fd)

    engine = create_engine(f"sqlite:///{db_path}", connect_args={"check_same_thread": False})
    Base.metadata.create_all(bind=engine)

    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSessionLocal()

    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()
        os.unlink(db_path)


@pytest.fixture
def store(db_session):
    """SQLAlchemy-backed hotel store."""
    return SqlAlchemyHotelStore(db_session)


@pytest.fixture
def clock():
    """Clock frozen before the dates used in tests."""
    return FixedClock(datetime(2025, 9, 1, 12, 0, tzinfo=timezone.utc))


@pytest.fixture
def test_settings():
    """Settings independent of the environment."""
    return Settings(
        _env_file=None,
        default_search_radius_m=5000.0,
        default_page=1,
        default_page_limit=10,
        max_page_limit=100,
        special_price_range_strategy="atomic",
        allow_past_special_prices=False
    )


@pytest.fixture
def make_hotel(store):
    """Factory inserting hotels straight into the store."""
    def _make_hotel(
        name: str,
        latitude: float = CENTER_LAT,
        longitude: float = CENTER_LON,
        default_price: float = 100.0,
        rooms_available: int = 5
    ) -> Hotel:
        hotel = Hotel(
            name=name,
            name_key=hotel_name_key(name),
            latitude=latitude,
            longitude=longitude,
            address=f"{name} street",
            rooms_available=rooms_available,
            default_price_per_night=default_price,
            photos=[],
            amenities=["wifi"],
            created_by="admin",
            modified_by="admin"
        )
        return store.add_hotel(hotel)

    return _make_hotel


@pytest.fixture(scope="function")
def client(db_session, clock):
    """Create a test client."""
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_clock] = lambda: clock
    app.dependency_overrides[get_geocoder] = lambda: MockGeocoder()
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def sample_hotel_data():
    """Sample hotel payload for testing."""
    return {
        "name": "Hotel Lutetia",
        "coordinates": {"latitude": CENTER_LAT, "longitude": CENTER_LON},
        "rooms_available": 12,
        "default_price_per_night": 100.0,
        "photos": ["https://example.com/lutetia.jpg"],
        "amenities": ["wifi", "spa"]
    }
