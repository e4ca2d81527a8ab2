"""SQLAlchemy 2.0 database models."""
from sqlalchemy import Column, String, Integer, Date, DateTime, ForeignKey, JSON, Float, UniqueConstraint
from sqlalchemy.orm import relationship, declarative_base
from datetime import datetime
import uuid


Base = declarative_base()


class Hotel(Base):
    """Hotel model."""
    __tablename__ = "hotels"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String, nullable=False)
    name_key = Column(String, nullable=False, unique=True, index=True)  # lower(trim(name))
    longitude = Column(Float, nullable=False)
    latitude = Column(Float, nullable=False)
    address = Column(String, nullable=True)
    rooms_available = Column(Integer, nullable=False, default=0)
    default_price_per_night = Column(Float, nullable=False)
    photos = Column(JSON, default=list)
    amenities = Column(JSON, default=list)
    created_by = Column(String, nullable=False)
    modified_by = Column(String, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    special_prices = relationship("SpecialPrice", back_populates="hotel")

    @property
    def location(self) -> dict:
        """GeoJSON-style point, longitude first."""
        return {"lon": self.longitude, "lat": self.latitude}


class SpecialPrice(Base):
    """Per-date price override for a hotel."""
    __tablename__ = "special_prices"
    __table_args__ = (
        UniqueConstraint("hotel_id", "date", name="uq_special_prices_hotel_date"),
    )

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    hotel_id = Column(String, ForeignKey("hotels.id"), nullable=False, index=True)
    date = Column(Date, nullable=False, index=True)
    special_price_per_night = Column(Float, nullable=False)
    special_price_reason = Column(String, nullable=False)
    created_by = Column(String, nullable=False)
    modified_by = Column(String, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    hotel = relationship("Hotel", back_populates="special_prices")


def hotel_name_key(name: str) -> str:
    """Dedup key for hotel identity: case-insensitive, trimmed name."""
    return name.strip().lower()
