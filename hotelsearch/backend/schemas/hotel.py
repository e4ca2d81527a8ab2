"""Hotel Pydantic schemas."""
from pydantic import BaseModel, Field, model_validator
from typing import Optional, List
from datetime import datetime


class Coordinates(BaseModel):
    """Coordinates as submitted by clients."""
    latitude: float = Field(..., ge=-90, le=90, description="Latitude in degrees")
    longitude: float = Field(..., ge=-180, le=180, description="Longitude in degrees")


class Location(BaseModel):
    """Stored hotel point, longitude first."""
    lon: float
    lat: float


class HotelCreate(BaseModel):
    """Schema for creating a hotel."""
    name: str = Field(..., min_length=3, max_length=100, description="Hotel name")
    coordinates: Coordinates
    address: Optional[str] = Field(None, max_length=200, description="Address, replaced by the geocoded one")
    rooms_available: int = Field(..., ge=0, description="Rooms currently available")
    default_price_per_night: float = Field(..., gt=0, description="Default price per night")
    photos: List[str] = Field(default_factory=list, description="Photo URLs or paths")
    amenities: List[str] = Field(default_factory=list, description="Amenity tags")


class HotelUpdate(BaseModel):
    """Schema for a partial hotel update."""
    name: Optional[str] = Field(None, min_length=3, max_length=100)
    coordinates: Optional[Coordinates] = None
    address: Optional[str] = Field(None, max_length=200)
    rooms_available: Optional[int] = Field(None, ge=0)
    default_price_per_night: Optional[float] = Field(None, gt=0)
    photos: Optional[List[str]] = None
    amenities: Optional[List[str]] = None

    @model_validator(mode="after")
    def check_not_empty(self):
        if not self.model_dump(exclude_unset=True):
            raise ValueError("At least one field must be provided")
        return self


class Hotel(BaseModel):
    """Schema for hotel response."""
    id: str
    name: str
    location: Location
    address: Optional[str]
    rooms_available: int
    default_price_per_night: float
    photos: List[str]
    amenities: List[str]
    created_by: str
    modified_by: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class GeocodeResult(BaseModel):
    """Reverse geocoding outcome for a coordinate pair."""
    valid: bool
    address: Optional[str] = None
    city: Optional[str] = None
    country: Optional[str] = None
