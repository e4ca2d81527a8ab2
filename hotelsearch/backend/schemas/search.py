"""Hotel search Pydantic schemas."""
from pydantic import BaseModel, Field
from typing import Dict, List, Optional
from datetime import date
from hotelsearch.backend.schemas.hotel import Location


class HotelSearchRequest(BaseModel):
    """Search parameters. Range checks are repeated by the search service."""
    name: Optional[str] = Field(None, min_length=1, max_length=100, description="Case-insensitive name filter")
    latitude: float = Field(..., description="Center latitude")
    longitude: float = Field(..., description="Center longitude")
    radius: Optional[float] = Field(None, description="Search radius in meters")
    from_date: date = Field(..., description="Check-in date")
    to_date: date = Field(..., description="Check-out date (not priced)")
    page: Optional[int] = Field(None, description="1-based page number")
    limit: Optional[int] = Field(None, description="Page size")


class HotelSearchResult(BaseModel):
    """A hotel in search results with its distance and nightly prices."""
    id: str
    name: str
    location: Location
    address: Optional[str]
    rooms_available: int
    default_price_per_night: float
    photos: List[str]
    amenities: List[str]
    distance: float = Field(..., ge=0, description="Distance from center in meters")
    price_by_dates: Dict[str, float] = Field(..., description="ISO date -> price for each night")


class HotelSearchResponse(BaseModel):
    """A page of search results."""
    page: int
    limit: int
    total_count: int = Field(..., ge=0, description="Qualifying hotels before pagination")
    results: List[HotelSearchResult]
