"""Hotel directory, special price and search API endpoints."""
from fastapi import APIRouter, Depends, status, Query
from sqlalchemy.orm import Session
from typing import Dict, List, Union
from datetime import date
from hotelsearch.backend.core.clock import Clock, get_clock
from hotelsearch.backend.core.security import get_current_actor
from hotelsearch.backend.db.session import get_db
from hotelsearch.backend.db.repository import SqlAlchemyHotelStore
from hotelsearch.backend.schemas.hotel import HotelCreate, HotelUpdate, Hotel as HotelSchema
from hotelsearch.backend.schemas.special_price import (
    SpecialPriceUpdate,
    SpecialPrice as SpecialPriceSchema,
    SpecialPriceRangeResult,
)
from hotelsearch.backend.schemas.search import HotelSearchRequest, HotelSearchResponse
from hotelsearch.backend.services.directory import HotelDirectoryService
from hotelsearch.backend.services.geocoding import GeocodingProvider, get_geocoder
from hotelsearch.backend.services.pricing import PriceResolutionService
from hotelsearch.backend.services.search import HotelSearchService
from hotelsearch.backend.services.special_prices import SpecialPriceService

router = APIRouter()


def get_directory_service(
    db: Session = Depends(get_db),
    geocoder: GeocodingProvider = Depends(get_geocoder)
) -> HotelDirectoryService:
    return HotelDirectoryService(SqlAlchemyHotelStore(db), geocoder)


@router.post("/hotels", response_model=HotelSchema, status_code=status.HTTP_201_CREATED)
async def create_hotel(
    hotel: HotelCreate,
    actor: str = Depends(get_current_actor),
    directory: HotelDirectoryService = Depends(get_directory_service)
):
    """Create a new hotel."""
    return await directory.create_hotel(hotel, actor)


@router.get("/hotels", response_model=List[HotelSchema])
async def list_hotels(
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=1000),
    directory: HotelDirectoryService = Depends(get_directory_service)
):
    """List hotels."""
    return directory.list_hotels(skip=skip, limit=limit)


@router.get("/hotels/{hotel_id}", response_model=HotelSchema)
async def get_hotel(
    hotel_id: str,
    directory: HotelDirectoryService = Depends(get_directory_service)
):
    """Get a specific hotel by ID."""
    return directory.get_hotel(hotel_id)


@router.put("/hotels/{hotel_id}", response_model=HotelSchema)
async def update_hotel(
    hotel_id: str,
    hotel_update: HotelUpdate,
    actor: str = Depends(get_current_actor),
    directory: HotelDirectoryService = Depends(get_directory_service)
):
    """Update a hotel."""
    return await directory.update_hotel(hotel_id, hotel_update, actor)


@router.post(
    "/hotels/special-prices",
    response_model=Union[SpecialPriceSchema, SpecialPriceRangeResult]
)
async def upsert_special_price(
    request: SpecialPriceUpdate,
    actor: str = Depends(get_current_actor),
    clock: Clock = Depends(get_clock),
    db: Session = Depends(get_db)
):
    """Set a special price for one date or an inclusive date range."""
    service = SpecialPriceService(SqlAlchemyHotelStore(db), clock=clock)

    if request.date is not None:
        return service.upsert_one(
            request.hotel_id,
            request.date,
            request.price,
            request.special_price_reason,
            actor
        )

    dates_written = service.upsert_range(
        request.hotel_id,
        request.start_date,
        request.end_date,
        request.price,
        request.special_price_reason,
        actor
    )
    return SpecialPriceRangeResult(
        hotel_id=request.hotel_id,
        start_date=request.start_date,
        end_date=request.end_date,
        dates_written=dates_written
    )


@router.get("/hotels/{hotel_id}/prices", response_model=Dict[str, float])
async def get_hotel_prices(
    hotel_id: str,
    from_date: date = Query(..., description="Check-in date"),
    to_date: date = Query(..., description="Check-out date (not priced)"),
    db: Session = Depends(get_db)
):
    """Nightly prices for a stay at one hotel."""
    return PriceResolutionService(SqlAlchemyHotelStore(db)).resolve_prices(hotel_id, from_date, to_date)


@router.post("/hotels/search", response_model=HotelSearchResponse)
async def search_hotels(
    request: HotelSearchRequest,
    clock: Clock = Depends(get_clock),
    db: Session = Depends(get_db)
):
    """Search hotels near a point with nightly prices for the stay."""
    service = HotelSearchService(SqlAlchemyHotelStore(db), clock=clock)
    return service.search(
        latitude=request.latitude,
        longitude=request.longitude,
        from_date=request.from_date,
        to_date=request.to_date,
        radius_m=request.radius,
        name_filter=request.name,
        page=request.page,
        limit=request.limit
    )
