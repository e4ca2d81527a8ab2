"""Special price Pydantic schemas."""
from pydantic import BaseModel, Field, model_validator
from typing import Optional
from datetime import date as date_type, datetime


class SpecialPriceUpdate(BaseModel):
    """Upsert request for a single date or an inclusive date range."""
    hotel_id: str = Field(..., description="Hotel ID")
    price: float = Field(..., ge=0, description="Special price per night")
    special_price_reason: str = Field(..., min_length=1, max_length=200, description="Why the price differs")
    date: Optional[date_type] = Field(None, description="Single night to override")
    start_date: Optional[date_type] = Field(None, description="First night of the range (inclusive)")
    end_date: Optional[date_type] = Field(None, description="Last night of the range (inclusive)")

    @model_validator(mode="after")
    def check_date_or_range(self):
        has_range = self.start_date is not None or self.end_date is not None
        if self.date is not None and has_range:
            raise ValueError("Provide either date or start_date/end_date, not both")
        if self.date is None and not has_range:
            raise ValueError("Provide either date or start_date/end_date")
        if has_range and (self.start_date is None or self.end_date is None):
            raise ValueError("start_date and end_date must be provided together")
        return self


class SpecialPrice(BaseModel):
    """Schema for special price response."""
    id: str
    hotel_id: str
    date: date_type
    special_price_per_night: float
    special_price_reason: str
    created_by: str
    modified_by: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class SpecialPriceRangeResult(BaseModel):
    """Outcome of a range upsert."""
    hotel_id: str
    start_date: date_type
    end_date: date_type
    dates_written: int = Field(..., ge=0, description="Number of nights written")
