"""Domain error taxonomy.

Every error carries a machine-readable ``kind`` and a human-readable
``message``. The API layer maps kinds to HTTP status codes.
"""
from datetime import date
from typing import Any, Dict, Optional


class HotelSearchError(Exception):
    """Base class for all domain errors."""

    kind = "internal"
    retryable = False

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind, "message": self.message}


class NotFoundError(HotelSearchError):
    kind = "not_found"


class InvalidInputError(HotelSearchError):
    kind = "invalid_input"


class InvalidRangeError(InvalidInputError):
    kind = "invalid_range"


class InvalidPriceError(HotelSearchError):
    kind = "invalid_price"


class ConflictError(HotelSearchError):
    kind = "conflict"


class InfrastructureError(HotelSearchError):
    """Store or network failure; safe to retry."""

    kind = "infrastructure"
    retryable = True


class SpecialPriceRangeError(InfrastructureError):
    """A per-date range upsert stopped part way through."""

    def __init__(self, message: str, failed_date: date, written_count: int):
        super().__init__(message)
        self.failed_date = failed_date
        self.written_count = written_count

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["failed_date"] = self.failed_date.isoformat()
        data["written_count"] = self.written_count
        return data


class InternalError(HotelSearchError):
    kind = "internal"


def not_found(entity: str, identifier: Optional[str]) -> NotFoundError:
    return NotFoundError(f"{entity} {identifier} not found")
