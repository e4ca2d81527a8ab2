"""Exception handlers mapping domain errors to HTTP responses."""
import logging
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from hotelsearch.backend.core.errors import HotelSearchError, InternalError

logger = logging.getLogger(__name__)

STATUS_BY_KIND = {
    "not_found": 404,
    "invalid_input": 400,
    "invalid_range": 400,
    "invalid_price": 400,
    "conflict": 409,
    "infrastructure": 503,
    "internal": 500,
}


async def hotel_search_error_handler(_request: Request, exc: HotelSearchError) -> JSONResponse:
    status_code = STATUS_BY_KIND.get(exc.kind, 500)
    if status_code >= 500:
        logger.error("%s error: %s", exc.kind, exc.message)
    else:
        logger.warning("%s error: %s", exc.kind, exc.message)
    return JSONResponse(status_code=status_code, content=exc.to_dict())


async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content=InternalError("Unexpected error").to_dict())


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(HotelSearchError, hotel_search_error_handler)
    app.add_exception_handler(Exception, unexpected_error_handler)
