from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from api.deps import get_booking_intake
from schemas.booking import BookingResponse
from services.booking_intake import BookingIntakeError, BookingIntakeService


router = APIRouter(tags=["booking"])
logger = logging.getLogger(__name__)


@router.post("/booking", response_model=BookingResponse)
async def submit_booking_request(
    request: Request, intake: BookingIntakeService = Depends(get_booking_intake)
) -> JSONResponse:
    try:
        payload = await request.json()
        result = await intake.submit(payload)
    except BookingIntakeError as exc:
        body = BookingResponse(success=False, message=exc.message)
        if exc.status_code >= 500:
            body.error = exc.detail or exc.message
        else:
            logger.info("booking.rejected", extra={"status_code": exc.status_code, "reason": exc.detail})
        return JSONResponse(status_code=exc.status_code, content=body.to_content())
    except Exception as exc:
        logger.exception("booking.unhandled_error")
        body = BookingResponse(success=False, message="Internal server error", error=str(exc) or exc.__class__.__name__)
        return JSONResponse(status_code=500, content=body.to_content())

    body = BookingResponse(
        success=True, message="Booking request submitted successfully", request_id=result.request_id
    )
    return JSONResponse(status_code=200, content=body.to_content())
