"""
Booking request intake.

Validates a public booking submission, resolves the salon, persists the
request, records one billable usage unit and fans the booking out to the
salon's notification channels. Only validation, salon resolution and
persistence can fail the request; metering and notifications are logged
and ignored.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Dict, Mapping, Optional, Protocol, TypeVar

from pydantic import ValidationError

from models.booking_request import NO_PROVIDER_PREFERENCE, BookingRequest, BookingRequestStatus
from models.salon import Salon
from models.usage import UsageType
from schemas.booking import BookingSubmission
from services.notifications import DispatchReport, NotificationDispatcher
from services.usage_tracker import UsageTracker

logger = logging.getLogger(__name__)

T = TypeVar("T")

REQUIRED_FIELDS = ("service", "dateTimePreference", "name", "salonSlug")
CONTACT_FIELDS = ("email", "phone")


class BookingIntakeError(Exception):
    status_code: int = 500
    message: str = "Internal server error"

    def __init__(self, detail: Optional[str] = None) -> None:
        super().__init__(detail or self.message)
        self.detail = detail


class MissingFieldsError(BookingIntakeError):
    status_code = 400
    message = "Missing required fields"


class MissingContactFieldsError(BookingIntakeError):
    status_code = 400
    message = "Email and phone are required for regular submissions"


class SalonNotFoundError(BookingIntakeError):
    status_code = 404
    message = "Salon not found"


class BookingPersistenceError(BookingIntakeError):
    status_code = 500
    message = "Internal server error"


class SalonLookup(Protocol):
    async def get_salon_by_slug(self, slug: str) -> Optional[Salon]: ...


class BookingStore(Protocol):
    async def create_booking_request(self, booking_data: Dict[str, Any]) -> str: ...


def _is_blank(value: Any) -> bool:
    return value is None or value == ""


def validate_booking_payload(payload: Any) -> BookingSubmission:
    if not isinstance(payload, Mapping):
        raise MissingFieldsError()
    missing = [name for name in REQUIRED_FIELDS if _is_blank(payload.get(name))]
    if missing:
        raise MissingFieldsError(f"missing: {', '.join(missing)}")

    submitted_by_provider = bool(payload.get("submittedByProvider"))
    if not submitted_by_provider:
        missing_contact = [name for name in CONTACT_FIELDS if _is_blank(payload.get(name))]
        if missing_contact:
            raise MissingContactFieldsError(f"missing: {', '.join(missing_contact)}")

    cleaned = {k: v for k, v in payload.items() if v is not None}
    cleaned["submittedByProvider"] = submitted_by_provider
    try:
        return BookingSubmission.model_validate(cleaned)
    except ValidationError as exc:
        raise MissingFieldsError(str(exc)) from exc


def build_booking_request(submission: BookingSubmission, salon_id: str) -> BookingRequest:
    staff_filed = submission.submitted_by_provider
    return BookingRequest(
        client_name=submission.name,
        client_email=submission.email or "",
        client_phone=submission.phone or "",
        service=submission.service,
        stylist_preference=submission.stylist or NO_PROVIDER_PREFERENCE,
        date_time_preference=submission.date_time_preference,
        notes=submission.notes or "",
        waitlist_opt_in=submission.waitlist_opt_in,
        status=BookingRequestStatus.provider_requested if staff_filed else BookingRequestStatus.pending,
        salon_id=salon_id,
        provider_id=submission.provider_id or None,
        provider_name=submission.provider_name or None,
    )


def to_document(booking: BookingRequest) -> Dict[str, Any]:
    # Optional provider fields are omitted rather than stored as null
    return booking.model_dump(mode="json", exclude_none=True, exclude={"id", "created_at", "updated_at"})


@dataclass
class BookingIntakeResult:
    request_id: str
    salon_id: str
    usage_recorded: bool
    notifications: Optional[DispatchReport]


class BookingIntakeService:
    def __init__(
        self,
        salons: SalonLookup,
        booking_requests: BookingStore,
        dispatcher: NotificationDispatcher,
        usage_tracker: Optional[UsageTracker] = None,
        *,
        usage_actor: str = "system",
        store_timeout: Optional[float] = None,
        channel_timeout: Optional[float] = None,
    ) -> None:
        self.salons = salons
        self.booking_requests = booking_requests
        self.dispatcher = dispatcher
        self.usage_tracker = usage_tracker
        self.usage_actor = usage_actor
        self.store_timeout = store_timeout
        self.channel_timeout = channel_timeout

    @staticmethod
    async def _bounded(call: Awaitable[T], timeout: Optional[float]) -> T:
        if timeout:
            return await asyncio.wait_for(call, timeout)
        return await call

    async def resolve_salon(self, slug: str) -> Salon:
        salon = await self._bounded(self.salons.get_salon_by_slug(slug), self.store_timeout)
        if salon is None:
            logger.warning("booking.salon_not_found", extra={"salon_slug": slug})
            raise SalonNotFoundError()
        return salon

    async def persist(self, booking: BookingRequest) -> str:
        try:
            request_id = await self._bounded(
                self.booking_requests.create_booking_request(to_document(booking)), self.store_timeout
            )
        except asyncio.TimeoutError as exc:
            logger.error("booking.persist_timeout", extra={"salon_id": booking.salon_id, "timeout": self.store_timeout})
            raise BookingPersistenceError(f"booking store timed out after {self.store_timeout}s") from exc
        except Exception as exc:
            logger.exception("booking.persist_failed", extra={"salon_id": booking.salon_id})
            raise BookingPersistenceError(str(exc)) from exc
        return str(request_id)

    async def record_usage(self, salon_id: str, request_id: str) -> bool:
        if self.usage_tracker is None:
            logger.warning("booking.usage_tracker_unavailable", extra={"salon_id": salon_id, "request_id": request_id})
            return False
        try:
            await self._bounded(
                self.usage_tracker.record_usage(salon_id, UsageType.booking, self.usage_actor, request_id),
                self.channel_timeout,
            )
        except Exception as exc:
            logger.error(
                "booking.usage_failed",
                extra={"salon_id": salon_id, "request_id": request_id, "error": str(exc) or exc.__class__.__name__},
            )
            return False
        return True

    async def notify(self, salon: Salon, booking: BookingRequest) -> Optional[DispatchReport]:
        try:
            return await self.dispatcher.dispatch(salon, booking)
        except Exception as exc:
            logger.exception("booking.dispatch_failed", extra={"request_id": booking.id, "error": str(exc)})
            return None

    async def submit(self, payload: Any) -> BookingIntakeResult:
        submission = validate_booking_payload(payload)
        logger.info(
            "booking.received",
            extra={"salon_slug": submission.salon_slug, "submitted_by_provider": submission.submitted_by_provider},
        )

        salon = await self.resolve_salon(submission.salon_slug)
        booking = build_booking_request(submission, salon.id)
        request_id = await self.persist(booking)
        booking = booking.model_copy(update={"id": request_id})
        logger.info("booking.created", extra={"request_id": request_id, "salon_id": salon.id, "status": booking.status.value})

        usage_recorded = await self.record_usage(salon.id, request_id)
        report = await self.notify(salon, booking)
        return BookingIntakeResult(
            request_id=request_id, salon_id=salon.id, usage_recorded=usage_recorded, notifications=report
        )
