from __future__ import annotations

import asyncio
import logging

from fastapi import APIRouter, Depends, HTTPException

from api.deps import ServiceContainer, get_services
from schemas.notifications import (
    ChannelTestRequest,
    ChannelTestResponse,
    NotificationSettingsView,
    NotificationTestRequest,
    NotificationTestResponse,
    SalonSummary,
)
from schemas.usage import UsageSummaryResponse
from services.sms import is_valid_phone_number


router = APIRouter(tags=["notifications"])
logger = logging.getLogger(__name__)


@router.post("/notifications/test", response_model=NotificationTestResponse)
async def inspect_notification_settings(
    payload: NotificationTestRequest, services: ServiceContainer = Depends(get_services)
) -> NotificationTestResponse:
    if not payload.salon_slug:
        raise HTTPException(status_code=400, detail="Salon slug is required")

    salon = await services.salons.get_salon_by_slug(payload.salon_slug)
    if salon is None:
        raise HTTPException(status_code=404, detail="Salon not found")

    notifications = salon.notifications
    return NotificationTestResponse(
        salon=SalonSummary(id=salon.id, name=salon.name, slug=salon.slug),
        notification_settings=NotificationSettingsView(
            email=notifications.email,
            sms=notifications.sms,
            booking_confirmation=notifications.booking_confirmation,
            booking_reminders=notifications.booking_reminders,
            sms_recipients=notifications.sms_recipients,
            email_recipients=notifications.email_recipients,
        ),
        enabled_sms_recipients=notifications.enabled_sms_recipients,
        enabled_email_recipients=notifications.enabled_email_recipients,
    )


@router.post("/sms/test", response_model=ChannelTestResponse)
async def send_test_sms(
    payload: ChannelTestRequest, services: ServiceContainer = Depends(get_services)
) -> ChannelTestResponse:
    if not payload.to:
        raise HTTPException(status_code=400, detail="Missing required field: to")
    if not is_valid_phone_number(payload.to):
        raise HTTPException(
            status_code=400, detail="Invalid phone number format. Use E.164 format (e.g., +1234567890)"
        )

    sent = await asyncio.to_thread(services.sms.send_test, payload.to)
    if not sent:
        raise HTTPException(status_code=500, detail="Failed to send SMS")
    return ChannelTestResponse(success=True, message="SMS sent successfully")


@router.post("/email/test", response_model=ChannelTestResponse)
async def send_test_email(
    payload: ChannelTestRequest, services: ServiceContainer = Depends(get_services)
) -> ChannelTestResponse:
    if not payload.to or "@" not in payload.to:
        raise HTTPException(status_code=400, detail="A valid recipient email is required")

    ok, detail = await asyncio.to_thread(services.email.send_test, payload.to)
    if not ok:
        logger.error("email.test_failed", extra={"to": payload.to, "error": detail})
        raise HTTPException(status_code=500, detail="Failed to send test email")
    return ChannelTestResponse(success=True, message="Test email sent successfully")


@router.get("/salons/{salon_id}/usage", response_model=UsageSummaryResponse)
async def get_usage_summary(salon_id: str, services: ServiceContainer = Depends(get_services)) -> UsageSummaryResponse:
    summary = await services.usage_tracker.get_usage_summary(salon_id)
    return UsageSummaryResponse(
        salon_id=summary.salon_id,
        total_requests=summary.total_requests,
        booking_count=summary.booking_count,
        consultation_count=summary.consultation_count,
        last_updated=summary.last_updated,
    )
