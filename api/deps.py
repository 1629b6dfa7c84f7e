from __future__ import annotations

from dataclasses import dataclass

from fastapi import Request
from motor.motor_asyncio import AsyncIOMotorDatabase

from core.config import AppSettings
from repositories.booking_requests import BookingRequestRepository
from repositories.salons import SalonRepository
from repositories.usage import UsageRepository
from services.booking_intake import BookingIntakeService
from services.communication import EmailService
from services.notifications import NotificationDispatcher
from services.provider_matcher import ProviderMatcher
from services.sms import SmsService
from services.usage_tracker import UsageTracker


@dataclass
class ServiceContainer:
    salons: SalonRepository
    sms: SmsService
    email: EmailService
    usage_tracker: UsageTracker
    booking_intake: BookingIntakeService


def build_services(db: AsyncIOMotorDatabase, settings: AppSettings) -> ServiceContainer:
    """Wire every client once; called at application startup."""
    salons = SalonRepository(db)
    sms = SmsService(settings, timeout=settings.channel_timeout_seconds)
    email = EmailService(settings, timeout=settings.channel_timeout_seconds)
    usage_tracker = UsageTracker(UsageRepository(db))
    dispatcher = NotificationDispatcher(
        sms,
        email,
        ProviderMatcher(salons),
        dashboard_url=settings.dashboard_requests_url,
        channel_timeout=settings.channel_timeout_seconds,
    )
    booking_intake = BookingIntakeService(
        salons,
        BookingRequestRepository(db),
        dispatcher,
        usage_tracker,
        usage_actor=settings.usage_actor,
        store_timeout=settings.store_timeout_seconds,
        channel_timeout=settings.channel_timeout_seconds,
    )
    return ServiceContainer(
        salons=salons, sms=sms, email=email, usage_tracker=usage_tracker, booking_intake=booking_intake
    )


def get_services(request: Request) -> ServiceContainer:
    return request.app.state.services


def get_booking_intake(request: Request) -> BookingIntakeService:
    return get_services(request).booking_intake
