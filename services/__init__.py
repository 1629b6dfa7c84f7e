from __future__ import annotations

# Re-export key service classes for convenient imports
from .booking_intake import BookingIntakeService
from .communication import EmailService
from .notifications import NotificationDispatcher
from .provider_matcher import ProviderMatcher
from .sms import SmsService
from .usage_tracker import UsageTracker

__all__ = [
    "BookingIntakeService",
    "EmailService",
    "NotificationDispatcher",
    "ProviderMatcher",
    "SmsService",
    "UsageTracker",
]
