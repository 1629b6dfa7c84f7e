from .salon import Salon, NotificationSettings, SmsRecipient, EmailRecipient
from .provider import Provider, TeamMember
from .booking_request import BookingRequest, BookingRequestStatus, NO_PROVIDER_PREFERENCE
from .usage import UsageMetric, UsageSummary, UsageType

__all__ = [
    "Salon",
    "NotificationSettings",
    "SmsRecipient",
    "EmailRecipient",
    "Provider",
    "TeamMember",
    "BookingRequest",
    "BookingRequestStatus",
    "NO_PROVIDER_PREFERENCE",
    "UsageMetric",
    "UsageSummary",
    "UsageType",
]
