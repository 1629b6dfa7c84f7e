from __future__ import annotations

from enum import Enum
from typing import Optional

from .base import MongoModel, PyObjectId


# Stylist preference meaning "no specific provider"
NO_PROVIDER_PREFERENCE = "Any service provider"


class BookingRequestStatus(str, Enum):
    pending = "pending"
    provider_requested = "provider-requested"
    booked = "booked"
    not_booked = "not-booked"


class BookingRequest(MongoModel):
    client_name: str
    client_email: str = ""
    client_phone: str = ""
    service: str
    stylist_preference: str = NO_PROVIDER_PREFERENCE
    date_time_preference: str
    notes: str = ""
    waitlist_opt_in: bool = False
    status: BookingRequestStatus = BookingRequestStatus.pending
    salon_id: PyObjectId
    provider_id: Optional[str] = None
    provider_name: Optional[str] = None
