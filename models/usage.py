from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel

from .base import MongoModel, PyObjectId


class UsageType(str, Enum):
    booking = "booking"
    consultation = "consultation"


class UsageMetric(MongoModel):
    salon_id: PyObjectId
    type: UsageType
    user_id: str
    request_id: str
    timestamp: datetime


class UsageSummary(BaseModel):
    salon_id: str
    total_requests: int = 0
    booking_count: int = 0
    consultation_count: int = 0
    last_updated: Optional[datetime] = None
