from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class UsageSummaryResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    salon_id: str = Field(alias="salonId")
    total_requests: int = Field(alias="totalRequests")
    booking_count: int = Field(alias="bookingCount")
    consultation_count: int = Field(alias="consultationCount")
    last_updated: Optional[datetime] = Field(default=None, alias="lastUpdated")
