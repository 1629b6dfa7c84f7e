from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class BookingSubmission(BaseModel):
    """Public booking form payload (camelCase on the wire)."""

    model_config = ConfigDict(populate_by_name=True, coerce_numbers_to_str=True, extra="ignore")

    service: str
    stylist: Optional[str] = None
    date_time_preference: str = Field(alias="dateTimePreference")
    name: str
    phone: Optional[str] = None
    email: Optional[str] = None
    notes: Optional[str] = None
    waitlist_opt_in: bool = Field(default=False, alias="waitlistOptIn")
    salon_slug: str = Field(alias="salonSlug")
    submitted_by_provider: bool = Field(default=False, alias="submittedByProvider")
    provider_id: Optional[str] = Field(default=None, alias="providerId")
    provider_name: Optional[str] = Field(default=None, alias="providerName")


class BookingResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool
    message: str
    request_id: Optional[str] = Field(default=None, alias="requestId")
    error: Optional[str] = None

    def to_content(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)
