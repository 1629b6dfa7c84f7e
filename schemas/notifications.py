from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from models.salon import EmailRecipient, SmsRecipient


class NotificationTestRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    salon_slug: Optional[str] = Field(default=None, alias="salonSlug")


class SalonSummary(BaseModel):
    id: str
    name: str
    slug: str


class NotificationSettingsView(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    email: bool
    sms: bool
    booking_confirmation: bool = Field(alias="bookingConfirmation")
    booking_reminders: bool = Field(alias="bookingReminders")
    sms_recipients: List[SmsRecipient] = Field(alias="smsRecipients")
    email_recipients: List[EmailRecipient] = Field(alias="emailRecipients")


class NotificationTestResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    salon: SalonSummary
    notification_settings: NotificationSettingsView = Field(alias="notificationSettings")
    enabled_sms_recipients: List[SmsRecipient] = Field(alias="enabledSmsRecipients")
    enabled_email_recipients: List[EmailRecipient] = Field(alias="enabledEmailRecipients")


class ChannelTestRequest(BaseModel):
    to: Optional[str] = None


class ChannelTestResponse(BaseModel):
    success: bool
    message: str
