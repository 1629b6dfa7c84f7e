from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .base import MongoModel


class SmsRecipient(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)

    phone: Optional[str] = None
    enabled: Optional[bool] = True


class EmailRecipient(BaseModel):
    email: Optional[str] = None
    enabled: Optional[bool] = True


class NotificationSettings(BaseModel):
    email: bool = False
    sms: bool = False
    booking_confirmation: bool = False
    booking_reminders: bool = False
    sms_recipients: List[SmsRecipient] = Field(default_factory=list)
    email_recipients: List[EmailRecipient] = Field(default_factory=list)

    # A stored null is the same as an absent list; non-object entries are dropped
    @field_validator("sms_recipients", "email_recipients", mode="before")
    @classmethod
    def _none_as_empty(cls, value):
        if value is None:
            return []
        if isinstance(value, list):
            return [entry for entry in value if isinstance(entry, dict)]
        return value

    @property
    def enabled_sms_recipients(self) -> List[SmsRecipient]:
        return [r for r in self.sms_recipients if r.enabled]

    @property
    def enabled_email_recipients(self) -> List[EmailRecipient]:
        return [r for r in self.email_recipients if r.enabled]


class SalonSettings(BaseModel):
    notifications: NotificationSettings = Field(default_factory=NotificationSettings)

    @field_validator("notifications", mode="before")
    @classmethod
    def _none_as_default(cls, value):
        return {} if value is None else value


class Salon(MongoModel):
    name: str
    slug: str
    booking_url: Optional[str] = None
    settings: SalonSettings = Field(default_factory=SalonSettings)

    @field_validator("settings", mode="before")
    @classmethod
    def _none_as_default(cls, value):
        return {} if value is None else value

    @property
    def notifications(self) -> NotificationSettings:
        return self.settings.notifications
