"""
SMS sender using the Twilio Programmable SMS REST API.
"""

from __future__ import annotations

import logging
import re

import requests

from core.config import AppSettings

logger = logging.getLogger(__name__)

TWILIO_MESSAGES_URL = "https://api.twilio.com/2010-04-01/Accounts/{account_sid}/Messages.json"
TEST_SMS_MESSAGE = "Test SMS from Salon Booking System - SMS notifications are working!"

_NON_DIGITS = re.compile(r"\D")


def format_phone_number(raw: str) -> str:
    """Normalize a phone number to E.164 (+<country><number>).

    Numbers without a leading '+' are assumed to be North American:
    10 digits get a +1 prefix and 11 digits starting with 1 get a '+'.
    """
    if not raw:
        return ""
    stripped = raw.strip()
    digits = _NON_DIGITS.sub("", stripped)
    if not digits:
        return ""
    if stripped.startswith("+"):
        return f"+{digits}"
    if len(digits) == 11 and digits.startswith("1"):
        return f"+{digits}"
    return f"+1{digits}"


def is_valid_phone_number(raw: str) -> bool:
    if not raw:
        return False
    digits = _NON_DIGITS.sub("", raw)
    if raw.strip().startswith("+"):
        return 8 <= len(digits) <= 15
    return len(digits) in (10, 11)


def mask_phone(phone: str) -> str:
    return f"{phone[:6]}***" if phone else phone


class SmsService:
    """Twilio SMS sender. `send` never raises; it reports success as a bool."""

    def __init__(self, settings: AppSettings, *, timeout: float = 10.0) -> None:
        self.account_sid = settings.twilio_account_sid
        self.auth_token = settings.twilio_auth_token
        self.from_number = settings.twilio_phone_number
        self.timeout = timeout

    @property
    def configured(self) -> bool:
        return bool(self.account_sid and self.auth_token and self.from_number)

    def send(self, to_phone: str, body: str) -> bool:
        if not self.configured:
            logger.warning("sms.not_configured", extra={"to": mask_phone(to_phone)})
            return False

        to_formatted = format_phone_number(to_phone)
        if not to_formatted:
            logger.error("sms.invalid_number", extra={"to": to_phone})
            return False

        url = TWILIO_MESSAGES_URL.format(account_sid=self.account_sid)
        data = {
            "To": to_formatted,
            "From": format_phone_number(self.from_number),
            "Body": body,
        }
        try:
            response = requests.post(
                url, data=data, auth=(self.account_sid, self.auth_token), timeout=self.timeout
            )
            response.raise_for_status()
        except requests.HTTPError as exc:
            logger.error(
                "sms.twilio_error",
                extra={"to": mask_phone(to_formatted), "status_code": exc.response.status_code, "error": exc.response.text},
            )
            return False
        except requests.RequestException as exc:
            logger.error("sms.request_failed", extra={"to": mask_phone(to_formatted), "error": str(exc)})
            return False

        try:
            sid = response.json().get("sid")
        except (ValueError, AttributeError):
            sid = None
        logger.info("sms.sent", extra={"to": mask_phone(to_formatted), "sid": sid})
        return True

    def send_test(self, to_phone: str) -> bool:
        return self.send(to_phone, TEST_SMS_MESSAGE)
