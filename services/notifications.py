"""
Booking notification fan-out.

A new booking request is pushed, in order, to the salon's enabled SMS
recipients, its enabled email recipients and, when the client asked for a
specific provider, to that provider's team-member phone. Every recipient is
attempted independently; failures are logged and collected as outcomes and
never raised to the caller.
"""

from __future__ import annotations

import asyncio
import html
import logging
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Iterable, List, Optional, Protocol, Tuple

from models.booking_request import BookingRequest
from models.salon import Salon
from services.provider_matcher import ProviderMatcher
from services.sms import format_phone_number, mask_phone

logger = logging.getLogger(__name__)

CHANNEL_SMS = "sms"
CHANNEL_EMAIL = "email"
CHANNEL_PROVIDER_SMS = "provider_sms"


class SmsSender(Protocol):
    def send(self, to_phone: str, body: str) -> bool: ...


class EmailSender(Protocol):
    def send(self, to_email: str, subject: str, body: str, html: str | None = None) -> Tuple[bool, str | None]: ...


class DeliveryError(Exception):
    """A transport reported that a message was not accepted."""


@dataclass(frozen=True)
class DeliveryOutcome:
    channel: str
    recipient: str
    delivered: bool
    error: Optional[str] = None


@dataclass
class DispatchReport:
    sms: List[DeliveryOutcome] = field(default_factory=list)
    email: List[DeliveryOutcome] = field(default_factory=list)
    provider: List[DeliveryOutcome] = field(default_factory=list)

    @property
    def outcomes(self) -> List[DeliveryOutcome]:
        return [*self.sms, *self.email, *self.provider]

    @property
    def delivered_count(self) -> int:
        return sum(1 for o in self.outcomes if o.delivered)

    @property
    def failed_count(self) -> int:
        return sum(1 for o in self.outcomes if not o.delivered)


async def attempt_all(
    recipients: Iterable[str],
    send: Callable[[str], Awaitable[None]],
    *,
    channel: str,
    timeout: Optional[float] = None,
) -> List[DeliveryOutcome]:
    """Attempt `send` for every recipient, collecting one outcome each.

    Never short-circuits: a raising or timed-out send becomes a failed
    outcome and the next recipient is still attempted.
    """
    outcomes: List[DeliveryOutcome] = []
    for recipient in recipients:
        try:
            if timeout:
                await asyncio.wait_for(send(recipient), timeout)
            else:
                await send(recipient)
        except asyncio.TimeoutError:
            outcome = DeliveryOutcome(channel, recipient, False, f"timed out after {timeout}s")
        except Exception as exc:
            outcome = DeliveryOutcome(channel, recipient, False, str(exc) or exc.__class__.__name__)
        else:
            outcome = DeliveryOutcome(channel, recipient, True)

        if outcome.delivered:
            logger.info("notification.delivered", extra={"channel": channel, "recipient": _log_recipient(outcome)})
        else:
            logger.error(
                "notification.failed",
                extra={"channel": channel, "recipient": _log_recipient(outcome), "error": outcome.error},
            )
        outcomes.append(outcome)
    return outcomes


def _log_recipient(outcome: DeliveryOutcome) -> str:
    if outcome.channel == CHANNEL_EMAIL:
        return outcome.recipient
    return mask_phone(outcome.recipient)


def build_salon_sms(dashboard_url: str) -> str:
    return f"New Booking Request: visit {dashboard_url} to view"


def build_provider_sms(provider_name: str, booking: BookingRequest) -> str:
    return (
        f"Hi {provider_name}, you have a new booking request from {booking.client_name} "
        f"for {booking.service} ({booking.date_time_preference}). Check your dashboard for details."
    )


def build_salon_email(salon: Salon, booking: BookingRequest, dashboard_url: str) -> Tuple[str, str, str]:
    """Returns (subject, text body, html body)."""
    subject = f"New Booking Request - {salon.name}"
    rows = [
        ("Client Name", booking.client_name),
        ("Service", booking.service),
        ("Stylist Preference", booking.stylist_preference),
        ("Requested Date/Time", booking.date_time_preference),
        ("Phone", booking.client_phone),
        ("Email", booking.client_email),
    ]
    if booking.notes:
        rows.append(("Notes", booking.notes))

    text_lines = [f"You have a new booking request at {salon.name}.", ""]
    text_lines += [f"{label}: {value}" for label, value in rows]
    text_lines += ["", f"Manage your requests: {dashboard_url}"]

    html_rows = "".join(
        f"<p><strong>{label}:</strong> {html.escape(str(value))}</p>" for label, value in rows
    )
    html_body = (
        f"<h2>New Booking Request</h2>"
        f"<p>You have a new booking request at {html.escape(salon.name)}.</p>"
        f"{html_rows}"
        f'<p><a href="{html.escape(dashboard_url, quote=True)}">View booking requests</a></p>'
    )
    return subject, "\n".join(text_lines), html_body


class NotificationDispatcher:
    def __init__(
        self,
        sms: SmsSender,
        email: EmailSender,
        provider_matcher: ProviderMatcher,
        *,
        dashboard_url: str,
        channel_timeout: Optional[float] = None,
    ) -> None:
        self.sms = sms
        self.email = email
        self.provider_matcher = provider_matcher
        self.dashboard_url = dashboard_url
        self.channel_timeout = channel_timeout

    async def _send_sms(self, phone: str, body: str) -> None:
        to_phone = format_phone_number(phone)
        if not to_phone:
            raise DeliveryError("recipient has no usable phone number")
        sent = await asyncio.to_thread(self.sms.send, to_phone, body)
        if not sent:
            raise DeliveryError("SMS gateway did not accept the message")

    async def _send_email(self, address: str, subject: str, body: str, html_body: str) -> None:
        if not address.strip():
            raise DeliveryError("recipient has no email address")
        ok, detail = await asyncio.to_thread(self.email.send, address, subject, body, html_body)
        if not ok:
            raise DeliveryError(detail or "email gateway did not accept the message")

    async def notify_sms_recipients(self, salon: Salon) -> List[DeliveryOutcome]:
        phones = [r.phone or "" for r in salon.notifications.enabled_sms_recipients]
        if not phones:
            logger.info("notification.no_sms_recipients", extra={"salon_id": salon.id})
            return []
        body = build_salon_sms(self.dashboard_url)
        return await attempt_all(
            phones, lambda phone: self._send_sms(phone, body), channel=CHANNEL_SMS, timeout=self.channel_timeout
        )

    async def notify_email_recipients(self, salon: Salon, booking: BookingRequest) -> List[DeliveryOutcome]:
        addresses = [r.email or "" for r in salon.notifications.enabled_email_recipients]
        if not addresses:
            logger.info("notification.no_email_recipients", extra={"salon_id": salon.id})
            return []
        subject, body, html_body = build_salon_email(salon, booking, self.dashboard_url)
        return await attempt_all(
            addresses,
            lambda address: self._send_email(address, subject, body, html_body),
            channel=CHANNEL_EMAIL,
            timeout=self.channel_timeout,
        )

    async def notify_requested_provider(self, salon: Salon, booking: BookingRequest) -> List[DeliveryOutcome]:
        try:
            lookup = self.provider_matcher.resolve(salon.id, booking.stylist_preference)
            if self.channel_timeout:
                contact = await asyncio.wait_for(lookup, self.channel_timeout)
            else:
                contact = await lookup
        except Exception as exc:
            logger.error(
                "notification.provider_lookup_failed",
                extra={"salon_id": salon.id, "preference": booking.stylist_preference, "error": str(exc)},
            )
            return []
        if contact is None:
            return []

        body = build_provider_sms(contact.provider.name, booking)
        return await attempt_all(
            [contact.phone],
            lambda phone: self._send_sms(phone, body),
            channel=CHANNEL_PROVIDER_SMS,
            timeout=self.channel_timeout,
        )

    async def dispatch(self, salon: Salon, booking: BookingRequest) -> DispatchReport:
        report = DispatchReport()
        report.sms = await self.notify_sms_recipients(salon)
        report.email = await self.notify_email_recipients(salon, booking)
        report.provider = await self.notify_requested_provider(salon, booking)
        logger.info(
            "notification.dispatch_complete",
            extra={
                "salon_id": salon.id,
                "request_id": booking.id,
                "delivered": report.delivered_count,
                "failed": report.failed_count,
            },
        )
        return report
