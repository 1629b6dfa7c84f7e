"""
Shared fixtures: in-memory stand-ins for the salon directory, booking store,
usage tracker and the SMS / email transports, plus an HTTP client bound to
the FastAPI app with those collaborators injected.
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional

import pytest
from httpx import ASGITransport, AsyncClient

from api.deps import ServiceContainer, get_booking_intake, get_services
from models.provider import Provider, TeamMember
from models.salon import Salon
from models.usage import UsageSummary
from services.booking_intake import BookingIntakeService
from services.notifications import NotificationDispatcher
from services.provider_matcher import ProviderMatcher

DASHBOARD_URL = "https://app.test/dashboard/requests"


def make_salon(
    *,
    salon_id: str = "salon-acme",
    name: str = "Acme Salon",
    slug: str = "acme",
    sms_recipients: Optional[List[Dict[str, Any]]] = None,
    email_recipients: Optional[List[Dict[str, Any]]] = None,
) -> Salon:
    notifications: Dict[str, Any] = {"email": True, "sms": True}
    if sms_recipients is not None:
        notifications["sms_recipients"] = sms_recipients
    if email_recipients is not None:
        notifications["email_recipients"] = email_recipients
    return Salon(_id=salon_id, name=name, slug=slug, settings={"notifications": notifications})


def make_payload(**overrides) -> Dict[str, Any]:
    data = {
        "service": "Haircut",
        "dateTimePreference": "tomorrow 2pm",
        "name": "Jane",
        "phone": "555-1212",
        "email": "j@x.com",
        "salonSlug": "acme",
    }
    data.update(overrides)
    return data


class FakeSalonDirectory:
    def __init__(self, salons=(), providers=(), team_members=()) -> None:
        self.salons = {s.slug: s for s in salons}
        self.providers = list(providers)
        self.team_members = list(team_members)
        self.slug_lookups: List[str] = []
        self.provider_lookups: List[str] = []
        self.team_member_lookups: List[str] = []

    async def get_salon_by_slug(self, slug: str) -> Optional[Salon]:
        self.slug_lookups.append(slug)
        return self.salons.get(slug)

    async def get_providers(self, salon_id: str) -> List[Provider]:
        self.provider_lookups.append(salon_id)
        return [p for p in self.providers if p.salon_id == salon_id]

    async def get_team_members(self, salon_id: str) -> List[TeamMember]:
        self.team_member_lookups.append(salon_id)
        return [m for m in self.team_members if m.salon_id == salon_id]


class FakeBookingStore:
    def __init__(self, error: Optional[Exception] = None) -> None:
        self.error = error
        self.documents: List[Dict[str, Any]] = []

    async def create_booking_request(self, booking_data: Dict[str, Any]) -> str:
        if self.error is not None:
            raise self.error
        self.documents.append(booking_data)
        return f"req-{len(self.documents)}"


class FakeUsageTracker:
    def __init__(self, error: Optional[Exception] = None) -> None:
        self.error = error
        self.calls: List[tuple] = []

    async def record_usage(self, salon_id, kind, actor, reference_id) -> str:
        self.calls.append((salon_id, kind, actor, reference_id))
        if self.error is not None:
            raise self.error
        return f"usage-{len(self.calls)}"

    async def get_usage_summary(self, salon_id: str) -> UsageSummary:
        return UsageSummary(salon_id=salon_id, total_requests=len(self.calls), booking_count=len(self.calls))


class FakeSms:
    """Records every attempt; numbers in `failing` raise, in `rejecting` return False."""

    def __init__(self, failing=(), rejecting=()) -> None:
        self.failing = set(failing)
        self.rejecting = set(rejecting)
        self.attempts: List[tuple] = []

    def send(self, to_phone: str, body: str) -> bool:
        self.attempts.append((to_phone, body))
        if to_phone in self.failing:
            raise RuntimeError(f"gateway down for {to_phone}")
        return to_phone not in self.rejecting

    def send_test(self, to_phone: str) -> bool:
        return self.send(to_phone, "test")

    @property
    def delivered(self) -> List[tuple]:
        return [a for a in self.attempts if a[0] not in self.failing | self.rejecting]


class FakeEmail:
    def __init__(self, failing=()) -> None:
        self.failing = set(failing)
        self.attempts: List[Dict[str, Any]] = []

    def send(self, to_email: str, subject: str, body: str, html: str | None = None):
        self.attempts.append({"to": to_email, "subject": subject, "body": body, "html": html})
        if to_email in self.failing:
            raise ConnectionError("smtp unavailable")
        return True, "<msg@test>"

    def send_test(self, to_email: str):
        return self.send(to_email, "Test", "test")


@pytest.fixture
def salon() -> Salon:
    return make_salon(
        sms_recipients=[
            {"phone": "5550001111", "enabled": True},
            {"phone": "+44 20 7946 0000", "enabled": True},
        ],
        email_recipients=[{"email": "owner@acme.test", "enabled": False}],
    )


@pytest.fixture
def directory(salon) -> FakeSalonDirectory:
    return FakeSalonDirectory(salons=[salon])


@pytest.fixture
def store() -> FakeBookingStore:
    return FakeBookingStore()


@pytest.fixture
def usage() -> FakeUsageTracker:
    return FakeUsageTracker()


@pytest.fixture
def sms() -> FakeSms:
    return FakeSms()


@pytest.fixture
def email() -> FakeEmail:
    return FakeEmail()


@pytest.fixture
def dispatcher(directory, sms, email) -> NotificationDispatcher:
    return NotificationDispatcher(sms, email, ProviderMatcher(directory), dashboard_url=DASHBOARD_URL)


@pytest.fixture
def intake(directory, store, dispatcher, usage) -> BookingIntakeService:
    return BookingIntakeService(directory, store, dispatcher, usage)


@pytest.fixture
def services(directory, sms, email, usage, intake) -> ServiceContainer:
    return ServiceContainer(salons=directory, sms=sms, email=email, usage_tracker=usage, booking_intake=intake)


@pytest.fixture
async def client(services):
    from main import create_app

    app = create_app()
    app.dependency_overrides[get_services] = lambda: services
    app.dependency_overrides[get_booking_intake] = lambda: services.booking_intake

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
