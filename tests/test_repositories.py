"""Repositories and the usage tracker against a minimal in-memory Motor stand-in."""
from itertools import count

import pytest
from bson import ObjectId

from models.usage import UsageType
from repositories.booking_requests import BookingRequestRepository
from repositories.salons import SalonRepository
from repositories.usage import UsageRepository
from services.booking_intake import BookingIntakeService
from services.notifications import NotificationDispatcher
from services.provider_matcher import ProviderMatcher
from services.usage_tracker import UsageTracker

from conftest import DASHBOARD_URL, FakeEmail, FakeSms, make_payload


def _matches(doc, query):
    for key, expected in query.items():
        value = doc.get(key)
        if isinstance(expected, dict) and "$in" in expected:
            if value not in expected["$in"]:
                return False
        elif value != expected:
            return False
    return True


class _InsertResult:
    def __init__(self, inserted_id):
        self.inserted_id = inserted_id


class FakeCursor:
    def __init__(self, docs):
        self.docs = list(docs)

    def sort(self, key_or_list, direction=None):
        keys = key_or_list if isinstance(key_or_list, list) else [(key_or_list, direction)]
        for key, order in reversed(keys):
            self.docs.sort(key=lambda d: d.get(key), reverse=order == -1)
        return self

    def __aiter__(self):
        self._iter = iter(self.docs)
        return self

    async def __anext__(self):
        try:
            return next(self._iter)
        except StopIteration:
            raise StopAsyncIteration


class FakeCollection:
    def __init__(self):
        self.docs = []

    async def insert_one(self, doc):
        doc = dict(doc)
        doc.setdefault("_id", ObjectId())
        self.docs.append(doc)
        return _InsertResult(doc["_id"])

    async def find_one(self, query):
        return next((d for d in self.docs if _matches(d, query)), None)

    def find(self, query):
        return FakeCursor(d for d in self.docs if _matches(d, query))


class FakeDatabase(dict):
    def __missing__(self, name):
        self[name] = FakeCollection()
        return self[name]


@pytest.fixture
def db():
    return FakeDatabase()


@pytest.mark.asyncio
async def test_salon_lookup_by_slug(db):
    salon_id = ObjectId()
    await db["salons"].insert_one(
        {
            "_id": salon_id,
            "name": "Acme Salon",
            "slug": "acme",
            "settings": {"notifications": {"sms_recipients": [{"phone": "5550001111", "enabled": True}]}},
        }
    )
    repo = SalonRepository(db)

    by_slug = await repo.get_salon_by_slug("acme")
    assert by_slug.id == str(salon_id)
    assert by_slug.notifications.enabled_sms_recipients[0].phone == "5550001111"
    assert by_slug.notifications.email_recipients == []
    assert await repo.get_salon_by_slug("ghost") is None


@pytest.mark.asyncio
async def test_salon_with_string_id(db):
    await db["salons"].insert_one({"_id": "test-salon-id", "name": "Test", "slug": "test"})
    salon = await SalonRepository(db).get_salon_by_slug("test")
    assert salon.id == "test-salon-id"


@pytest.mark.asyncio
async def test_malformed_recipient_does_not_block_booking(db):
    await db["salons"].insert_one(
        {
            "_id": "salon-acme",
            "name": "Acme Salon",
            "slug": "acme",
            "settings": {
                "notifications": {
                    "sms_recipients": [
                        {"phone": "5550001111", "enabled": True},
                        {"phone": None, "enabled": False},
                        {"phone": None, "enabled": True},
                    ],
                    "email_recipients": [{"email": None, "enabled": True}],
                }
            },
        }
    )
    salons = SalonRepository(db)
    sms = FakeSms()
    dispatcher = NotificationDispatcher(sms, FakeEmail(), ProviderMatcher(salons), dashboard_url=DASHBOARD_URL)
    intake = BookingIntakeService(salons, BookingRequestRepository(db), dispatcher)

    result = await intake.submit(make_payload())

    assert result.request_id == str(db["booking_requests"].docs[0]["_id"])
    assert [a[0] for a in sms.attempts] == ["+15550001111"]
    assert [o.delivered for o in result.notifications.sms] == [True, False]
    assert [o.delivered for o in result.notifications.email] == [False]


@pytest.mark.asyncio
async def test_providers_and_team_members_are_scoped_to_salon(db):
    await db["providers"].insert_one({"salon_id": "s1", "name": "Nina", "team_member_id": "tm-1"})
    await db["providers"].insert_one({"salon_id": "s2", "name": "Marco"})
    await db["team_members"].insert_one({"_id": "tm-1", "salon_id": "s1", "name": "Nina", "phone": "5550002222"})
    repo = SalonRepository(db)

    providers = await repo.get_providers("s1")
    members = await repo.get_team_members("s1")

    assert [p.name for p in providers] == ["Nina"]
    assert providers[0].receive_notifications is False
    assert [m.id for m in members] == ["tm-1"]


@pytest.mark.asyncio
async def test_create_booking_request_returns_string_id_and_timestamps(db):
    repo = BookingRequestRepository(db)
    request_id = await repo.create_booking_request(
        {
            "client_name": "Jane",
            "service": "Haircut",
            "date_time_preference": "tomorrow 2pm",
            "status": "pending",
            "salon_id": "s1",
        }
    )

    stored = db["booking_requests"].docs[0]
    assert request_id == str(stored["_id"])
    assert stored["created_at"] is not None and stored["updated_at"] is not None


@pytest.mark.asyncio
async def test_usage_tracker_records_and_summarizes(db):
    tracker = UsageTracker(UsageRepository(db))
    ids = count(1)

    first = await tracker.record_usage("s1", UsageType.booking, "system", f"req-{next(ids)}")
    await tracker.record_usage("s1", "consultation", "system", f"req-{next(ids)}")
    await tracker.record_usage("s2", UsageType.booking, "system", f"req-{next(ids)}")

    stored = db["usage_metrics"].docs[0]
    assert first == str(stored["_id"])
    assert stored["type"] == "booking"
    assert stored["user_id"] == "system"
    assert stored["request_id"] == "req-1"

    summary = await tracker.get_usage_summary("s1")
    assert summary.total_requests == 2
    assert summary.booking_count == 1
    assert summary.consultation_count == 1
    assert summary.last_updated is not None


@pytest.mark.asyncio
async def test_usage_tracker_rejects_unknown_kind(db):
    with pytest.raises(ValueError):
        await UsageTracker(UsageRepository(db)).record_usage("s1", "haircut", "system", "req-1")
