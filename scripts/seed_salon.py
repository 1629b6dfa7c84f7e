from __future__ import annotations

import asyncio
from datetime import datetime, timezone

from motor.motor_asyncio import AsyncIOMotorClient

from core.config import settings


UTC = timezone.utc


async def upsert_salon(db, *, name: str, slug: str, sms_phone: str, notify_email: str) -> str:
    existing = await db["salons"].find_one({"slug": slug})
    if existing:
        return str(existing["_id"])
    now = datetime.now(UTC)
    doc = {
        "name": name,
        "slug": slug,
        "booking_url": f"{settings.app_base_url.rstrip('/')}/booking/{slug}",
        "settings": {
            "notifications": {
                "email": True,
                "sms": True,
                "booking_confirmation": True,
                "booking_reminders": True,
                "sms_recipients": [{"phone": sms_phone, "enabled": True}],
                "email_recipients": [{"email": notify_email, "enabled": True}],
            }
        },
        "created_at": now,
        "updated_at": now,
    }
    res = await db["salons"].insert_one(doc)
    return str(res.inserted_id)


async def add_team_provider(db, *, salon_id: str, name: str, phone: str) -> str:
    existing = await db["providers"].find_one({"salon_id": salon_id, "name": name})
    if existing:
        return str(existing["_id"])
    now = datetime.now(UTC)
    member = await db["team_members"].insert_one(
        {"salon_id": salon_id, "name": name, "phone": phone, "created_at": now, "updated_at": now}
    )
    res = await db["providers"].insert_one(
        {
            "salon_id": salon_id,
            "name": name,
            "is_team_member": True,
            "receive_notifications": True,
            "team_member_id": str(member.inserted_id),
            "created_at": now,
            "updated_at": now,
        }
    )
    return str(res.inserted_id)


async def main() -> None:
    client = AsyncIOMotorClient(settings.mongo_uri)
    db = client[settings.database_name]
    try:
        salon_id = await upsert_salon(
            db,
            name="Elegant Cuts Salon",
            slug="test",
            sms_phone="+15555550100",
            notify_email="owner@example.com",
        )
        provider_id = await add_team_provider(db, salon_id=salon_id, name="Nina", phone="+15555550101")
        print("Seeded salon:", {"salon_id": salon_id, "provider_id": provider_id})
    finally:
        client.close()


if __name__ == "__main__":
    asyncio.run(main())
