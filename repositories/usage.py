from __future__ import annotations

from typing import List

from models.usage import UsageMetric

from .base import BaseRepository, utcnow


class UsageRepository(BaseRepository):
    collection = "usage_metrics"

    async def add_metric(self, *, salon_id: str, usage_type: str, user_id: str, request_id: str) -> str:
        now = utcnow()
        doc = {
            "salon_id": salon_id,
            "type": usage_type,
            "user_id": user_id,
            "request_id": request_id,
            "timestamp": now,
            "created_at": now,
        }
        return await self.insert_one(doc, with_timestamps=False)

    async def get_metrics(self, salon_id: str) -> List[UsageMetric]:
        docs = await self.find_many({"salon_id": salon_id}, sort=[("timestamp", -1)])
        return [UsageMetric(**doc) for doc in docs]
