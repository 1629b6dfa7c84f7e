from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence

from motor.motor_asyncio import AsyncIOMotorDatabase


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class BaseRepository:
    collection: str = ""

    def __init__(self, db: AsyncIOMotorDatabase) -> None:
        self.db = db

    @property
    def _collection(self):
        return self.db[self.collection]

    async def find_many(
        self,
        query: Dict[str, Any] | None = None,
        *,
        sort: Optional[Sequence[tuple[str, int]]] = None,
    ) -> List[Dict[str, Any]]:
        cursor = self._collection.find(query or {})
        if sort:
            cursor = cursor.sort(list(sort))
        return [doc async for doc in cursor]

    async def find_one(self, query: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        return await self._collection.find_one(query)

    async def insert_one(self, doc: Dict[str, Any], *, with_timestamps: bool = True) -> str:
        # Never persist a null _id; MongoDB will auto-generate one
        doc = {k: v for k, v in doc.items() if not (k == "_id" and v is None)}

        if with_timestamps:
            now = utcnow()
            if doc.get("created_at") is None:
                doc["created_at"] = now
            if doc.get("updated_at") is None:
                doc["updated_at"] = now
        result = await self._collection.insert_one(doc)
        return str(result.inserted_id)
