from __future__ import annotations

from typing import Any, Dict

from .base import BaseRepository


class BookingRequestRepository(BaseRepository):
    collection = "booking_requests"

    async def create_booking_request(self, booking_data: Dict[str, Any]) -> str:
        return await self.insert_one(dict(booking_data))
