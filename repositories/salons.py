from __future__ import annotations

from typing import List, Optional

from models.provider import Provider, TeamMember
from models.salon import Salon

from .base import BaseRepository


class SalonRepository(BaseRepository):
    """Read-only access to salons and their provider/team rosters."""

    collection = "salons"
    providers_collection = "providers"
    team_members_collection = "team_members"

    async def get_salon_by_slug(self, slug: str) -> Optional[Salon]:
        doc = await self.find_one({"slug": slug})
        return Salon(**doc) if doc else None

    async def get_providers(self, salon_id: str) -> List[Provider]:
        cursor = self.db[self.providers_collection].find({"salon_id": salon_id})
        return [Provider(**doc) async for doc in cursor]

    async def get_team_members(self, salon_id: str) -> List[TeamMember]:
        cursor = self.db[self.team_members_collection].find({"salon_id": salon_id})
        return [TeamMember(**doc) async for doc in cursor]
