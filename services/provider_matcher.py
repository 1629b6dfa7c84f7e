from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Optional, Protocol

from models.booking_request import NO_PROVIDER_PREFERENCE
from models.provider import Provider, TeamMember

logger = logging.getLogger(__name__)


class ProviderDirectory(Protocol):
    async def get_providers(self, salon_id: str) -> list[Provider]: ...

    async def get_team_members(self, salon_id: str) -> list[TeamMember]: ...


@dataclass(frozen=True)
class ProviderContact:
    provider: Provider
    team_member: TeamMember
    phone: str


def is_specific_preference(stylist_preference: Optional[str]) -> bool:
    return bool(stylist_preference) and stylist_preference != NO_PROVIDER_PREFERENCE


def find_provider_by_name(providers: Iterable[Provider], name: str) -> Optional[Provider]:
    # Exact, case-sensitive; first match wins
    return next((p for p in providers if p.name == name), None)


def is_notifiable(provider: Provider) -> bool:
    return provider.receive_notifications and provider.is_team_member


class ProviderMatcher:
    """Resolves a free-text stylist preference to a notifiable team member's phone."""

    def __init__(self, directory: ProviderDirectory) -> None:
        self.directory = directory

    async def resolve(self, salon_id: str, stylist_preference: Optional[str]) -> Optional[ProviderContact]:
        if not is_specific_preference(stylist_preference):
            return None

        providers = await self.directory.get_providers(salon_id)
        provider = find_provider_by_name(providers, stylist_preference)
        if provider is None:
            logger.info("provider_match.not_found", extra={"salon_id": salon_id, "preference": stylist_preference})
            return None
        if not is_notifiable(provider):
            logger.info(
                "provider_match.not_notifiable",
                extra={
                    "provider_id": provider.id,
                    "receive_notifications": provider.receive_notifications,
                    "is_team_member": provider.is_team_member,
                },
            )
            return None
        if not provider.team_member_id:
            logger.warning("provider_match.missing_team_member_ref", extra={"provider_id": provider.id})
            return None

        team_members = await self.directory.get_team_members(salon_id)
        team_member = next((m for m in team_members if m.id == provider.team_member_id), None)
        if team_member is None:
            logger.warning(
                "provider_match.team_member_not_found",
                extra={"provider_id": provider.id, "team_member_id": provider.team_member_id},
            )
            return None
        if not team_member.phone:
            logger.warning("provider_match.team_member_without_phone", extra={"team_member_id": team_member.id})
            return None

        return ProviderContact(provider=provider, team_member=team_member, phone=team_member.phone)
