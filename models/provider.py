from __future__ import annotations

from typing import Optional

from .base import MongoModel, PyObjectId


class Provider(MongoModel):
    salon_id: PyObjectId
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    is_team_member: bool = False
    receive_notifications: bool = False
    team_member_id: Optional[PyObjectId] = None


class TeamMember(MongoModel):
    salon_id: PyObjectId
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
