from __future__ import annotations

from fastapi import APIRouter

from api.v1.endpoints import booking as booking_endpoints
from api.v1.endpoints import notifications as notifications_endpoints


api_router = APIRouter()

api_router.include_router(booking_endpoints.router)
api_router.include_router(notifications_endpoints.router)
