from __future__ import annotations

import logging

from models.usage import UsageSummary, UsageType
from repositories.usage import UsageRepository

logger = logging.getLogger(__name__)


class UsageTracker:
    """Records billable usage units against a salon."""

    def __init__(self, repository: UsageRepository) -> None:
        self.repository = repository

    async def record_usage(self, salon_id: str, kind: UsageType | str, actor: str, reference_id: str) -> str:
        usage_type = UsageType(kind).value
        usage_id = await self.repository.add_metric(
            salon_id=salon_id, usage_type=usage_type, user_id=actor, request_id=reference_id
        )
        logger.info(
            "usage.recorded",
            extra={"salon_id": salon_id, "usage_type": usage_type, "request_id": reference_id, "usage_id": usage_id},
        )
        return usage_id

    async def get_usage_summary(self, salon_id: str) -> UsageSummary:
        metrics = await self.repository.get_metrics(salon_id)
        return UsageSummary(
            salon_id=salon_id,
            total_requests=len(metrics),
            booking_count=sum(1 for m in metrics if m.type == UsageType.booking),
            consultation_count=sum(1 for m in metrics if m.type == UsageType.consultation),
            # metrics come back newest first
            last_updated=metrics[0].timestamp if metrics else None,
        )
