"""Activity log: records who changed what, read back per resource."""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime

from projectgrid.application.interfaces.repositories import IActivityRepository
from projectgrid.domain.entities.activity import ActivityEntity
from projectgrid.domain.enums import ActivityAction, ActivityResourceType
from projectgrid.shared.telemetry.logging import get_logger
from projectgrid.shared.utils.datetime import utc_now
from projectgrid.shared.utils.generators import generate_cuid

logger = get_logger(__name__)


class ActivityLogService:
    def __init__(
        self,
        activity_repo: IActivityRepository,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._activities = activity_repo
        self._clock = clock

    async def record(
        self,
        user_id: str,
        action: ActivityAction,
        resource_type: ActivityResourceType,
        resource_id: str,
        description: str,
    ) -> ActivityEntity:
        activity = ActivityEntity(
            id=generate_cuid(),
            user_id=user_id,
            action=action,
            resource_type=resource_type,
            resource_id=resource_id,
            description=description,
            created_at=self._clock(),
        )
        await self._activities.add(activity)
        logger.debug("Activity %s on %s %s", action.value, resource_type.value, resource_id)
        return activity

    async def list_for_resource(self, resource_id: str) -> list[ActivityEntity]:
        return await self._activities.list_by_resource(resource_id)
