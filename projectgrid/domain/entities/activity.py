"""Activity log entry: who did what to which resource."""

from dataclasses import dataclass
from datetime import datetime

from projectgrid.domain.enums import ActivityAction, ActivityResourceType


@dataclass
class ActivityEntity:
    id: str
    user_id: str
    action: ActivityAction
    resource_type: ActivityResourceType
    resource_id: str
    description: str = ""
    created_at: datetime | None = None
