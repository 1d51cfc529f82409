"""Workspace API schemas."""

from datetime import datetime

from pydantic import Field

from projectgrid.domain.enums import WorkspaceRole
from projectgrid.schemas.common import CamelModel

_COLOR_PATTERN = r"^#[0-9A-Fa-f]{6}$"


class WorkspaceCreateRequest(CamelModel):
    name: str = Field(..., min_length=1, max_length=80)
    description: str = Field(default="", max_length=500)
    color: str | None = Field(default=None, pattern=_COLOR_PATTERN)


class WorkspaceUpdateRequest(CamelModel):
    """Partial update; omitted fields are left unchanged."""

    name: str | None = Field(default=None, min_length=1, max_length=80)
    description: str | None = Field(default=None, max_length=500)
    color: str | None = Field(default=None, pattern=_COLOR_PATTERN)


class WorkspaceMemberResponse(CamelModel):
    user_id: str
    role: WorkspaceRole
    joined_at: datetime | None = None


class WorkspaceResponse(CamelModel):
    id: str
    name: str
    description: str = ""
    color: str
    owner_id: str
    members: list[WorkspaceMemberResponse] = Field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None
