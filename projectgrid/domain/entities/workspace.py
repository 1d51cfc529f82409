"""Workspace domain entity.

A workspace groups projects and carries role-based membership. The
creator is always recorded as the owner member.
"""

from dataclasses import dataclass, field
from datetime import datetime

from projectgrid.domain.enums import WorkspaceRole
from projectgrid.domain.exceptions import ValidationException

DEFAULT_WORKSPACE_COLOR = "#FF5733"


@dataclass
class WorkspaceMember:
    user_id: str
    role: WorkspaceRole
    joined_at: datetime | None = None


@dataclass
class WorkspaceEntity:
    """Domain entity for a workspace and its members."""

    id: str
    name: str
    owner_id: str
    description: str = ""
    color: str = DEFAULT_WORKSPACE_COLOR
    members: list[WorkspaceMember] = field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        """Validate workspace rules. Raises ValidationException if invalid."""
        if not self.id:
            raise ValidationException("Workspace ID is required", field="id")
        if not self.name or not self.name.strip():
            raise ValidationException("Workspace name is required", field="name")
        if not self.owner_id:
            raise ValidationException("Workspace owner is required", field="owner_id")

    @classmethod
    def create(
        cls,
        workspace_id: str,
        name: str,
        owner_id: str,
        now: datetime,
        description: str = "",
        color: str | None = None,
    ) -> "WorkspaceEntity":
        """New workspace with the creator as its owner member."""
        return cls(
            id=workspace_id,
            name=name.strip(),
            owner_id=owner_id,
            description=description or "",
            color=color or DEFAULT_WORKSPACE_COLOR,
            members=[WorkspaceMember(owner_id, WorkspaceRole.OWNER, now)],
            created_at=now,
            updated_at=now,
        )

    def role_of(self, user_id: str) -> WorkspaceRole | None:
        for member in self.members:
            if member.user_id == user_id:
                return member.role
        return None

    def is_member(self, user_id: str) -> bool:
        return self.role_of(user_id) is not None

    def can_manage(self, user_id: str) -> bool:
        """Whether the user may change workspace settings (owner or admin)."""
        return self.role_of(user_id) in WorkspaceRole.managers()

    @property
    def member_ids(self) -> list[str]:
        return [m.user_id for m in self.members]
