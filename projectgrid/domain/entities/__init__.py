"""Domain entities and aggregates.

Pure domain models; no persistence concerns.
"""

from projectgrid.domain.entities.activity import ActivityEntity
from projectgrid.domain.entities.comment import CommentEntity
from projectgrid.domain.entities.project import ProjectEntity, ProjectMember
from projectgrid.domain.entities.task import Subtask, TaskEntity
from projectgrid.domain.entities.user import PendingCodeState, UserEntity
from projectgrid.domain.entities.verification_token import VerificationTokenEntity
from projectgrid.domain.entities.workspace import WorkspaceEntity, WorkspaceMember

__all__ = [
    "ActivityEntity",
    "CommentEntity",
    "PendingCodeState",
    "ProjectEntity",
    "ProjectMember",
    "Subtask",
    "TaskEntity",
    "UserEntity",
    "VerificationTokenEntity",
    "WorkspaceEntity",
    "WorkspaceMember",
]
