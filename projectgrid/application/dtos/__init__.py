"""Application DTOs (no persistence dependency)."""

from projectgrid.application.dtos.auth import (
    AccountPolicy,
    LoginResult,
    SessionIssued,
    TwoFactorChallenge,
    VerificationResent,
)
from projectgrid.application.dtos.task import ProjectTasks, TaskDetails, WorkspaceStats
from projectgrid.application.dtos.user import UserProfile
from projectgrid.application.dtos.workspace import WorkspaceProjects

__all__ = [
    "AccountPolicy",
    "LoginResult",
    "ProjectTasks",
    "SessionIssued",
    "TaskDetails",
    "TwoFactorChallenge",
    "UserProfile",
    "VerificationResent",
    "WorkspaceProjects",
    "WorkspaceStats",
]
