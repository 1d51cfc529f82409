"""Application services: account lifecycle, user profile, workspaces, tasks."""

from projectgrid.application.services.account_emails import AccountEmailRenderer
from projectgrid.application.services.account_service import AccountService
from projectgrid.application.services.activity_service import ActivityLogService
from projectgrid.application.services.one_time_code import OneTimeCodeService
from projectgrid.application.services.task_service import TaskService
from projectgrid.application.services.user_service import UserService
from projectgrid.application.services.workspace_service import WorkspaceService
from projectgrid.application.services.workspace_stats_service import WorkspaceStatsService

__all__ = [
    "AccountEmailRenderer",
    "AccountService",
    "ActivityLogService",
    "OneTimeCodeService",
    "TaskService",
    "UserService",
    "WorkspaceService",
    "WorkspaceStatsService",
]
