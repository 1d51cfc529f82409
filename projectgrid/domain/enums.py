"""Domain enumerations for the ProjectGrid application.

Enums represent fixed sets of domain values (token purposes, membership
roles, project and task status, priority, activity actions).
"""

from enum import Enum


class TokenPurpose(str, Enum):
    """Closed set of purposes a signed token may carry.

    A token minted for one flow is rejected by every other flow.
    """

    EMAIL_VERIFICATION = "email-verification"
    PASSWORD_RESET = "password-reset"
    LOGIN = "login"
    TWO_FACTOR = "2fa-otp"

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid purpose values as strings."""
        return [purpose.value for purpose in cls]


class WorkspaceRole(str, Enum):
    OWNER = "owner"
    ADMIN = "admin"
    MEMBER = "member"
    VIEWER = "viewer"

    @classmethod
    def managers(cls) -> frozenset["WorkspaceRole"]:
        """Roles allowed to change workspace settings."""
        return frozenset({cls.OWNER, cls.ADMIN})


class ProjectStatus(str, Enum):
    BACKLOG = "Backlog"
    TODO = "To Do"
    IN_PROGRESS = "In Progress"
    REVIEW = "Review"
    BLOCKED = "Blocked"
    ON_HOLD = "On Hold"
    CANCELLED = "Cancelled"
    COMPLETED = "Completed"
    ARCHIVED = "Archived"


class ProjectPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class ProjectMemberRole(str, Enum):
    MANAGER = "manager"
    CONTRIBUTOR = "contributor"
    VIEWER = "viewer"


class TaskStatus(str, Enum):
    TODO = "To Do"
    IN_PROGRESS = "In Progress"
    REVIEW = "Review"
    COMPLETED = "Completed"


class ActivityAction(str, Enum):
    """What a recorded activity did; stored verbatim on the activity record."""

    CREATED_TASK = "created_task"
    UPDATED_TASK = "updated_task"
    CREATED_SUBTASK = "created_subtask"
    UPDATED_SUBTASK = "updated_subtask"
    COMPLETED_TASK = "completed_task"
    CREATED_PROJECT = "created_project"
    CREATED_WORKSPACE = "created_workspace"
    UPDATED_WORKSPACE = "updated_workspace"
    ADDED_COMMENT = "added_comment"
    UPDATED_COMMENT = "updated_comment"
    DELETED_COMMENT = "deleted_comment"
    WATCHED_TASK = "watched_task"
    ARCHIVED_TASK = "archived_task"


class ActivityResourceType(str, Enum):
    TASK = "Task"
    PROJECT = "Project"
    WORKSPACE = "Workspace"
    COMMENT = "Comment"
