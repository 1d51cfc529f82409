"""Domain layer: entities, value objects, enums, and exceptions.

No dependencies on infrastructure or presentation. Used by application
and infrastructure layers.
"""

from projectgrid.domain.entities import (
    ProjectEntity,
    UserEntity,
    VerificationTokenEntity,
    WorkspaceEntity,
)
from projectgrid.domain.enums import (
    ProjectPriority,
    ProjectStatus,
    TokenPurpose,
    WorkspaceRole,
)
from projectgrid.domain.exceptions import (
    AuthenticationException,
    AuthorizationException,
    ErrorKind,
    ProjectGridException,
    ResourceNotFoundException,
    ValidationException,
)
from projectgrid.domain.value_objects import EmailAddress

__all__ = [
    # Entities
    "ProjectEntity",
    "UserEntity",
    "VerificationTokenEntity",
    "WorkspaceEntity",
    # Enums
    "ProjectPriority",
    "ProjectStatus",
    "TokenPurpose",
    "WorkspaceRole",
    # Exceptions
    "AuthenticationException",
    "AuthorizationException",
    "ErrorKind",
    "ProjectGridException",
    "ResourceNotFoundException",
    "ValidationException",
    # Value objects
    "EmailAddress",
]
