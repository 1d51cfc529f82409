"""Application interfaces (ports): repository and service protocols.

Define contracts for infrastructure implementations (DIP).
No runtime imports from projectgrid.infrastructure or projectgrid.api.
"""

from projectgrid.application.interfaces.repositories import (
    IProjectRepository,
    IUserRepository,
    IVerificationTokenRepository,
    IWorkspaceRepository,
)
from projectgrid.application.interfaces.services import (
    INotificationService,
    IPasswordHasher,
    ITokenIssuer,
)

__all__ = [
    "INotificationService",
    "IPasswordHasher",
    "IProjectRepository",
    "ITokenIssuer",
    "IUserRepository",
    "IVerificationTokenRepository",
    "IWorkspaceRepository",
]
