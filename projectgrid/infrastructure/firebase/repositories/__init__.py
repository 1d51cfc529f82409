"""Firestore-backed repository implementations."""

from projectgrid.infrastructure.firebase.repositories.activity_repo_firestore import (
    FirestoreActivityRepository,
)
from projectgrid.infrastructure.firebase.repositories.comment_repo_firestore import (
    FirestoreCommentRepository,
)
from projectgrid.infrastructure.firebase.repositories.project_repo_firestore import (
    FirestoreProjectRepository,
)
from projectgrid.infrastructure.firebase.repositories.task_repo_firestore import (
    FirestoreTaskRepository,
)
from projectgrid.infrastructure.firebase.repositories.user_repo_firestore import (
    FirestoreUserRepository,
)
from projectgrid.infrastructure.firebase.repositories.verification_token_repo_firestore import (
    FirestoreVerificationTokenRepository,
)
from projectgrid.infrastructure.firebase.repositories.workspace_repo_firestore import (
    FirestoreWorkspaceRepository,
)

__all__ = [
    "FirestoreActivityRepository",
    "FirestoreCommentRepository",
    "FirestoreProjectRepository",
    "FirestoreTaskRepository",
    "FirestoreUserRepository",
    "FirestoreVerificationTokenRepository",
    "FirestoreWorkspaceRepository",
]
