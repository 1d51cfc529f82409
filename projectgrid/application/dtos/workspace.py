"""DTOs for workspace use cases."""

from dataclasses import dataclass

from projectgrid.domain.entities import ProjectEntity, WorkspaceEntity


@dataclass(frozen=True)
class WorkspaceProjects:
    """A workspace together with its non-archived projects."""

    workspace: WorkspaceEntity
    projects: list[ProjectEntity]
