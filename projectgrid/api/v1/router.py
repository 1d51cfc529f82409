"""Version 1 API: health checks, account lifecycle, profile, workspaces, tasks."""

from fastapi import APIRouter

from projectgrid.api.v1.endpoints import auth, health, projects, tasks, users, workspaces
from projectgrid.schemas.common import ErrorResponse

api_router = APIRouter()

# Every handler in core.exception_handlers renders ErrorResponse.
_ERROR_RESPONSES = {
    status: {"model": ErrorResponse} for status in (400, 401, 403, 404, 500, 503)
}

api_router.include_router(health.router, prefix="/health", tags=["health"])

for module, prefix in (
    (auth, "/auth"),
    (users, "/users"),
    (workspaces, "/workspaces"),
    (projects, "/projects"),
    (tasks, "/tasks"),
):
    api_router.include_router(
        module.router,
        prefix=prefix,
        tags=[prefix.strip("/")],
        responses=_ERROR_RESPONSES,
    )
