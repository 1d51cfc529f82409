"""Liveness and readiness checks. Neither route touches the account or workspace services."""

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from projectgrid.infrastructure.firebase.client import get_firestore_client
from projectgrid.schemas.health import HealthResponse, ReadinessResponse

router = APIRouter()


@router.get("", response_model=HealthResponse)
async def liveness() -> HealthResponse:
    return HealthResponse()


@router.get(
    "/ready",
    response_model=ReadinessResponse,
    responses={status.HTTP_503_SERVICE_UNAVAILABLE: {"model": ReadinessResponse}},
)
async def readiness() -> ReadinessResponse | JSONResponse:
    """200 once Firestore is connected, 503 otherwise."""
    if get_firestore_client() is None:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content=ReadinessResponse(status="not_ready", firestore=False).model_dump(),
        )
    return ReadinessResponse(firestore=True)
