"""Liveness and readiness response bodies."""

from typing import Literal

from pydantic import BaseModel


class HealthResponse(BaseModel):
    status: Literal["ok"] = "ok"


class ReadinessResponse(BaseModel):
    """``firestore`` is False until the lifespan has opened the client."""

    status: Literal["ok", "not_ready"] = "ok"
    firestore: bool
