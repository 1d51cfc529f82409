"""Startup and shutdown of process-wide resources (Firestore pool, tracing)."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from projectgrid.core.config import get_settings
from projectgrid.infrastructure.firebase.client import close_firebase, init_firebase
from projectgrid.shared.telemetry.telemetry import (
    TelemetryConfig,
    get_telemetry,
    set_telemetry,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def create_lifespan(app: FastAPI) -> AsyncIterator[None]:
    settings = get_settings()

    if not init_firebase(settings):
        logger.warning("Running without Firestore; account and workspace routes answer 503")

    if settings.telemetry_enabled:
        telemetry = TelemetryConfig.from_settings(settings)
        if telemetry.setup_telemetry(
            exporter_type=settings.telemetry_exporter,
            otlp_endpoint=settings.telemetry_otlp_endpoint,
            sample_rate=settings.telemetry_sample_rate,
        ):
            telemetry.instrument(app)
            set_telemetry(telemetry)

    try:
        yield
    finally:
        await close_firebase()
        telemetry = get_telemetry()
        if telemetry is not None:
            telemetry.shutdown()
            set_telemetry(None)
