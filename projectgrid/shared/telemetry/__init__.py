"""Logging and OpenTelemetry tracing for the ProjectGrid API."""

from projectgrid.shared.telemetry.logging import get_logger, setup_logging
from projectgrid.shared.telemetry.telemetry import (
    TelemetryConfig,
    get_telemetry,
    set_telemetry,
)
from projectgrid.shared.telemetry.tracing import (
    add_span_attributes,
    add_span_event,
    traced,
)

__all__ = [
    "TelemetryConfig",
    "add_span_attributes",
    "add_span_event",
    "get_logger",
    "get_telemetry",
    "set_telemetry",
    "setup_logging",
    "traced",
]
