"""Tests for request context, request-id sanitizing and the traced decorator."""

import logging

import pytest
from opentelemetry import trace
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import SimpleSpanProcessor
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter
from opentelemetry.trace import StatusCode

from projectgrid.middleware.request_id import sanitize_request_id
from projectgrid.shared.context import (
    clear_request_context,
    get_request_context,
    set_current_user_id,
    set_request_id,
)
from projectgrid.shared.telemetry.logging import RequestIdFilter
from projectgrid.shared.telemetry.tracing import traced

_exporter = InMemorySpanExporter()
_provider = TracerProvider()
_provider.add_span_processor(SimpleSpanProcessor(_exporter))
trace.set_tracer_provider(_provider)


@pytest.fixture(autouse=True)
def _reset() -> None:
    _exporter.clear()
    clear_request_context()


def test_context_round_trip() -> None:
    set_request_id("req-1")
    set_current_user_id("u1")
    assert get_request_context().request_id == "req-1"
    assert get_request_context().user_id == "u1"
    clear_request_context()
    assert get_request_context().request_id is None


def test_empty_user_id_rejected() -> None:
    with pytest.raises(ValueError):
        set_current_user_id("")


@pytest.mark.parametrize("raw", [None, "", "has space", "x" * 65, "inject\nline"])
def test_unsafe_request_ids_are_replaced(raw: str | None) -> None:
    assert sanitize_request_id(raw) != raw
    assert len(sanitize_request_id(raw)) == 36


def test_log_records_carry_request_id() -> None:
    record = logging.LogRecord("x", logging.INFO, __file__, 1, "msg", None, None)
    RequestIdFilter().filter(record)
    assert record.request_id == "-"
    set_request_id("req-2")
    RequestIdFilter().filter(record)
    assert record.request_id == "req-2"


async def test_traced_records_only_safe_kwargs() -> None:
    @traced("demo.flow")
    async def flow(user_id: str, password: str) -> str:
        return user_id

    assert await flow(user_id="u1", password="secret") == "u1"
    (span,) = _exporter.get_finished_spans()
    assert span.name == "demo.flow"
    assert span.attributes["arg.user_id"] == "u1"
    assert "arg.password" not in span.attributes
    assert span.status.status_code is StatusCode.OK


def test_traced_marks_errors() -> None:
    @traced()
    def explode() -> None:
        raise RuntimeError("boom")

    with pytest.raises(RuntimeError):
        explode()
    (span,) = _exporter.get_finished_spans()
    assert span.status.status_code is StatusCode.ERROR
    assert span.events[0].name == "exception"
