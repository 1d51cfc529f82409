"""Span helpers for application services.

``traced`` wraps a service method in a span. Call arguments become span
attributes only when their name is allow-listed, so passwords, tokens,
codes and email addresses never reach the exporter.
"""

import inspect
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from functools import wraps
from typing import Any

from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode

RECORDED_ARGUMENTS = frozenset(
    {
        "user_id",
        "workspace_id",
        "project_id",
        "task_id",
        "purpose",
        "enable",
        "status",
        "priority",
        "role",
    }
)

AttributeValue = str | int | float | bool


def _recorded_arguments(signature: inspect.Signature, args: tuple, kwargs: dict) -> dict[str, str]:
    try:
        bound = signature.bind_partial(*args, **kwargs)
    except TypeError:
        return {}
    return {
        f"arg.{name}": str(value)
        for name, value in bound.arguments.items()
        if name.lower() in RECORDED_ARGUMENTS
    }


def traced(
    operation_name: str | None = None,
    attributes: dict[str, AttributeValue] | None = None,
) -> Callable:
    """Run the decorated function (sync or async) inside a span.

    The span is named ``operation_name`` (default ``module.qualname``),
    carries ``attributes`` plus allow-listed arguments, and ends ERROR with
    the exception recorded if the call raises.
    """

    def decorator(func: Callable) -> Callable:
        tracer = trace.get_tracer(func.__module__)
        name = operation_name or f"{func.__module__}.{func.__qualname__}"
        signature = inspect.signature(func)

        @contextmanager
        def span_for(args: tuple, kwargs: dict) -> Iterator[trace.Span]:
            with tracer.start_as_current_span(
                name, record_exception=False, set_status_on_exception=False
            ) as span:
                span.set_attributes({**(attributes or {}), **_recorded_arguments(signature, args, kwargs)})
                try:
                    yield span
                except Exception as exc:
                    span.record_exception(exc)
                    span.set_status(Status(StatusCode.ERROR, type(exc).__name__))
                    raise
                span.set_status(Status(StatusCode.OK))

        if inspect.iscoroutinefunction(func):

            @wraps(func)
            async def run_async(*args: Any, **kwargs: Any) -> Any:
                with span_for(args, kwargs):
                    return await func(*args, **kwargs)

            return run_async

        @wraps(func)
        def run(*args: Any, **kwargs: Any) -> Any:
            with span_for(args, kwargs):
                return func(*args, **kwargs)

        return run

    return decorator


def add_span_attributes(**attributes: AttributeValue) -> None:
    """Annotate the active span, if one is recording."""
    span = trace.get_current_span()
    if span.is_recording():
        span.set_attributes(attributes)


def add_span_event(name: str, attributes: dict[str, AttributeValue] | None = None) -> None:
    span = trace.get_current_span()
    if span.is_recording():
        span.add_event(name, attributes=attributes or {})
