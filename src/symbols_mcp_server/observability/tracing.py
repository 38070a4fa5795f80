"""OpenTelemetry spans around catalog loading and tool calls."""

from __future__ import annotations

from contextlib import contextmanager
import logging
from typing import TYPE_CHECKING, Any

from opentelemetry import trace
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.trace import SpanKind, Status, StatusCode


if TYPE_CHECKING:
    from collections.abc import Generator

    from opentelemetry.trace import Span, Tracer

logger = logging.getLogger(__name__)

_TRACER_NAME = "symbols_mcp_server"
_active: dict[str, Tracer | None] = {"tracer": None}


def init_tracing(
    service_name: str = "symbols-mcp-server",
    resource_attributes: dict[str, str] | None = None,
) -> TracerProvider:
    """Install an SDK tracer provider carrying the service identity.

    No exporter is attached; span ids feed log correlation and any span
    processor an embedding application adds to the returned provider.
    """
    resource = Resource.create({"service.name": service_name, **(resource_attributes or {})})
    provider = TracerProvider(resource=resource)
    trace.set_tracer_provider(provider)
    _active["tracer"] = provider.get_tracer(_TRACER_NAME)
    logger.info("Tracing initialized for service: %s", service_name)
    return provider


def get_tracer() -> Tracer:
    tracer = _active["tracer"]
    if tracer is None:
        tracer = _active["tracer"] = trace.get_tracer(_TRACER_NAME)
    return tracer


@contextmanager
def create_span(
    name: str,
    kind: SpanKind = SpanKind.INTERNAL,
    attributes: dict[str, Any] | None = None,
) -> Generator[Span, None, None]:
    """Run the block inside a span. Exceptions mark the span failed and propagate."""
    span_attributes = {key: value for key, value in (attributes or {}).items() if value is not None}
    with get_tracer().start_as_current_span(
        name,
        kind=kind,
        attributes=span_attributes,
        record_exception=False,
        set_status_on_exception=False,
    ) as span:
        try:
            yield span
        except Exception as exc:
            span.set_status(Status(StatusCode.ERROR, str(exc)))
            span.record_exception(exc)
            raise
