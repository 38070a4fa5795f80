"""Observability: structured logging, Prometheus metrics and OpenTelemetry spans."""

from symbols_mcp_server.observability.context import get_trace_context
from symbols_mcp_server.observability.logging import JsonFormatter, configure_logging
from symbols_mcp_server.observability.metrics import (
    CATALOG_ENTITIES,
    CATALOG_FILES,
    REQUEST_COUNT,
    REQUEST_LATENCY,
    get_metrics,
    get_metrics_content_type,
    record_catalog,
    track_latency,
)
from symbols_mcp_server.observability.tracing import create_span, get_tracer, init_tracing


__all__ = [
    "CATALOG_ENTITIES",
    "CATALOG_FILES",
    "REQUEST_COUNT",
    "REQUEST_LATENCY",
    "JsonFormatter",
    "configure_logging",
    "create_span",
    "get_metrics",
    "get_metrics_content_type",
    "get_trace_context",
    "get_tracer",
    "init_tracing",
    "record_catalog",
    "track_latency",
]
