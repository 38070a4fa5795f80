"""Prometheus metrics for tool calls and catalog size."""

from __future__ import annotations

from contextlib import contextmanager
import time
from typing import TYPE_CHECKING

from prometheus_client import CONTENT_TYPE_LATEST, Counter, Gauge, Histogram, generate_latest


if TYPE_CHECKING:
    from collections.abc import Generator


REQUEST_COUNT = Counter(
    "symbols_mcp_requests_total",
    "MCP tool invocations",
    ["tool", "status"],
)

REQUEST_LATENCY = Histogram(
    "symbols_mcp_request_duration_seconds",
    "MCP tool latency in seconds",
    ["tool"],
    buckets=(0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0),
)

CATALOG_ENTITIES = Gauge(
    "symbols_mcp_catalog_entities",
    "Entities in the loaded catalog",
    ["kind"],
)

CATALOG_FILES = Gauge(
    "symbols_mcp_catalog_files",
    "Definition files processed by the last catalog load",
)


@contextmanager
def track_latency(histogram: Histogram, **labels: str) -> Generator[None, None, None]:
    """Observe the duration of the wrapped block on ``histogram``."""
    start = time.perf_counter()
    try:
        yield
    finally:
        histogram.labels(**labels).observe(time.perf_counter() - start)


def record_catalog(counts: dict[str, int], files_processed: int) -> None:
    for kind, count in counts.items():
        CATALOG_ENTITIES.labels(kind=kind).set(count)
    CATALOG_FILES.set(files_processed)


def get_metrics() -> bytes:
    """Render all metrics in Prometheus text exposition format."""
    return generate_latest()


def get_metrics_content_type() -> str:
    return CONTENT_TYPE_LATEST
