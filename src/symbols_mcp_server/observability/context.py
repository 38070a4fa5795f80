"""Correlation ids attached to every log line."""

from __future__ import annotations

from contextvars import ContextVar
from uuid import uuid4

from opentelemetry import trace


_fallback_ids: ContextVar[dict[str, str] | None] = ContextVar("symbols_fallback_ids", default=None)


def get_trace_context() -> dict[str, str]:
    """Return ``trace_id``/``span_id`` for the current task.

    The active OpenTelemetry span wins. Outside any span a random pair is
    minted once per context so related log lines still group together.
    """
    span_context = trace.get_current_span().get_span_context()
    if span_context.is_valid:
        return {
            "trace_id": format(span_context.trace_id, "032x"),
            "span_id": format(span_context.span_id, "016x"),
        }

    ids = _fallback_ids.get()
    if ids is None:
        ids = {"trace_id": uuid4().hex, "span_id": uuid4().hex[:16]}
        _fallback_ids.set(ids)
    return ids

