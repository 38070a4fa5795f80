"""Structured JSON logging on stderr.

With the stdio transport stdout carries the MCP protocol stream, so every
handler installed here writes to stderr.
"""

from __future__ import annotations

from datetime import datetime, timezone
import logging
from pathlib import Path
import sys
from typing import Any

import orjson

from symbols_mcp_server.observability.context import get_trace_context


# Attributes every LogRecord carries; anything else came in through ``extra=``.
_RECORD_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {"message", "asctime"}

QUIET_LOGGERS = ("httpx", "httpcore", "uvicorn.access", "mcp.server.lowlevel")

TEXT_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def _to_json(value: Any) -> Any:
    if isinstance(value, (set, frozenset)):
        return sorted(value, key=str)
    if isinstance(value, Path):
        return str(value)
    return repr(value)


class JsonFormatter(logging.Formatter):
    """One JSON object per record, correlated with the active span.

    ``extra=`` fields (``path``, ``entity_id``, ``tool`` ...) are copied to the
    top level; values under secret-looking keys are replaced.
    """

    SECRET_KEYS = frozenset({"password", "token", "api_key", "secret", "authorization"})
    MAX_MESSAGE_LEN = 2000
    MAX_EXTRA_LEN = 500

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": self._clip(record.getMessage(), self.MAX_MESSAGE_LEN),
            **get_trace_context(),
        }
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        entry.update(self._extras(record))
        return orjson.dumps(entry, default=_to_json).decode("utf-8")

    def _extras(self, record: logging.LogRecord) -> dict[str, Any]:
        extras = {}
        for key, value in vars(record).items():
            if key in _RECORD_ATTRS or key.startswith("_"):
                continue
            if key.lower() in self.SECRET_KEYS:
                value = "[REDACTED]"
            elif isinstance(value, str):
                value = self._clip(value, self.MAX_EXTRA_LEN)
            extras[key] = value
        return extras

    @staticmethod
    def _clip(text: str, limit: int) -> str:
        return text if len(text) <= limit else text[:limit] + "..."


def configure_logging(
    level: str = "INFO",
    json_output: bool = True,
) -> None:
    """Replace the root handlers with a single stderr handler.

    Args:
        level: Root log level name, case-insensitive
        json_output: ``JsonFormatter`` when True, plain text otherwise
    """
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(JsonFormatter() if json_output else logging.Formatter(TEXT_FORMAT))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
