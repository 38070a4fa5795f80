"""Command execution through a closed registry of built-in handlers.

Command definitions choose a handler by name (``HandlerKind``) or return
``static_data``. Arbitrary code from configuration is never executed.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from datetime import datetime, timezone
import logging
from typing import Any
import uuid

import anyio

from symbols_mcp_server.domain.model import CommandSymbol, HandlerKind
from symbols_mcp_server.errors import CommandExecutionError


logger = logging.getLogger(__name__)

Handler = Callable[[CommandSymbol, dict[str, Any]], Awaitable[dict[str, Any]]]


def _envelope(command: CommandSymbol) -> dict[str, Any]:
    return {"command": command.id, "summary": command.description}


async def _hello(command: CommandSymbol, args: dict[str, Any]) -> dict[str, Any]:
    who = args.get("name") or "there"
    return {"message": f"Hello, {who}!", **_envelope(command)}


async def _time(command: CommandSymbol, args: dict[str, Any]) -> dict[str, Any]:
    return {"now": datetime.now(timezone.utc).isoformat(), **_envelope(command)}


async def _add(command: CommandSymbol, args: dict[str, Any]) -> dict[str, Any]:
    a, b = args.get("a"), args.get("b")
    # bool is an int subclass but is not a number here
    if not all(isinstance(v, (int, float)) and not isinstance(v, bool) for v in (a, b)):
        raise CommandExecutionError("Both a and b must be numbers")
    return {"result": a + b, "operation": f"{a} + {b}", **_envelope(command)}


async def _uuid(command: CommandSymbol, args: dict[str, Any]) -> dict[str, Any]:
    return {"uuid": str(uuid.uuid4()), **_envelope(command)}


HANDLERS: dict[HandlerKind, Handler] = {
    HandlerKind.HELLO: _hello,
    HandlerKind.TIME: _time,
    HandlerKind.ADD: _add,
    HandlerKind.UUID: _uuid,
}


async def run_command(
    command: CommandSymbol,
    args: dict[str, Any] | None = None,
    *,
    timeout: float | None = None,
) -> dict[str, Any]:
    """Run ``command`` with ``args``.

    ``static_data`` takes precedence over ``handler``.

    Raises:
        CommandExecutionError: the handler rejected its arguments or exceeded
            ``timeout`` seconds.
    """
    args = args or {}
    if command.static_data is not None:
        return {**command.static_data, **_envelope(command), "type": "static"}

    if command.handler is None:
        raise CommandExecutionError(f"No handler found for command {command.id}")

    handler = HANDLERS[command.handler]
    try:
        with anyio.fail_after(timeout):
            return await handler(command, args)
    except TimeoutError as exc:
        logger.warning("Command %s timed out after %ss", command.id, timeout)
        raise CommandExecutionError(f"Command {command.id} timed out") from exc
