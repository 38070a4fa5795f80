"""Signal handling for graceful shutdown of the stdio transport."""

from __future__ import annotations

import logging
import signal


logger = logging.getLogger(__name__)


def install_shutdown_signals() -> list[signal.Signals]:
    """Route SIGTERM through the SIGINT path.

    SIGINT raises ``KeyboardInterrupt`` in the main thread, which lets the
    in-flight tool call unwind before the server exits. Returns the signals
    that were installed.
    """

    installed: list[signal.Signals] = []
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            signal.signal(sig, signal.default_int_handler)
        except ValueError:  # pragma: no cover - only the main thread may set handlers
            logger.debug("Signal %s is not supported in this context", sig.name)
            continue
        installed.append(sig)
    return installed
