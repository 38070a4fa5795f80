"""Exception hierarchy for catalog loading and query handling.

Load-time errors (``CatalogLoadError`` and subclasses) are fatal: the server
must not start serving with a partially built catalog. Query-time errors are
scoped to a single tool call.
"""

from __future__ import annotations

from pathlib import Path


class SymbolsServerError(Exception):
    """Base class for all errors raised by symbols-mcp-server."""


class CatalogLoadError(SymbolsServerError):
    """Raised when the catalog cannot be built."""

    def __init__(self, message: str, *, path: Path | None = None) -> None:
        super().__init__(message)
        self.path = path


class ConfigValidationError(CatalogLoadError):
    """A definition file or entity does not match its schema."""

    def __init__(self, message: str, *, path: Path | None = None, entity_id: str | None = None) -> None:
        super().__init__(message, path=path)
        self.entity_id = entity_id


class DuplicateIdentifierError(CatalogLoadError):
    """The same entity id was inserted twice during one load."""

    def __init__(self, identifier: str, *, path: Path | None = None, first_path: Path | None = None) -> None:
        message = f"Symbol ID {identifier} is duplicated"
        if path is not None:
            message = f"{message} in {path}"
        if first_path is not None:
            message = f"{message} (first defined in {first_path})"
        super().__init__(message, path=path)
        self.identifier = identifier
        self.first_path = first_path


class DuplicateVersionError(CatalogLoadError):
    """More than one file declared a top-level ``version``."""

    def __init__(self, *, path: Path | None = None, first_path: Path | None = None) -> None:
        super().__init__(
            f"Version is declared more than once: {path} (already declared in {first_path})",
            path=path,
        )
        self.first_path = first_path


class PathSecurityError(CatalogLoadError):
    """The catalog root resolves outside the allowed base directory."""

    def __init__(self, path: Path, allowed_base: Path) -> None:
        super().__init__("Invalid configuration directory path", path=path)
        self.allowed_base = allowed_base


class CatalogIOError(CatalogLoadError):
    """A definition file could not be read or parsed."""


class PaginationValidationError(SymbolsServerError, ValueError):
    """``limit``/``offset`` are outside the accepted bounds."""


class UnknownCommandError(SymbolsServerError, LookupError):
    """No command is registered under the requested id."""


class CommandExecutionError(SymbolsServerError):
    """A command handler rejected its arguments or failed to run."""


class RemoteFetchError(SymbolsServerError):
    """A remote resource returned a non-success response."""

    def __init__(self, url: str, status_code: int | None = None) -> None:
        super().__init__(f"Failed to fetch {url} (status={status_code})")
        self.url = url
        self.status_code = status_code
