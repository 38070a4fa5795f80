"""Catalog query service.

Composes query parsing, scoring, ranking and pagination into the read API
used by the MCP tools. Every method is a pure read over an immutable
``Catalog``, so one instance is shared by all concurrent tool calls.
"""

from __future__ import annotations

from collections.abc import Sequence
import logging
from typing import Any

from symbols_mcp_server.catalog.catalog import Catalog
from symbols_mcp_server.commands import run_command
from symbols_mcp_server.domain.model import BaseSymbol, CommandSymbol, EntityKind, Page
from symbols_mcp_server.errors import UnknownCommandError
from symbols_mcp_server.search.pagination import DEFAULT_LIMIT, DEFAULT_MAX_LIMIT, paginate, validate_pagination
from symbols_mcp_server.search.query import parse_terms
from symbols_mcp_server.search.scoring import DEFAULT_OPTIONS, ScoringOptions, rank_entities


logger = logging.getLogger(__name__)


class CatalogService:
    """High-level search and lookup over one catalog snapshot."""

    def __init__(
        self,
        catalog: Catalog,
        *,
        scoring: ScoringOptions = DEFAULT_OPTIONS,
        max_limit: int = DEFAULT_MAX_LIMIT,
        command_timeout: float | None = None,
    ):
        """Initialize the service.

        Args:
            catalog: Immutable catalog built at startup
            scoring: Weight table and fuzzy tunables
            max_limit: Largest accepted page size
            command_timeout: Per-call budget for ``run_command`` in seconds
        """
        self.catalog = catalog
        self.scoring = scoring
        self.max_limit = max_limit
        self.command_timeout = command_timeout

    def search(
        self,
        query: str | None,
        limit: int = DEFAULT_LIMIT,
        offset: int = 0,
        kind: EntityKind | None = None,
        ns: str | None = None,
    ) -> Page[BaseSymbol]:
        """Rank entities of ``kind`` (or all kinds) against ``query``.

        An empty query returns every entity sorted by name, then id. A
        non-empty ``ns`` restricts results to commands whose namespace
        starts with it.

        Raises:
            PaginationValidationError: ``limit``/``offset`` out of bounds.
        """
        validate_pagination(limit, offset, self.max_limit)

        terms = parse_terms(query)
        entities = self.catalog.of_kind(kind)
        if ns:
            entities = [e for e in entities if isinstance(e, CommandSymbol) and e.ns.startswith(ns)]
        ranked = rank_entities(entities, terms, self.scoring)
        logger.debug("search terms=%s kind=%s ns=%s matched=%d", terms, kind, ns, len(ranked))
        return paginate(ranked, limit, offset, self.max_limit)

    def describe(
        self,
        ids: str | Sequence[str] | None = None,
        limit: int = DEFAULT_LIMIT,
        offset: int = 0,
        kind: EntityKind | None = None,
    ) -> Page[BaseSymbol]:
        """Bulk lookup by id, in catalog insertion order.

        ``ids=None`` selects the whole catalog (of ``kind``); a bare string is
        a one-element list. Unknown ids are omitted, not reported.
        """
        validate_pagination(limit, offset, self.max_limit)

        entities = self.catalog.of_kind(kind)
        if ids is not None:
            wanted = {ids} if isinstance(ids, str) else set(ids)
            entities = [entity for entity in entities if entity.id in wanted]
        return paginate(entities, limit, offset, self.max_limit)

    def get_by_id(self, entity_id: str, kind: EntityKind | None = None) -> BaseSymbol | None:
        """Return the entity or ``None``; absence is never an error."""
        return self.catalog.get(entity_id, kind)

    async def run_command(self, command_id: str, args: dict[str, Any] | None = None) -> dict[str, Any]:
        """Execute a catalog command by its ``ns/name`` id.

        Raises:
            UnknownCommandError: no command has that id.
            CommandExecutionError: the handler failed.
        """
        command = self.catalog.get(command_id, EntityKind.COMMAND)
        if not isinstance(command, CommandSymbol):
            raise UnknownCommandError(f"Unknown command: {command_id}")
        return await run_command(command, args, timeout=self.command_timeout)
