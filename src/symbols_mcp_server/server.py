"""FastMCP server exposing catalog search, lookup and command tools."""

from __future__ import annotations

import logging
from typing import Annotated, Any, Literal

from fastmcp import Context, FastMCP
from fastmcp.exceptions import ResourceError
from opentelemetry.trace import SpanKind

from symbols_mcp_server.config import Settings
from symbols_mcp_server.domain.model import BaseSymbol, EntityKind, Page
from symbols_mcp_server.errors import (
    CommandExecutionError,
    PaginationValidationError,
    RemoteFetchError,
    UnknownCommandError,
)
from symbols_mcp_server.observability import REQUEST_COUNT, REQUEST_LATENCY, track_latency
from symbols_mcp_server.observability.tracing import create_span
from symbols_mcp_server.resources import ResourceSpec, read_resource
from symbols_mcp_server.service_layer.catalog_service import CatalogService


logger = logging.getLogger(__name__)

SymbolType = Literal["function", "model", "command"]

RECOMMENDED_WORKFLOW = """
## Recommended Workflow:
1. Search: search_symbols(query: "user creation") → get the IDs of matching symbols.
2. Describe: describe_symbols(ids: ["CreateUser@iam.function", "CreateUserRequest@iam.model"])
3. Analyze: Use the symbol's description, imports, example, fields, parameters and return_type
   for instantiation and usage information.
""".strip()

REMOTE_FETCH_FAILED = "Failed to fetch resource. Please check server logs."


def page_payload(page: Page[BaseSymbol]) -> dict[str, Any]:
    """Serialize a page, omitting ``next`` on the last page."""
    payload: dict[str, Any] = {
        "data": [entity.to_payload() for entity in page.data],
        "total": page.total,
    }
    if page.next is not None:
        payload["next"] = page.next
    return payload


def _kind(symbol_type: SymbolType | None) -> EntityKind | None:
    return EntityKind(symbol_type) if symbol_type else None


def create_server(
    service: CatalogService,
    settings: Settings,
    resources: list[ResourceSpec] | None = None,
) -> FastMCP:
    """Create the MCP server bound to one catalog service."""

    counts = ", ".join(f"{count} {kind}s" for kind, count in service.catalog.counts().items())
    mcp = FastMCP(
        name=settings.name,
        version=settings.version,
        instructions=f"Symbol catalog with {counts}.\n\n{RECOMMENDED_WORKFLOW}",
        mask_error_details=settings.mask_error_details,
    )

    _register_catalog_tools(mcp, service, settings)
    _register_command_tools(mcp, service)
    for spec in resources or []:
        _register_resource(mcp, spec, settings)
    return mcp


def _register_catalog_tools(mcp: FastMCP, service: CatalogService, settings: Settings) -> None:
    default_limit = settings.default_limit

    @mcp.tool(name="search_symbols", annotations={"title": "Search symbols", "readOnlyHint": True})
    async def search_symbols(
        query: Annotated[str, "Search terms (empty string returns all symbols)"] = "",
        limit: Annotated[int, "Maximum number of symbols to return"] = default_limit,
        offset: Annotated[int, "Offset for pagination"] = 0,
        symbol_type: Annotated[SymbolType | None, "Restrict results to one symbol type"] = None,
        ns: Annotated[str | None, "Only commands whose namespace starts with this prefix"] = None,
        ctx: Context | None = None,
    ) -> dict[str, Any]:
        """Search for symbols by name, tags, or description with fuzzy matching support.

        Query terms are separated by spaces and/or commas. Scoring priority
        is name > tags > description, and typos such as 'authenicate' still
        match 'authenticate'.

        Examples:
            search_symbols(query="auth")                        → auth-related symbols
            search_symbols(query="create, user")                → user creation symbols
            search_symbols(query="")                            → all symbols, alphabetical
            search_symbols(query="stats", symbol_type="model")  → stats-related models
            search_symbols(query="", ns="demo")                 → commands in the demo namespace

        Returns:
            {"data": [...], "total": 42, "next": 25}
        """
        tool_name = "search_symbols"
        with (
            track_latency(REQUEST_LATENCY, tool=tool_name),
            create_span(
                "mcp.tool.search_symbols",
                kind=SpanKind.INTERNAL,
                attributes={"search.query": query[:100], "mcp.tool.name": tool_name},
            ) as span,
        ):
            try:
                page = service.search(query, limit=limit, offset=offset, kind=_kind(symbol_type), ns=ns)
            except PaginationValidationError as exc:
                span.set_attribute("error", True)
                REQUEST_COUNT.labels(tool=tool_name, status="error").inc()
                return {"error": str(exc)}

            span.set_attribute("search.total", page.total)
            logger.info("search_symbols called - query='%s', total=%d", query[:50], page.total)
            REQUEST_COUNT.labels(tool=tool_name, status="ok").inc()
            return page_payload(page)

    @mcp.tool(name="describe_symbols", annotations={"title": "Describe symbols", "readOnlyHint": True})
    async def describe_symbols(
        ids: Annotated[list[str] | str | None, "Symbol IDs to describe (omit for all symbols)"] = None,
        limit: Annotated[int, "Maximum number of symbols to return"] = default_limit,
        offset: Annotated[int, "Offset for pagination"] = 0,
        symbol_type: Annotated[SymbolType | None, "Restrict results to one symbol type"] = None,
        ctx: Context | None = None,
    ) -> dict[str, Any]:
        """Describe multiple symbols with pagination.

        Unknown IDs are silently skipped.

        Examples:
            describe_symbols(limit=100)                          → first 100 symbols
            describe_symbols(ids=["UserProfile@iam.model"])      → one symbol
            describe_symbols(ids="Store@platform.model")         → single id string

        Returns:
            {"data": [...], "total": 2}
        """
        tool_name = "describe_symbols"
        with (
            track_latency(REQUEST_LATENCY, tool=tool_name),
            create_span("mcp.tool.describe_symbols", kind=SpanKind.INTERNAL) as span,
        ):
            span.set_attribute("mcp.tool.name", tool_name)
            try:
                page = service.describe(ids, limit=limit, offset=offset, kind=_kind(symbol_type))
            except PaginationValidationError as exc:
                span.set_attribute("error", True)
                REQUEST_COUNT.labels(tool=tool_name, status="error").inc()
                return {"error": str(exc)}

            REQUEST_COUNT.labels(tool=tool_name, status="ok").inc()
            return page_payload(page)

    @mcp.tool(name="get_symbol", annotations={"title": "Get symbol", "readOnlyHint": True})
    async def get_symbol(
        id: Annotated[str, "Exact symbol ID, e.g. 'CreateUser@iam.function'"],
        ctx: Context | None = None,
    ) -> dict[str, Any]:
        """Get detailed information about one symbol by its ID.

        Returns {"symbol": {...}} or {"symbol": null} when the ID is unknown.
        """
        tool_name = "get_symbol"
        with track_latency(REQUEST_LATENCY, tool=tool_name):
            entity = service.get_by_id(id)
            REQUEST_COUNT.labels(tool=tool_name, status="ok" if entity else "miss").inc()
            return {"symbol": entity.to_payload() if entity else None}


def _register_command_tools(mcp: FastMCP, service: CatalogService) -> None:
    @mcp.tool(name="run_command", annotations={"title": "Run command"})
    async def run_command(
        id: Annotated[str, "Command ID in 'ns/name' form (see search_symbols with symbol_type='command')"],
        args: Annotated[dict[str, Any] | None, "Arguments matching the command's schema"] = None,
        ctx: Context | None = None,
    ) -> dict[str, Any]:
        """Run a catalog command and return its result."""
        tool_name = "run_command"
        with (
            track_latency(REQUEST_LATENCY, tool=tool_name),
            create_span(
                "mcp.tool.run_command",
                kind=SpanKind.INTERNAL,
                attributes={"command.id": id, "mcp.tool.name": tool_name},
            ) as span,
        ):
            try:
                result = await service.run_command(id, args)
            except (UnknownCommandError, CommandExecutionError) as exc:
                span.set_attribute("error", True)
                logger.warning("run_command failed - id=%s: %s", id, exc)
                REQUEST_COUNT.labels(tool=tool_name, status="error").inc()
                return {"error": str(exc)}

            REQUEST_COUNT.labels(tool=tool_name, status="ok").inc()
            return {"result": result}


def _register_resource(mcp: FastMCP, spec: ResourceSpec, settings: Settings) -> None:
    @mcp.resource(spec.get_uri(), name=spec.title, description=spec.description, mime_type=spec.mime_type)
    async def _read() -> str:
        try:
            return await read_resource(spec, timeout=settings.http_timeout)
        except RemoteFetchError as exc:
            raise ResourceError(REMOTE_FETCH_FAILED) from exc
