"""Unit tests for MCP tool registration and payloads."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any
from unittest.mock import MagicMock, patch

from fastmcp.exceptions import ResourceError
import pytest

from symbols_mcp_server import server
from symbols_mcp_server.config import Settings
from symbols_mcp_server.domain.model import Page
from symbols_mcp_server.errors import RemoteFetchError
from symbols_mcp_server.resources import ResourceSpec
from symbols_mcp_server.service_layer.catalog_service import CatalogService


class ToolCaptureMCP:
    """Minimal FastMCP stub that records registered tools and resources."""

    def __init__(self) -> None:
        self.tools: dict[str, dict[str, Any]] = {}
        self.resources: dict[str, dict[str, Any]] = {}

    def tool(
        self, name: str, annotations: dict[str, Any] | None = None
    ) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
        def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
            self.tools[name] = {"func": func, "annotations": annotations or {}}
            return func

        return decorator

    def resource(self, uri: str, **kwargs: Any) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
        def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
            self.resources[uri] = {"func": func, **kwargs}
            return func

        return decorator


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None)


@pytest.fixture
def mcp(sample_catalog, settings) -> ToolCaptureMCP:
    stub = ToolCaptureMCP()
    service = CatalogService(sample_catalog, max_limit=settings.max_limit)
    server._register_catalog_tools(stub, service, settings)
    server._register_command_tools(stub, service)
    return stub


async def _call(mcp: ToolCaptureMCP, name: str, **kwargs: Any) -> Any:
    return await mcp.tools[name]["func"](**kwargs)


@pytest.mark.unit
def test_registers_expected_tools(mcp):
    assert set(mcp.tools) == {"search_symbols", "describe_symbols", "get_symbol", "run_command"}
    assert mcp.tools["search_symbols"]["annotations"]["readOnlyHint"] is True
    assert "readOnlyHint" not in mcp.tools["run_command"]["annotations"]


@pytest.mark.unit
def test_page_payload_omits_next_on_last_page(sample_catalog):
    entity = sample_catalog.get("CreateUser@iam.function")
    assert server.page_payload(Page(data=[entity], total=1)) == {"data": [entity.to_payload()], "total": 1}
    assert server.page_payload(Page(data=[entity], total=2, next=1))["next"] == 1


@pytest.mark.unit
class TestSearchSymbols:
    @pytest.mark.asyncio
    async def test_search(self, mcp):
        result = await _call(mcp, "search_symbols", query="create")
        assert result["total"] == 1
        assert result["data"][0]["id"] == "CreateUser@iam.function"
        assert result["data"][0]["type"] == "function"
        assert "next" not in result

    @pytest.mark.asyncio
    async def test_empty_query_paginates(self, mcp):
        result = await _call(mcp, "search_symbols", query="", limit=2)
        assert [item["name"] for item in result["data"]] == ["CreateUser", "DeleteUser"]
        assert result["total"] == 5
        assert result["next"] == 2

    @pytest.mark.asyncio
    async def test_symbol_type_filter(self, mcp):
        result = await _call(mcp, "search_symbols", query="", symbol_type="command")
        assert [item["id"] for item in result["data"]] == ["demo/about", "demo/add"]

    @pytest.mark.asyncio
    async def test_namespace_filter(self, mcp):
        result = await _call(mcp, "search_symbols", query="", ns="demo")
        assert [item["id"] for item in result["data"]] == ["demo/about", "demo/add"]

    @pytest.mark.asyncio
    async def test_invalid_limit_is_reported(self, mcp):
        assert await _call(mcp, "search_symbols", query="user", limit=0) == {"error": "limit must be positive"}

    @pytest.mark.asyncio
    async def test_limit_above_maximum_is_reported(self, mcp):
        result = await _call(mcp, "search_symbols", query="user", limit=5000)
        assert result == {"error": "limit cannot exceed 1000"}


@pytest.mark.unit
class TestDescribeSymbols:
    @pytest.mark.asyncio
    async def test_ids(self, mcp):
        result = await _call(mcp, "describe_symbols", ids=["UserProfile@iam.model", "missing"])
        assert result["total"] == 1
        model = result["data"][0]
        assert model["fields"]["displayName"] == {"type": "string", "required": True}

    @pytest.mark.asyncio
    async def test_single_id_string(self, mcp):
        result = await _call(mcp, "describe_symbols", ids="demo/add")
        assert result["data"][0]["ns"] == "demo"
        assert result["data"][0]["handler"] == "add"

    @pytest.mark.asyncio
    async def test_invalid_offset_is_reported(self, mcp):
        assert await _call(mcp, "describe_symbols", offset=-1) == {"error": "offset must be non-negative"}


@pytest.mark.unit
class TestGetSymbol:
    @pytest.mark.asyncio
    async def test_found(self, mcp):
        result = await _call(mcp, "get_symbol", id="CreateUser@iam.function")
        assert result["symbol"]["name"] == "CreateUser"
        assert result["symbol"]["tags"] == ["user", "create"]
        assert "example" not in result["symbol"]

    @pytest.mark.asyncio
    async def test_missing(self, mcp):
        assert await _call(mcp, "get_symbol", id="Nope") == {"symbol": None}


@pytest.mark.unit
class TestRunCommandTool:
    @pytest.mark.asyncio
    async def test_success(self, mcp):
        result = await _call(mcp, "run_command", id="demo/add", args={"a": 1, "b": 1})
        assert result["result"]["result"] == 2

    @pytest.mark.asyncio
    async def test_unknown(self, mcp):
        assert await _call(mcp, "run_command", id="demo/nope") == {"error": "Unknown command: demo/nope"}

    @pytest.mark.asyncio
    async def test_handler_failure(self, mcp):
        result = await _call(mcp, "run_command", id="demo/add", args={"a": "x"})
        assert result == {"error": "Both a and b must be numbers"}


@pytest.mark.unit
class TestResources:
    @pytest.mark.asyncio
    async def test_inline_resource(self, settings):
        stub = ToolCaptureMCP()
        spec = ResourceSpec(title="Read Me", type="inline", description="Intro", content="hello")
        server._register_resource(stub, spec, settings)

        registered = stub.resources["resource://read-me"]
        assert registered["name"] == "Read Me"
        assert registered["mime_type"] == "text/plain"
        assert await registered["func"]() == "hello"

    @pytest.mark.asyncio
    async def test_remote_failure_is_masked(self, settings):
        stub = ToolCaptureMCP()
        spec = ResourceSpec(title="Remote", type="remote", description="d", content="https://example.com/x")
        server._register_resource(stub, spec, settings)

        with patch.object(server, "read_resource", side_effect=RemoteFetchError("https://example.com/x", 500)):
            with pytest.raises(ResourceError, match="Failed to fetch resource"):
                await stub.resources["resource://remote"]["func"]()


@pytest.mark.unit
def test_create_server_wires_everything(sample_catalog, settings):
    service = CatalogService(sample_catalog)
    spec = ResourceSpec(title="Note", type="inline", description="d", content="x")

    with patch.object(server, "FastMCP") as fastmcp_cls:
        fastmcp_cls.return_value = MagicMock()
        mcp = server.create_server(service, settings, [spec])

    kwargs = fastmcp_cls.call_args.kwargs
    assert kwargs["name"] == "symbols-mcp-server"
    assert kwargs["mask_error_details"] is True
    assert "2 functions, 1 models, 2 commands" in kwargs["instructions"]
    assert "Recommended Workflow" in kwargs["instructions"]
    assert mcp.tool.call_count == 4
    mcp.resource.assert_called_once()
