"""Unit tests for CatalogService search, describe and command execution."""

import pytest

from symbols_mcp_server.domain.model import EntityKind
from symbols_mcp_server.errors import CommandExecutionError, PaginationValidationError, UnknownCommandError
from symbols_mcp_server.search.scoring import ScoringOptions
from symbols_mcp_server.service_layer.catalog_service import CatalogService


@pytest.fixture
def service(sample_catalog):
    return CatalogService(sample_catalog)


@pytest.mark.unit
class TestSearch:
    def test_single_match(self, service):
        page = service.search("create")
        assert [e.id for e in page.data] == ["CreateUser@iam.function"]
        assert page.total == 1
        assert page.next is None

    def test_empty_query_returns_everything_alphabetically(self, service):
        page = service.search("", limit=1)
        assert [e.id for e in page.data] == ["CreateUser@iam.function"]
        assert page.total == 5
        assert page.next == 1

    def test_empty_query_full_order(self, service):
        page = service.search("")
        assert [e.name for e in page.data] == ["CreateUser", "DeleteUser", "UserProfile", "about", "add"]

    def test_tie_breaks_on_name(self, service):
        page = service.search("user", kind=EntityKind.FUNCTION)
        assert [e.name for e in page.data] == ["CreateUser", "DeleteUser"]

    def test_kind_filter(self, service):
        page = service.search("", kind=EntityKind.MODEL)
        assert [e.id for e in page.data] == ["UserProfile@iam.model"]

    def test_typo_still_matches(self, service):
        page = service.search("profle")
        assert [e.id for e in page.data] == ["UserProfile@iam.model"]

    def test_namespace_matches_commands(self, service):
        page = service.search("demo")
        assert [e.id for e in page.data] == ["demo/about", "demo/add"]
        assert page.total == 2

    def test_namespace_prefix_filter(self, service):
        page = service.search("", ns="de")
        assert [e.id for e in page.data] == ["demo/about", "demo/add"]
        assert service.search("", ns="other").total == 0

    def test_namespace_filter_combines_with_query(self, service):
        page = service.search("add", ns="demo")
        assert [e.id for e in page.data] == ["demo/add"]

    def test_empty_namespace_is_no_filter(self, service):
        assert service.search("", ns="").total == 5

    def test_no_match(self, service):
        page = service.search("zzzz")
        assert page.data == []
        assert page.total == 0

    def test_offset_past_end(self, service):
        page = service.search("", limit=2, offset=10)
        assert page.data == []
        assert page.total == 0

    def test_rejects_bad_pagination(self, service):
        with pytest.raises(PaginationValidationError):
            service.search("user", limit=0)
        with pytest.raises(PaginationValidationError):
            service.search("user", offset=-1)

    def test_custom_max_limit(self, sample_catalog):
        service = CatalogService(sample_catalog, max_limit=2)
        with pytest.raises(PaginationValidationError, match="limit cannot exceed 2"):
            service.search("", limit=3)

    def test_match_all_tags_option_is_applied(self, sample_catalog):
        service = CatalogService(sample_catalog, scoring=ScoringOptions(match_all_tags=True))
        page = service.search("user")
        assert service.scoring.match_all_tags is True
        assert [e.name for e in page.data] == ["CreateUser", "DeleteUser", "UserProfile"]


@pytest.mark.unit
class TestDescribe:
    def test_all_in_insertion_order(self, service):
        page = service.describe(limit=100)
        assert [e.id for e in page.data][:3] == [
            "CreateUser@iam.function",
            "DeleteUser@iam.function",
            "UserProfile@iam.model",
        ]
        assert page.total == 5

    def test_unknown_ids_are_skipped(self, service):
        page = service.describe(["UserProfile@iam.model", "missing", "CreateUser@iam.function"])
        assert [e.id for e in page.data] == ["CreateUser@iam.function", "UserProfile@iam.model"]
        assert page.total == 2

    def test_single_id_string(self, service):
        page = service.describe("demo/add")
        assert [e.id for e in page.data] == ["demo/add"]

    def test_empty_id_list(self, service):
        page = service.describe([])
        assert page.data == []
        assert page.total == 0

    def test_kind_filter(self, service):
        page = service.describe(kind=EntityKind.COMMAND)
        assert [e.id for e in page.data] == ["demo/add", "demo/about"]

    def test_pagination(self, service):
        page = service.describe(limit=2, offset=2)
        assert [e.id for e in page.data] == ["UserProfile@iam.model", "demo/add"]
        assert page.next == 4


@pytest.mark.unit
class TestGetById:
    def test_found(self, service):
        assert service.get_by_id("UserProfile@iam.model").name == "UserProfile"

    def test_missing_is_none(self, service):
        assert service.get_by_id("Nope@iam.model") is None

    def test_kind_mismatch_is_none(self, service):
        assert service.get_by_id("UserProfile@iam.model", EntityKind.FUNCTION) is None


@pytest.mark.unit
class TestRunCommand:
    @pytest.mark.asyncio
    async def test_handler(self, service):
        result = await service.run_command("demo/add", {"a": 2, "b": 3})
        assert result["result"] == 5
        assert result["command"] == "demo/add"

    @pytest.mark.asyncio
    async def test_static_data(self, service):
        result = await service.run_command("demo/about")
        assert result["message"] == "hi"
        assert result["type"] == "static"

    @pytest.mark.asyncio
    async def test_unknown_command(self, service):
        with pytest.raises(UnknownCommandError, match="Unknown command: demo/missing"):
            await service.run_command("demo/missing")

    @pytest.mark.asyncio
    async def test_non_command_id_is_unknown(self, service):
        with pytest.raises(UnknownCommandError):
            await service.run_command("CreateUser@iam.function")

    @pytest.mark.asyncio
    async def test_handler_error_propagates(self, service):
        with pytest.raises(CommandExecutionError):
            await service.run_command("demo/add", {"a": "two", "b": 3})
