"""Tests for the FastMCP wiring."""

from __future__ import annotations

import json

import pytest
from fastmcp import Client, FastMCP
from playwright.async_api import Error as PlaywrightError

from browser_actions import BrowserConfig, Context, ToolRegistry, all_tools
from browser_actions.server import RegistryTool, _build_parser, call_registry_tool, create_server, register_tools


@pytest.fixture
def mcp() -> FastMCP:
    """Create a fresh FastMCP instance for testing."""
    return FastMCP("test-server")


def _payload(result) -> dict:
    return json.loads(result.content[0].text)


class TestRegistryTool:
    def test_parameters_come_from_input_model(self, registry):
        tool = RegistryTool.from_tool(registry, registry.get("browser_navigate"))

        assert tool.name == "browser_navigate"
        assert tool.parameters["required"] == ["url"]
        assert set(tool.parameters["properties"]) == {"url", "user_data_dir"}
        assert tool.parameters["additionalProperties"] is False

    def test_annotations_follow_tool_type(self, registry):
        back = RegistryTool.from_tool(registry, registry.get("browser_navigate_back"))
        close = RegistryTool.from_tool(registry, registry.get("browser_close"))

        assert back.annotations.readOnlyHint is True
        assert close.annotations.destructiveHint is True


class TestCallRegistryTool:
    @pytest.mark.asyncio
    async def test_calls_registry(self, registry, context):
        response = await call_registry_tool(registry, "browser_navigate", {"url": "https://example.com"})

        assert response["ok"] is True
        assert context.current_tab.url == "https://example.com"

    @pytest.mark.asyncio
    async def test_reports_action_errors(self, registry, factory):
        response = await call_registry_tool(registry, "browser_navigate_forward", {})

        assert response["ok"] is False
        assert response["errorType"] == "NoActiveTab"
        assert factory.started == 0

    @pytest.mark.asyncio
    async def test_reports_session_start_failure(self, registry, factory):
        factory.fail_next = PlaywrightError("Executable doesn't exist")

        response = await call_registry_tool(registry, "browser_navigate", {"url": "https://example.com"})

        assert response["ok"] is False
        assert response["errorType"] == "SessionStartFailed"

    @pytest.mark.asyncio
    async def test_reports_validation_errors(self, registry):
        response = await call_registry_tool(registry, "browser_tab_select", {"index": -1})
        assert response["errorType"] == "ValidationFailed"

    @pytest.mark.asyncio
    async def test_reports_browser_errors(self, registry, context):
        await call_registry_tool(registry, "browser_navigate", {"url": "https://a.test/"})

        async def broken_goto(url, **kwargs):
            raise PlaywrightError("net::ERR_NAME_NOT_RESOLVED")

        context.current_tab.page.goto = broken_goto
        response = await call_registry_tool(registry, "browser_navigate", {"url": "https://nowhere.invalid/"})

        assert response == {
            "ok": False,
            "error": "Browser error: net::ERR_NAME_NOT_RESOLVED",
            "errorType": "BrowserError",
        }


class TestMCPClient:
    @pytest.fixture
    def server(self, config, factory) -> FastMCP:
        mcp, _ = create_server(config, Context(config, factory=factory))
        return mcp

    @pytest.mark.asyncio
    async def test_listed_schema_keeps_field_bounds(self, server):
        async with Client(server) as client:
            tools = {tool.name: tool for tool in await client.list_tools()}

        index = tools["browser_tab_select"].inputSchema["properties"]["index"]
        assert index["type"] == "integer"
        assert index["minimum"] == 0
        assert tools["browser_close"].annotations.destructiveHint is True

    @pytest.mark.asyncio
    async def test_navigate_through_client(self, server):
        async with Client(server) as client:
            result = await client.call_tool("browser_navigate", {"url": "https://example.com"})

        payload = _payload(result)
        assert payload["ok"] is True
        assert payload["url"] == "https://example.com"

    @pytest.mark.asyncio
    async def test_unknown_argument_is_validation_failure(self, server, factory):
        async with Client(server) as client:
            result = await client.call_tool("browser_navigate", {"url": "https://example.com", "bogus": 1})

        payload = _payload(result)
        assert payload["ok"] is False
        assert payload["errorType"] == "ValidationFailed"
        assert any(detail["loc"] == ["bogus"] for detail in payload["details"])
        assert factory.started == 0

    @pytest.mark.asyncio
    async def test_out_of_range_argument_is_validation_failure(self, server):
        async with Client(server) as client:
            result = await client.call_tool("browser_tab_select", {"index": -1})

        assert _payload(result)["errorType"] == "ValidationFailed"


class TestRegisterTools:
    def test_registers_every_tool(self, mcp, context):
        registry = ToolRegistry(context, all_tools(True))
        names = register_tools(mcp, registry)
        assert names == registry.get_registered_names()

    def test_create_server_respects_capabilities(self, factory):
        config = BrowserConfig(capabilities=("core",))
        server, registry = create_server(config, Context(config, factory=factory))

        assert isinstance(server, FastMCP)
        assert "browser_navigate" in registry.get_registered_names()
        assert "browser_tab_new" not in registry.get_registered_names()


class TestParser:
    def test_defaults_leave_config_untouched(self):
        args = _build_parser().parse_args([])
        assert args.headless is None
        assert args.capture_snapshot is None
        assert args.stdio is False

    def test_flags(self):
        args = _build_parser().parse_args(["--stdio", "--headed", "--caps", "core,tabs", "--no-snapshot"])
        assert args.stdio is True
        assert args.headless is False
        assert args.caps == "core,tabs"
        assert args.capture_snapshot is False
