#!/usr/bin/env python3
"""
Browser Actions MCP Server

FastMCP server exposing schema-validated browser tools (navigate, history,
tabs, ...) backed by one Playwright session per server process.

Usage:
    # Run with STDIO transport (for agent integration)
    browser-actions --stdio

    # Run with HTTP transport on a persistent profile
    browser-actions --port 4010 --user-data-dir ~/.browser-actions/profiles/default
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

from fastmcp import FastMCP
from fastmcp.tools import Tool as MCPTool
from fastmcp.tools.tool import ToolResult as MCPToolResult
from mcp.types import ToolAnnotations
from playwright.async_api import (
    Error as PlaywrightError,
    TimeoutError as PlaywrightTimeout,
)
from pydantic import Field

from .config import BrowserConfig, load_config
from .context import Context
from .dispatch import ToolRegistry
from .errors import BrowserActionError
from .tool import Tool
from .tools import all_tools

logger = logging.getLogger("browser_actions")


def setup_logger(stdio: bool = False) -> None:
    """Configure the package logger. STDIO mode logs to stderr to keep stdout clean."""
    if not logger.handlers:
        stream = sys.stderr if stdio else sys.stdout
        handler = logging.StreamHandler(stream)
        formatter = logging.Formatter("[BROWSER] %(message)s")
        handler.setFormatter(formatter)
        logger.addHandler(handler)
        logger.setLevel(logging.INFO)


# ---------------------------------------------------------------------------
# Registration
# ---------------------------------------------------------------------------


async def call_registry_tool(registry: ToolRegistry, name: str, arguments: dict[str, Any] | None) -> dict:
    """
    Dispatch one tool call and render failures as error dicts.

    Returns:
        The registry response, or {"ok": False, "error": ..., "errorType": ...}
    """
    try:
        return await registry.call(name, arguments)
    except BrowserActionError as e:
        logger.info(f"Tool '{name}' failed: {e!s}")
        return e.to_dict()
    except PlaywrightTimeout:
        return {"ok": False, "error": "Navigation timed out", "errorType": "TimeoutError"}
    except PlaywrightError as e:
        return {"ok": False, "error": f"Browser error: {e!s}", "errorType": "BrowserError"}


class RegistryTool(MCPTool):
    """
    FastMCP tool that forwards raw arguments to the registry.

    The advertised input schema is the tool's own pydantic model, so field
    bounds reach MCP clients unchanged and every argument, unknown ones
    included, is validated by the registry.
    """

    registry: Any = Field(exclude=True, repr=False)

    @classmethod
    def from_tool(cls, registry: ToolRegistry, tool: Tool) -> RegistryTool:
        schema = tool.schema
        return cls(
            name=schema.name,
            description=schema.description,
            parameters=schema.input_schema.model_json_schema(),
            annotations=ToolAnnotations(
                title=schema.title,
                readOnlyHint=schema.type == "readOnly",
                destructiveHint=schema.type == "destructive",
            ),
            registry=registry,
        )

    async def run(self, arguments: dict[str, Any]) -> MCPToolResult:
        response = await call_registry_tool(self.registry, self.name, arguments)
        return MCPToolResult(structured_content=response)


def register_tools(mcp: FastMCP, registry: ToolRegistry) -> list[str]:
    """
    Register every tool held by the registry with the MCP server.

    Returns:
        Names of the registered tools
    """
    for tool in registry.tools():
        mcp.add_tool(RegistryTool.from_tool(registry, tool))
    return registry.get_registered_names()


def create_server(config: BrowserConfig, context: Context | None = None) -> tuple[FastMCP, ToolRegistry]:
    """Create the FastMCP server, its session Context and the tool registry."""
    context = context or Context(config)
    registry = ToolRegistry(
        context,
        all_tools(config.capture_snapshot),
        capabilities=config.capabilities,
    )

    @asynccontextmanager
    async def lifespan(_server: FastMCP) -> AsyncIterator[dict]:
        try:
            yield {}
        finally:
            await context.close()

    mcp = FastMCP("browser-actions", lifespan=lifespan)
    register_tools(mcp, registry)
    return mcp, registry


# ── Entry point ───────────────────────────────────────────────────────────


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Browser Actions MCP Server")
    parser.add_argument(
        "--port",
        type=int,
        default=int(os.getenv("BROWSER_ACTIONS_PORT", "4010")),
        help="HTTP server port (default: 4010)",
    )
    parser.add_argument(
        "--host",
        default="0.0.0.0",
        help="HTTP server host (default: 0.0.0.0)",
    )
    parser.add_argument(
        "--stdio",
        action="store_true",
        help="Use STDIO transport instead of HTTP",
    )
    parser.add_argument("--config", type=Path, default=None, help="JSON configuration file")
    parser.add_argument("--browser", choices=["chromium", "firefox", "webkit"], default=None)
    parser.add_argument("--user-data-dir", default=None, help="Browser profile directory")
    headless = parser.add_mutually_exclusive_group()
    headless.add_argument("--headless", dest="headless", action="store_true", default=None)
    headless.add_argument("--headed", dest="headless", action="store_false")
    parser.add_argument(
        "--caps",
        default=None,
        help="Comma-separated capabilities to enable (default: all)",
    )
    parser.add_argument(
        "--no-snapshot",
        dest="capture_snapshot",
        action="store_false",
        default=None,
        help="Do not attach page snapshots to tool responses",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """Entry point for the Browser Actions MCP server."""
    args = _build_parser().parse_args(argv)
    setup_logger(stdio=args.stdio)

    config = load_config(
        args.config,
        browser=args.browser,
        user_data_dir=args.user_data_dir,
        headless=args.headless,
        capabilities=args.caps,
        capture_snapshot=args.capture_snapshot,
    )
    mcp, registry = create_server(config)

    if not args.stdio:
        names = registry.get_registered_names()
        logger.info(f"Registered {len(names)} browser tools: {', '.join(names)}")

    if args.stdio:
        mcp.run(transport="stdio")
    else:
        logger.info(f"Starting Browser Actions server on {args.host}:{args.port}")
        mcp.run(transport="http", host=args.host, port=args.port)


if __name__ == "__main__":
    main()
