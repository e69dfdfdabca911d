"""Tool registry and dispatch."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from .context import Context
from .errors import DuplicateToolName, UnknownTool
from .tool import Tool, ToolResult

logger = logging.getLogger(__name__)


@dataclass
class RegisteredTool:
    """A tool and the position it was registered at."""

    tool: Tool
    order: int


class ToolRegistry:
    """
    Name-keyed registry of tools for one capability configuration.

    Dispatch is a dict lookup: validate arguments against the tool's input
    schema, call its handler with the session Context, then honour the
    result's ``wait_for_network`` and ``capture_snapshot`` flags.
    """

    def __init__(
        self,
        context: Context,
        tools: Iterable[Tool] = (),
        capabilities: Iterable[str] | None = None,
    ):
        self.context = context
        self._capabilities = frozenset(capabilities) if capabilities is not None else None
        self._tools: dict[str, RegisteredTool] = {}
        self._seen_names: set[str] = set()
        for tool in tools:
            self.register(tool)

    def register(self, tool: Tool) -> bool:
        """
        Register a tool.

        Args:
            tool: Tool produced by define_tool

        Returns:
            True if registered, False if its capability is not enabled

        Raises:
            DuplicateToolName: If a tool with the same name is already registered
        """
        if tool.name in self._seen_names:
            raise DuplicateToolName(tool.name)
        self._seen_names.add(tool.name)
        if self._capabilities is not None and tool.capability not in self._capabilities:
            logger.debug(f"Skipping tool '{tool.name}': capability '{tool.capability}' not enabled")
            return False
        self._tools[tool.name] = RegisteredTool(tool=tool, order=len(self._tools))
        return True

    def get(self, name: str) -> Tool:
        registered = self._tools.get(name)
        if registered is None:
            raise UnknownTool(name)
        return registered.tool

    def has_tool(self, name: str) -> bool:
        return name in self._tools

    def get_registered_names(self) -> list[str]:
        return [r.tool.name for r in sorted(self._tools.values(), key=lambda r: r.order)]

    def tools(self) -> list[Tool]:
        return [self._tools[name].tool for name in self.get_registered_names()]

    def list_tools(self) -> list[dict[str, Any]]:
        """MCP listings for every registered tool, in registration order."""
        return [tool.schema.to_mcp() for tool in self.tools()]

    async def run(self, name: str, arguments: dict[str, Any] | None = None) -> ToolResult:
        """
        Validate arguments and run the tool's handler.

        Raises:
            UnknownTool: If no tool is registered under ``name``
            ValidationFailed: If ``arguments`` do not match the input schema;
                the handler is not called
        """
        tool = self.get(name)
        params = tool.schema.validate_arguments(arguments)
        logger.info(f"Running tool '{name}'")
        return await tool.handle(self.context, params)

    async def call(self, name: str, arguments: dict[str, Any] | None = None) -> dict[str, Any]:
        """
        Run a tool and build the caller-facing response.

        Returns:
            Dict with the replay code, current page URL/title, open tabs when
            there is more than one, and a page snapshot when requested
        """
        result = await self.run(name, arguments)
        response: dict[str, Any] = {"ok": True, "code": "\n".join(result.code)}

        tab = self.context.current_tab
        if tab is not None:
            if result.wait_for_network:
                await tab.wait_for_network_idle()
            response["url"] = tab.url
            response["title"] = await tab.title()
            if result.capture_snapshot:
                response["snapshot"] = await tab.capture_snapshot()
        if len(self.context.tabs) > 1:
            response["tabs"] = await self.context.list_tabs()

        response.update(result.data)
        return response
