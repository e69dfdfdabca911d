"""
Session-wide tools - close the browser, wait, read console messages.
"""

from __future__ import annotations

import asyncio
from typing import Literal

from pydantic import Field

from ..context import Context, TabAccess
from ..tool import NoParams, Tool, ToolParams, ToolResult, ToolSchema, define_tool

MAX_WAIT_SECONDS = 10.0


class WaitParams(ToolParams):
    time: float = Field(ge=0, description=f"The time to wait in seconds (capped at {MAX_WAIT_SECONDS:g})")


class ConsoleParams(ToolParams):
    level: Literal["log", "debug", "info", "warning", "error"] | None = Field(
        default=None, description="Only return messages of this level"
    )


def close_browser(capture_snapshot: bool) -> Tool:
    async def handle(context: Context, params: NoParams) -> ToolResult:
        await context.close()
        return ToolResult(
            code=["// Internal to close the page", "await page.close();"],
            capture_snapshot=False,
            wait_for_network=False,
        )

    return define_tool(
        capability="core",
        schema=ToolSchema(
            name="browser_close",
            title="Close browser",
            description="Close the browser. The next navigation starts a fresh session.",
            input_schema=NoParams,
            type="destructive",
        ),
        handle=handle,
    )


def wait_for(capture_snapshot: bool) -> Tool:
    async def handle(context: Context, params: WaitParams) -> ToolResult:
        seconds = min(params.time, MAX_WAIT_SECONDS)
        await asyncio.sleep(seconds)
        return ToolResult(
            code=[f"// Waited for {seconds:g} seconds"],
            capture_snapshot=capture_snapshot and context.current_tab is not None,
            wait_for_network=False,
        )

    return define_tool(
        capability="core",
        schema=ToolSchema(
            name="browser_wait_for",
            title="Wait",
            description="Wait for a specified time in seconds",
            input_schema=WaitParams,
            type="readOnly",
        ),
        handle=handle,
    )


def console_messages(capture_snapshot: bool) -> Tool:
    async def handle(context: Context, params: ConsoleParams) -> ToolResult:
        tab = await context.acquire_tab(TabAccess.REQUIRE)
        messages = tab.console_messages
        if params.level:
            messages = [m for m in messages if m.get("type") == params.level]
        return ToolResult(
            code=["// <internal code to get console messages>"],
            capture_snapshot=False,
            wait_for_network=False,
            data={"messages": list(messages), "count": len(messages)},
        )

    return define_tool(
        capability="core",
        schema=ToolSchema(
            name="browser_console_messages",
            title="Get console messages",
            description="Returns all console messages of the current tab",
            input_schema=ConsoleParams,
            type="readOnly",
        ),
        handle=handle,
    )


def common_tools(capture_snapshot: bool) -> list[Tool]:
    return [
        close_browser(capture_snapshot),
        wait_for(capture_snapshot),
        console_messages(capture_snapshot),
    ]
