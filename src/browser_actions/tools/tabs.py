"""
Browser tab management tools - list, new, select, close.
"""

from __future__ import annotations

from pydantic import Field

from ..context import Context
from ..tool import NoParams, Tool, ToolParams, ToolResult, ToolSchema, define_tool, js_quote


class NewTabParams(ToolParams):
    url: str | None = Field(
        default=None,
        description="The URL to navigate to in the new tab. If omitted, the new tab will be blank.",
    )


class SelectTabParams(ToolParams):
    index: int = Field(ge=0, description="The index of the tab to select")


class CloseTabParams(ToolParams):
    index: int | None = Field(
        default=None,
        ge=0,
        description="The index of the tab to close. Closes current tab if not provided.",
    )


def list_tabs(capture_snapshot: bool) -> Tool:
    async def handle(context: Context, params: NoParams) -> ToolResult:
        return ToolResult(
            code=["// <internal code to list tabs>"],
            capture_snapshot=False,
            wait_for_network=False,
            data={"tabs": await context.list_tabs()},
        )

    return define_tool(
        capability="tabs",
        schema=ToolSchema(
            name="browser_tab_list",
            title="List tabs",
            description="List browser tabs",
            input_schema=NoParams,
            type="readOnly",
        ),
        handle=handle,
    )


def new_tab(capture_snapshot: bool) -> Tool:
    async def handle(context: Context, params: NewTabParams) -> ToolResult:
        tab = await context.new_tab()
        code = ["// <internal code to open a new tab>"]
        if params.url:
            await tab.navigate(params.url)
            code.append(f"await page.goto({js_quote(params.url)});")
        return ToolResult(code=code, capture_snapshot=capture_snapshot, wait_for_network=False)

    return define_tool(
        capability="tabs",
        schema=ToolSchema(
            name="browser_tab_new",
            title="Open a new tab",
            description="Open a new tab",
            input_schema=NewTabParams,
            type="readOnly",
        ),
        handle=handle,
    )


def select_tab(capture_snapshot: bool) -> Tool:
    async def handle(context: Context, params: SelectTabParams) -> ToolResult:
        await context.select_tab(params.index)
        return ToolResult(
            code=[f"// <internal code to select tab {params.index}>"],
            capture_snapshot=capture_snapshot,
            wait_for_network=False,
        )

    return define_tool(
        capability="tabs",
        schema=ToolSchema(
            name="browser_tab_select",
            title="Select a tab",
            description="Select a tab by index",
            input_schema=SelectTabParams,
            type="readOnly",
        ),
        handle=handle,
    )


def close_tab(capture_snapshot: bool) -> Tool:
    async def handle(context: Context, params: CloseTabParams) -> ToolResult:
        await context.close_tab(params.index)
        label = "current" if params.index is None else str(params.index)
        return ToolResult(
            code=[f"// <internal code to close tab {label}>"],
            capture_snapshot=capture_snapshot,
            wait_for_network=False,
        )

    return define_tool(
        capability="tabs",
        schema=ToolSchema(
            name="browser_tab_close",
            title="Close a tab",
            description="Close a tab",
            input_schema=CloseTabParams,
            type="destructive",
        ),
        handle=handle,
    )


def tab_tools(capture_snapshot: bool) -> list[Tool]:
    return [
        list_tabs(capture_snapshot),
        new_tab(capture_snapshot),
        select_tab(capture_snapshot),
        close_tab(capture_snapshot),
    ]
