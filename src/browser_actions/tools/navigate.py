"""
Navigation tools - navigate, back, forward.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import Field

from ..context import Context, TabAccess
from ..tool import NoParams, Tool, ToolParams, ToolResult, ToolSchema, define_tool, js_quote


class NavigateParams(ToolParams):
    url: str = Field(description="The URL to navigate to")
    user_data_dir: str | None = Field(
        default=None,
        description="Custom user data directory for the browser profile. "
        "Switching profiles restarts the browser and discards open tabs.",
    )


def _profile_changed(context: Context, user_data_dir: str) -> bool:
    current = context.config.user_data_dir
    return current is None or current != Path(user_data_dir).expanduser()


def navigate(capture_snapshot: bool) -> Tool:
    async def handle(context: Context, params: NavigateParams) -> ToolResult:
        if params.user_data_dir and _profile_changed(context, params.user_data_dir):
            # The next ensure_tab() starts a new browser on the new profile
            await context.reconfigure(user_data_dir=Path(params.user_data_dir).expanduser())

        tab = await context.ensure_tab()
        await tab.navigate(params.url)

        return ToolResult(
            code=[
                f"// Navigate to {params.url}",
                f"await page.goto({js_quote(params.url)});",
            ],
            capture_snapshot=capture_snapshot,
            wait_for_network=False,
        )

    return define_tool(
        capability="core",
        schema=ToolSchema(
            name="browser_navigate",
            title="Navigate to a URL",
            description="Navigate to a URL",
            input_schema=NavigateParams,
            type="destructive",
        ),
        handle=handle,
    )


def go_back(capture_snapshot: bool) -> Tool:
    async def handle(context: Context, params: NoParams) -> ToolResult:
        # Tolerant: starts a session if there is none, which then has no history
        tab = await context.acquire_tab(TabAccess.ENSURE)
        await tab.go_back()
        return ToolResult(
            code=[
                "// Navigate back",
                "await page.goBack();",
            ],
            capture_snapshot=capture_snapshot,
            wait_for_network=False,
        )

    return define_tool(
        capability="history",
        schema=ToolSchema(
            name="browser_navigate_back",
            title="Go back",
            description="Go back to the previous page",
            input_schema=NoParams,
            type="readOnly",
        ),
        handle=handle,
    )


def go_forward(capture_snapshot: bool) -> Tool:
    async def handle(context: Context, params: NoParams) -> ToolResult:
        tab = await context.acquire_tab(TabAccess.REQUIRE)
        await tab.go_forward()
        return ToolResult(
            code=[
                "// Navigate forward",
                "await page.goForward();",
            ],
            capture_snapshot=capture_snapshot,
            wait_for_network=False,
        )

    return define_tool(
        capability="history",
        schema=ToolSchema(
            name="browser_navigate_forward",
            title="Go forward",
            description="Go forward to the next page",
            input_schema=NoParams,
            type="readOnly",
        ),
        handle=handle,
    )


def navigation_tools(capture_snapshot: bool) -> list[Tool]:
    return [
        navigate(capture_snapshot),
        go_back(capture_snapshot),
        go_forward(capture_snapshot),
    ]
