"""
Tab handle: one open page inside the browser session.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from playwright.async_api import Error as PlaywrightError, Page

if TYPE_CHECKING:
    from .context import Context

logger = logging.getLogger(__name__)


class Tab:
    """
    Wraps a Playwright Page.

    The Context tracks its tabs; a Tab only refers back to the Context so it
    can report its index and unregister itself when the page closes.
    """

    def __init__(self, context: Context, page: Page, navigation_timeout_ms: int):
        self.context = context
        self.page = page
        self.console_messages: list[dict[str, Any]] = []
        self._navigation_timeout_ms = navigation_timeout_ms
        page.on("console", self._capture_console)
        page.on("close", self._on_close)

    def __repr__(self) -> str:
        return f"Tab(index={self.index}, url={self.url!r})"

    @property
    def index(self) -> int:
        """Position of this tab in the context's tab list (-1 once detached)."""
        try:
            return self.context.tabs.index(self)
        except ValueError:
            return -1

    @property
    def url(self) -> str:
        return self.page.url

    async def title(self) -> str:
        try:
            return await self.page.title()
        except PlaywrightError:
            return ""

    def _capture_console(self, msg: Any) -> None:
        self.console_messages.append({"type": msg.type, "text": msg.text})

    def _on_close(self, _page: Any = None) -> None:
        self.context._on_page_closed(self)

    async def navigate(self, url: str) -> None:
        """Go to ``url`` and wait for the DOM to be ready."""
        logger.info(f"Navigating tab {self.index} to {url}")
        await self.page.goto(url, wait_until="domcontentloaded", timeout=self._navigation_timeout_ms)

    async def go_back(self) -> None:
        # Playwright returns None when there is no history entry; that is a no-op
        await self.page.go_back()

    async def go_forward(self) -> None:
        await self.page.go_forward()

    async def wait_for_network_idle(self, timeout_ms: int = 5000) -> None:
        try:
            await self.page.wait_for_load_state("networkidle", timeout=timeout_ms)
        except PlaywrightError as e:
            logger.warning(f"Network did not go idle on tab {self.index}: {e!s}")

    async def capture_snapshot(self) -> str:
        """
        Get an accessibility snapshot of the page.

        Uses Playwright's aria_snapshot() for a compact, indented text tree
        with role/name annotations, e.g.::

            - navigation "Main":
              - link "Home"
            - main:
              - heading "Welcome"
        """
        return await self.page.locator(":root").aria_snapshot()

    async def describe(self) -> dict[str, Any]:
        return {
            "index": self.index,
            "url": self.url,
            "title": await self.title(),
            "active": self.context.current_tab is self,
        }
