"""Shared fixtures for browser action tests.

The Playwright engine is replaced by small fakes that keep per-page history,
so the whole lifecycle can be exercised without launching a browser.
"""

from __future__ import annotations

from collections import defaultdict
from typing import Any, Callable

import pytest

from browser_actions import BrowserConfig, Context, ToolRegistry, all_tools


class FakeLocator:
    def __init__(self, page: FakePage):
        self._page = page

    async def aria_snapshot(self) -> str:
        return f'- document "{self._page.url}"'


class FakePage:
    """Page with a linear history stack, like a real tab."""

    def __init__(self, url: str = "about:blank"):
        self.history: list[str] = [url]
        self.position = 0
        self.closed = False
        self.calls: list[tuple[str, Any]] = []
        self._handlers: dict[str, list[Callable]] = defaultdict(list)

    @property
    def url(self) -> str:
        return self.history[self.position]

    def on(self, event: str, handler: Callable) -> None:
        self._handlers[event].append(handler)

    def emit(self, event: str, payload: Any) -> None:
        for handler in list(self._handlers[event]):
            handler(payload)

    async def goto(self, url: str, **kwargs: Any) -> None:
        self.calls.append(("goto", url))
        del self.history[self.position + 1 :]
        self.history.append(url)
        self.position += 1

    async def go_back(self) -> None:
        self.calls.append(("go_back", None))
        if self.position > 0:
            self.position -= 1

    async def go_forward(self) -> None:
        self.calls.append(("go_forward", None))
        if self.position < len(self.history) - 1:
            self.position += 1

    async def title(self) -> str:
        return f"Title of {self.url}"

    async def bring_to_front(self) -> None:
        self.calls.append(("bring_to_front", None))

    async def wait_for_load_state(self, state: str, **kwargs: Any) -> None:
        self.calls.append(("wait_for_load_state", state))

    def locator(self, selector: str) -> FakeLocator:
        return FakeLocator(self)

    async def close(self) -> None:
        self.closed = True
        self.emit("close", self)


class FakeBrowserContext:
    def __init__(self, pages: list[FakePage] | None = None, fail_new_page: bool = False):
        self.pages: list[FakePage] = list(pages or [])
        self.closed = False
        self.fail_new_page = fail_new_page
        self._handlers: dict[str, list[Callable]] = defaultdict(list)

    def on(self, event: str, handler: Callable) -> None:
        self._handlers[event].append(handler)

    async def new_page(self) -> FakePage:
        if self.fail_new_page:
            raise RuntimeError("page crashed")
        page = FakePage()
        self.pages.append(page)
        for handler in list(self._handlers["page"]):
            handler(page)
        return page

    def open_popup(self, url: str) -> FakePage:
        """Simulate the page opening a window on its own (window.open)."""
        page = FakePage(url)
        self.pages.append(page)
        for handler in list(self._handlers["page"]):
            handler(page)
        return page


class FakeSession:
    def __init__(self, config: BrowserConfig, context: FakeBrowserContext):
        self.config = config
        self.context = context
        self.closed = False

    async def close(self) -> None:
        self.closed = True
        self.context.closed = True


class FakeFactory:
    """Session provider recording every start."""

    def __init__(self) -> None:
        self.sessions: list[FakeSession] = []
        self.fail_next: Exception | None = None
        self.fail_new_page = False
        self.restored_pages: list[FakePage] = []

    async def start(self, config: BrowserConfig) -> FakeSession:
        if self.fail_next is not None:
            error, self.fail_next = self.fail_next, None
            raise error
        context = FakeBrowserContext(self.restored_pages, fail_new_page=self.fail_new_page)
        self.restored_pages = []
        session = FakeSession(config, context)
        self.sessions.append(session)
        return session

    @property
    def started(self) -> int:
        return len(self.sessions)


@pytest.fixture
def factory() -> FakeFactory:
    return FakeFactory()


@pytest.fixture
def config(tmp_path) -> BrowserConfig:
    return BrowserConfig(user_data_dir=tmp_path / "profile-a")


@pytest.fixture
def context(config: BrowserConfig, factory: FakeFactory) -> Context:
    return Context(config, factory=factory)


@pytest.fixture
def registry(context: Context) -> ToolRegistry:
    return ToolRegistry(context, all_tools(capture_snapshot=True))
