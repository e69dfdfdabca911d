"""
Browser session context.

One Context per client connection. It owns the configuration, the running
browser session and the ordered list of tabs, and it is the only place any
of them change. Tools get at the browser exclusively through
``acquire_tab`` / ``ensure_tab`` / ``current_tab_or_die`` and the tab
management methods below.

Lifecycle::

    UNINITIALIZED --ensure_tab()--> ACTIVE --close()--> CLOSING --> UNINITIALIZED

No tab exists without a live session: whenever the session is torn down the
tab list is emptied and there is no current tab.
"""

from __future__ import annotations

import asyncio
import logging
from enum import Enum
from typing import Any

from playwright.async_api import Page

from .browser_factory import BrowserContextFactory, BrowserSessionHandle, PlaywrightContextFactory
from .config import BrowserConfig
from .errors import NoActiveTab, SessionStartFailed, TabNotFound
from .tab import Tab

logger = logging.getLogger(__name__)


class SessionState(str, Enum):
    UNINITIALIZED = "uninitialized"
    ACTIVE = "active"
    CLOSING = "closing"


class TabAccess(str, Enum):
    """How a tool obtains its tab.

    ENSURE starts a session and opens a tab when needed.
    REQUIRE only returns an already open tab and fails with NoActiveTab otherwise.
    """

    ENSURE = "ensure"
    REQUIRE = "require"


class Context:
    def __init__(
        self,
        config: BrowserConfig | None = None,
        factory: BrowserContextFactory | None = None,
    ):
        self._config = config or BrowserConfig()
        self._factory = factory or PlaywrightContextFactory()
        self._session: BrowserSessionHandle | None = None
        self._tabs: list[Tab] = []
        self._current_tab: Tab | None = None
        self._state = SessionState.UNINITIALIZED
        self._lock = asyncio.Lock()

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def config(self) -> BrowserConfig:
        return self._config

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def tabs(self) -> tuple[Tab, ...]:
        return tuple(self._tabs)

    @property
    def current_tab(self) -> Tab | None:
        return self._current_tab

    @property
    def is_running(self) -> bool:
        return self._session is not None

    # ------------------------------------------------------------------
    # Tab acquisition
    # ------------------------------------------------------------------

    async def acquire_tab(self, access: TabAccess = TabAccess.ENSURE) -> Tab:
        """
        Return the current tab.

        Args:
            access: ENSURE to start a session and open a tab on demand,
                REQUIRE to fail instead of creating anything

        Raises:
            NoActiveTab: access is REQUIRE and no tab is open
            SessionStartFailed: access is ENSURE and the browser could not start
        """
        if access is TabAccess.REQUIRE:
            return self.current_tab_or_die()

        async with self._lock:
            if self._session is None:
                await self._start_session()
            if self._current_tab is None:
                await self._open_page()
            assert self._current_tab is not None
            return self._current_tab

    async def ensure_tab(self) -> Tab:
        return await self.acquire_tab(TabAccess.ENSURE)

    def current_tab_or_die(self) -> Tab:
        if self._current_tab is None:
            raise NoActiveTab()
        return self._current_tab

    # ------------------------------------------------------------------
    # Tab management
    # ------------------------------------------------------------------

    async def new_tab(self) -> Tab:
        """Open a new tab (starting the session if needed) and make it current."""
        async with self._lock:
            if self._session is None:
                await self._start_session(open_page=False)
            return await self._open_page()

    async def select_tab(self, index: int) -> Tab:
        tab = self._tab_at(index)
        self._current_tab = tab
        await tab.page.bring_to_front()
        return tab

    async def close_tab(self, index: int | None = None) -> Tab:
        """Close the tab at ``index`` (default: the current tab)."""
        tab = self.current_tab_or_die() if index is None else self._tab_at(index)
        await tab.page.close()
        # The page "close" event normally does this already
        self._on_page_closed(tab)
        logger.info(f"Closed tab, {len(self._tabs)} remaining")
        return tab

    async def list_tabs(self) -> list[dict[str, Any]]:
        return [await tab.describe() for tab in self._tabs]

    def _tab_at(self, index: int) -> Tab:
        if not 0 <= index < len(self._tabs):
            raise TabNotFound(index, len(self._tabs))
        return self._tabs[index]

    # ------------------------------------------------------------------
    # Session lifecycle
    # ------------------------------------------------------------------

    async def close(self) -> None:
        """Tear down the browser session, if any. All tabs are discarded."""
        async with self._lock:
            await self._close_session()

    async def reconfigure(self, **changes: Any) -> BrowserConfig:
        """
        Close the running session, then apply configuration changes.

        The next ``ensure_tab()`` starts a fresh session with the new
        configuration. Switching ``user_data_dir`` this way starts over with
        that profile's history and storage; anything open in the old session
        is lost.
        """
        async with self._lock:
            await self._close_session()
            self._config = self._config.with_changes(**changes)
            logger.info(f"Reconfigured browser session: {self._config.to_dict()}")
            return self._config

    async def _start_session(self, open_page: bool = True) -> None:
        config = self._config
        try:
            session = await self._factory.start(config)
        except Exception as e:
            logger.error(f"Failed to start {config.browser} session: {e!s}")
            raise SessionStartFailed(f"Failed to start {config.browser}: {e!s}") from e

        self._session = session
        self._state = SessionState.ACTIVE
        try:
            session.context.on("page", lambda page, s=session: self._on_page_created(page, s))
            # A persistent profile may come back with pages already open
            for page in list(session.context.pages):
                self._add_tab(page)
            if open_page and self._current_tab is None:
                await self._open_page()
        except Exception as e:
            try:
                await self._close_session()
            except Exception as close_error:
                logger.warning(f"Error tearing down half-started session: {close_error!s}")
            raise SessionStartFailed(f"Failed to open a page in the new session: {e!s}") from e

        logger.info(
            f"Started browser session: browser={config.browser}, "
            f"user_data_dir={config.user_data_dir}, tabs={len(self._tabs)}"
        )

    async def _close_session(self) -> None:
        session = self._session
        if session is None:
            return
        self._state = SessionState.CLOSING
        # Drop tabs before closing so page "close" events find nothing to remove
        self._tabs.clear()
        self._current_tab = None
        self._session = None
        try:
            await session.close()
            logger.info("Closed browser session")
        finally:
            self._state = SessionState.UNINITIALIZED

    async def _open_page(self) -> Tab:
        assert self._session is not None
        page = await self._session.context.new_page()
        tab = self._add_tab(page)
        self._current_tab = tab
        logger.info(f"Opened tab {tab.index}")
        return tab

    # ------------------------------------------------------------------
    # Page events
    # ------------------------------------------------------------------

    def _add_tab(self, page: Page) -> Tab:
        for tab in self._tabs:
            if tab.page is page:
                return tab
        tab = Tab(self, page, navigation_timeout_ms=self._config.navigation_timeout_ms)
        self._tabs.append(tab)
        if self._current_tab is None:
            self._current_tab = tab
        return tab

    def _on_page_created(self, page: Page, session: BrowserSessionHandle) -> None:
        # Late events from a replaced session are ignored
        if self._session is session:
            self._add_tab(page)

    def _on_page_closed(self, tab: Tab) -> None:
        if tab not in self._tabs:
            return
        index = self._tabs.index(tab)
        self._tabs.remove(tab)
        if self._current_tab is tab:
            self._current_tab = self._tabs[min(index, len(self._tabs) - 1)] if self._tabs else None
