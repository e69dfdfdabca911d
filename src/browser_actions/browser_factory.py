"""
Browser session provider.

Starts Playwright and hands back a BrowserContext for a BrowserConfig.
Two modes, chosen by ``config.user_data_dir``:
- Persistent: launch_persistent_context on the profile directory, so cookies,
  storage and history survive restarts
- Ephemeral: a plain launch plus new_context, nothing written to disk
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Protocol

from playwright.async_api import Browser, BrowserContext, async_playwright

from .config import BrowserConfig

logger = logging.getLogger(__name__)

# Stealth script to hide automation detection
# Injected via add_init_script() to run before any page scripts
STEALTH_SCRIPT = """
Object.defineProperty(navigator, 'webdriver', {
    get: () => false,
    configurable: true
});
delete Object.getPrototypeOf(navigator).webdriver;
if (window.chrome) {
    window.chrome.runtime = undefined;
}
"""


class BrowserSessionHandle(Protocol):
    """A running browser session as seen by the Context."""

    @property
    def context(self) -> BrowserContext: ...

    async def close(self) -> None: ...


class BrowserContextFactory(Protocol):
    async def start(self, config: BrowserConfig) -> BrowserSessionHandle: ...


@dataclass
class PlaywrightSession:
    """Owns the playwright driver, the optional Browser, and the BrowserContext."""

    context: BrowserContext
    browser: Browser | None = None
    _playwright: Any = None

    async def close(self) -> None:
        # Context first: for persistent profiles this flushes the profile to disk
        try:
            await self.context.close()
        finally:
            try:
                if self.browser is not None:
                    await self.browser.close()
                    self.browser = None
            finally:
                if self._playwright is not None:
                    await self._playwright.stop()
                    self._playwright = None


class PlaywrightContextFactory:
    """Default session provider backed by Playwright's async API."""

    async def start(self, config: BrowserConfig) -> PlaywrightSession:
        playwright = await async_playwright().start()
        try:
            browser_type = getattr(playwright, config.browser)
            launch_args = list(config.launch_args) if config.browser == "chromium" else []
            context_options: dict[str, Any] = {
                "viewport": config.viewport,
                "locale": config.locale,
            }
            if config.effective_user_agent:
                context_options["user_agent"] = config.effective_user_agent

            browser: Browser | None = None
            if config.user_data_dir is not None:
                config.user_data_dir.mkdir(parents=True, exist_ok=True)
                logger.info(
                    f"Starting persistent browser: browser={config.browser}, "
                    f"user_data_dir={config.user_data_dir}, headless={config.headless}"
                )
                # Returns BrowserContext directly, no separate Browser object
                context = await browser_type.launch_persistent_context(
                    user_data_dir=str(config.user_data_dir),
                    headless=config.headless,
                    channel=config.channel,
                    args=launch_args,
                    **context_options,
                )
            else:
                logger.info(f"Starting ephemeral browser: browser={config.browser}, headless={config.headless}")
                browser = await browser_type.launch(
                    headless=config.headless,
                    channel=config.channel,
                    args=launch_args,
                )
                context = await browser.new_context(**context_options)

            context.set_default_timeout(config.default_timeout_ms)
            context.set_default_navigation_timeout(config.navigation_timeout_ms)
            if config.browser == "chromium":
                await context.add_init_script(STEALTH_SCRIPT)
        except BaseException:
            await playwright.stop()
            raise

        return PlaywrightSession(context=context, browser=browser, _playwright=playwright)
