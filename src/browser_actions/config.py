"""Browser configuration.

Reads ``~/.browser-actions/configuration.json`` (or the file named by
``BROWSER_ACTIONS_CONFIG``), then environment variables, then explicit
overrides, and folds them into a single immutable BrowserConfig.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any

# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------

CONFIG_FILE = Path.home() / ".browser-actions" / "configuration.json"

SUPPORTED_BROWSERS = ("chromium", "firefox", "webkit")

# Browser User-Agent for stealth mode, chromium only
BROWSER_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/131.0.0.0 Safari/537.36"
)

# Chrome flags shared between all chromium launches
CHROME_ARGS = (
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
    "--disable-blink-features=AutomationControlled",
    "--no-first-run",
    "--no-default-browser-check",
)

DEFAULT_TIMEOUT_MS = 30000
DEFAULT_NAVIGATION_TIMEOUT_MS = 60000


@dataclass(frozen=True)
class BrowserConfig:
    """
    Launch options for one browser session.

    ``user_data_dir`` selects the profile directory. When it is None the
    session runs in an ephemeral context that keeps nothing on disk.
    ``capabilities`` of None enables every tool capability.
    """

    browser: str = "chromium"
    channel: str | None = None
    headless: bool = True
    user_data_dir: Path | None = None
    viewport: dict[str, int] = field(default_factory=lambda: {"width": 1920, "height": 1080})
    user_agent: str | None = None
    locale: str = "en-US"
    launch_args: tuple[str, ...] = CHROME_ARGS
    default_timeout_ms: int = DEFAULT_TIMEOUT_MS
    navigation_timeout_ms: int = DEFAULT_NAVIGATION_TIMEOUT_MS
    capabilities: tuple[str, ...] | None = None
    capture_snapshot: bool = True

    def __post_init__(self) -> None:
        if self.browser not in SUPPORTED_BROWSERS:
            raise ValueError(
                f"Unsupported browser '{self.browser}'. Expected one of: {', '.join(SUPPORTED_BROWSERS)}"
            )
        if self.user_data_dir is not None and not isinstance(self.user_data_dir, Path):
            object.__setattr__(self, "user_data_dir", Path(self.user_data_dir).expanduser())
        if isinstance(self.capabilities, str):
            object.__setattr__(self, "capabilities", _split_list(self.capabilities))
        elif self.capabilities is not None:
            object.__setattr__(self, "capabilities", tuple(self.capabilities))
        object.__setattr__(self, "launch_args", tuple(self.launch_args))

    @property
    def persistent(self) -> bool:
        return self.user_data_dir is not None

    @property
    def effective_user_agent(self) -> str | None:
        """The configured user agent, or the Chrome one when chromium runs without one."""
        if self.user_agent:
            return self.user_agent
        return BROWSER_USER_AGENT if self.browser == "chromium" else None

    def with_changes(self, **changes: Any) -> BrowserConfig:
        """Return a copy with the given fields replaced."""
        return replace(self, **changes)

    def to_dict(self) -> dict[str, Any]:
        return {
            "browser": self.browser,
            "channel": self.channel,
            "headless": self.headless,
            "user_data_dir": str(self.user_data_dir) if self.user_data_dir else None,
            "capabilities": list(self.capabilities) if self.capabilities is not None else None,
            "capture_snapshot": self.capture_snapshot,
        }


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------


def read_config_file(path: Path | None = None) -> dict[str, Any]:
    """Load the JSON configuration file, returning {} when absent or unreadable."""
    if path is None:
        env_path = os.environ.get("BROWSER_ACTIONS_CONFIG")
        path = Path(env_path) if env_path else CONFIG_FILE
    if not path.exists():
        return {}
    try:
        with open(path, encoding="utf-8-sig") as f:
            data = json.load(f)
    except (json.JSONDecodeError, OSError):
        return {}
    if not isinstance(data, dict):
        return {}
    # Settings may sit at the top level or under a "browser" section
    section = data.get("browser")
    return section if isinstance(section, dict) else data


def _split_list(value: str) -> tuple[str, ...]:
    return tuple(part.strip() for part in value.split(",") if part.strip())


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


def read_env() -> dict[str, Any]:
    """Collect configuration overrides from BROWSER_ACTIONS_* variables."""
    values: dict[str, Any] = {}
    if browser := os.environ.get("BROWSER_ACTIONS_BROWSER"):
        values["browser"] = browser
    if channel := os.environ.get("BROWSER_ACTIONS_CHANNEL"):
        values["channel"] = channel
    if headless := os.environ.get("BROWSER_ACTIONS_HEADLESS"):
        values["headless"] = _parse_bool(headless)
    if user_data_dir := os.environ.get("BROWSER_ACTIONS_USER_DATA_DIR"):
        values["user_data_dir"] = user_data_dir
    if caps := os.environ.get("BROWSER_ACTIONS_CAPS"):
        values["capabilities"] = _split_list(caps)
    return values


def load_config(path: Path | None = None, **overrides: Any) -> BrowserConfig:
    """
    Build a BrowserConfig from file, environment and explicit overrides.

    Later sources win. Overrides whose value is None are ignored so CLI
    flags that were not given do not mask the file or environment.

    Args:
        path: Configuration file (default: BROWSER_ACTIONS_CONFIG or ~/.browser-actions/configuration.json)
        **overrides: Field values that take precedence over everything else

    Returns:
        The merged BrowserConfig
    """
    known = {f.name for f in fields(BrowserConfig)}
    merged: dict[str, Any] = {}
    for source in (read_config_file(path), read_env(), overrides):
        merged.update({k: v for k, v in source.items() if k in known and v is not None})
    return BrowserConfig(**merged)
