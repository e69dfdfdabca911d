"""Tests for configuration loading."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from browser_actions.config import BrowserConfig, load_config, read_config_file

ENV_VARS = (
    "BROWSER_ACTIONS_CONFIG",
    "BROWSER_ACTIONS_BROWSER",
    "BROWSER_ACTIONS_CHANNEL",
    "BROWSER_ACTIONS_HEADLESS",
    "BROWSER_ACTIONS_USER_DATA_DIR",
    "BROWSER_ACTIONS_CAPS",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr("browser_actions.config.CONFIG_FILE", tmp_path / "missing.json")


class TestBrowserConfig:
    def test_defaults(self):
        config = BrowserConfig()
        assert config.browser == "chromium"
        assert config.headless is True
        assert config.user_data_dir is None
        assert config.persistent is False
        assert config.capabilities is None

    def test_user_data_dir_is_path(self):
        config = BrowserConfig(user_data_dir="~/profiles/work")
        assert isinstance(config.user_data_dir, Path)
        assert config.user_data_dir == Path("~/profiles/work").expanduser()
        assert config.persistent is True

    def test_capabilities_from_string(self):
        assert BrowserConfig(capabilities="core, tabs").capabilities == ("core", "tabs")

    def test_unsupported_browser(self):
        with pytest.raises(ValueError):
            BrowserConfig(browser="netscape")

    def test_with_changes_returns_copy(self, tmp_path):
        config = BrowserConfig()
        changed = config.with_changes(user_data_dir=tmp_path)
        assert changed.user_data_dir == tmp_path
        assert config.user_data_dir is None


class TestLoadConfig:
    def test_missing_file_gives_defaults(self):
        assert load_config() == BrowserConfig()

    def test_malformed_file_is_ignored(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("{not json")
        assert read_config_file(path) == {}

    def test_file_values(self, tmp_path):
        path = tmp_path / "configuration.json"
        path.write_text(json.dumps({"browser": {"browser": "firefox", "headless": False, "unknown": 1}}))

        config = load_config(path)

        assert config.browser == "firefox"
        assert config.headless is False

    def test_flat_file_with_browser_name(self, tmp_path):
        path = tmp_path / "configuration.json"
        path.write_text(json.dumps({"browser": "webkit", "locale": "de-DE"}))

        config = load_config(path)

        assert config.browser == "webkit"
        assert config.locale == "de-DE"

    def test_env_overrides_file(self, tmp_path, monkeypatch):
        path = tmp_path / "configuration.json"
        path.write_text(json.dumps({"headless": False, "user_data_dir": "/tmp/from-file"}))
        monkeypatch.setenv("BROWSER_ACTIONS_CONFIG", str(path))
        monkeypatch.setenv("BROWSER_ACTIONS_HEADLESS", "true")
        monkeypatch.setenv("BROWSER_ACTIONS_CAPS", "core,history")

        config = load_config()

        assert config.headless is True
        assert config.user_data_dir == Path("/tmp/from-file")
        assert config.capabilities == ("core", "history")

    def test_explicit_overrides_win_and_none_is_ignored(self, monkeypatch):
        monkeypatch.setenv("BROWSER_ACTIONS_USER_DATA_DIR", "/tmp/from-env")

        config = load_config(user_data_dir="/tmp/from-cli", headless=None)

        assert config.user_data_dir == Path("/tmp/from-cli")
        assert config.headless is True


class TestUserAgent:
    def test_chromium_gets_chrome_user_agent(self):
        assert "Chrome/" in BrowserConfig().effective_user_agent

    @pytest.mark.parametrize("browser", ["firefox", "webkit"])
    def test_other_engines_keep_their_own(self, browser):
        assert BrowserConfig(browser=browser).effective_user_agent is None

    def test_explicit_user_agent_wins(self):
        config = BrowserConfig(browser="firefox", user_agent="custom-agent/1.0")
        assert config.effective_user_agent == "custom-agent/1.0"
