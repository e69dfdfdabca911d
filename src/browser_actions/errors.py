"""
Errors raised by tool registration, dispatch and the browser session lifecycle.

Everything derives from BrowserActionError so the MCP layer can report any of
them back to the caller as an ``{"ok": False, ...}`` payload.
"""

from __future__ import annotations

from typing import Any


class BrowserActionError(Exception):
    """Base class for all browser action errors."""

    def to_dict(self) -> dict[str, Any]:
        return {"ok": False, "error": str(self), "errorType": type(self).__name__}


# ---------------------------------------------------------------------------
# Registration (fatal at startup)
# ---------------------------------------------------------------------------


class ToolRegistrationError(BrowserActionError):
    """A tool definition could not be registered."""


class SchemaIncomplete(ToolRegistrationError):
    """A tool schema is missing required fields."""

    def __init__(self, tool_name: str | None, missing: list[str]):
        self.tool_name = tool_name
        self.missing = missing
        label = tool_name or "<unnamed>"
        super().__init__(f"Tool schema '{label}' is incomplete: missing {', '.join(missing)}")


class DuplicateToolName(ToolRegistrationError):
    """Two tools were registered under the same name."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Tool '{name}' is already registered")


# ---------------------------------------------------------------------------
# Dispatch
# ---------------------------------------------------------------------------


class UnknownTool(BrowserActionError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unknown tool: {name}")


class ValidationFailed(BrowserActionError):
    """Caller-supplied arguments do not match the tool's input schema."""

    def __init__(self, tool_name: str, errors: list[dict[str, Any]]):
        self.tool_name = tool_name
        self.errors = errors
        details = "; ".join(
            f"{'.'.join(str(p) for p in err.get('loc', ())) or '<root>'}: {err.get('msg', '')}"
            for err in errors
        )
        super().__init__(f"Invalid arguments for '{tool_name}': {details}")

    def to_dict(self) -> dict[str, Any]:
        payload = super().to_dict()
        payload["details"] = [
            {"loc": list(err.get("loc", ())), "msg": err.get("msg", "")} for err in self.errors
        ]
        return payload


# ---------------------------------------------------------------------------
# Session lifecycle
# ---------------------------------------------------------------------------


class NoActiveTab(BrowserActionError):
    def __init__(self, message: str = "No open tabs. Navigate to a URL to create one."):
        super().__init__(message)


class TabNotFound(BrowserActionError):
    def __init__(self, index: int, count: int):
        self.index = index
        super().__init__(f"Tab {index} not found ({count} open)")


class SessionStartFailed(BrowserActionError):
    """The browser engine failed to start a session."""
