"""
Browser Actions - schema-validated browser tools over one managed session.

Provides:
- Tool definitions: a schema (pydantic input model, readOnly/destructive
  type, capability tag) bound to an async handler
- Session context: lazy start, teardown and reconfiguration of the
  Playwright browser session, including switching profile directories
- Tab handles and the ensure/require tab acquisition modes
- A registry that validates, dispatches and builds uniform responses
- A FastMCP server exposing every registered tool

Example usage:
    from browser_actions import BrowserConfig, Context, ToolRegistry, all_tools

    context = Context(BrowserConfig(headless=True))
    registry = ToolRegistry(context, all_tools(capture_snapshot=True))
    response = await registry.call("browser_navigate", {"url": "https://example.com"})
"""

from .config import BrowserConfig, load_config
from .context import Context, SessionState, TabAccess
from .dispatch import ToolRegistry
from .errors import (
    BrowserActionError,
    DuplicateToolName,
    NoActiveTab,
    SchemaIncomplete,
    SessionStartFailed,
    TabNotFound,
    ToolRegistrationError,
    UnknownTool,
    ValidationFailed,
)
from .tab import Tab
from .tool import Tool, ToolFactory, ToolParams, ToolResult, ToolSchema, define_tool
from .tools import all_tools

__all__ = [
    # Configuration
    "BrowserConfig",
    "load_config",
    # Session lifecycle
    "Context",
    "SessionState",
    "TabAccess",
    "Tab",
    # Tool definitions and dispatch
    "Tool",
    "ToolFactory",
    "ToolParams",
    "ToolResult",
    "ToolSchema",
    "ToolRegistry",
    "define_tool",
    "all_tools",
    # Errors
    "BrowserActionError",
    "ToolRegistrationError",
    "SchemaIncomplete",
    "DuplicateToolName",
    "UnknownTool",
    "ValidationFailed",
    "NoActiveTab",
    "TabNotFound",
    "SessionStartFailed",
]
