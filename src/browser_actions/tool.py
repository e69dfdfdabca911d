"""
Tool definitions.

A tool is data plus a function: a ToolSchema describing the command and a
handler that receives the session Context and the validated parameters.
Every tool is produced by ``define_tool`` so all of them share one shape::

    def navigate(capture_snapshot: bool) -> Tool:
        return define_tool(
            capability="core",
            schema=ToolSchema(
                name="browser_navigate",
                title="Navigate to a URL",
                description="Navigate to a URL",
                input_schema=NavigateParams,
                type="destructive",
            ),
            handle=...,
        )
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Literal

from pydantic import BaseModel, ConfigDict, ValidationError

from .errors import SchemaIncomplete, ValidationFailed

if TYPE_CHECKING:
    from .context import Context

ToolType = Literal["readOnly", "destructive"]
TOOL_TYPES: tuple[str, ...] = ("readOnly", "destructive")

# Capability tags used to filter which tools a server exposes
CAPABILITIES: tuple[str, ...] = ("core", "history", "tabs")


class ToolParams(BaseModel):
    """Base for tool input schemas. Unknown fields are rejected."""

    model_config = ConfigDict(extra="forbid")


class NoParams(ToolParams):
    pass


@dataclass(frozen=True)
class ToolResult:
    """
    Uniform tool output.

    ``code`` is replayable Playwright code describing the effect.
    ``capture_snapshot`` asks the dispatcher to attach a page snapshot.
    ``wait_for_network`` asks the dispatcher to wait for network idle first.
    ``data`` is merged into the response for tools that report something.
    """

    code: list[str] = field(default_factory=list)
    capture_snapshot: bool = False
    wait_for_network: bool = False
    data: dict[str, Any] = field(default_factory=dict)


Handler = Callable[["Context", Any], Awaitable[ToolResult]]


@dataclass(frozen=True)
class ToolSchema:
    name: str
    title: str
    description: str
    input_schema: type[BaseModel]
    type: ToolType

    def validate_arguments(self, arguments: dict[str, Any] | None) -> BaseModel:
        """Validate raw arguments, raising ValidationFailed on mismatch."""
        try:
            return self.input_schema.model_validate(arguments or {})
        except ValidationError as e:
            raise ValidationFailed(self.name, e.errors()) from e

    def to_mcp(self) -> dict[str, Any]:
        """Render the listing an MCP client sees for this tool."""
        return {
            "name": self.name,
            "title": self.title,
            "description": self.description,
            "inputSchema": self.input_schema.model_json_schema(),
            "annotations": {
                "title": self.title,
                "readOnlyHint": self.type == "readOnly",
                "destructiveHint": self.type == "destructive",
            },
        }


@dataclass(frozen=True)
class Tool:
    capability: str
    schema: ToolSchema
    handle: Handler

    @property
    def name(self) -> str:
        return self.schema.name


ToolFactory = Callable[[bool], Tool]


def _missing_fields(capability: Any, schema: Any, handle: Any) -> list[str]:
    missing: list[str] = []
    if not isinstance(capability, str) or not capability:
        missing.append("capability")
    if not callable(handle):
        missing.append("handle")
    if schema is None:
        missing.append("schema")
        return missing
    for name in ("name", "title", "description"):
        value = getattr(schema, name, None)
        if not isinstance(value, str) or not value.strip():
            missing.append(name)
    input_schema = getattr(schema, "input_schema", None)
    if not (isinstance(input_schema, type) and issubclass(input_schema, BaseModel)):
        missing.append("input_schema")
    if getattr(schema, "type", None) not in TOOL_TYPES:
        missing.append("type")
    return missing


def define_tool(*, capability: str, schema: ToolSchema, handle: Handler) -> Tool:
    """
    Bind a schema to its handler.

    Only structural completeness is checked here. Arguments are validated
    against ``schema.input_schema`` at dispatch time.

    Raises:
        SchemaIncomplete: If any required schema field is missing or malformed
    """
    missing = _missing_fields(capability, schema, handle)
    if missing:
        raise SchemaIncomplete(getattr(schema, "name", None) or None, missing)
    return Tool(capability=capability, schema=schema, handle=handle)


def js_quote(value: str) -> str:
    """Quote a string as a single-quoted JavaScript literal for replay code."""
    escaped = (
        value.replace("\\", "\\\\")
        .replace("'", "\\'")
        .replace("\n", "\\n")
        .replace("\r", "\\r")
    )
    return f"'{escaped}'"
