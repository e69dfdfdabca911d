"""
Browser tools organized by category.

- common: Close the browser, wait, console messages (capability "core")
- navigate: URL navigation ("core") and history ("history")
- tabs: Tab management - list, new, select, close ("tabs")

Each module exposes tool factories taking the ``capture_snapshot`` flag.
"""

from ..tool import Tool
from .common import common_tools
from .navigate import navigation_tools
from .tabs import tab_tools


def all_tools(capture_snapshot: bool) -> list[Tool]:
    """Every tool, in listing order."""
    return [
        *common_tools(capture_snapshot),
        *navigation_tools(capture_snapshot),
        *tab_tools(capture_snapshot),
    ]


__all__ = [
    "all_tools",
    "common_tools",
    "navigation_tools",
    "tab_tools",
]
