"""
Tool registry with dispatch table for MCP server.

Built once at startup; routing is a dictionary lookup.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from . import handlers
from .definitions import TOOL_DEFINITIONS
from .types import ToolResult, ToolSpec

if TYPE_CHECKING:
    from ..controller import BraveController

logger = logging.getLogger("mcp.brave.registry")

HANDLERS = {
    "open_url": handlers.handle_open_url,
    "get_current_tab": handlers.handle_get_current_tab,
    "list_tabs": handlers.handle_list_tabs,
    "close_tab": handlers.handle_close_tab,
    "switch_to_tab": handlers.handle_switch_to_tab,
    "reload_tab": handlers.handle_reload_tab,
    "go_back": handlers.handle_go_back,
    "go_forward": handlers.handle_go_forward,
    "execute_javascript": handlers.handle_execute_javascript,
    "get_page_content": handlers.handle_get_page_content,
}


class ToolRegistry:
    """Registry of tool specs keyed by name."""

    def __init__(self) -> None:
        self._specs: dict[str, ToolSpec] = {}

    def register(self, spec: ToolSpec) -> None:
        self._specs[spec.name] = spec

    def has(self, name: str) -> bool:
        return name in self._specs

    def dispatch(self, name: str, controller: BraveController, arguments: dict[str, Any]) -> ToolResult:
        """Dispatch tool call to its handler. Callers check ``has`` first."""
        return self._specs[name].handler(controller, arguments)

    @property
    def tool_names(self) -> list[str]:
        return list(self._specs.keys())

    @property
    def definitions(self) -> list[dict[str, Any]]:
        return [spec.definition for spec in self._specs.values()]

    def __len__(self) -> int:
        return len(self._specs)


def create_default_registry() -> ToolRegistry:
    registry = ToolRegistry()
    for definition in TOOL_DEFINITIONS:
        name = definition["name"]
        registry.register(ToolSpec(name=name, handler=HANDLERS[name], definition=definition))
    logger.debug("registered %d tools", len(registry))
    return registry


__all__ = ["HANDLERS", "ToolRegistry", "create_default_registry"]
