"""
Tool handlers.

Each handler pulls its own typed arguments out of the raw argument object and
calls one facade operation. "Tab not found" comes back as an ordinary text
result; only exceptions become error results (handled in main).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from ..tabs import normalize_tab_id
from .types import ToolArgumentError, ToolResult

if TYPE_CHECKING:
    from ..controller import BraveController


def _required_str(arguments: dict[str, Any], key: str) -> str:
    value = arguments.get(key)
    if not isinstance(value, str) or not value:
        raise ToolArgumentError(f"Missing required argument: {key}")
    return value


def _required_tab_id(arguments: dict[str, Any]) -> str:
    tab_id = normalize_tab_id(arguments.get("tab_id"))
    if tab_id is None:
        raise ToolArgumentError("Missing required argument: tab_id")
    return tab_id


def _optional_tab_id(arguments: dict[str, Any]) -> str | None:
    return normalize_tab_id(arguments.get("tab_id"))


def handle_open_url(controller: BraveController, arguments: dict[str, Any]) -> ToolResult:
    url = _required_str(arguments, "url")
    new_tab = arguments.get("new_tab", True)
    if not isinstance(new_tab, bool):
        raise ToolArgumentError("new_tab must be a boolean")
    return ToolResult.text(controller.open_url(url, new_tab=new_tab))


def handle_get_current_tab(controller: BraveController, arguments: dict[str, Any]) -> ToolResult:  # noqa: ARG001
    return ToolResult.json(controller.get_current_tab())


def handle_list_tabs(controller: BraveController, arguments: dict[str, Any]) -> ToolResult:  # noqa: ARG001
    # window_id is accepted for compatibility; neither backend filters by window.
    return ToolResult.json(controller.list_tabs())


def handle_close_tab(controller: BraveController, arguments: dict[str, Any]) -> ToolResult:
    return ToolResult.text(controller.close_tab(_required_tab_id(arguments)))


def handle_switch_to_tab(controller: BraveController, arguments: dict[str, Any]) -> ToolResult:
    return ToolResult.text(controller.switch_to_tab(_required_tab_id(arguments)))


def handle_reload_tab(controller: BraveController, arguments: dict[str, Any]) -> ToolResult:
    return ToolResult.text(controller.reload_tab(_optional_tab_id(arguments)))


def handle_go_back(controller: BraveController, arguments: dict[str, Any]) -> ToolResult:
    return ToolResult.text(controller.go_back(_optional_tab_id(arguments)))


def handle_go_forward(controller: BraveController, arguments: dict[str, Any]) -> ToolResult:
    return ToolResult.text(controller.go_forward(_optional_tab_id(arguments)))


def handle_execute_javascript(controller: BraveController, arguments: dict[str, Any]) -> ToolResult:
    code = _required_str(arguments, "code")
    return ToolResult.text(controller.execute_javascript(code, _optional_tab_id(arguments)))


def handle_get_page_content(controller: BraveController, arguments: dict[str, Any]) -> ToolResult:
    return ToolResult.text(controller.get_page_content(_optional_tab_id(arguments)))


__all__ = [
    "handle_close_tab",
    "handle_execute_javascript",
    "handle_get_current_tab",
    "handle_get_page_content",
    "handle_go_back",
    "handle_go_forward",
    "handle_list_tabs",
    "handle_open_url",
    "handle_reload_tab",
    "handle_switch_to_tab",
]
