"""Tool schema definitions."""

from __future__ import annotations

from typing import Any

# AppleScript ids are numbers, DevTools ids are strings; both are accepted.
TAB_ID_TYPES = ["string", "integer"]


def _tab_id(description: str) -> dict[str, Any]:
    return {"type": TAB_ID_TYPES, "description": description}


OPEN_URL_TOOL: dict[str, Any] = {
    "name": "open_url",
    "description": "Open a URL in Brave",
    "inputSchema": {
        "type": "object",
        "properties": {
            "url": {"type": "string", "description": "URL to open"},
            "new_tab": {"type": "boolean", "description": "Open in a new tab", "default": True},
        },
        "required": ["url"],
    },
}

GET_CURRENT_TAB_TOOL: dict[str, Any] = {
    "name": "get_current_tab",
    "description": "Get information about the current active tab",
    "inputSchema": {"type": "object", "properties": {}},
}

LIST_TABS_TOOL: dict[str, Any] = {
    "name": "list_tabs",
    "description": "List all open tabs in Brave",
    "inputSchema": {
        "type": "object",
        "properties": {
            "window_id": {"type": TAB_ID_TYPES, "description": "Specific window ID to list tabs from"},
        },
    },
}

CLOSE_TAB_TOOL: dict[str, Any] = {
    "name": "close_tab",
    "description": "Close a specific tab",
    "inputSchema": {
        "type": "object",
        "properties": {"tab_id": _tab_id("ID of the tab to close")},
        "required": ["tab_id"],
    },
}

SWITCH_TO_TAB_TOOL: dict[str, Any] = {
    "name": "switch_to_tab",
    "description": "Switch to a specific tab",
    "inputSchema": {
        "type": "object",
        "properties": {"tab_id": _tab_id("ID of the tab to switch to")},
        "required": ["tab_id"],
    },
}

RELOAD_TAB_TOOL: dict[str, Any] = {
    "name": "reload_tab",
    "description": "Reload a tab",
    "inputSchema": {
        "type": "object",
        "properties": {"tab_id": _tab_id("ID of the tab to reload")},
    },
}

GO_BACK_TOOL: dict[str, Any] = {
    "name": "go_back",
    "description": "Navigate back in browser history",
    "inputSchema": {"type": "object", "properties": {"tab_id": _tab_id("ID of the tab")}},
}

GO_FORWARD_TOOL: dict[str, Any] = {
    "name": "go_forward",
    "description": "Navigate forward in browser history",
    "inputSchema": {"type": "object", "properties": {"tab_id": _tab_id("ID of the tab")}},
}

EXECUTE_JAVASCRIPT_TOOL: dict[str, Any] = {
    "name": "execute_javascript",
    "description": "Execute JavaScript in the current tab",
    "inputSchema": {
        "type": "object",
        "properties": {
            "code": {"type": "string", "description": "JavaScript code to execute"},
            "tab_id": _tab_id("ID of the tab"),
        },
        "required": ["code"],
    },
}

GET_PAGE_CONTENT_TOOL: dict[str, Any] = {
    "name": "get_page_content",
    "description": "Get the text content of the current page, with links as 'text [href]'",
    "inputSchema": {"type": "object", "properties": {"tab_id": _tab_id("ID of the tab")}},
}

TOOL_DEFINITIONS: list[dict[str, Any]] = [
    OPEN_URL_TOOL,
    GET_CURRENT_TAB_TOOL,
    LIST_TABS_TOOL,
    CLOSE_TAB_TOOL,
    SWITCH_TO_TAB_TOOL,
    RELOAD_TAB_TOOL,
    GO_BACK_TOOL,
    GO_FORWARD_TOOL,
    EXECUTE_JAVASCRIPT_TOOL,
    GET_PAGE_CONTENT_TOOL,
]

__all__ = ["TOOL_DEFINITIONS"]
