"""Facade between the tool dispatch layer and the active backend."""

from __future__ import annotations

import logging
from typing import Any

from .backends import BrowserBackend, select_backend
from .config import BraveConfig

logger = logging.getLogger("mcp.brave")


class BraveController:
    """One operation interface, whichever backend was selected at construction."""

    def __init__(self, backend: BrowserBackend) -> None:
        self.backend = backend

    @classmethod
    def from_config(cls, config: BraveConfig, platform: str | None = None) -> BraveController:
        backend = select_backend(config, platform)
        logger.info("backend=%s", backend.name)
        return cls(backend)

    def open_url(self, url: str, new_tab: bool = True) -> str:
        self.backend.open_url(url, new_tab=new_tab)
        if new_tab:
            return f"Opened {url} in a new Brave tab"
        return f"Opened {url} in the current Brave tab"

    def get_current_tab(self) -> dict[str, Any]:
        return self.backend.get_current_tab().to_dict()

    def list_tabs(self) -> list[dict[str, Any]]:
        return [tab.to_dict() for tab in self.backend.list_tabs()]

    def close_tab(self, tab_id: str) -> str:
        return self.backend.close_tab(tab_id)

    def switch_to_tab(self, tab_id: str) -> str:
        return self.backend.switch_to_tab(tab_id)

    def reload_tab(self, tab_id: str | None = None) -> str:
        return self.backend.reload_tab(tab_id)

    def go_back(self, tab_id: str | None = None) -> str:
        return self.backend.go_back(tab_id)

    def go_forward(self, tab_id: str | None = None) -> str:
        return self.backend.go_forward(tab_id)

    def execute_javascript(self, code: str, tab_id: str | None = None) -> str:
        return self.backend.execute_javascript(code, tab_id)

    def get_page_content(self, tab_id: str | None = None) -> str:
        return self.backend.get_page_content(tab_id)


__all__ = ["BraveController"]
