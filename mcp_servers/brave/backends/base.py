"""Operation contract implemented by every backend."""

from __future__ import annotations

from abc import ABC, abstractmethod

from ..tabs import TabInfo


class BrowserBackend(ABC):
    """One behavioral contract over heterogeneous automation mechanisms.

    Per-tab operations take an optional opaque ``tab_id``; ``None`` means the
    current tab. An unknown id yields the "Tab not found" status string rather
    than an exception. Failures raise ``BackendError`` subclasses.

    Implementations assume one call at a time.
    """

    name: str = "backend"

    @abstractmethod
    def open_url(self, url: str, new_tab: bool = True) -> None: ...

    @abstractmethod
    def get_current_tab(self) -> TabInfo: ...

    @abstractmethod
    def list_tabs(self) -> list[TabInfo]: ...

    @abstractmethod
    def close_tab(self, tab_id: str) -> str: ...

    @abstractmethod
    def switch_to_tab(self, tab_id: str) -> str: ...

    @abstractmethod
    def reload_tab(self, tab_id: str | None = None) -> str: ...

    @abstractmethod
    def go_back(self, tab_id: str | None = None) -> str: ...

    @abstractmethod
    def go_forward(self, tab_id: str | None = None) -> str: ...

    @abstractmethod
    def execute_javascript(self, code: str, tab_id: str | None = None) -> str: ...

    @abstractmethod
    def get_page_content(self, tab_id: str | None = None) -> str: ...


__all__ = ["BrowserBackend"]
