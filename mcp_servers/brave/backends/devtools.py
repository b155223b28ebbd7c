"""
Remote-debugging backend.

Owns one ``DevToolsSession``, created on first use and kept for the life of the
process. There is no window grouping here: tab ids are the session's handles.

Operations addressed at a non-current tab switch to it, act, then switch back.
That sequence mutates the session's current handle, so calls must not overlap.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable, Generator
from contextlib import contextmanager
from functools import wraps
from typing import Any, TypeVar

import websocket

from ..config import BraveConfig
from ..errors import BackendError, DevToolsError, GenericBackendError, JavaScriptError, classify_failure
from ..launcher import BraveLauncher
from ..page_content import PAGE_CONTENT_SCRIPT
from ..session import DevToolsSession
from ..tabs import (
    JAVASCRIPT_EXECUTED,
    NAVIGATED_BACK,
    NAVIGATED_FORWARD,
    TAB_CLOSED,
    TAB_NOT_FOUND,
    TAB_RELOADED,
    TAB_SWITCHED,
    TabInfo,
)
from .base import BrowserBackend

logger = logging.getLogger("mcp.brave.devtools")

F = TypeVar("F", bound=Callable[..., Any])


def classified(func: F) -> F:
    """Route raw session failures through the error classifier."""

    @wraps(func)
    def wrapper(self: DevToolsBackend, *args: Any, **kwargs: Any) -> Any:
        try:
            return func(self, *args, **kwargs)
        except BackendError:
            raise
        except JavaScriptError as exc:
            # Exceptions thrown by page script pass through unclassified.
            raise GenericBackendError(str(exc)) from exc
        except (DevToolsError, websocket.WebSocketException, OSError) as exc:
            logger.error("devtools_error op=%s %s", func.__name__, exc)
            raise classify_failure(str(exc), cdp_port=self.config.cdp_port) from exc

    return wrapper  # type: ignore[return-value]


def script_result_text(value: Any) -> str:
    if value is None:
        return JAVASCRIPT_EXECUTED
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return value
    if isinstance(value, (dict, list)):
        return json.dumps(value, ensure_ascii=False)
    return str(value)


class DevToolsBackend(BrowserBackend):
    name = "devtools"

    def __init__(self, config: BraveConfig | None = None, launcher: BraveLauncher | None = None) -> None:
        self.config = config or BraveConfig.from_env()
        self.launcher = launcher or BraveLauncher(self.config)
        self._session: DevToolsSession | None = None

    @property
    def session(self) -> DevToolsSession:
        if self._session is None:
            self._session = self.launcher.acquire_session()
        return self._session

    def _known(self, tab_id: str) -> bool:
        return tab_id in self.session.window_handles

    @contextmanager
    def _acting_on(self, tab_id: str | None) -> Generator[DevToolsSession, None, None]:
        session = self.session
        if tab_id is None:
            session.recover_current()
            yield session
            return
        with session.switched_to(tab_id):
            yield session

    def _read_tab(self, session: DevToolsSession) -> TabInfo:
        return TabInfo(id=session.current_window_handle or "", url=session.current_url, title=session.title)

    @classified
    def open_url(self, url: str, new_tab: bool = True) -> None:
        session = self.session
        if new_tab or session.recover_current() is None:
            session.new_window()
        session.get(url)

    @classified
    def get_current_tab(self) -> TabInfo:
        self.session.recover_current()
        return self._read_tab(self.session)

    @classified
    def list_tabs(self) -> list[TabInfo]:
        session = self.session
        tabs: list[TabInfo] = []
        for handle in session.window_handles:
            with session.switched_to(handle):
                tabs.append(self._read_tab(session))
        return tabs

    @classified
    def close_tab(self, tab_id: str) -> str:
        if not self._known(tab_id):
            return TAB_NOT_FOUND
        session = self.session
        previous = session.current_window_handle
        session.switch_to(tab_id)
        session.close()

        remaining = session.window_handles
        if previous is not None and previous != tab_id and previous in remaining:
            session.switch_to(previous)
        elif remaining:
            session.switch_to(remaining[0])
        return TAB_CLOSED

    @classified
    def switch_to_tab(self, tab_id: str) -> str:
        if not self._known(tab_id):
            return TAB_NOT_FOUND
        self.session.switch_to(tab_id)
        self.session.activate(tab_id)
        return TAB_SWITCHED

    @classified
    def reload_tab(self, tab_id: str | None = None) -> str:
        if tab_id is not None and not self._known(tab_id):
            return TAB_NOT_FOUND
        with self._acting_on(tab_id) as session:
            session.refresh()
        return TAB_RELOADED

    @classified
    def go_back(self, tab_id: str | None = None) -> str:
        if tab_id is not None and not self._known(tab_id):
            return TAB_NOT_FOUND
        with self._acting_on(tab_id) as session:
            session.back()
        return NAVIGATED_BACK

    @classified
    def go_forward(self, tab_id: str | None = None) -> str:
        if tab_id is not None and not self._known(tab_id):
            return TAB_NOT_FOUND
        with self._acting_on(tab_id) as session:
            session.forward()
        return NAVIGATED_FORWARD

    @classified
    def execute_javascript(self, code: str, tab_id: str | None = None) -> str:
        if tab_id is not None and not self._known(tab_id):
            return TAB_NOT_FOUND
        # Passed as a protocol argument: no string escaping here.
        with self._acting_on(tab_id) as session:
            value = session.execute_script(code)
        return script_result_text(value)

    @classified
    def get_page_content(self, tab_id: str | None = None) -> str:
        if tab_id is not None and not self._known(tab_id):
            return TAB_NOT_FOUND
        with self._acting_on(tab_id) as session:
            value = session.execute_script(PAGE_CONTENT_SCRIPT)
        return "" if value is None else str(value)


__all__ = ["DevToolsBackend", "classified", "script_result_text"]
