"""
DevTools session used by the remote-debugging backend.

``DevToolsSession`` mimics a WebDriver session on top of the DevTools HTTP and
WebSocket endpoints: page targets are window handles, and the session keeps a
*current handle* that every page-level call acts on.

The current handle is plain mutable state. ``switched_to`` restores it on exit,
which is only correct while calls are issued one at a time. Concurrent callers
would need one lock around the whole switch/act/restore sequence.

No call here has a timeout except the short wait for a freshly opened window to
show up in the target list.
"""

from __future__ import annotations

import json
import logging
import time
from collections.abc import Callable, Generator
from contextlib import contextmanager, suppress
from typing import Any
from urllib.error import URLError
from urllib.parse import quote as url_quote
from urllib.request import Request, urlopen

import websocket

from .errors import DevToolsError, JavaScriptError

logger = logging.getLogger("mcp.brave.devtools")

NEW_WINDOW_WAIT = 2.0


def http_request(url: str, *, method: str = "GET") -> str:
    """Call a DevTools HTTP endpoint and return the response body."""
    req = Request(url, method=method, headers={"User-Agent": "mcp-brave"})
    try:
        with urlopen(req) as resp:
            return resp.read().decode(errors="replace")
    except (OSError, URLError) as exc:
        raise DevToolsError(f"DevTools endpoint {url} not reachable: {exc}") from exc


class CdpConnection:
    """Low-level CDP WebSocket connection to one target."""

    def __init__(self, ws_url: str):
        try:
            # Attached instances are not started with --remote-allow-origins.
            self.ws = websocket.create_connection(ws_url, suppress_origin=True)
        except (websocket.WebSocketException, OSError) as exc:
            raise DevToolsError(f"Cannot connect to {ws_url}: {exc}") from exc
        self.ws_url = ws_url
        self._next_id = 1

    def send(self, method: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
        """Send CDP command and wait for response."""
        msg_id = self._next_id
        self._next_id += 1

        msg: dict[str, Any] = {"id": msg_id, "method": method}
        if params:
            msg["params"] = params

        try:
            self.ws.send(json.dumps(msg))
            while True:
                data = json.loads(self.ws.recv())
                # Events carry no id; the response is the one echoing ours.
                if isinstance(data, dict) and data.get("id") == msg_id:
                    break
        except (websocket.WebSocketException, OSError, ValueError) as exc:
            raise DevToolsError(f"{method} failed: {exc}") from exc

        if "error" in data:
            error = data["error"]
            message = error.get("message") if isinstance(error, dict) else str(error)
            raise DevToolsError(f"{method} failed: {message}")
        return data.get("result", {})

    def close(self) -> None:
        with suppress(Exception):
            self.ws.close()


class DevToolsSession:
    """WebDriver-style session over DevTools page targets."""

    def __init__(
        self,
        port: int,
        *,
        http: Callable[..., str] = http_request,
        connect: Callable[[str], CdpConnection] = CdpConnection,
    ) -> None:
        self.endpoint = f"http://127.0.0.1:{port}"
        self._http = http
        self._connect = connect
        self._connections: dict[str, CdpConnection] = {}
        handles = self.window_handles
        self._current: str | None = handles[0] if handles else None

    # ── handles ─────────────────────────────────────────────────────────────

    def _targets(self) -> list[dict[str, Any]]:
        raw = self._http(f"{self.endpoint}/json/list")
        try:
            targets = json.loads(raw)
        except ValueError as exc:
            raise DevToolsError(f"Unexpected /json/list payload: {raw[:200]}") from exc
        pages = [t for t in targets if isinstance(t, dict) and t.get("type") == "page" and t.get("id")]

        live = {t["id"] for t in pages}
        for handle in [h for h in self._connections if h not in live]:
            self._connections.pop(handle).close()
        return pages

    @property
    def window_handles(self) -> list[str]:
        return [str(t["id"]) for t in self._targets()]

    @property
    def current_window_handle(self) -> str | None:
        return self._current

    def switch_to(self, handle: str) -> None:
        if handle not in self.window_handles:
            raise DevToolsError(f"no such window: {handle}")
        self._current = handle

    def recover_current(self) -> str | None:
        """Re-point the current handle if its tab was closed outside the session.

        Falls back to the first live page, or None when the browser has no tabs.
        """
        handles = self.window_handles
        if self._current not in handles:
            if self._current is not None:
                logger.info("current tab %s is gone; %d tabs remain", self._current, len(handles))
            self._current = handles[0] if handles else None
        return self._current

    @contextmanager
    def switched_to(self, handle: str) -> Generator[None, None, None]:
        """Act on ``handle`` for the duration of the block, then restore the previous handle."""
        previous = self._current
        self.switch_to(handle)
        try:
            yield
        finally:
            self._current = previous

    def activate(self, handle: str) -> None:
        """Bring the tab to the foreground in the browser UI."""
        self._http(f"{self.endpoint}/json/activate/{handle}")

    # ── page-level calls on the current handle ──────────────────────────────

    def _connection(self) -> CdpConnection:
        handle = self._current
        if handle is None:
            raise DevToolsError("No active tab in the debugging session")
        conn = self._connections.get(handle)
        if conn is not None:
            return conn
        for target in self._targets():
            if target["id"] == handle and target.get("webSocketDebuggerUrl"):
                conn = self._connect(target["webSocketDebuggerUrl"])
                self._connections[handle] = conn
                return conn
        raise DevToolsError(f"no such window: {handle}")

    def send(self, method: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
        return self._connection().send(method, params)

    def execute_script(self, expression: str, *, user_gesture: bool = False) -> Any:
        """Evaluate JavaScript in the current tab; ``undefined`` and ``null`` map to None."""
        params: dict[str, Any] = {"expression": expression, "returnByValue": True, "awaitPromise": True}
        if user_gesture:
            params["userGesture"] = True
        result = self.send("Runtime.evaluate", params)

        details = result.get("exceptionDetails")
        if isinstance(details, dict):
            exc = details.get("exception") if isinstance(details.get("exception"), dict) else {}
            message = exc.get("description") or details.get("text") or "JavaScript evaluation failed"
            raise JavaScriptError(str(message))

        remote = result.get("result") or {}
        if remote.get("type") == "undefined" or remote.get("subtype") == "null":
            return None
        return remote.get("value")

    @property
    def current_url(self) -> str:
        return str(self.execute_script("window.location.href") or "")

    @property
    def title(self) -> str:
        return str(self.execute_script("document.title") or "")

    def get(self, url: str) -> None:
        result = self.send("Page.navigate", {"url": url})
        if result.get("errorText"):
            logger.warning("navigate url=%s error=%s", url.split("?")[0], result["errorText"])

    def refresh(self) -> None:
        self.send("Page.reload", {})

    def back(self) -> None:
        self.execute_script("window.history.back()")

    def forward(self) -> None:
        self.execute_script("window.history.forward()")

    def close(self) -> None:
        """Close the current tab. The session is left without a current handle."""
        handle = self._current
        if handle is None:
            raise DevToolsError("No active tab in the debugging session")
        conn = self._connections.pop(handle, None)
        if conn is not None:
            conn.close()
        self._http(f"{self.endpoint}/json/close/{handle}")
        self._current = None

    def new_window(self) -> str:
        """Open a blank tab, make it current, and return its handle."""
        before = set(self.window_handles)
        if self._current is not None and self._current in before:
            self.execute_script("window.open('about:blank', '_blank'); undefined", user_gesture=True)
            deadline = time.time() + NEW_WINDOW_WAIT
            while time.time() < deadline:
                fresh = [h for h in self.window_handles if h not in before]
                if fresh:
                    self._current = fresh[-1]
                    return self._current
                time.sleep(0.1)
            logger.info("window.open produced no new target; creating one directly")

        # Chrome-based browsers only accept PUT on /json/new.
        raw = self._http(f"{self.endpoint}/json/new?{url_quote('about:blank', safe=':')}", method="PUT")
        try:
            created = json.loads(raw)
        except ValueError as exc:
            raise DevToolsError(f"Unexpected /json/new payload: {raw[:200]}") from exc
        handle = str(created.get("id") or "")
        if not handle:
            raise DevToolsError("Failed to create browser tab")
        self._current = handle
        return handle


__all__ = ["CdpConnection", "DevToolsSession", "http_request"]
