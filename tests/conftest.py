"""In-memory stand-in for a DevTools-enabled Brave, used by the session and backend tests."""

from __future__ import annotations

import json
from typing import Any

import pytest

from mcp_servers.brave.config import BraveConfig
from mcp_servers.brave.errors import DevToolsError
from mcp_servers.brave.page_content import PAGE_CONTENT_SCRIPT
from mcp_servers.brave.session import DevToolsSession

UNDEFINED: dict[str, Any] = {"type": "undefined"}


def _remote(value: Any) -> dict[str, Any]:
    if value is None:
        return UNDEFINED
    if isinstance(value, str):
        return {"type": "string", "value": value}
    if isinstance(value, bool):
        return {"type": "boolean", "value": value}
    if isinstance(value, (int, float)):
        return {"type": "number", "value": value}
    return {"type": "object", "value": value}


class FakeConnection:
    def __init__(self, browser: FakeBrowser, handle: str) -> None:
        self.browser = browser
        self.handle = handle
        self.closed = False

    def send(self, method: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
        params = params or {}
        self.browser.calls.append((self.handle, method, params))
        if self.handle in self.browser.broken:
            raise DevToolsError(f"{method} failed: connection to {self.handle} lost")
        page = self.browser.pages[self.handle]

        if method == "Page.navigate":
            page["url"] = params["url"]
            return {"frameId": f"frame-{self.handle}"}
        if method == "Page.reload":
            return {}
        if method != "Runtime.evaluate":
            return {}

        expression = params["expression"]
        if expression == "window.location.href":
            return {"result": _remote(page["url"])}
        if expression == "document.title":
            return {"result": _remote(page["title"])}
        if expression == PAGE_CONTENT_SCRIPT:
            return {"result": _remote(page.get("content", ""))}
        if expression.startswith("window.open("):
            if self.browser.popups_blocked:
                return {"result": UNDEFINED}
            self.browser.add_page("about:blank", "")
            return {"result": UNDEFINED}
        if expression in self.browser.script_errors:
            return {
                "result": {"type": "object", "subtype": "error"},
                "exceptionDetails": {
                    "text": "Uncaught",
                    "exception": {"description": self.browser.script_errors[expression]},
                },
            }
        return {"result": _remote(self.browser.script_results.get(expression))}

    def close(self) -> None:
        self.closed = True


class FakeBrowser:
    """Page targets keyed by handle, served through fake HTTP and WebSocket transports."""

    def __init__(self, pages: list[tuple[str, str, str]] | None = None) -> None:
        self.pages: dict[str, dict[str, Any]] = {}
        for handle, url, title in pages or []:
            self.pages[handle] = {"url": url, "title": title}
        self.calls: list[tuple[str, str, dict[str, Any]]] = []
        self.http_calls: list[tuple[str, str]] = []
        self.activated: list[str] = []
        self.script_results: dict[str, Any] = {}
        self.script_errors: dict[str, str] = {}
        self.broken: set[str] = set()
        self.popups_blocked = False
        self._next = 1

    def add_page(self, url: str, title: str) -> str:
        handle = f"NEW{self._next}"
        self._next += 1
        self.pages[handle] = {"url": url, "title": title}
        return handle

    def http(self, url: str, *, method: str = "GET") -> str:
        path = url.split("127.0.0.1:9222", 1)[1]
        self.http_calls.append((method, path))
        if path == "/json/list":
            targets = [
                {
                    "id": handle,
                    "type": "page",
                    "url": page["url"],
                    "title": page["title"],
                    "webSocketDebuggerUrl": f"ws://127.0.0.1:9222/devtools/page/{handle}",
                }
                for handle, page in self.pages.items()
            ]
            targets.append({"id": "SW1", "type": "service_worker", "url": "https://sw.test/sw.js"})
            return json.dumps(targets)
        if path.startswith("/json/activate/"):
            self.activated.append(path.rsplit("/", 1)[1])
            return "Target activated"
        if path.startswith("/json/close/"):
            self.pages.pop(path.rsplit("/", 1)[1], None)
            return "Target is closing"
        if path.startswith("/json/new"):
            if method != "PUT":
                raise DevToolsError("Using unsafe HTTP verb GET to invoke /json/new")
            handle = self.add_page("about:blank", "")
            return json.dumps({"id": handle, "type": "page", "url": "about:blank"})
        raise DevToolsError(f"unexpected path {path}")

    def connect(self, ws_url: str) -> FakeConnection:
        return FakeConnection(self, ws_url.rsplit("/", 1)[1])

    def session(self) -> DevToolsSession:
        return DevToolsSession(9222, http=self.http, connect=self.connect)

    def evaluated_on(self, handle: str) -> list[str]:
        return [p["expression"] for (h, m, p) in self.calls if h == handle and m == "Runtime.evaluate"]


class FakeLauncher:
    def __init__(self, browser: FakeBrowser) -> None:
        self.browser = browser
        self.acquired = 0

    def acquire_session(self) -> DevToolsSession:
        self.acquired += 1
        return self.browser.session()


@pytest.fixture
def brave_config() -> BraveConfig:
    return BraveConfig(backend="devtools", cdp_port=9222)


@pytest.fixture
def browser() -> FakeBrowser:
    return FakeBrowser(
        [
            ("A", "https://a.test/", "Alpha"),
            ("B", "https://b.test/", "Beta"),
            ("C", "https://c.test/", "Gamma"),
        ]
    )
