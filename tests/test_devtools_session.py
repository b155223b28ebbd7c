from __future__ import annotations

import json

import pytest

from conftest import FakeBrowser
from mcp_servers.brave import session as session_module
from mcp_servers.brave.errors import DevToolsError
from mcp_servers.brave.session import CdpConnection


class FakeWebSocket:
    def __init__(self, replies: list[dict]) -> None:
        self.replies = [json.dumps(r) for r in replies]
        self.sent: list[dict] = []
        self.closed = False

    def send(self, data: str) -> None:
        self.sent.append(json.loads(data))

    def recv(self) -> str:
        return self.replies.pop(0)

    def close(self) -> None:
        self.closed = True


def _connection(monkeypatch: pytest.MonkeyPatch, replies: list[dict]) -> tuple[CdpConnection, FakeWebSocket]:
    ws = FakeWebSocket(replies)
    seen: dict = {}

    def fake_create_connection(url: str, **kwargs):  # noqa: ANN003, ANN202
        seen.update(kwargs, url=url)
        return ws

    monkeypatch.setattr(session_module.websocket, "create_connection", fake_create_connection)
    conn = CdpConnection("ws://127.0.0.1:9222/devtools/page/A")
    assert seen["suppress_origin"] is True
    return conn, ws


def test_cdp_send_skips_events_until_matching_id(monkeypatch: pytest.MonkeyPatch) -> None:
    conn, ws = _connection(
        monkeypatch,
        [
            {"method": "Page.frameNavigated", "params": {}},
            {"id": 1, "result": {"frameId": "F"}},
        ],
    )

    assert conn.send("Page.navigate", {"url": "https://e.test/"}) == {"frameId": "F"}
    assert ws.sent == [{"id": 1, "method": "Page.navigate", "params": {"url": "https://e.test/"}}]


def test_cdp_error_response_raises(monkeypatch: pytest.MonkeyPatch) -> None:
    conn, _ = _connection(monkeypatch, [{"id": 1, "error": {"code": -32000, "message": "No target"}}])

    with pytest.raises(DevToolsError, match="Page.reload failed: No target"):
        conn.send("Page.reload")


def test_cdp_connect_failure_raises(monkeypatch: pytest.MonkeyPatch) -> None:
    def refuse(url: str, **kwargs):  # noqa: ANN003, ANN202
        raise ConnectionRefusedError(111, "Connection refused")

    monkeypatch.setattr(session_module.websocket, "create_connection", refuse)
    with pytest.raises(DevToolsError, match="Cannot connect"):
        CdpConnection("ws://127.0.0.1:9222/devtools/page/A")


def test_handles_are_page_targets_only(browser: FakeBrowser) -> None:
    session = browser.session()
    assert session.window_handles == ["A", "B", "C"]
    assert session.current_window_handle == "A"


def test_empty_browser_has_no_current_handle() -> None:
    session = FakeBrowser().session()
    assert session.window_handles == []
    assert session.current_window_handle is None
    with pytest.raises(DevToolsError, match="No active tab"):
        session.execute_script("1")


def test_switch_to_unknown_handle_raises(browser: FakeBrowser) -> None:
    session = browser.session()
    with pytest.raises(DevToolsError, match="no such window"):
        session.switch_to("Z")
    assert session.current_window_handle == "A"


def test_switched_to_restores_previous_handle_on_error(browser: FakeBrowser) -> None:
    session = browser.session()

    with pytest.raises(RuntimeError):
        with session.switched_to("C"):
            assert session.current_window_handle == "C"
            raise RuntimeError("boom")

    assert session.current_window_handle == "A"


def test_page_reads_use_current_handle(browser: FakeBrowser) -> None:
    session = browser.session()
    session.switch_to("B")
    assert session.current_url == "https://b.test/"
    assert session.title == "Beta"


def test_execute_script_sends_by_value_evaluation(browser: FakeBrowser) -> None:
    browser.script_results["[1, 2]"] = [1, 2]
    session = browser.session()

    assert session.execute_script("[1, 2]") == [1, 2]
    _, method, params = browser.calls[-1]
    assert method == "Runtime.evaluate"
    assert params["returnByValue"] is True
    assert params["awaitPromise"] is True
    assert "userGesture" not in params


def test_execute_script_exception_raises_description(browser: FakeBrowser) -> None:
    browser.script_errors["boom()"] = "ReferenceError: boom is not defined"
    with pytest.raises(DevToolsError, match="ReferenceError"):
        browser.session().execute_script("boom()")


def test_close_drops_current_handle(browser: FakeBrowser) -> None:
    session = browser.session()
    session.switch_to("B")
    session.close()
    assert session.current_window_handle is None
    assert session.window_handles == ["A", "C"]


def test_connections_are_cached_and_pruned(browser: FakeBrowser) -> None:
    opened: list = []

    def connect(ws_url: str):  # noqa: ANN202
        conn = browser.connect(ws_url)
        opened.append(conn)
        return conn

    session = session_module.DevToolsSession(9222, http=browser.http, connect=connect)
    session.switch_to("C")
    session.refresh()
    session.refresh()
    assert len(opened) == 1

    browser.pages.pop("C")
    assert session.window_handles == ["A", "B"]
    assert opened[0].closed


def test_new_window_uses_window_open_with_gesture(browser: FakeBrowser) -> None:
    session = browser.session()

    handle = session.new_window()

    assert handle == "NEW1"
    assert session.current_window_handle == "NEW1"
    opens = [p for (h, m, p) in browser.calls if m == "Runtime.evaluate" and p["expression"].startswith("window.open(")]
    assert opens and opens[0]["userGesture"] is True
    assert not any(method == "PUT" for method, _ in browser.http_calls)


def test_new_window_falls_back_to_put_when_popup_blocked(
    browser: FakeBrowser, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setattr(session_module, "NEW_WINDOW_WAIT", 0.0)
    browser.popups_blocked = True
    session = browser.session()

    handle = session.new_window()

    assert ("PUT", "/json/new?about:blank") in browser.http_calls
    assert session.current_window_handle == handle
    assert handle in browser.pages


def test_activate_calls_endpoint(browser: FakeBrowser) -> None:
    browser.session().activate("B")
    assert browser.activated == ["B"]


def test_recover_current_repoints_closed_handle(browser: FakeBrowser) -> None:
    session = browser.session()
    browser.pages.pop("A")

    assert session.recover_current() == "B"
    assert session.current_window_handle == "B"


def test_recover_current_keeps_live_handle(browser: FakeBrowser) -> None:
    session = browser.session()
    session.switch_to("C")
    assert session.recover_current() == "C"


def test_new_window_with_closed_current_creates_target(browser: FakeBrowser) -> None:
    session = browser.session()
    browser.pages.pop("A")

    handle = session.new_window()

    assert ("PUT", "/json/new?about:blank") in browser.http_calls
    assert session.current_window_handle == handle
    assert browser.evaluated_on("A") == []
