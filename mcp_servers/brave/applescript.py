"""
AppleScript command building.

Every command sent to Brave is rendered here so that quoting and escaping happen
in exactly one place. Callers pass raw text; ``quote`` escapes it once.

Per-tab commands come in two shapes that bind the same names, so one action body
serves both:

- current tab: ``w`` is the front window, ``t`` its active tab
- by id: windows are walked in enumeration order, then tabs within each window;
  the first tab whose id (as text) equals the requested id wins, otherwise the
  command returns "Tab not found"

Action bodies may refer to ``w``, ``t`` and ``tabIndex``.
"""

from __future__ import annotations

from dataclasses import dataclass

from .tabs import TAB_NOT_FOUND

INDENT = "    "


def escape_applescript_string(text: str) -> str:
    """Escape text for an AppleScript string literal.

    Backslashes first, then double quotes. The reverse order would double the
    backslashes introduced for the quotes.
    """
    return text.replace("\\", "\\\\").replace('"', '\\"')


def quote(text: str) -> str:
    return f'"{escape_applescript_string(text)}"'


def _indent(lines: list[str], depth: int) -> list[str]:
    return [f"{INDENT * depth}{line}" if line else line for line in lines]


def tell(app_name: str, body: list[str]) -> str:
    return "\n".join([f"tell application {quote(app_name)}", *_indent(body, 1), "end tell"])


@dataclass(frozen=True)
class TabCommand:
    """An action against one tab plus the expression returned afterwards."""

    action: tuple[str, ...]
    result: str
    tab_id: str | None = None

    def render(self, app_name: str) -> str:
        body = [*self.action, f"return {self.result}"]
        if self.tab_id is None:
            lines = [
                "set w to front window",
                "set tabIndex to active tab index of w",
                "set t to active tab of w",
                *body,
            ]
            return tell(app_name, lines)

        match = [f"if (id of t as string) is {quote(self.tab_id)} then", *_indent(body, 1), "end if"]
        lines = [
            "repeat with w in windows",
            *_indent(
                [
                    "repeat with tabIndex from 1 to count of tabs of w",
                    *_indent(["set t to tab tabIndex of w", *match], 1),
                    "end repeat",
                ],
                1,
            ),
            "end repeat",
            f"return {quote(TAB_NOT_FOUND)}",
        ]
        return tell(app_name, lines)


def status_command(action: str | tuple[str, ...], status: str, tab_id: str | None = None) -> TabCommand:
    """Per-tab command returning a fixed status literal."""
    actions = (action,) if isinstance(action, str) else action
    return TabCommand(action=actions, result=quote(status), tab_id=tab_id)


def javascript_command(code: str, tab_id: str | None = None) -> TabCommand:
    """Per-tab command returning the value of ``code`` evaluated in the page."""
    return TabCommand(
        action=(f"set jsResult to (execute t javascript {quote(code)})",),
        result="jsResult",
        tab_id=tab_id,
    )


def open_location(app_name: str, url: str) -> str:
    return f"tell application {quote(app_name)} to open location {quote(url)}"


def set_active_url(app_name: str, url: str) -> str:
    return f"tell application {quote(app_name)} to set URL of active tab of front window to {quote(url)}"


def current_tab_script(app_name: str) -> str:
    # osascript prints the list as "url, title, id".
    return tell(
        app_name,
        [
            "set currentTab to active tab of front window",
            "return {URL of currentTab, title of currentTab, id of currentTab}",
        ],
    )


def list_tabs_script(app_name: str) -> str:
    # One "id,url,title|" record per tab, windows in enumeration order.
    return tell(
        app_name,
        [
            'set output to ""',
            "repeat with w in windows",
            *_indent(
                [
                    "repeat with t in tabs of w",
                    *_indent(
                        ['set output to output & (id of t as string) & "," & (URL of t) & "," & (title of t) & "|"'],
                        1,
                    ),
                    "end repeat",
                ],
                1,
            ),
            "end repeat",
            "return output",
        ],
    )


__all__ = [
    "TabCommand",
    "current_tab_script",
    "escape_applescript_string",
    "javascript_command",
    "list_tabs_script",
    "open_location",
    "quote",
    "set_active_url",
    "status_command",
    "tell",
]
