"""
AppleScript backend (macOS).

Each operation renders one AppleScript program and runs it through
``osascript -e``. There is no shared state between calls. There is also no
timeout: a hung Apple event blocks the tool call.

Output parsing is delimiter based and does not escape delimiters:

- get_current_tab: ``url, title, id``. The url ends at the first ", " and the id
  starts after the last one; everything in between is the title.
- list_tabs: ``id,url,title|`` records. A "|" anywhere, or a "," inside a URL,
  corrupts the record stream.
"""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Callable

from .. import applescript as script
from ..config import BraveConfig
from ..errors import classify_failure
from ..page_content import PAGE_CONTENT_SCRIPT
from ..tabs import (
    JAVASCRIPT_EXECUTED,
    NAVIGATED_BACK,
    NAVIGATED_FORWARD,
    TAB_CLOSED,
    TAB_RELOADED,
    TAB_SWITCHED,
    TabInfo,
)
from .base import BrowserBackend

logger = logging.getLogger("mcp.brave.applescript")

Runner = Callable[[list[str]], subprocess.CompletedProcess]

NO_VALUE_OUTPUTS = {"", "missing value"}


def run_osascript(argv: list[str]) -> subprocess.CompletedProcess[str]:
    return subprocess.run(argv, capture_output=True, text=True, check=False)


def parse_current_tab(output: str) -> TabInfo:
    url, _, rest = output.partition(", ")
    title, sep, tab_id = rest.rpartition(", ")
    if not sep:
        title, tab_id = rest, ""
    return TabInfo(id=tab_id.strip(), url=url, title=title)


def parse_tab_records(output: str) -> list[TabInfo]:
    tabs: list[TabInfo] = []
    for record in output.split("|"):
        if not record.strip():
            continue
        fields = record.split(",", 2)
        fields += [""] * (3 - len(fields))
        tab_id, url, title = fields
        tabs.append(TabInfo(id=tab_id.strip(), url=url, title=title))
    return tabs


class AppleScriptBackend(BrowserBackend):
    name = "applescript"

    def __init__(self, config: BraveConfig | None = None, runner: Runner | None = None) -> None:
        self.config = config or BraveConfig.from_env()
        self.app_name = self.config.app_name
        self._runner = runner or run_osascript

    def execute(self, program: str) -> str:
        """Run one AppleScript program and return its stripped stdout."""
        try:
            proc = self._runner(["osascript", "-e", program])
        except OSError as exc:
            logger.error("osascript_failed %s", exc)
            raise classify_failure(str(exc), cdp_port=self.config.cdp_port) from exc

        if proc.returncode != 0:
            detail = (proc.stderr or proc.stdout or "").strip() or f"osascript exited with code {proc.returncode}"
            logger.error("applescript_error code=%s %s", proc.returncode, detail)
            raise classify_failure(detail, cdp_port=self.config.cdp_port)
        if proc.stderr and proc.stderr.strip():
            logger.warning("applescript_stderr %s", proc.stderr.strip())
        return (proc.stdout or "").strip()

    def _run(self, command: script.TabCommand) -> str:
        return self.execute(command.render(self.app_name))

    def open_url(self, url: str, new_tab: bool = True) -> None:
        if new_tab:
            self.execute(script.open_location(self.app_name, url))
        else:
            self.execute(script.set_active_url(self.app_name, url))

    def get_current_tab(self) -> TabInfo:
        return parse_current_tab(self.execute(script.current_tab_script(self.app_name)))

    def list_tabs(self) -> list[TabInfo]:
        return parse_tab_records(self.execute(script.list_tabs_script(self.app_name)))

    def close_tab(self, tab_id: str) -> str:
        return self._run(script.status_command("close t", TAB_CLOSED, tab_id))

    def switch_to_tab(self, tab_id: str) -> str:
        action = ("set active tab index of w to tabIndex", "set index of w to 1", "activate")
        return self._run(script.status_command(action, TAB_SWITCHED, tab_id))

    def reload_tab(self, tab_id: str | None = None) -> str:
        return self._run(script.status_command("reload t", TAB_RELOADED, tab_id))

    def go_back(self, tab_id: str | None = None) -> str:
        return self._run(script.status_command("go back t", NAVIGATED_BACK, tab_id))

    def go_forward(self, tab_id: str | None = None) -> str:
        return self._run(script.status_command("go forward t", NAVIGATED_FORWARD, tab_id))

    def execute_javascript(self, code: str, tab_id: str | None = None) -> str:
        output = self._run(script.javascript_command(code, tab_id))
        return JAVASCRIPT_EXECUTED if output in NO_VALUE_OUTPUTS else output

    def get_page_content(self, tab_id: str | None = None) -> str:
        output = self._run(script.javascript_command(PAGE_CONTENT_SCRIPT, tab_id))
        return "" if output == "missing value" else output


__all__ = ["AppleScriptBackend", "parse_current_tab", "parse_tab_records", "run_osascript"]
