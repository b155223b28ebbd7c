"""Backends driving Brave, and host-based selection between them."""

from __future__ import annotations

import sys

from ..config import BraveConfig
from .base import BrowserBackend


def select_backend(config: BraveConfig, platform: str | None = None) -> BrowserBackend:
    """AppleScript on macOS, the DevTools session everywhere else (unless overridden)."""
    kind = config.resolve_backend(platform or sys.platform)
    if kind == "applescript":
        from .applescript import AppleScriptBackend

        return AppleScriptBackend(config)

    from .devtools import DevToolsBackend

    return DevToolsBackend(config)


__all__ = ["BrowserBackend", "select_backend"]
