"""Tab identity and the literal status strings both backends return."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any

TAB_NOT_FOUND = "Tab not found"
TAB_CLOSED = "Tab closed"
TAB_SWITCHED = "Switched to tab"
TAB_RELOADED = "Tab reloaded"
NAVIGATED_BACK = "Navigated back"
NAVIGATED_FORWARD = "Navigated forward"
JAVASCRIPT_EXECUTED = "JavaScript executed"


@dataclass(slots=True, frozen=True)
class TabInfo:
    """A tab as seen by the caller. ``id`` is opaque and only valid until the tab closes."""

    id: str
    url: str
    title: str

    def to_dict(self) -> dict[str, str]:
        return asdict(self)


def normalize_tab_id(raw: Any) -> str | None:
    """Coerce an incoming tab id to its opaque string form.

    ``None`` and blank strings mean "the current tab". Numbers are accepted because
    AppleScript ids are numeric, but they are never used arithmetically.
    """
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, float) and raw.is_integer():
        raw = int(raw)
    value = str(raw).strip()
    return value or None


__all__ = [
    "JAVASCRIPT_EXECUTED",
    "NAVIGATED_BACK",
    "NAVIGATED_FORWARD",
    "TAB_CLOSED",
    "TAB_NOT_FOUND",
    "TAB_RELOADED",
    "TAB_SWITCHED",
    "TabInfo",
    "normalize_tab_id",
]
