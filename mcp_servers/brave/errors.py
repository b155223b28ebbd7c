"""
Error taxonomy shared by both backends.

Backends never interpret failure text themselves: they hand the raw message to
``classify_failure`` and raise whatever comes back. The table is evaluated in
order and the first matching fragment wins.

"Tab not found" is deliberately absent here. It is a normal result value.
"""

from __future__ import annotations

from dataclasses import dataclass


class BackendError(Exception):
    """Base class for failures surfaced to the caller as an error result."""

    def __init__(self, message: str, *, raw: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.raw = raw if raw is not None else message

    def __str__(self) -> str:
        return self.message


class PermissionDeniedError(BackendError):
    pass


class AppNotRunningError(BackendError):
    pass


class ProfileLockedError(BackendError):
    pass


class GenericBackendError(BackendError):
    pass


class DevToolsError(Exception):
    """Raw transport or protocol failure of the DevTools session (pre-classification)."""


class JavaScriptError(DevToolsError):
    """An exception thrown by page script. Reported as-is, never classified."""


PERMISSION_DENIED_MESSAGE = (
    "Permission denied: Brave control requires automation permissions.\n\n"
    "To grant permission:\n"
    "1. Open System Settings > Privacy & Security > Automation\n"
    "2. Find the application running this server in the list\n"
    '3. Enable "Brave Browser" under it\n'
    "4. You may need to restart that application after granting permission\n\n"
    "Note: macOS shows a permission prompt the first time Brave is controlled."
)

APP_NOT_RUNNING_MESSAGE = "Brave Browser is not running. Please launch Brave and try again."

PROFILE_LOCKED_MESSAGE = (
    "Brave is already running with this profile, so a debuggable instance cannot be launched.\n\n"
    "Either:\n"
    "1. Close every Brave window and retry (the server will launch Brave itself), or\n"
    "2. Restart Brave with remote debugging enabled, e.g. "
    "`brave --remote-debugging-port={port}`, and retry (the server will attach to it)."
)


@dataclass(frozen=True)
class FailurePattern:
    fragments: tuple[str, ...]
    error_type: type[BackendError]
    message: str


FAILURE_PATTERNS: tuple[FailurePattern, ...] = (
    FailurePattern(
        ("(-1743)", "-1743", "not allowed assistive access", "not authorized", "not authorised"),
        PermissionDeniedError,
        PERMISSION_DENIED_MESSAGE,
    ),
    FailurePattern(
        ("(-600)", "isn't running", "is not running"),
        AppNotRunningError,
        APP_NOT_RUNNING_MESSAGE,
    ),
    FailurePattern(
        ("already in use", "SingletonLock", "ProcessSingleton"),
        ProfileLockedError,
        PROFILE_LOCKED_MESSAGE,
    ),
)


def classify_failure(raw: str, *, cdp_port: int = 9222) -> BackendError:
    """Map raw failure text from either backend to a typed error."""
    text = (raw or "").strip()
    lowered = text.lower()
    for pattern in FAILURE_PATTERNS:
        if any(fragment.lower() in lowered for fragment in pattern.fragments):
            return pattern.error_type(pattern.message.format(port=cdp_port), raw=text)
    return GenericBackendError(text or "Unknown backend failure", raw=text)


__all__ = [
    "APP_NOT_RUNNING_MESSAGE",
    "AppNotRunningError",
    "BackendError",
    "DevToolsError",
    "FAILURE_PATTERNS",
    "FailurePattern",
    "GenericBackendError",
    "JavaScriptError",
    "PERMISSION_DENIED_MESSAGE",
    "PROFILE_LOCKED_MESSAGE",
    "PermissionDeniedError",
    "ProfileLockedError",
    "classify_failure",
]
