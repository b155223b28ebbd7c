from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field
from pathlib import Path

DEFAULT_APP_NAME = "Brave Browser"
DEFAULT_PROFILE_NAME = "Default"


def _binary_candidates() -> list[str]:
    local_app_data = os.environ.get("LOCALAPPDATA", "")
    candidates = [
        "/Applications/Brave Browser.app/Contents/MacOS/Brave Browser",
        str(Path("~/Applications/Brave Browser.app/Contents/MacOS/Brave Browser").expanduser()),
        "C:\\Program Files\\BraveSoftware\\Brave-Browser\\Application\\brave.exe",
        "C:\\Program Files (x86)\\BraveSoftware\\Brave-Browser\\Application\\brave.exe",
    ]
    if local_app_data:
        candidates.append(str(Path(local_app_data) / "BraveSoftware" / "Brave-Browser" / "Application" / "brave.exe"))
    candidates.extend(
        [
            "/usr/bin/brave-browser",
            "/usr/bin/brave-browser-stable",
            "/usr/bin/brave",
            "/opt/brave.com/brave/brave",
            # Snap last: it ignores --user-data-dir outside its sandbox.
            "/snap/bin/brave",
        ]
    )
    return candidates


def expand_path(raw: str) -> str:
    return str(Path(raw).expanduser())


def default_user_data_dir(platform: str | None = None) -> str:
    """Brave's per-user data root for the given platform."""
    platform = platform or sys.platform
    if platform.startswith("win"):
        root = os.environ.get("LOCALAPPDATA") or str(Path.home() / "AppData" / "Local")
        return str(Path(root) / "BraveSoftware" / "Brave-Browser" / "User Data")
    if platform == "darwin":
        return str(Path.home() / "Library" / "Application Support" / "BraveSoftware" / "Brave-Browser")
    return str(Path.home() / ".config" / "BraveSoftware" / "Brave-Browser")


@dataclass
class BraveConfig:
    backend: str = "auto"
    app_name: str = DEFAULT_APP_NAME
    cdp_port: int = 9222
    binary_path: str | None = None
    user_data_dir: str | None = None
    profile_name: str = DEFAULT_PROFILE_NAME
    extra_flags: list[str] = field(default_factory=list)
    launch_timeout: float = 15.0

    @staticmethod
    def normalize_backend(raw: str | None) -> str:
        value = (raw or "").strip().lower()
        if value in {"applescript", "osascript", "apple"}:
            return "applescript"
        if value in {"devtools", "cdp", "webdriver", "debug"}:
            return "devtools"
        return "auto"

    def resolve_backend(self, platform: str | None = None) -> str:
        """Concrete backend name for this host."""
        if self.backend != "auto":
            return self.backend
        return "applescript" if (platform or sys.platform) == "darwin" else "devtools"

    @classmethod
    def detect_binary(cls) -> str:
        env_path = os.environ.get("MCP_BRAVE_BINARY")
        if env_path:
            return expand_path(env_path)
        for candidate in _binary_candidates():
            path = Path(candidate)
            if path.exists() and os.access(str(path), os.X_OK):
                return str(path)
        # Last resort: rely on PATH lookup
        return "brave-browser"

    @classmethod
    def from_env(cls) -> BraveConfig:
        binary_raw = os.environ.get("MCP_BRAVE_BINARY")
        user_data_raw = os.environ.get("MCP_BRAVE_USER_DATA_DIR")
        flags_raw = os.environ.get("MCP_BRAVE_FLAGS", "")
        return cls(
            backend=cls.normalize_backend(os.environ.get("MCP_BRAVE_BACKEND")),
            app_name=os.environ.get("MCP_BRAVE_APP_NAME") or DEFAULT_APP_NAME,
            cdp_port=int(os.environ.get("MCP_BRAVE_PORT", "9222")),
            binary_path=expand_path(binary_raw) if binary_raw else None,
            user_data_dir=expand_path(user_data_raw) if user_data_raw else None,
            profile_name=(os.environ.get("BRAVE_PROFILE") or "").strip() or DEFAULT_PROFILE_NAME,
            extra_flags=[flag.strip() for flag in flags_raw.split(",") if flag.strip()],
            launch_timeout=float(os.environ.get("MCP_BRAVE_LAUNCH_TIMEOUT", "15")),
        )
