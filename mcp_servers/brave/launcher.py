from __future__ import annotations

import contextlib
import logging
import os
import socket
import subprocess
import tempfile
import time
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from urllib.error import URLError
from urllib.request import urlopen

from .config import BraveConfig, default_user_data_dir
from .errors import DevToolsError
from .session import DevToolsSession

logger = logging.getLogger("mcp.brave.launcher")

# Markers Chromium prints when a second process hands off to the running one.
HANDOFF_MARKERS = ("ProcessSingleton", "SingletonLock", "existing browser session")


@dataclass(frozen=True)
class ProfileDescriptor:
    executable: str
    user_data_dir: str
    profile_name: str


def discover_profile(config: BraveConfig, platform: str | None = None) -> ProfileDescriptor:
    """Resolve executable, user-data directory and profile name. Not cached."""
    return ProfileDescriptor(
        executable=config.binary_path or BraveConfig.detect_binary(),
        user_data_dir=config.user_data_dir or default_user_data_dir(platform),
        profile_name=config.profile_name,
    )


def profile_in_use(user_data_dir: str) -> bool:
    """True when a live browser process holds the user-data directory lock."""
    root = Path(user_data_dir)

    # Windows keeps "lockfile" open without share access while running.
    lockfile = root / "lockfile"
    if lockfile.exists():
        try:
            with open(lockfile, "a"):
                pass
        except PermissionError:
            return True

    # POSIX: "SingletonLock" is a symlink to "<hostname>-<pid>".
    singleton = root / "SingletonLock"
    if not os.path.lexists(singleton):
        return False
    try:
        target = os.readlink(singleton)
    except OSError:
        return True
    host, _, pid_raw = target.rpartition("-")
    if host and host != socket.gethostname():
        return True
    try:
        os.kill(int(pid_raw), 0)
    except ValueError:
        return True
    except ProcessLookupError:
        return False
    except PermissionError:
        return True
    return True


def _tail_text(path: str, max_chars: int = 4000) -> str:
    try:
        raw = Path(path).read_text(encoding="utf-8", errors="replace")
    except OSError:
        return ""
    return raw[-max_chars:]


class BraveLauncher:
    """Attach to a debuggable Brave, or launch one on the user's profile."""

    def __init__(
        self,
        config: BraveConfig | None = None,
        session_factory: Callable[[int], DevToolsSession] = DevToolsSession,
    ) -> None:
        self.config = config or BraveConfig.from_env()
        self.session_factory = session_factory
        self.process: subprocess.Popen | None = None

    def cdp_ready(self, timeout: float = 0.4) -> bool:
        """Return True if the DevTools HTTP endpoint responds."""
        endpoint = f"http://127.0.0.1:{self.config.cdp_port}/json/version"
        try:
            with urlopen(endpoint, timeout=timeout) as resp:
                return resp.status == 200
        except (OSError, TimeoutError, URLError):
            return False

    def build_launch_command(self, profile: ProfileDescriptor) -> list[str]:
        flags = [
            f"--remote-debugging-port={self.config.cdp_port}",
            f"--user-data-dir={profile.user_data_dir}",
            f"--profile-directory={profile.profile_name}",
            "--remote-allow-origins=*",
            "--no-first-run",
            "--no-default-browser-check",
            # Keep navigator.webdriver unset so sites treat the session as a normal browser.
            "--disable-blink-features=AutomationControlled",
            *self.config.extra_flags,
        ]
        return [profile.executable, *flags]

    def _make_log_path(self) -> str:
        log_dir = Path(tempfile.gettempdir()) / "mcp-brave"
        log_dir.mkdir(parents=True, exist_ok=True)
        return str(log_dir / f"brave_launch_{int(time.time() * 1000)}.log")

    def launch(self, profile: ProfileDescriptor) -> tuple[subprocess.Popen, str]:
        cmd = self.build_launch_command(profile)
        log_path = self._make_log_path()
        logger.info("launching %s", " ".join(cmd))
        with open(log_path, "ab", buffering=0) as log_fh:
            try:
                proc = subprocess.Popen(
                    cmd,
                    stdout=log_fh,
                    stderr=log_fh,
                    stdin=subprocess.DEVNULL,
                    start_new_session=True,
                )
            except OSError as exc:
                raise DevToolsError(f"Cannot start Brave ({profile.executable}): {exc}") from exc
        self.process = proc
        return proc, log_path

    def acquire_session(self) -> DevToolsSession:
        """Attach to the DevTools port if something answers there, else launch Brave."""
        port = self.config.cdp_port
        if self.cdp_ready():
            logger.info("attached to existing Brave on port %s", port)
            return self.session_factory(port)

        profile = discover_profile(self.config)
        logger.info(
            "no debuggable Brave on port %s; launching profile=%s dir=%s",
            port,
            profile.profile_name,
            profile.user_data_dir,
        )
        if profile_in_use(profile.user_data_dir):
            raise DevToolsError(f"Profile directory {profile.user_data_dir} is already in use by a running Brave")

        proc, log_path = self.launch(profile)
        deadline = time.time() + self.config.launch_timeout
        while time.time() < deadline:
            if self.cdp_ready():
                logger.info("Brave launched pid=%s port=%s", proc.pid, port)
                return self.session_factory(port)
            code = proc.poll()
            if code is not None:
                tail = _tail_text(log_path)
                # Exit 0 before the port opens means the command line was forwarded to a running Brave.
                if code == 0 or any(marker in tail for marker in HANDOFF_MARKERS):
                    raise DevToolsError(
                        f"Profile directory {profile.user_data_dir} is already in use by a running Brave"
                    )
                raise DevToolsError(f"Brave exited with code {code} before DevTools became available: {tail}")
            time.sleep(0.1)

        with contextlib.suppress(Exception):
            proc.terminate()
        raise DevToolsError(f"Brave did not open DevTools port {port} within {self.config.launch_timeout:g}s")


__all__ = ["BraveLauncher", "ProfileDescriptor", "discover_profile", "profile_in_use"]
