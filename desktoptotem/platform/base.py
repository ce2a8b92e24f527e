"""Base platform abstraction."""
import datetime
import os
import subprocess
import threading
import xml.etree.ElementTree as ET
from abc import ABC, abstractmethod
from typing import Callable, Dict, List, Optional, Tuple
from urllib.parse import unquote, urlparse
from ..models import ActivationPolicy, AppCandidate, RecentDocument
from .desktop_entries import DESKTOP_EXTENSION, DesktopEntryIndex, parse_entry

LaunchCallback = Callable[[bool, Optional[str]], None]

GENERIC_APP_ICON = "application-x-executable"


class PlatformBase(ABC):
    """Abstract base for platform-specific operations."""

    # Subclasses override these
    WINDOW_COMMANDS: Optional[Dict[str, List[str]]] = {
        "get_id": ["xdotool", "getactivewindow"],
        "get_class": ["xdotool", "getwindowclassname"],
        "get_pid": ["xdotool", "getwindowpid"],
    }
    LAUNCH_COMMANDS: List[List[str]] = [["gtk-launch"], ["gio", "launch"]]
    RECENT_FILES_PATH: str = os.path.expanduser("~/.local/share/recently-used.xbel")

    bundle_extension: str = DESKTOP_EXTENSION

    def __init__(self) -> None:
        self.entries = DesktopEntryIndex()

    @abstractmethod
    def get_active_window_info(self) -> Optional[Tuple[str, int]]:
        """Return (window class, owning pid) of the focused window."""
        pass

    @property
    @abstractmethod
    def name(self) -> str:
        """Platform name for logging."""
        pass

    @property
    @abstractmethod
    def supports_window_tracking(self) -> bool:
        """Whether platform supports window tracking."""
        pass

    # --- Collaborators used by the tracker ---

    def frontmost_application(self) -> Optional[AppCandidate]:
        """Describe the application owning the focused window, if known."""
        info = self.get_active_window_info()
        if info is None:
            return None

        wm_class, pid = info
        if not wm_class:
            return None

        path = self.entries.find(wm_class)
        if path is None:
            return None

        entry = parse_entry(path)
        if entry is None:
            return None

        policy = ActivationPolicy.REGULAR
        if not entry.is_application:
            policy = ActivationPolicy.PROHIBITED
        elif entry.hidden:
            policy = ActivationPolicy.ACCESSORY

        return AppCandidate(
            path=path,
            name=entry.name,
            activation_policy=policy,
            is_self=pid == os.getpid(),
        )

    def recent_documents(self, limit: int = 10) -> List[RecentDocument]:
        """Most recently accessed local files, newest first."""
        try:
            tree = ET.parse(self.RECENT_FILES_PATH)
        except (OSError, ET.ParseError):
            return []

        documents: List[RecentDocument] = []
        for bookmark in tree.getroot().iter("bookmark"):
            href = bookmark.get("href", "")
            parsed = urlparse(href)
            if parsed.scheme != "file":
                continue
            path = unquote(parsed.path)

            accessed_at = _parse_xbel_time(bookmark.get("visited") or bookmark.get("modified"))
            if accessed_at is None or not os.path.isfile(path):
                continue
            documents.append(RecentDocument(path=path, accessed_at=accessed_at))

        documents.sort(key=lambda d: d.accessed_at, reverse=True)
        return documents[:limit]

    def path_exists(self, path: str) -> bool:
        return os.path.exists(path)

    def describe_application(self, path: str) -> Tuple[str, str]:
        """Return (display name, icon name) for an application path."""
        entry = parse_entry(path) if path.endswith(DESKTOP_EXTENSION) else None
        if entry is None:
            return os.path.basename(path.rstrip("/")), GENERIC_APP_ICON
        return entry.name, entry.icon or GENERIC_APP_ICON

    def launch_application(self, path: str, callback: Optional[LaunchCallback] = None) -> None:
        """
        Start an application without waiting for it.

        The callback, if given, runs on the launcher thread with
        (success, error message).
        """
        threading.Thread(
            target=self._launch, args=(path, callback), daemon=True
        ).start()

    # Shared helpers

    def _launch(self, path: str, callback: Optional[LaunchCallback]) -> None:
        error: Optional[str] = "no launcher available"
        for cmd in self.LAUNCH_COMMANDS:
            argv = self._launch_argv(cmd, path)
            try:
                subprocess.run(argv, check=True, capture_output=True, timeout=30)
                error = None
                break
            except FileNotFoundError:
                continue
            except subprocess.CalledProcessError as e:
                error = (e.stderr or b"").decode(errors="replace").strip() or str(e)
            except subprocess.TimeoutExpired as e:
                error = str(e)

        if error is None:
            print(f"Launched {path}")
        else:
            print(f"Error opening app {path}: {error}")

        if callback:
            callback(error is None, error)

    def _launch_argv(self, cmd: List[str], path: str) -> List[str]:
        if cmd[0] == "gtk-launch":
            # gtk-launch takes a desktop file id, not a path
            return cmd + [os.path.basename(path)]
        return cmd + [path]

    def _query_active_window(self) -> Optional[Tuple[str, int]]:
        """Run WINDOW_COMMANDS and return (class, pid)."""
        if not self.WINDOW_COMMANDS:
            return None
        try:
            window_id = subprocess.check_output(
                self.WINDOW_COMMANDS["get_id"],
                stderr=subprocess.DEVNULL
            ).decode().strip()

            wm_class = subprocess.check_output(
                self.WINDOW_COMMANDS["get_class"] + [window_id],
                stderr=subprocess.DEVNULL
            ).decode().strip()

            pid_out = subprocess.check_output(
                self.WINDOW_COMMANDS["get_pid"] + [window_id],
                stderr=subprocess.DEVNULL
            ).decode().strip()

            return (wm_class, int(pid_out) if pid_out.isdigit() else -1)
        except (subprocess.CalledProcessError, FileNotFoundError):
            return None

    def _check_command(self, cmd: str) -> bool:
        """Check if command exists."""
        try:
            subprocess.run(["which", cmd], capture_output=True, check=True)
            return True
        except (subprocess.CalledProcessError, FileNotFoundError):
            return False

    def _is_x11(self) -> bool:
        """Check if running on X11."""
        session_type = os.environ.get("XDG_SESSION_TYPE", "").lower()
        return session_type == "x11" or os.environ.get("DISPLAY") is not None


def _parse_xbel_time(value: Optional[str]) -> Optional[datetime.datetime]:
    """Parse an XBEL timestamp (UTC, 'Z' suffix) into naive local time."""
    if not value:
        return None
    try:
        ts = datetime.datetime.fromisoformat(value.replace('Z', '+00:00'))
    except ValueError:
        return None
    if ts.tzinfo is not None:
        ts = ts.astimezone().replace(tzinfo=None)
    return ts
