"""Lookup of freedesktop .desktop entries, the Linux application bundles."""
import configparser
import os
import shlex
import time
from dataclasses import dataclass
from typing import Dict, List, Optional

DESKTOP_EXTENSION = ".desktop"
ENTRY_SECTION = "Desktop Entry"
INDEX_MAX_AGE_SECONDS = 60.0


@dataclass(frozen=True)
class DesktopEntry:
    """The fields of a .desktop file that matter for tracking."""
    path: str
    name: str
    icon: str
    exec_name: str
    wm_class: str
    is_application: bool
    hidden: bool


def application_dirs() -> List[str]:
    """XDG application directories, user directory first."""
    data_home = os.environ.get("XDG_DATA_HOME") or os.path.expanduser("~/.local/share")
    data_dirs = os.environ.get("XDG_DATA_DIRS") or "/usr/local/share:/usr/share"
    dirs = [data_home] + [d for d in data_dirs.split(":") if d]
    dirs.append("/var/lib/flatpak/exports/share")
    dirs.append(os.path.expanduser("~/.local/share/flatpak/exports/share"))
    return [os.path.join(d, "applications") for d in dirs]


def parse_entry(path: str) -> Optional[DesktopEntry]:
    """Parse a .desktop file, returning None when it is unreadable."""
    parser = configparser.ConfigParser(interpolation=None, strict=False)
    parser.optionxform = str  # type: ignore[assignment,method-assign]
    try:
        with open(path, 'r', encoding='utf-8') as f:
            parser.read_file(f)
    except (OSError, UnicodeDecodeError, configparser.Error):
        return None

    if not parser.has_section(ENTRY_SECTION):
        return None
    section = parser[ENTRY_SECTION]

    exec_line = section.get("Exec", "")
    try:
        argv = shlex.split(exec_line)
    except ValueError:
        argv = exec_line.split()
    exec_name = os.path.basename(argv[0]) if argv else ""

    stem = os.path.splitext(os.path.basename(path))[0]
    return DesktopEntry(
        path=path,
        name=section.get("Name", stem),
        icon=section.get("Icon", ""),
        exec_name=exec_name,
        wm_class=section.get("StartupWMClass", ""),
        is_application=section.get("Type", "Application") == "Application",
        hidden=section.get("NoDisplay", "false").lower() == "true"
        or section.get("Hidden", "false").lower() == "true",
    )


class DesktopEntryIndex:
    """
    Maps window classes to installed .desktop files.

    The index is rebuilt lazily when a lookup misses and the last scan is
    older than INDEX_MAX_AGE_SECONDS, so newly installed apps are found.
    """

    def __init__(self, dirs: Optional[List[str]] = None) -> None:
        self.dirs = dirs
        self._by_key: Dict[str, str] = {}
        self._built_at: Optional[float] = None

    def _scan(self) -> None:
        by_key: Dict[str, str] = {}
        for directory in self.dirs or application_dirs():
            if not os.path.isdir(directory):
                continue
            for root, _dirs, files in os.walk(directory):
                for file_name in sorted(files):
                    if not file_name.endswith(DESKTOP_EXTENSION):
                        continue
                    path = os.path.join(root, file_name)
                    entry = parse_entry(path)
                    if entry is None:
                        continue
                    stem = os.path.splitext(file_name)[0]
                    # Earlier directories win, matching XDG precedence
                    for key in (entry.wm_class, stem, stem.split(".")[-1], entry.exec_name):
                        if key:
                            by_key.setdefault(key.lower(), path)
        self._by_key = by_key
        self._built_at = time.monotonic()

    def find(self, wm_class: str) -> Optional[str]:
        """Return the .desktop path for a window class, if any."""
        key = wm_class.lower()
        if self._built_at is None:
            self._scan()
        path = self._by_key.get(key)
        if path is None and self._built_at is not None \
                and time.monotonic() - self._built_at > INDEX_MAX_AGE_SECONDS:
            self._scan()
            path = self._by_key.get(key)
        return path
