"""
Rules deciding which applications may be scored and shown.

Every check is a plain, case-sensitive substring or extension test, so the
same candidate always gets the same answer.
"""
import os
from typing import Optional, Tuple
from ..models import ActivationPolicy, AppCandidate

# Substrings identifying this application in a path or name
SELF_MARKERS: Tuple[str, ...] = ("Desktop Totem", "Desktop_Totem", "desktoptotem", "desktop-totem")

# System utilities that run often but are not what users mean by "apps I use"
EXCLUDED_APPS: Tuple[str, ...] = (
    "Print Center", "Print Centre", "Keychain Access", "Activity Monitor",
    "Console", "Terminal", "System Settings", "System Preferences",
    "Disk Utility", "Migration Assistant", "Archive Utility",
    "Bluetooth File Exchange", "ColorSync Utility", "Digital Colour Meter",
    "Grapher", "Screenshot", "VoiceOver Utility", "AirPort Utility",
)

# Helper bundles and background processes
BACKGROUND_MARKERS: Tuple[str, ...] = ("Helper", "Agent", "Service", "Daemon")

DEFAULT_BUNDLE_EXTENSION = ".app"


def bundle_file_name(path: str) -> str:
    """Last path component, e.g. 'Safari.app'."""
    return os.path.basename(path.rstrip("/"))


def bundle_stem(path: str) -> str:
    """File name without its extension, e.g. 'Safari'."""
    return os.path.splitext(bundle_file_name(path))[0]


def bundle_extension(path: str) -> str:
    return os.path.splitext(bundle_file_name(path))[1]


def _contains_any(text: str, markers: Tuple[str, ...]) -> bool:
    return any(marker in text for marker in markers)


class EventFilter:
    """Pure predicates over candidates and stored paths."""

    def __init__(self, bundle_extension: str = DEFAULT_BUNDLE_EXTENSION,
                 self_markers: Tuple[str, ...] = SELF_MARKERS,
                 excluded_apps: Tuple[str, ...] = EXCLUDED_APPS) -> None:
        self.bundle_extension = bundle_extension
        self.self_markers = self_markers
        self.excluded_apps = excluded_apps

    def is_self_reference(self, path: str, name: str = "") -> bool:
        """True when the path or name points at this application."""
        return _contains_any(path, self.self_markers) or _contains_any(name, self.self_markers)

    def is_excluded_utility(self, name: str) -> bool:
        return _contains_any(name, self.excluded_apps)

    def is_background_process(self, name: str) -> bool:
        return _contains_any(name, BACKGROUND_MARKERS)

    def has_bundle_extension(self, path: str) -> bool:
        return bundle_extension(path) == self.bundle_extension

    def should_count(self, candidate: Optional[AppCandidate]) -> bool:
        """Decide whether an observed activation contributes to scores."""
        if candidate is None or not candidate.path:
            return False

        file_name = bundle_file_name(candidate.path)

        if candidate.is_self or self.is_self_reference(candidate.path, candidate.name):
            return False
        if candidate.activation_policy is not ActivationPolicy.REGULAR:
            return False
        if self.is_excluded_utility(candidate.name) or self.is_excluded_utility(bundle_stem(candidate.path)):
            return False
        if not self.has_bundle_extension(candidate.path):
            return False
        if self.is_background_process(candidate.name) or self.is_background_process(file_name):
            return False
        return True

    def should_purge(self, path: str) -> bool:
        """
        Whether a stored score entry must be dropped on load.

        Only rules derivable from the path itself apply here; activation
        policy is not persisted.
        """
        return self.is_self_reference(path, bundle_stem(path)) or self.is_excluded_utility(bundle_stem(path))

    def is_displayable(self, path: str, name: Optional[str] = None) -> bool:
        """Structural checks applied by the ranker to every stored path."""
        file_name = bundle_file_name(path)

        if not self.has_bundle_extension(path):
            return False
        if self.is_self_reference(path, file_name):
            return False
        if self.is_background_process(file_name) or self.is_excluded_utility(bundle_stem(path)):
            return False
        if name is not None:
            if self.is_self_reference("", name):
                return False
            if self.is_background_process(name) or self.is_excluded_utility(name):
                return False
        return True
