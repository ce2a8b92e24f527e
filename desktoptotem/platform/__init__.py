"""Platform detection and factory."""
import os
import subprocess
from typing import List, Optional, Tuple, Type
from .base import PlatformBase
from .kde import KDEPlatform
from .gnome import GNOMEPlatform
from .generic import GenericPlatform

# (XDG_CURRENT_DESKTOP markers, session process markers, implementation)
DESKTOPS: List[Tuple[Tuple[str, ...], Tuple[str, ...], Type[PlatformBase]]] = [
    (("kde", "plasma"), ("plasmashell", "kwin"), KDEPlatform),
    (("gnome", "ubuntu"), ("gnome-shell", "mutter"), GNOMEPlatform),
]

_platform_instance: Optional[PlatformBase] = None


def _platform_class() -> Type[PlatformBase]:
    desktop = os.environ.get("XDG_CURRENT_DESKTOP", "").lower()
    for desktop_markers, _, cls in DESKTOPS:
        if any(marker in desktop for marker in desktop_markers):
            return cls

    try:
        processes = subprocess.check_output(["ps", "-e"]).decode().lower()
    except (subprocess.CalledProcessError, FileNotFoundError):
        return GenericPlatform

    for _, process_markers, cls in DESKTOPS:
        if any(marker in processes for marker in process_markers):
            return cls
    return GenericPlatform


def detect_platform() -> PlatformBase:
    """
    Return the platform for the running desktop, detecting it once.

    XDG_CURRENT_DESKTOP is consulted first, then the process list; anything
    unrecognised gets the generic X11 implementation.
    """
    global _platform_instance

    if _platform_instance is None:
        _platform_instance = _platform_class()()
        print(f"Detected platform: {_platform_instance.name}")
    return _platform_instance


def get_platform() -> PlatformBase:
    """Get current platform instance (cached)."""
    return detect_platform()


__all__ = ["PlatformBase", "get_platform", "detect_platform"]
