"""KDE Plasma platform implementation."""
from typing import Optional, Tuple
from .base import PlatformBase


class KDEPlatform(PlatformBase):
    """KDE Plasma-specific implementation."""

    # kdotool mirrors the xdotool commands and also works under KWin Wayland
    WAYLAND_WINDOW_COMMANDS = {
        "get_id": ["kdotool", "getactivewindow"],
        "get_class": ["kdotool", "getwindowclassname"],
        "get_pid": ["kdotool", "getwindowpid"],
    }
    LAUNCH_COMMANDS = [["kioclient", "exec"], ["kioclient5", "exec"], ["gtk-launch"], ["gio", "launch"]]

    def __init__(self) -> None:
        super().__init__()
        if not self._is_x11():
            self.WINDOW_COMMANDS = self.WAYLAND_WINDOW_COMMANDS

    @property
    def name(self) -> str:
        return "KDE Plasma"

    @property
    def supports_window_tracking(self) -> bool:
        if self._is_x11():
            return self._check_command("xdotool")
        return self._check_command("kdotool")

    def get_active_window_info(self) -> Optional[Tuple[str, int]]:
        """Use xdotool (X11) or kdotool (Wayland) for window info."""
        return self._query_active_window()
