"""Generic X11/Wayland fallback implementation."""
from typing import Optional, Tuple
from .base import PlatformBase


class GenericPlatform(PlatformBase):
    """Fallback for unknown desktop environments."""

    @property
    def name(self) -> str:
        return "Generic"

    @property
    def supports_window_tracking(self) -> bool:
        return self._is_x11() and self._check_command("xdotool")

    def get_active_window_info(self) -> Optional[Tuple[str, int]]:
        """Only works with xdotool on X11."""
        if not self._is_x11():
            return None
        return self._query_active_window()
