"""GNOME platform implementation."""
from .generic import GenericPlatform


class GNOMEPlatform(GenericPlatform):
    """
    GNOME-specific implementation.

    Mutter does not expose the focused window under Wayland, so activation
    tracking needs an X11 session with xdotool, as on the generic desktop.
    """

    LAUNCH_COMMANDS = [["gio", "launch"], ["gtk-launch"]]

    @property
    def name(self) -> str:
        return "GNOME"
