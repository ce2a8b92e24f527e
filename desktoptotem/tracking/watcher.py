"""
Foreground application monitoring.

Desktops on Linux do not broadcast an "application activated" signal, so
the focused window is polled and every change of application is forwarded
to the tracker as one activation.
"""
from typing import Optional
from ..platform.base import PlatformBase
from .tracker import UsageTracker


class ActivationWatcher:
    """
    Turns focused-window polls into activation events.

    Polled regularly (every POLL_INTERVAL_MS) by the tray timer or the
    headless service loop.
    """

    def __init__(self, tracker: UsageTracker, platform: Optional[PlatformBase] = None) -> None:
        self.tracker = tracker
        self.platform = platform or tracker.platform
        self.current_path: Optional[str] = None
        self.is_watching: bool = False

    def start(self) -> None:
        """Begin watching; the application already in front is not credited."""
        self.is_watching = True
        candidate = self.platform.frontmost_application()
        self.current_path = candidate.path if candidate else None

    def stop(self) -> None:
        self.is_watching = False
        self.current_path = None

    def poll(self) -> bool:
        """
        Check the focused application once.

        Returns True when a switch was detected and scored.
        """
        if not self.is_watching:
            return False

        candidate = self.platform.frontmost_application()
        if candidate is None:
            # Focus on a desktop or an unknown window; a later switch back counts
            self.current_path = None
            return False

        if candidate.path == self.current_path:
            return False

        self.current_path = candidate.path
        return self.tracker.on_app_activated(candidate)
