#!/usr/bin/env python3
"""
Headless tracking loop, for sessions without a system tray.
"""
import time
import datetime
from typing import Optional
from .config import LOG_INTERVAL, DEBUG_MODE, DEBUG_LOG_PATH, settings
from .debug import debug_log
from .platform import get_platform
from .platform.base import PlatformBase
from .tracking import ActivationWatcher, UsageTracker


def main(tracker: Optional[UsageTracker] = None, platform: Optional[PlatformBase] = None) -> None:
    """Poll for activations and refresh the ranking until interrupted."""
    platform = platform or get_platform()
    tracker = tracker or UsageTracker(platform=platform)
    watcher = ActivationWatcher(tracker, platform)

    if not platform.supports_window_tracking:
        print(f"Warning: activation tracking unavailable on {platform.name} "
              f"(window tracking not supported), only documents will be counted")

    if DEBUG_MODE:
        print(f"Debug logging enabled: {DEBUG_LOG_PATH}")
        debug_log("=" * 80)
        debug_log("Desktop Totem service started in DEBUG mode")
        debug_log(f"LOG_INTERVAL: {LOG_INTERVAL}")
        debug_log(f"REFRESH_INTERVAL: {settings.refresh_interval_seconds}")
        debug_log("=" * 80)

    tracker.refresh()
    watcher.start()
    last_refresh = datetime.datetime.now()
    print("Desktop Totem tracking started")

    try:
        while True:
            watcher.poll()

            now = datetime.datetime.now()
            if (now - last_refresh).total_seconds() >= settings.refresh_interval_seconds:
                items = tracker.refresh()
                last_refresh = now
                debug_log(f"Refreshed: {[(i.name, i.score) for i in items]}")

            time.sleep(LOG_INTERVAL)
    except KeyboardInterrupt:
        pass
    finally:
        watcher.stop()
        print("Desktop Totem tracking stopped")


if __name__ == "__main__":
    main()
