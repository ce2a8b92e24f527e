#!/usr/bin/env python3
"""
Main entrypoint for Desktop Totem.
"""
import argparse
import sys
from typing import List, Optional
from .db import ensure_db_exists


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        prog="desktoptotem",
        description="Tray companion ranking the applications you use most.",
    )
    parser.add_argument("--headless", action="store_true",
                        help="track without a tray icon (no presentation layer)")
    args = parser.parse_args(argv)

    # Ensure DB schema exists before anything reads it
    ensure_db_exists()

    if args.headless:
        from .service import main as run_service
        run_service()
        return 0

    from PyQt5.QtWidgets import QApplication
    from .tracking import UsageTracker
    from .ui.tray import TrayApp

    # 1. Initialize the global QApplication instance
    app = QApplication(sys.argv)

    # 2. Keep running when the totem window closes; the tray icon stays.
    app.setQuitOnLastWindowClosed(False)

    # 3. The tray owns the tracker's timers for the whole session
    tray_icon = TrayApp(UsageTracker())

    # 4. Start the Qt event loop
    return app.exec_()


if __name__ == "__main__":
    sys.exit(main())
