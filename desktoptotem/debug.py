"""Debug log written next to the database when DESKTOPTOTEM_DEBUG=1."""
import datetime
from . import config


def debug_log(message: str) -> None:
    """Write debug message to log file if debug mode is enabled."""
    if config.DEBUG_MODE:
        timestamp = datetime.datetime.now().isoformat(timespec='milliseconds')
        with open(config.DEBUG_LOG_PATH, 'a') as f:
            f.write(f"[{timestamp}] {message}\n")
