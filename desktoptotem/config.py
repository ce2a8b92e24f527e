import os
import json
from typing import Any, Dict

DB_PATH: str = os.path.expanduser(os.environ.get("DESKTOPTOTEM_DB", "~/.local/share/desktoptotem.db"))
POLL_INTERVAL_MS: int = 2000  # activation watcher
LOG_INTERVAL: int = 2  # seconds, headless loop
REFRESH_INTERVAL_SECONDS: int = 120
MAX_ITEMS: int = 10
RECENT_DOCUMENTS_LIMIT: int = 10
WEB_PORT: int = 5055

# User configuration file path
USER_CONFIG_PATH: str = os.path.expanduser("~/.config/desktoptotem/settings.json")

# Debug mode - logs detailed tracking information
DEBUG_MODE: bool = os.environ.get("DESKTOPTOTEM_DEBUG", "0") == "1"
DEBUG_LOG_PATH: str = os.path.expanduser("~/.local/share/desktoptotem_debug.log")


def load_user_config(config_path: str = USER_CONFIG_PATH) -> Dict[str, Any]:
    """Load user configuration from file."""
    if os.path.exists(config_path):
        try:
            with open(config_path, 'r') as f:
                data = json.load(f)
            if isinstance(data, dict):
                return data
            print(f"Ignoring settings file {config_path}: expected a JSON object")
        except (json.JSONDecodeError, IOError) as e:
            print(f"Ignoring unreadable settings file {config_path}: {e}")
    return {}


def save_user_config(config: Dict[str, Any], config_path: str = USER_CONFIG_PATH) -> None:
    """Save user configuration to file."""
    os.makedirs(os.path.dirname(config_path), exist_ok=True)
    with open(config_path, 'w') as f:
        json.dump(config, f, indent=2)


# --- Dynamic Configuration Class ---

class Config:
    """
    Manages dynamic application settings loaded from the user's JSON file.

    This class holds settings that can be reloaded at runtime.
    """
    DEFAULT_MAX_ITEMS: int = MAX_ITEMS
    DEFAULT_REFRESH_INTERVAL_SECONDS: int = REFRESH_INTERVAL_SECONDS
    DEFAULT_WEB_ENABLED: bool = False
    DEFAULT_WEB_PORT: int = WEB_PORT

    def __init__(self, config_path: str = USER_CONFIG_PATH):
        self.config_path = config_path
        self._user_config: Dict[str, Any] = {}

        self.max_items: int = self.DEFAULT_MAX_ITEMS
        self.refresh_interval_seconds: int = self.DEFAULT_REFRESH_INTERVAL_SECONDS
        self.web_enabled: bool = self.DEFAULT_WEB_ENABLED
        self.web_port: int = self.DEFAULT_WEB_PORT

        self.reload()

    def reload(self) -> None:
        """
        Reload configuration from disk, updating this object's attributes.
        """
        self._user_config = load_user_config(self.config_path)

        self.max_items = self._positive_int('max_items', self.DEFAULT_MAX_ITEMS)
        self.refresh_interval_seconds = self._positive_int(
            'refresh_interval_seconds', self.DEFAULT_REFRESH_INTERVAL_SECONDS
        )
        self.web_enabled = bool(self._user_config.get('web_enabled', self.DEFAULT_WEB_ENABLED))
        self.web_port = self._positive_int('web_port', self.DEFAULT_WEB_PORT)

    def _positive_int(self, key: str, default: int) -> int:
        value = self._user_config.get(key, default)
        if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
            print(f"Invalid value for '{key}' in settings: {value!r}, using {default}")
            return default
        return value


# Shared instance imported by the rest of the application.
settings = Config()
