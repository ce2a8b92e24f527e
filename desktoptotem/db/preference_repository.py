"""Repository for scalar preferences: watermark, migration flags, UI flags."""
import datetime
import json
from typing import Any, Optional
from .connection import get_cursor


class PreferenceRepository:
    """JSON-encoded values keyed by name."""

    # Persisted key names
    TRACKING_START = "trackingStartDate_v1"
    RESET_V2_DONE = "hasResetInitialFileCounts_v2"
    DESKTOP_ALWAYS_ON_TOP = "desktopAlwaysOnTop"
    ALWAYS_ON_TOP = "alwaysOnTop"
    ONBOARDING_SEEN = "hasSeenOnboarding_v1"

    _MISSING = object()

    def __init__(self, db_path: Optional[str] = None) -> None:
        self.db_path = db_path

    def _get_raw(self, key: str) -> Any:
        with get_cursor(self.db_path) as cur:
            cur.execute("SELECT value FROM preferences WHERE key = ?", (key,))
            row = cur.fetchone()
        if row is None:
            return self._MISSING
        try:
            return json.loads(row[0])
        except (TypeError, ValueError):
            print(f"Ignoring unreadable preference '{key}'")
            return self._MISSING

    def _set_raw(self, key: str, value: Any) -> None:
        with get_cursor(self.db_path) as cur:
            cur.execute("""
                INSERT INTO preferences (key, value) VALUES (?, ?)
                ON CONFLICT(key) DO UPDATE SET value = excluded.value
            """, (key, json.dumps(value)))

    def has(self, key: str) -> bool:
        return self._get_raw(key) is not self._MISSING

    def remove(self, key: str) -> None:
        with get_cursor(self.db_path) as cur:
            cur.execute("DELETE FROM preferences WHERE key = ?", (key,))

    def get_bool(self, key: str, default: bool = False) -> bool:
        value = self._get_raw(key)
        if isinstance(value, bool):
            return value
        return default

    def set_bool(self, key: str, value: bool) -> None:
        self._set_raw(key, bool(value))

    def get_datetime(self, key: str) -> Optional[datetime.datetime]:
        """Return a stored timestamp, or None when absent or unparseable."""
        value = self._get_raw(key)
        if not isinstance(value, str):
            return None
        try:
            return datetime.datetime.fromisoformat(value)
        except ValueError:
            print(f"Ignoring unreadable timestamp in preference '{key}': {value!r}")
            return None

    def set_datetime(self, key: str, value: datetime.datetime) -> None:
        self._set_raw(key, value.isoformat())
