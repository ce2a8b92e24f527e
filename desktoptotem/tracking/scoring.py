"""Weighted usage scores with a tracking-start watermark and one-shot migrations."""
import datetime
from typing import Callable, List, Optional
from ..db.count_repository import CountRepository
from ..db.preference_repository import PreferenceRepository
from ..debug import debug_log
from .filters import EventFilter

# Score weights per event type
ACTIVATION_WEIGHT = 2  # user switched to the app
REFRESH_ACTIVATION_WEIGHT = 2  # app found frontmost on a periodic refresh
DOCUMENT_WEIGHT = 5  # recent document accessed after the watermark
MANUAL_OPEN_WEIGHT = 3  # opened from the totem


class ScoringEngine:
    """
    Sole writer of the score map.

    Scores only grow; they shrink only through reset() or purge().
    """

    def __init__(self, counts: CountRepository, preferences: PreferenceRepository,
                 event_filter: Optional[EventFilter] = None,
                 clock: Callable[[], datetime.datetime] = datetime.datetime.now) -> None:
        self.counts = counts
        self.preferences = preferences
        self.filter = event_filter or EventFilter()
        self.clock = clock

    # --- Lifecycle ---

    def prepare(self) -> None:
        """Run pending one-shot migrations and make sure a watermark exists."""
        self.run_migrations()
        self.ensure_watermark()

    def run_migrations(self) -> bool:
        """
        Wipe scores written by builds older than the v2 reset, once per store.

        Returns True when the wipe ran.
        """
        if self.preferences.get_bool(PreferenceRepository.RESET_V2_DONE):
            return False
        self.counts.clear()
        self.preferences.set_bool(PreferenceRepository.RESET_V2_DONE, True)
        print("Cleared usage history from a previous version")
        return True

    def ensure_watermark(self) -> datetime.datetime:
        """Return the watermark, starting a clean slate if there is none."""
        watermark = self.preferences.get_datetime(PreferenceRepository.TRACKING_START)
        if watermark is not None:
            return watermark

        now = self.clock()
        self.counts.clear()
        self.preferences.set_datetime(PreferenceRepository.TRACKING_START, now)
        debug_log(f"Tracking starts at {now.isoformat()}")
        return now

    @property
    def watermark(self) -> datetime.datetime:
        return self.ensure_watermark()

    def reset(self) -> datetime.datetime:
        """Forget all scores and move the watermark to now (never backwards)."""
        previous = self.preferences.get_datetime(PreferenceRepository.TRACKING_START)
        now = self.clock()
        watermark = max(now, previous) if previous is not None else now

        self.counts.clear()
        self.preferences.set_datetime(PreferenceRepository.TRACKING_START, watermark)
        debug_log(f"Counts reset, tracking restarts at {watermark.isoformat()}")
        return watermark

    def purge(self) -> List[str]:
        """Drop stored paths that the current filter rules reject."""
        doomed = [path for path in self.counts.paths() if self.filter.should_purge(path)]
        if doomed:
            self.counts.delete_many(doomed)
            debug_log(f"Purged {len(doomed)} filtered entries: {doomed}")
        return doomed

    # --- Scoring ---

    def _credit(self, path: str, weight: int, reason: str) -> int:
        score = self.counts.increment(path, weight)
        debug_log(f"+{weight} {reason}: {path} -> {score}")
        return score

    def record_activation(self, path: str) -> int:
        return self._credit(path, ACTIVATION_WEIGHT, "activation")

    def record_refresh_activation(self, path: str) -> int:
        return self._credit(path, REFRESH_ACTIVATION_WEIGHT, "frontmost on refresh")

    def record_document_open(self, path: str, accessed_at: datetime.datetime) -> bool:
        """
        Credit a document access that happened at or after the watermark.

        Returns whether the access counted.
        """
        if accessed_at < self.watermark:
            return False
        if self.filter.is_self_reference(path):
            return False
        self._credit(path, DOCUMENT_WEIGHT, "document access")
        return True

    def record_manual_open(self, path: str) -> int:
        return self._credit(path, MANUAL_OPEN_WEIGHT, "manual open")
