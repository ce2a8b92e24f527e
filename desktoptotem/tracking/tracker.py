"""
The usage tracker: public entry point of the tracking engine.

Combines the filter, scoring engine, ranker and note store over one
database, and publishes the ranked list through an EventDispatcher.
"""
import dataclasses
import datetime
import threading
from typing import Callable, List, Optional
from .. import config
from ..config import settings
from ..db.connection import ensure_db_exists
from ..db.count_repository import CountRepository
from ..db.note_repository import NoteRepository
from ..db.preference_repository import PreferenceRepository
from ..debug import debug_log
from ..events import EventContext, EventDispatcher, EventHandler, TrackerEvent
from ..models import AppCandidate, DisplayItem
from ..platform import get_platform
from ..platform.base import PlatformBase
from .filters import EventFilter
from .notes import NoteStore
from .ranker import Ranker
from .scoring import MANUAL_OPEN_WEIGHT, ScoringEngine


class UsageTracker:
    """
    Tracks application usage and publishes the "most used" list.

    All store mutations and publications happen under a single re-entrant
    lock, so the activation poller, the refresh timer, UI actions and web
    requests never interleave a read-modify-write.
    """

    def __init__(self, platform: Optional[PlatformBase] = None,
                 db_path: Optional[str] = None,
                 max_items: Optional[int] = None,
                 clock: Callable[[], datetime.datetime] = datetime.datetime.now) -> None:
        self.platform = platform or get_platform()
        self.db_path = db_path
        self._max_items = max_items

        ensure_db_exists(db_path)
        self.counts = CountRepository(db_path)
        self.preferences = PreferenceRepository(db_path)

        self.filter = EventFilter(bundle_extension=self.platform.bundle_extension)
        self.engine = ScoringEngine(self.counts, self.preferences, self.filter, clock)
        self.ranker = Ranker(self.counts, self.filter, self.platform)
        self.note_store = NoteStore(NoteRepository(db_path))

        self.events = EventDispatcher()
        self._lock = threading.RLock()
        self._items: List[DisplayItem] = []

        with self._lock:
            self.engine.prepare()

    @property
    def max_items(self) -> int:
        return self._max_items or settings.max_items

    @property
    def items(self) -> List[DisplayItem]:
        """The currently published ranked list (a copy)."""
        with self._lock:
            return list(self._items)

    def subscribe(self, handler: EventHandler) -> None:
        """Call `handler(context)` with `context.items` whenever the list changes."""
        self.events.register(TrackerEvent.ITEMS_CHANGED, handler)

    def unsubscribe(self, handler: EventHandler) -> None:
        self.events.unregister(TrackerEvent.ITEMS_CHANGED, handler)

    def _publish(self, items: List[DisplayItem]) -> None:
        self._items = items
        self.events.emit(TrackerEvent.ITEMS_CHANGED, EventContext(items=list(items)))

    def find_item(self, path: str) -> Optional[DisplayItem]:
        with self._lock:
            for item in self._items:
                if item.path == path:
                    return item
        return None

    # --- Tracking ---

    def on_app_activated(self, candidate: Optional[AppCandidate]) -> bool:
        """
        Handle a foreground application switch.

        Returns whether the activation was scored.
        """
        if candidate is None:
            return False
        if not self.filter.should_count(candidate):
            debug_log(f"Ignored activation: {candidate.name} ({candidate.path})")
            return False

        with self._lock:
            self.engine.purge()
            self.engine.record_activation(candidate.path)
            self._publish(self.ranker.top_n(self.max_items))
        return True

    def refresh(self) -> List[DisplayItem]:
        """
        Reconcile with the desktop and republish the ranked list.

        Credits the frontmost application again on every call, so apps kept
        in front across timer ticks keep gaining score.
        """
        return self._reconcile(credit_frontmost=True)

    def _reconcile(self, credit_frontmost: bool) -> List[DisplayItem]:
        # Ask the desktop before taking the lock; these may run subprocesses
        frontmost = self.platform.frontmost_application() if credit_frontmost else None
        documents = self.platform.recent_documents(config.RECENT_DOCUMENTS_LIMIT)

        with self._lock:
            self.engine.ensure_watermark()
            self.engine.purge()

            if frontmost is not None and self.filter.should_count(frontmost):
                self.engine.record_refresh_activation(frontmost.path)

            counted = 0
            for document in documents[:config.RECENT_DOCUMENTS_LIMIT]:
                if self.engine.record_document_open(document.path, document.accessed_at):
                    counted += 1
            if counted:
                debug_log(f"Counted {counted} recent documents")

            items = self.ranker.top_n(self.max_items)
            self._publish(items)
            return list(items)

    def open_item(self, item: DisplayItem) -> Optional[DisplayItem]:
        """
        Launch an item and credit the manual open.

        The launch runs in the background and its outcome never affects the
        score. The published list is updated in memory and re-sorted without
        re-reading the store. Returns the updated item, or None when it is
        not in the published list.
        """
        print(f"Opening {item.name} at {item.path}")
        self.platform.launch_application(item.path, self._on_launch_finished)

        with self._lock:
            self.engine.record_manual_open(item.path)

            index = next(
                (i for i, current in enumerate(self._items)
                 if current.id == item.id or current.path == item.path),
                None,
            )
            if index is None:
                return None

            current = self._items[index]
            updated = dataclasses.replace(
                current,
                score=current.score + MANUAL_OPEN_WEIGHT,
                last_accessed=datetime.datetime.now(),
            )
            items = list(self._items)
            items[index] = updated
            self._publish(sorted(items, key=lambda i: i.score, reverse=True))
            return updated

    def _on_launch_finished(self, success: bool, error: Optional[str]) -> None:
        if not success:
            debug_log(f"Launch failed, score kept: {error}")

    def reset_counts(self) -> List[DisplayItem]:
        """
        Forget all usage, restart tracking from now and refresh.

        The app in front is whatever asked for the reset (the totem or the
        dashboard's browser) and is not credited, so the list starts empty.
        """
        with self._lock:
            watermark = self.engine.reset()
            self._publish([])
            self.events.emit(TrackerEvent.COUNTS_RESET, EventContext(watermark=watermark))
        return self._reconcile(credit_frontmost=False)

    # --- Notes ---

    def note(self, item: DisplayItem) -> Optional[str]:
        return self.note_for_path(item.path)

    def note_for_path(self, path: str) -> Optional[str]:
        return self.note_store.note(path)

    def has_note(self, item: DisplayItem) -> bool:
        return self.note_store.has_note(item.path)

    def set_note(self, text: Optional[str], item: DisplayItem) -> Optional[str]:
        """Set or clear (blank text) the note for an item."""
        return self.set_note_for_path(text, item.path)

    def set_note_for_path(self, text: Optional[str], path: str) -> Optional[str]:
        with self._lock:
            stored = self.note_store.set_note(path, text)
            self.events.emit(TrackerEvent.NOTE_CHANGED, EventContext(path=path, note=stored))
            return stored

    # --- Presentation flags persisted alongside the scores ---

    @property
    def always_on_top(self) -> bool:
        return self.preferences.get_bool(PreferenceRepository.ALWAYS_ON_TOP)

    @always_on_top.setter
    def always_on_top(self, value: bool) -> None:
        self.preferences.set_bool(PreferenceRepository.ALWAYS_ON_TOP, value)

    @property
    def desktop_always_on_top(self) -> bool:
        return self.preferences.get_bool(PreferenceRepository.DESKTOP_ALWAYS_ON_TOP)

    @desktop_always_on_top.setter
    def desktop_always_on_top(self, value: bool) -> None:
        self.preferences.set_bool(PreferenceRepository.DESKTOP_ALWAYS_ON_TOP, value)

    def needs_onboarding(self) -> bool:
        return not self.preferences.get_bool(PreferenceRepository.ONBOARDING_SEEN)

    def mark_onboarding_seen(self) -> None:
        self.preferences.set_bool(PreferenceRepository.ONBOARDING_SEEN, True)
