"""Unit tests for the usage tracker facade."""
import datetime
import threading
import unittest
from typing import List
from unittest.mock import MagicMock
from desktoptotem.db import PreferenceRepository
from desktoptotem.events import EventContext, TrackerEvent
from desktoptotem.models import ActivationPolicy, AppCandidate, RecentDocument
from desktoptotem.tracking.tracker import UsageTracker
from fakes import FakePlatform, FixedClock, TempDatabase

START = datetime.datetime(2024, 3, 1, 9, 0, 0)
EDITOR = "/Applications/Editor.app"
MAIL = "/Applications/Mail.app"


class TrackerTestCase(unittest.TestCase):

    def setUp(self) -> None:
        self.db = TempDatabase()
        self.platform = FakePlatform()
        self.platform.install(EDITOR, MAIL)
        self.clock = FixedClock(START)
        self.tracker = UsageTracker(platform=self.platform, db_path=self.db.path,
                                    max_items=10, clock=self.clock)
        self.published: List[List[str]] = []
        self.tracker.subscribe(self.on_items)

    def tearDown(self) -> None:
        self.db.cleanup()

    def on_items(self, context: EventContext) -> None:
        self.published.append([item.path for item in context.items])

    def scores(self) -> dict:
        return {item.path: item.score for item in self.tracker.items}


class TestActivations(TrackerTestCase):

    def test_qualifying_activation_is_scored_and_published(self) -> None:
        self.assertTrue(self.tracker.on_app_activated(AppCandidate(EDITOR, "Editor")))
        self.assertTrue(self.tracker.on_app_activated(AppCandidate(EDITOR, "Editor")))

        self.assertEqual(self.tracker.counts.get(EDITOR), 4)
        self.assertEqual(self.scores(), {EDITOR: 4})
        self.assertEqual(self.published[-1], [EDITOR])

    def test_filtered_activation_changes_nothing(self) -> None:
        rejected = [
            None,
            AppCandidate(MAIL, "Mail", activation_policy=ActivationPolicy.ACCESSORY),
            AppCandidate(MAIL, "Mail", is_self=True),
            AppCandidate("/Applications/Terminal.app", "Terminal"),
        ]
        for candidate in rejected:
            with self.subTest(candidate=candidate):
                self.assertFalse(self.tracker.on_app_activated(candidate))

        self.assertEqual(self.tracker.counts.all(), {})
        self.assertEqual(self.published, [])

    def test_activation_purges_filtered_entries(self) -> None:
        self.tracker.counts.increment("/Applications/Desktop Totem.app", 30)

        self.tracker.on_app_activated(AppCandidate(EDITOR, "Editor"))

        self.assertEqual(self.tracker.counts.all(), {EDITOR: 2})

    def test_concurrent_activations_are_not_lost(self) -> None:
        candidate = AppCandidate(EDITOR, "Editor")

        def activate() -> None:
            for _ in range(25):
                self.tracker.on_app_activated(candidate)

        threads = [threading.Thread(target=activate) for _ in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        self.assertEqual(self.tracker.counts.get(EDITOR), 200)


class TestRefresh(TrackerTestCase):

    def test_frontmost_app_gains_on_every_refresh(self) -> None:
        self.platform.frontmost = AppCandidate(EDITOR, "Editor")

        self.tracker.refresh()
        items = self.tracker.refresh()

        self.assertEqual([(i.path, i.score) for i in items], [(EDITOR, 4)])
        self.assertEqual(len(self.published), 2)

    def test_filtered_frontmost_app_is_not_scored(self) -> None:
        self.platform.frontmost = AppCandidate(
            "/Applications/Sync Agent.app", "Sync Agent")

        self.assertEqual(self.tracker.refresh(), [])
        self.assertEqual(self.tracker.counts.all(), {})

    def test_recent_documents_respect_the_watermark(self) -> None:
        self.platform.documents = [
            RecentDocument("/docs/new.pdf", START + datetime.timedelta(minutes=5)),
            RecentDocument("/docs/old.pdf", START - datetime.timedelta(minutes=5)),
        ]

        self.tracker.refresh()

        self.assertEqual(self.tracker.counts.all(), {"/docs/new.pdf": 5})

    def test_only_ten_documents_considered(self) -> None:
        self.platform.documents = [
            RecentDocument(f"/docs/{i}.txt", START) for i in range(12)
        ]

        self.tracker.refresh()

        self.assertEqual(len(self.tracker.counts.all()), 10)

    def test_refresh_purges_stale_rules(self) -> None:
        self.tracker.counts.increment("/Applications/Desktop Totem.app", 30)

        self.tracker.refresh()

        self.assertEqual(self.tracker.counts.all(), {})

    def test_max_items(self) -> None:
        tracker = UsageTracker(platform=self.platform, db_path=self.db.path, max_items=1)
        tracker.counts.increment(EDITOR, 2)
        tracker.counts.increment(MAIL, 3)

        self.assertEqual([i.path for i in tracker.refresh()], [MAIL])


class TestOpenItem(TrackerTestCase):

    def setUp(self) -> None:
        super().setUp()
        self.tracker.counts.increment(EDITOR, 5)
        self.tracker.counts.increment(MAIL, 7)
        self.tracker.refresh()

    def test_open_updates_list_without_refresh(self) -> None:
        editor = self.tracker.find_item(EDITOR)
        assert editor is not None
        refresh = MagicMock(wraps=self.tracker.refresh)
        self.tracker.refresh = refresh  # type: ignore[method-assign]

        updated = self.tracker.open_item(editor)

        assert updated is not None
        self.assertEqual(updated.score, 8)
        self.assertEqual(self.scores(), {EDITOR: 8, MAIL: 7})
        # Re-sorted: Editor overtook Mail
        self.assertEqual(self.published[-1], [EDITOR, MAIL])
        self.assertEqual(self.tracker.counts.get(EDITOR), 8)
        self.assertEqual(self.platform.launched, [EDITOR])
        refresh.assert_not_called()

    def test_launch_failure_keeps_the_credit(self) -> None:
        self.platform.launch_result = (False, "no launcher available")
        editor = self.tracker.find_item(EDITOR)
        assert editor is not None

        self.tracker.open_item(editor)

        self.assertEqual(self.tracker.counts.get(EDITOR), 8)

    def test_open_item_not_in_list(self) -> None:
        stray = self.tracker.ranker.top_n(10)[0]
        stray.path = "/Applications/Gone.app"

        self.assertIsNone(self.tracker.open_item(stray))
        self.assertEqual(self.tracker.counts.get("/Applications/Gone.app"), 3)


class TestReset(TrackerTestCase):

    def test_reset_empties_the_list(self) -> None:
        self.tracker.on_app_activated(AppCandidate(EDITOR, "Editor"))
        resets: List[EventContext] = []
        self.tracker.events.register(TrackerEvent.COUNTS_RESET, resets.append)
        later = self.clock.advance(hours=1)

        self.assertEqual(self.tracker.reset_counts(), [])

        self.assertEqual(self.tracker.items, [])
        self.assertEqual(self.tracker.counts.all(), {})
        self.assertEqual(resets[0].watermark, later)
        self.assertEqual(self.published[-2:], [[], []])

    def test_app_in_front_is_not_credited_by_reset(self) -> None:
        self.platform.frontmost = AppCandidate(EDITOR, "Editor")
        self.tracker.on_app_activated(AppCandidate(EDITOR, "Editor"))
        self.clock.advance(hours=1)

        self.assertEqual(self.tracker.reset_counts(), [])

        self.assertEqual(self.tracker.ranker.top_n(10), [])
        self.assertEqual(self.tracker.counts.all(), {})
        # The next regular refresh credits it again
        self.assertEqual([i.score for i in self.tracker.refresh()], [2])

    def test_documents_before_reset_stop_counting(self) -> None:
        self.platform.documents = [
            RecentDocument("/docs/a.pdf", START + datetime.timedelta(minutes=1)),
        ]
        self.tracker.refresh()
        self.clock.advance(hours=1)

        self.tracker.reset_counts()

        self.assertEqual(self.tracker.counts.all(), {})


class TestNotesAndFlags(TrackerTestCase):

    def test_set_and_clear_note(self) -> None:
        self.tracker.counts.increment(EDITOR, 2)
        editor = self.tracker.refresh()[0]
        changes: List[EventContext] = []
        self.tracker.events.register(TrackerEvent.NOTE_CHANGED, changes.append)

        self.assertEqual(self.tracker.set_note("  renew licence  ", editor), "renew licence")
        self.assertEqual(self.tracker.note(editor), "renew licence")
        self.assertTrue(self.tracker.has_note(editor))

        self.assertIsNone(self.tracker.set_note("   ", editor))
        self.assertIsNone(self.tracker.note(editor))
        self.assertFalse(self.tracker.has_note(editor))
        self.assertEqual([c.note for c in changes], ["renew licence", None])

    def test_notes_survive_a_reset(self) -> None:
        self.tracker.set_note_for_path("keep me", EDITOR)
        self.tracker.reset_counts()
        self.assertEqual(self.tracker.note_for_path(EDITOR), "keep me")

    def test_window_flags(self) -> None:
        self.assertFalse(self.tracker.always_on_top)
        self.tracker.always_on_top = True
        self.tracker.desktop_always_on_top = True

        reopened = UsageTracker(platform=self.platform, db_path=self.db.path, max_items=10)
        self.assertTrue(reopened.always_on_top)
        self.assertTrue(reopened.desktop_always_on_top)
        self.assertTrue(reopened.preferences.get_bool(PreferenceRepository.ALWAYS_ON_TOP))

    def test_onboarding_once(self) -> None:
        self.assertTrue(self.tracker.needs_onboarding())
        self.tracker.mark_onboarding_seen()
        self.assertFalse(self.tracker.needs_onboarding())

    def test_failing_subscriber_does_not_block_others(self) -> None:
        def broken(context: EventContext) -> None:
            raise RuntimeError("boom")

        received: List[EventContext] = []
        self.tracker.unsubscribe(self.on_items)
        self.tracker.subscribe(broken)
        self.tracker.subscribe(received.append)

        self.tracker.on_app_activated(AppCandidate(EDITOR, "Editor"))

        self.assertEqual(len(received), 1)
        self.assertEqual(self.published, [])


if __name__ == '__main__':
    unittest.main()
