"""Unit tests for the scoring engine: weights, watermark and migrations."""
import datetime
import unittest
from desktoptotem.db import CountRepository, PreferenceRepository
from desktoptotem.tracking.filters import EventFilter
from desktoptotem.tracking.scoring import ScoringEngine
from fakes import FixedClock, TempDatabase

START = datetime.datetime(2024, 3, 1, 9, 0, 0)
SAFARI = "/Applications/Safari.app"


class ScoringTestCase(unittest.TestCase):

    def setUp(self) -> None:
        self.db = TempDatabase()
        self.counts = CountRepository(self.db.path)
        self.preferences = PreferenceRepository(self.db.path)
        self.clock = FixedClock(START)
        self.engine = ScoringEngine(self.counts, self.preferences, EventFilter(), self.clock)

    def tearDown(self) -> None:
        self.db.cleanup()


class TestWeights(ScoringTestCase):

    def setUp(self) -> None:
        super().setUp()
        self.engine.prepare()

    def test_each_event_type(self) -> None:
        self.assertEqual(self.engine.record_activation(SAFARI), 2)
        self.assertEqual(self.engine.record_refresh_activation(SAFARI), 4)
        self.assertEqual(self.engine.record_manual_open(SAFARI), 7)
        self.assertTrue(self.engine.record_document_open(SAFARI, START))
        self.assertEqual(self.counts.get(SAFARI), 12)

    def test_document_before_watermark_scores_nothing(self) -> None:
        self.clock.advance(hours=1)
        counted = self.engine.record_document_open("/docs/old.pdf", START - datetime.timedelta(seconds=1))
        self.assertFalse(counted)
        self.assertEqual(self.counts.get("/docs/old.pdf"), 0)
        self.assertNotIn("/docs/old.pdf", self.counts.all())

    def test_document_at_watermark_counts(self) -> None:
        self.assertTrue(self.engine.record_document_open("/docs/new.pdf", START))
        self.assertEqual(self.counts.get("/docs/new.pdf"), 5)

    def test_self_documents_are_ignored(self) -> None:
        self.assertFalse(self.engine.record_document_open("/tmp/desktoptotem/log.txt", START))

    def test_negative_weight_is_refused(self) -> None:
        with self.assertRaises(ValueError):
            self.counts.increment(SAFARI, -1)


class TestLifecycle(ScoringTestCase):

    def test_first_run_starts_clean(self) -> None:
        self.preferences.set_bool(PreferenceRepository.RESET_V2_DONE, True)
        self.counts.increment(SAFARI, 40)

        self.engine.prepare()

        self.assertEqual(self.counts.all(), {})
        self.assertEqual(self.engine.watermark, START)

    def test_migration_wipes_once(self) -> None:
        self.preferences.set_datetime(PreferenceRepository.TRACKING_START, START)
        self.counts.increment(SAFARI, 40)

        self.assertTrue(self.engine.run_migrations())
        self.assertEqual(self.counts.all(), {})
        self.assertTrue(self.preferences.get_bool(PreferenceRepository.RESET_V2_DONE))

        self.counts.increment(SAFARI, 2)
        self.assertFalse(self.engine.run_migrations())
        self.assertEqual(self.counts.get(SAFARI), 2)

    def test_prepare_keeps_scores_after_first_run(self) -> None:
        self.engine.prepare()
        self.engine.record_activation(SAFARI)

        self.clock.advance(days=2)
        ScoringEngine(self.counts, self.preferences, EventFilter(), self.clock).prepare()

        self.assertEqual(self.counts.get(SAFARI), 2)
        self.assertEqual(self.engine.watermark, START)

    def test_reset_clears_and_moves_watermark(self) -> None:
        self.engine.prepare()
        self.engine.record_activation(SAFARI)
        later = self.clock.advance(hours=3)

        self.assertEqual(self.engine.reset(), later)
        self.assertEqual(self.counts.all(), {})
        self.assertEqual(self.engine.watermark, later)

    def test_reset_never_moves_watermark_back(self) -> None:
        future = START + datetime.timedelta(days=1)
        self.preferences.set_datetime(PreferenceRepository.TRACKING_START, future)

        self.assertEqual(self.engine.reset(), future)
        self.assertEqual(self.engine.watermark, future)

    def test_unreadable_watermark_starts_over(self) -> None:
        self.engine.prepare()
        self.engine.record_activation(SAFARI)
        self.preferences._set_raw(PreferenceRepository.TRACKING_START, "not a date")

        self.assertEqual(self.engine.ensure_watermark(), START)
        self.assertEqual(self.counts.all(), {})

    def test_purge_drops_filtered_paths(self) -> None:
        self.engine.prepare()
        self.counts.increment(SAFARI, 2)
        self.counts.increment("/Applications/Desktop Totem.app", 9)
        self.counts.increment("/System/Applications/Utilities/Terminal.app", 4)
        self.counts.increment("/docs/report.pdf", 5)

        removed = self.engine.purge()

        self.assertEqual(sorted(removed), [
            "/Applications/Desktop Totem.app",
            "/System/Applications/Utilities/Terminal.app",
        ])
        self.assertEqual(self.counts.all(), {SAFARI: 2, "/docs/report.pdf": 5})


if __name__ == '__main__':
    unittest.main()
