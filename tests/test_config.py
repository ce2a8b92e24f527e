"""Tests for user settings loading."""
import json
import os
import tempfile
import unittest
from desktoptotem.config import Config, load_user_config, save_user_config


class TestUserConfig(unittest.TestCase):

    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.path = os.path.join(self._tmp.name, "desktoptotem", "settings.json")

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_defaults_without_file(self) -> None:
        config = Config(self.path)
        self.assertEqual(config.max_items, 10)
        self.assertEqual(config.refresh_interval_seconds, 120)
        self.assertFalse(config.web_enabled)
        self.assertEqual(config.web_port, 5055)

    def test_save_and_reload(self) -> None:
        config = Config(self.path)
        save_user_config({"max_items": 5, "web_enabled": True}, self.path)

        config.reload()

        self.assertEqual(config.max_items, 5)
        self.assertTrue(config.web_enabled)
        self.assertEqual(config.refresh_interval_seconds, 120)

    def test_invalid_values_fall_back(self) -> None:
        save_user_config({"max_items": 0, "refresh_interval_seconds": "soon", "web_port": True}, self.path)

        config = Config(self.path)

        self.assertEqual(config.max_items, 10)
        self.assertEqual(config.refresh_interval_seconds, 120)
        self.assertEqual(config.web_port, 5055)

    def test_unreadable_file(self) -> None:
        os.makedirs(os.path.dirname(self.path))
        with open(self.path, 'w') as f:
            f.write("{broken")
        self.assertEqual(load_user_config(self.path), {})

        with open(self.path, 'w') as f:
            json.dump([1, 2], f)
        self.assertEqual(load_user_config(self.path), {})


if __name__ == '__main__':
    unittest.main()
