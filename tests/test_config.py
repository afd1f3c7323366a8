import json
import logging
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from note_match import logging_config
from note_match.logger import get_logger, qualified_name
from note_match.core.config import ConfigManager


class TestConfigManager(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.config_dir = Path(self._tmp.name)

    def tearDown(self):
        self._tmp.cleanup()

    def test_creates_default_tuner_config(self):
        manager = ConfigManager(str(self.config_dir))
        config = manager.get_config("tuner")
        self.assertEqual(config["transposition"], "C")
        self.assertTrue(config["strict_invariants"])
        self.assertTrue((self.config_dir / "tuner.json").exists())

    def test_get_config_returns_a_copy(self):
        manager = ConfigManager(str(self.config_dir))
        manager.get_config("tuner")["transposition"] = "Bb"
        self.assertEqual(manager.get_config("tuner")["transposition"], "C")
        self.assertEqual(manager.get_config("missing"), {})

    def test_update_persists(self):
        manager = ConfigManager(str(self.config_dir))
        self.assertTrue(manager.update_config("tuner", {"transposition": "Bb"}))

        reloaded = ConfigManager(str(self.config_dir))
        self.assertEqual(reloaded.get_config("tuner")["transposition"], "Bb")

    def test_update_unknown_config(self):
        manager = ConfigManager(str(self.config_dir))
        self.assertFalse(manager.update_config("missing", {"a": 1}))
        self.assertFalse(manager.reset_config("missing"))

    def test_reset(self):
        manager = ConfigManager(str(self.config_dir))
        manager.update_config("tuner", {"use_flats": True})
        self.assertTrue(manager.reset_config("tuner"))
        self.assertFalse(manager.get_config("tuner")["use_flats"])
        saved = json.loads((self.config_dir / "tuner.json").read_text())
        self.assertFalse(saved["use_flats"])

    def test_missing_keys_are_backfilled(self):
        (self.config_dir / "tuner.json").write_text(json.dumps({"use_flats": True}))
        config = ConfigManager(str(self.config_dir)).get_config("tuner")
        self.assertTrue(config["use_flats"])
        self.assertEqual(config["in_tune_cents"], 5.0)

    def test_corrupt_file_falls_back_to_defaults(self):
        (self.config_dir / "tuner.json").write_text("{not json")
        with self.assertLogs("note_match.core.config", level="ERROR"):
            config = ConfigManager(str(self.config_dir)).get_config("tuner")
        self.assertEqual(config["transposition"], "C")

    def test_unknown_transposition_is_reset(self):
        (self.config_dir / "tuner.json").write_text(
            json.dumps({"transposition": "H", "use_flats": True})
        )
        with self.assertLogs("note_match.core.config", level="ERROR") as logs:
            config = ConfigManager(str(self.config_dir)).get_config("tuner")
        self.assertEqual(config["transposition"], "C")
        self.assertTrue(config["use_flats"])
        self.assertIn("transposition='H'", logs.output[0])

    def test_flat_transposition_spelling_is_kept(self):
        (self.config_dir / "tuner.json").write_text(json.dumps({"transposition": "Bb"}))
        config = ConfigManager(str(self.config_dir)).get_config("tuner")
        self.assertEqual(config["transposition"], "Bb")

    def test_invalid_values_are_reset(self):
        (self.config_dir / "tuner.json").write_text(
            json.dumps(
                {
                    "use_flats": "yes",
                    "strict_invariants": 1,
                    "min_frequency": "low",
                    "max_frequency": -10.0,
                    "in_tune_cents": True,
                }
            )
        )
        with self.assertLogs("note_match.core.config", level="ERROR") as logs:
            config = ConfigManager(str(self.config_dir)).get_config("tuner")
        self.assertEqual(len(logs.output), 5)
        self.assertFalse(config["use_flats"])
        self.assertTrue(config["strict_invariants"])
        self.assertEqual(config["min_frequency"], 0.0)
        self.assertEqual(config["max_frequency"], 0.0)
        self.assertEqual(config["in_tune_cents"], 5.0)

    def test_inverted_frequency_window_is_reset(self):
        (self.config_dir / "tuner.json").write_text(
            json.dumps({"min_frequency": 900.0, "max_frequency": 100.0})
        )
        with self.assertLogs("note_match.core.config", level="ERROR"):
            config = ConfigManager(str(self.config_dir)).get_config("tuner")
        self.assertEqual(config["min_frequency"], 0.0)
        self.assertEqual(config["max_frequency"], 100.0)

    def test_update_rejects_invalid_values(self):
        manager = ConfigManager(str(self.config_dir))
        with self.assertLogs("note_match.core.config", level="ERROR"):
            manager.update_config("tuner", {"transposition": "X#", "use_flats": True})
        config = manager.get_config("tuner")
        self.assertEqual(config["transposition"], "C")
        self.assertTrue(config["use_flats"])
        saved = json.loads((self.config_dir / "tuner.json").read_text())
        self.assertEqual(saved["transposition"], "C")


class TestLoggingConfig(unittest.TestCase):
    def setUp(self):
        root = logging.getLogger()
        self._root_state = (root.level, root.handlers[:], root.propagate)

    def tearDown(self):
        for name in logging_config.MODULE_LOG_LEVELS:
            if not name:
                continue
            logger = logging.getLogger(name)
            for handler in logger.handlers[:]:
                logger.removeHandler(handler)
            logger.setLevel(logging.NOTSET)
            logger.propagate = True

        root = logging.getLogger()
        level, handlers, propagate = self._root_state
        for handler in root.handlers[:]:
            root.removeHandler(handler)
        for handler in handlers:
            root.addHandler(handler)
        root.setLevel(level)
        root.propagate = propagate

    def test_setup_logging_overrides_package_levels(self):
        with mock.patch.object(logging_config, "_console_handler", logging.NullHandler()):
            logging_config.setup_logging("DEBUG")
        self.assertEqual(logging.getLogger("note_match.scale_note").level, logging.DEBUG)
        self.assertEqual(logging.getLogger("").level, logging.ERROR)
        self.assertFalse(logging.getLogger("note_match").propagate)

    def test_setup_logging_defaults(self):
        with mock.patch.object(logging_config, "_console_handler", logging.NullHandler()):
            logging_config.setup_logging()
        self.assertEqual(logging.getLogger("note_match.cli").level, logging.WARNING)
        self.assertEqual(logging.getLogger("note_match.services").level, logging.INFO)


class TestGetLogger(unittest.TestCase):
    def test_package_names_are_kept(self):
        self.assertEqual(qualified_name("note_match.scale_note"), "note_match.scale_note")
        self.assertEqual(qualified_name("note_match"), "note_match")

    def test_outside_names_are_nested_under_package(self):
        self.assertEqual(qualified_name("__main__"), "note_match")
        self.assertEqual(qualified_name(""), "note_match")
        self.assertEqual(qualified_name("plugins.pitch"), "note_match.plugins.pitch")
        # Prefix match alone is not membership
        self.assertEqual(qualified_name("note_matcher"), "note_match.note_matcher")

    def test_loggers_are_cached(self):
        logger = get_logger("note_match.services.tuner")
        self.assertIs(get_logger("note_match.services.tuner"), logger)
        self.assertEqual(get_logger("__main__").name, "note_match")
