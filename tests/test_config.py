import tempfile
import unittest
from pathlib import Path

from pydantic import ValidationError

from facility_matcher.config import MatchingSettings, Settings, find_config, load_settings


class TestSettings(unittest.TestCase):
    def test_defaults(self) -> None:
        settings = Settings()
        self.assertEqual(settings.matching.threshold, 0.65)
        self.assertEqual(settings.matching.suggestion_limit, 20)
        self.assertEqual(settings.matching.suggestion_min_score, 0.3)
        self.assertEqual(settings.matching.browse_page_size, 50)
        self.assertEqual(settings.matching.debounce_seconds, 0.3)
        self.assertEqual(settings.user.id, "local")
        self.assertTrue(settings.store.path.is_absolute())

    def test_load_yaml(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "config.yaml"
            path.write_text(
                "matching:\n  threshold: 0.8\nstore:\n  path: ~/fm/sessions.sqlite3\nuser:\n  id: alice\n",
                encoding="utf-8",
            )
            settings = Settings.load(path)
        self.assertEqual(settings.matching.threshold, 0.8)
        self.assertEqual(settings.matching.suggestion_limit, 20)
        self.assertEqual(settings.user.id, "alice")
        self.assertEqual(settings.store.path, (Path.home() / "fm" / "sessions.sqlite3").resolve())

    def test_empty_yaml_gives_defaults(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "config.yaml"
            path.write_text("", encoding="utf-8")
            self.assertEqual(Settings.load(path), Settings())

    def test_threshold_must_be_in_unit_interval(self) -> None:
        with self.assertRaises(ValidationError):
            MatchingSettings(threshold=1.5)
        with self.assertRaises(ValidationError):
            MatchingSettings(suggestion_min_score=-0.1)

    def test_explicit_config_path_wins(self) -> None:
        explicit = Path("/somewhere/else.yaml")
        self.assertEqual(find_config(explicit), explicit)

    def test_load_settings_with_explicit_path(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "custom.yml"
            path.write_text("user:\n  id: bob\n", encoding="utf-8")
            self.assertEqual(load_settings(path).user.id, "bob")


if __name__ == "__main__":
    unittest.main()
