import tempfile
import unittest
from pathlib import Path

from moe.config import ConfigError, DEFAULT_DEBOUNCE, load_config


class TestLoadConfig(unittest.TestCase):
    def setUp(self) -> None:
        self.tmp = tempfile.TemporaryDirectory()
        self.root = Path(self.tmp.name)

    def tearDown(self) -> None:
        self.tmp.cleanup()

    def write(self, rel: str, content: str) -> Path:
        p = self.root / rel
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(content, encoding="utf-8")
        return p

    def test_minimal(self):
        cfg = load_config(self.write("moe.yml", "write:\n  - src: app.moe\n    dst: out/app.html\n"))
        self.assertEqual(cfg.write_pairs, {self.root / "app.moe": self.root / "out/app.html"})
        self.assertEqual(cfg.watch_paths, set())
        self.assertEqual(cfg.debounce, DEFAULT_DEBOUNCE)
        self.assertEqual((cfg.lang, cfg.direction), ("ar", "rtl"))

    def test_all_options(self):
        self.write("partials/a.moe", "")
        self.write("partials/b.moe", "")
        cfg = load_config(self.write("moe.yml", (
            "write:\n"
            "  - src: app.moe\n"
            "    dst: app.html\n"
            "watch:\n"
            "  - 'partials/*.moe'\n"
            "debounce: 1.5\n"
            "lang: en\n"
            "dir: ltr\n"
        )))
        self.assertEqual(cfg.watch_paths, {self.root / "partials/a.moe", self.root / "partials/b.moe"})
        self.assertEqual(cfg.debounce, 1.5)
        self.assertEqual((cfg.lang, cfg.direction), ("en", "ltr"))

    def test_root_must_be_mapping(self):
        with self.assertRaises(TypeError):
            load_config(self.write("moe.yml", "- a\n- b\n"))

    def test_write_is_required(self):
        with self.assertRaises(ConfigError):
            load_config(self.write("moe.yml", ""))

    def test_write_entries_need_src_and_dst(self):
        with self.assertRaises(TypeError):
            load_config(self.write("moe.yml", "write:\n  - src: app.moe\n"))

    def test_write_must_not_be_empty(self):
        with self.assertRaises(ConfigError):
            load_config(self.write("moe.yml", "write: []\n"))

    def test_debounce_must_be_positive(self):
        with self.assertRaises(ValueError):
            load_config(self.write("moe.yml", "write:\n  - {src: a, dst: b}\ndebounce: 0\n"))


if __name__ == "__main__":
    unittest.main()
