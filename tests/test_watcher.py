import tempfile
import time
import unittest
from pathlib import Path
from unittest import mock

from watchdog.events import DirModifiedEvent, FileModifiedEvent

from moe.__main__ import main
from moe.compiler import MoeCompiler
from moe.watcher import ChangeHandler, trigger_recompile


class WatcherTestCase(unittest.TestCase):
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


class TestTriggerRecompile(WatcherTestCase):
    def test_writes_compiled_page(self):
        src = self.write("app.moe", 'Text "hello"\n')
        dst = self.root / "app.html"
        self.assertEqual(trigger_recompile({src: dst}, MoeCompiler()), 1)
        self.assertIn('<p id="moe-ref-1" style="" class="moe-element moe-text">hello</p>',
                      dst.read_text(encoding="utf-8"))

    def test_replaces_previous_output(self):
        src = self.write("app.moe", 'Text "new"\n')
        dst = self.write("app.html", "old content " * 1000)
        trigger_recompile({src: dst}, MoeCompiler())
        html = dst.read_text(encoding="utf-8")
        self.assertNotIn("old content", html)
        self.assertTrue(html.startswith("<!DOCTYPE html>"))

    def test_missing_source_is_logged_and_skipped(self):
        good = self.write("good.moe", 'Text "ok"\n')
        pairs = {self.root / "missing.moe": self.root / "missing.html", good: self.root / "good.html"}
        with self.assertLogs("moe.watcher", level="ERROR"):
            written = trigger_recompile(pairs, MoeCompiler())
        self.assertEqual(written, 1)
        self.assertTrue((self.root / "good.html").exists())

    def test_undecodable_source_is_logged_and_skipped(self):
        bad = self.root / "a_bad.moe"
        bad.write_bytes(b'Text "\xff\xfe"\n')
        good = self.write("b_good.moe", 'Text "ok"\n')
        pairs = {bad: self.root / "bad.html", good: self.root / "good.html"}
        with self.assertLogs("moe.watcher", level="ERROR"):
            written = trigger_recompile(pairs, MoeCompiler())
        self.assertEqual(written, 1)
        self.assertFalse((self.root / "bad.html").exists())
        self.assertIn(">ok</p>", (self.root / "good.html").read_text(encoding="utf-8"))


class TestChangeHandler(WatcherTestCase):
    def make_handler(self, debounce=0.05):
        self.src = self.write("app.moe", 'Text "a"\n')
        return ChangeHandler([self.src], {self.src: self.root / "app.html"}, MoeCompiler(), debounce)

    def test_burst_of_changes_rebuilds_once(self):
        handler = self.make_handler()
        with mock.patch("moe.watcher.trigger_recompile") as rebuild:
            for _ in range(3):
                handler.on_modified(FileModifiedEvent(str(self.src)))
            time.sleep(0.5)
        rebuild.assert_called_once_with(handler.write_pairs, handler.compiler)

    def test_unwatched_files_and_directories_are_ignored(self):
        handler = self.make_handler()
        other = self.write("other.moe", "")
        with mock.patch.object(handler, "schedule") as schedule:
            handler.on_modified(FileModifiedEvent(str(other)))
            handler.on_modified(DirModifiedEvent(str(self.root)))
        schedule.assert_not_called()

    def test_cancel_stops_pending_rebuild(self):
        handler = self.make_handler(debounce=0.2)
        with mock.patch("moe.watcher.trigger_recompile") as rebuild:
            handler.schedule()
            handler.cancel()
            time.sleep(0.4)
        rebuild.assert_not_called()


class TestMain(WatcherTestCase):
    def test_once(self):
        self.write("app.moe", 'Title "Hi" size=2\n')
        cfg = self.write("moe.yml", "write:\n  - src: app.moe\n    dst: app.html\n")
        self.assertEqual(main([str(cfg), "--once"]), 0)
        self.assertIn("<h2 ", (self.root / "app.html").read_text(encoding="utf-8"))

    def test_once_reports_failed_pairs(self):
        cfg = self.write("moe.yml", "write:\n  - src: missing.moe\n    dst: app.html\n")
        self.assertEqual(main([str(cfg), "--once"]), 1)


if __name__ == "__main__":
    unittest.main()
