import unittest

from moe.session import BLOCK_MARKER, CompileSession, PendingEvent


class TestCompileSession(unittest.TestCase):
    def setUp(self) -> None:
        self.session = CompileSession()

    def test_ids_count_from_one(self):
        self.assertEqual(self.session.next_id(), "moe-ref-1")
        self.assertEqual(self.session.next_id(), "moe-ref-2")

    def test_take_styles_serializes_and_clears(self):
        self.session.add_style("color", "red")
        self.session.add_style("margin", "4px")
        self.assertEqual(self.session.take_styles(), "color:red;margin:4px;")
        self.assertEqual(self.session.take_styles(), "")

    def test_later_style_overrides_same_property(self):
        self.session.add_style("color", "red")
        self.session.add_style("color", "blue")
        self.assertEqual(self.session.take_styles(), "color:blue;")

    def test_bind_event_needs_an_element(self):
        self.assertFalse(self.session.bind_event("click"))
        self.assertIsNone(self.session.take_event())

    def test_take_event_clears(self):
        self.session.last_element_id = "moe-ref-3"
        self.assertTrue(self.session.bind_event("click"))
        self.assertEqual(self.session.take_event(), PendingEvent("click", "moe-ref-3"))
        self.assertIsNone(self.session.take_event())

    def test_close_block_on_empty_stack(self):
        self.assertIsNone(self.session.close_block())

    def test_drain_is_innermost_first(self):
        for tag in ("section", BLOCK_MARKER, "div"):
            self.session.open_block(tag)
        self.assertEqual(self.session.drain_blocks(), ["div", BLOCK_MARKER, "section"])
        self.assertEqual(self.session.block_stack, [])


if __name__ == "__main__":
    unittest.main()
