"""Integration tests for above/below/next/prev through the engine."""

from __future__ import annotations

import unittest

from qfnav import setup
from qfnav.entries import Entry, ListKind
from qfnav.memory_host import MemoryHost
from qfnav.navigation import NavError


def _make_engine():
    host = MemoryHost()
    a = host.add_buffer("a.py")
    b = host.add_buffer("b.py")
    engine = setup(host)
    engine.set(
        "c",
        items=[
            Entry(owner_ref=a, line=3),
            Entry(owner_ref=a, line=10),
            Entry(owner_ref=None, line=0, text="noise"),
            Entry(owner_ref=b, line=5),
            Entry(owner_ref=b, line=8),
        ],
        open=False,
    )
    return host, engine, a, b


class AboveBelowTests(unittest.TestCase):
    def test_below_moves_to_next_entry_after_cursor(self) -> None:
        host, engine, a, _b = _make_engine()
        host.edit(a, 4)

        result = engine.below("c")

        self.assertEqual(result.index, 1)
        self.assertEqual(host.cursor_position(), (a, 10))

    def test_below_switches_buffer_and_skips_invalid(self) -> None:
        host, engine, a, b = _make_engine()
        host.edit(a, 10)

        result = engine.below("c")

        self.assertEqual(result.index, 3)
        self.assertEqual(host.cursor_position(), (b, 5))

    def test_above_skips_entry_on_cursor_line(self) -> None:
        host, engine, _a, b = _make_engine()
        host.edit(b, 8)

        result = engine.above("c")

        self.assertEqual(result.index, 3)
        self.assertEqual(host.cursor_position(), (b, 5))

    def test_above_wraps_from_first_entry(self) -> None:
        host, engine, a, b = _make_engine()
        host.edit(a, 3)

        result = engine.above("c")

        self.assertEqual(result.index, 4)
        self.assertEqual(host.cursor_position(), (b, 8))

    def test_below_wraps_from_last_entry(self) -> None:
        host, engine, a, b = _make_engine()
        host.edit(b, 8)

        result = engine.below("c")

        self.assertEqual(result.index, 0)
        self.assertEqual(host.cursor_position(), (a, 3))

    def test_above_without_wrap_at_top_reports_and_stays(self) -> None:
        host, engine, a, _b = _make_engine()
        host.edit(a, 3)

        result = engine.above("c", wrap=False)

        self.assertIs(result.error, NavError.NO_MORE_ITEMS)
        self.assertEqual(host.errors, ["No more items"])
        self.assertEqual(host.cursor_position(), (a, 3))

    def test_below_without_wrap_at_bottom_reports_and_stays(self) -> None:
        host, engine, _a, b = _make_engine()
        host.edit(b, 9)

        result = engine.below("c", wrap=False)

        self.assertIs(result.error, NavError.NO_MORE_ITEMS)
        self.assertEqual(host.errors, ["No more items"])
        self.assertEqual(host.cursor_position(), (b, 9))

    def test_cursor_in_unlisted_buffer_jumps_to_ends(self) -> None:
        host, engine, a, b = _make_engine()
        other = host.add_buffer("c.py")

        host.edit(other, 1)
        self.assertEqual(engine.below("c").index, 0)
        host.edit(other, 1)
        self.assertEqual(engine.above("c").index, 4)

    def test_below_from_above_every_entry_skips_the_first_one(self) -> None:
        host, engine, a, _b = _make_engine()
        host.edit(a, 1)

        result = engine.below("c")

        self.assertEqual(result.index, 1)
        self.assertEqual(host.cursor_position(), (a, 10))

    def test_empty_or_all_invalid_list_reports_empty(self) -> None:
        host, engine, _a, _b = _make_engine()
        engine.set("c", items=[Entry(owner_ref=None, line=0)], open=False)

        result = engine.above("c")

        self.assertIs(result.error, NavError.EMPTY)
        self.assertEqual(host.errors, ["Quickfix list empty"])

    def test_empty_report_is_suppressed_when_not_verbose(self) -> None:
        host, engine, _a, _b = _make_engine()
        engine.set("l", items=[], open=False)
        engine.below("l", verbose=False)
        self.assertEqual(host.errors, [])

    def test_unloaded_buffer_entries_are_skipped(self) -> None:
        host, engine, a, b = _make_engine()
        host.edit(a, 10)
        host.unload_buffer(b)

        result = engine.below("c")

        self.assertEqual(result.index, 0)


class NextPrevTests(unittest.TestCase):
    def test_next_steps_over_invalid_entries(self) -> None:
        host, engine, _a, b = _make_engine()
        host.select_entry(ListKind.PRIMARY, 1)

        result = engine.next("c")

        self.assertEqual(result.index, 3)
        self.assertEqual(host.cursor_position(), (b, 5))

    def test_next_wraps_to_first_valid_entry(self) -> None:
        host, engine, a, _b = _make_engine()
        host.select_entry(ListKind.PRIMARY, 4)

        result = engine.next("c")

        self.assertEqual(result.index, 0)
        self.assertEqual(host.cursor_position(), (a, 3))

    def test_prev_wraps_to_last_valid_entry(self) -> None:
        host, engine, _a, b = _make_engine()
        host.select_entry(ListKind.PRIMARY, 0)

        result = engine.prev("c")

        self.assertEqual(result.index, 4)
        self.assertEqual(host.cursor_position(), (b, 8))

    def test_next_without_wrap_reports_at_boundary(self) -> None:
        host, engine, _a, _b = _make_engine()
        host.select_entry(ListKind.PRIMARY, 4)

        result = engine.next("c", wrap=False)

        self.assertIs(result.error, NavError.NO_MORE_ITEMS)
        self.assertEqual(host.errors, ["No more items"])
        self.assertEqual(host.selected_index(ListKind.PRIMARY), 4)

    def test_prev_on_empty_location_list_reports(self) -> None:
        host, engine, _a, _b = _make_engine()
        result = engine.prev("l")
        self.assertIs(result.error, NavError.EMPTY)
        self.assertEqual(host.errors, ["Location list empty"])


if __name__ == "__main__":
    unittest.main()
