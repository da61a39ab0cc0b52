"""Integration tests for event-driven list lifecycle through ``setup``."""

from __future__ import annotations

import unittest

from qfnav import EngineConfig, ListOptions, setup
from qfnav.entries import Entry, ListKind
from qfnav.host import EventName
from qfnav.memory_host import MemoryHost


def _entries(ref: int, *lines: int) -> list[Entry]:
    return [Entry(owner_ref=ref, line=line) for line in lines]


class EventLifecycleTests(unittest.TestCase):
    def test_command_completed_opens_populated_list_without_focus(self) -> None:
        host = MemoryHost()
        ref = host.add_buffer("a.py")
        engine = setup(host)
        host.replace_list_items(ListKind.PRIMARY, _entries(ref, 1, 2))
        edit_window = host.current_window()

        host.emit(EventName.COMMAND_COMPLETED, "grep")

        self.assertTrue(engine.host.surface_state(ListKind.PRIMARY).is_open)
        self.assertFalse(host.surface_state(ListKind.SECONDARY).is_open)
        self.assertEqual(host.current_window(), edit_window)
        self.assertEqual(host.errors, [])

    def test_command_completed_with_empty_list_stays_closed_silently(self) -> None:
        host = MemoryHost()
        setup(host)

        host.emit(EventName.COMMAND_COMPLETED, "make")

        self.assertFalse(host.surface_state(ListKind.PRIMARY).is_open)
        self.assertEqual(host.errors, [])

    def test_deferred_unfocus_close_fires_even_after_focus_returns(self) -> None:
        host = MemoryHost()
        ref = host.add_buffer("a.py")
        engine = setup(host, {"c": {"unfocus_close": True, "focus_open": True}})
        engine.set("c", items=_entries(ref, 1, 2))
        self.assertTrue(host.surface_state(ListKind.PRIMARY).is_open)

        host.emit(EventName.WINDOW_FOCUS_LOST)
        self.assertTrue(host.surface_state(ListKind.PRIMARY).is_open)
        host.emit(EventName.WINDOW_FOCUS_GAINED)

        host.run_deferred()

        self.assertFalse(host.surface_state(ListKind.PRIMARY).is_open)

    def test_focus_gained_opens_list_with_items(self) -> None:
        host = MemoryHost()
        ref = host.add_buffer("a.py")
        setup(host, {"l": {"focus_open": True}})
        host.replace_list_items(ListKind.SECONDARY, _entries(ref, 4))

        host.emit(EventName.WINDOW_FOCUS_GAINED)

        self.assertTrue(host.surface_state(ListKind.SECONDARY).is_open)
        self.assertEqual(host.errors, [])

    def test_cursor_idle_follows_with_configured_strategy(self) -> None:
        host = MemoryHost()
        ref = host.add_buffer("a.py")
        engine = setup(host, {"c": {"auto_follow": "next"}, "l": {"auto_follow": False}})
        engine.set("c", items=_entries(ref, 2, 6, 9), open=False)
        host.edit(ref, 5)

        host.emit(EventName.CURSOR_MOVED)
        self.assertEqual(host.selected_index(ListKind.PRIMARY), 0)

        host.emit(EventName.CURSOR_IDLE)
        self.assertEqual(host.selected_index(ListKind.PRIMARY), 1)

    def test_fast_follow_respects_limit(self) -> None:
        host = MemoryHost()
        ref = host.add_buffer("a.py")
        engine = setup(
            host,
            EngineConfig(primary=ListOptions(follow_slow=False, auto_follow_limit=2)),
        )
        engine.set("c", items=_entries(ref, 2, 20), open=False)

        host.edit(ref, 10)
        host.emit(EventName.CURSOR_MOVED)
        self.assertEqual(host.cleared_messages, 0)

        host.edit(ref, 21)
        host.emit(EventName.CURSOR_MOVED)
        self.assertEqual(host.selected_index(ListKind.PRIMARY), 1)

    def test_set_resets_follow_memo(self) -> None:
        host = MemoryHost()
        ref = host.add_buffer("a.py")
        engine = setup(host)
        engine.set("c", items=_entries(ref, 1, 5), open=False)
        host.edit(ref, 5)
        self.assertTrue(engine.follow("c", "prev"))

        engine.set("c", items=_entries(ref, 5, 9), open=False)

        self.assertIsNone(engine.follow_states[ListKind.PRIMARY].last_line)
        self.assertTrue(engine.follow("c", "prev"))
        self.assertEqual(host.selected_index(ListKind.PRIMARY), 0)

    def test_post_command_lets_follow_fire_on_same_line(self) -> None:
        host = MemoryHost()
        ref = host.add_buffer("a.py")
        engine = setup(host, EngineConfig(primary=ListOptions(follow_slow=False)))
        engine.set("c", items=_entries(ref, 5), open=False)
        host.edit(ref, 5)
        host.emit(EventName.CURSOR_MOVED)
        self.assertEqual(engine.follow_states[ListKind.PRIMARY].last_line, 5)

        host.replace_list_items(ListKind.PRIMARY, _entries(ref, 2, 5))
        host.emit(EventName.COMMAND_COMPLETED, "grep")
        host.emit(EventName.CURSOR_MOVED)

        self.assertEqual(host.selected_index(ListKind.PRIMARY), 1)

    def test_window_new_reopens_stretched_surfaces(self) -> None:
        host = MemoryHost()
        ref = host.add_buffer("a.py")
        engine = setup(host)
        engine.set("c", items=_entries(ref, 1, 2, 3, 4, 5, 6))
        engine.open("c")
        stretched = host.surface_state(ListKind.PRIMARY).handle
        host.resize_surface(stretched, 40)
        engine.set("l", items=_entries(ref, 1), open=False)
        engine.open("l")

        host.emit(EventName.WINDOW_NEW)

        reopened = host.surface_state(ListKind.PRIMARY).handle
        self.assertNotEqual(reopened, stretched)
        self.assertEqual(host.heights[reopened], 6)


class CommandLifecycleTests(unittest.TestCase):
    def test_open_empty_with_auto_close_reports_and_closes(self) -> None:
        host = MemoryHost()
        engine = setup(host)
        host.open_surface(ListKind.PRIMARY, 5)

        self.assertFalse(engine.open("c"))

        self.assertEqual(host.errors, ["No items"])
        self.assertFalse(host.surface_state(ListKind.PRIMARY).is_open)

    def test_open_empty_without_auto_close_keeps_surface(self) -> None:
        host = MemoryHost()
        engine = setup(host, {"c": {"auto_close": False}})
        host.open_surface(ListKind.PRIMARY, 5)

        engine.open("c")

        self.assertEqual(host.errors, ["No items"])
        self.assertTrue(host.surface_state(ListKind.PRIMARY).is_open)

    def test_close_other_on_open(self) -> None:
        host = MemoryHost()
        ref = host.add_buffer("a.py")
        engine = setup(host, {"close_other": True})
        engine.set("l", items=_entries(ref, 1))
        self.assertTrue(host.surface_state(ListKind.SECONDARY).is_open)

        engine.set("c", items=_entries(ref, 2))

        self.assertTrue(host.surface_state(ListKind.PRIMARY).is_open)
        self.assertFalse(host.surface_state(ListKind.SECONDARY).is_open)

    def test_toggle_and_visible(self) -> None:
        host = MemoryHost()
        ref = host.add_buffer("a.py")
        engine = setup(host)
        engine.set("l", items=_entries(ref, 1), open=False)

        self.assertTrue(engine.toggle("l", stay=True))
        self.assertTrue(host.surface_state(ListKind.SECONDARY).is_open)
        engine.close("visible")
        self.assertFalse(host.surface_state(ListKind.SECONDARY).is_open)

    def test_resize_follows_item_count(self) -> None:
        host = MemoryHost()
        ref = host.add_buffer("a.py")
        engine = setup(host, {"c": {"min_height": 2, "max_height": 10}})
        engine.set("c", items=_entries(ref, 1, 2, 3))
        handle = host.surface_state(ListKind.PRIMARY).handle
        self.assertEqual(host.heights[handle], 3)

        host.replace_list_items(ListKind.PRIMARY, _entries(ref, *range(1, 16)))
        engine.resize("c")

        self.assertEqual(host.heights[handle], 10)

    def test_clear_archives_and_closes(self) -> None:
        host = MemoryHost()
        ref = host.add_buffer("a.py")
        engine = setup(host)
        engine.set("c", items=_entries(ref, 1, 2))

        engine.clear("c", "before-clear")

        self.assertEqual(host.list_items(ListKind.PRIMARY), [])
        self.assertFalse(host.surface_state(ListKind.PRIMARY).is_open)
        self.assertEqual(engine.archive.get("before-clear"), tuple(_entries(ref, 1, 2)))

    def test_save_then_replace_then_load_restores_snapshot(self) -> None:
        host = MemoryHost()
        ref = host.add_buffer("a.py")
        engine = setup(host)
        engine.set("c", items=_entries(ref, 1, 2), open=False)
        engine.save("c", "foo")
        host.replace_list_items(ListKind.PRIMARY, _entries(ref, 7, 8, 9))

        self.assertTrue(engine.load("c", "foo"))

        self.assertEqual(host.list_items(ListKind.PRIMARY), _entries(ref, 1, 2))
        self.assertTrue(host.surface_state(ListKind.PRIMARY).is_open)

    def test_keep_and_tally_through_engine(self) -> None:
        host = MemoryHost()
        engine = setup(host)
        engine.set(
            "c",
            lines=["a.py:1:1: error: boom", "a.py:2:1: warning: meh", "b.py:3:4: error: bang"],
            title="make",
            tally=True,
            open=False,
        )
        self.assertEqual(host.list_title(ListKind.PRIMARY), "make - E:2 W:1")

        self.assertEqual(engine.keep("c", kind="error"), 2)
        self.assertEqual(engine.tally("c"), "make - E:2")


if __name__ == "__main__":
    unittest.main()
