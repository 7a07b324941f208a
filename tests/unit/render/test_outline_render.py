"""Frame and status-line composition for the outline view."""

from __future__ import annotations

import unittest
from pathlib import Path

from lazystage.diff import parse_unified_diff
from lazystage.dispatch import Mode
from lazystage.dispatch.popups import ConfirmPopup
from lazystage.git.refs import Commit
from lazystage.git.snapshot import HeadInfo, RepositoryState, Snapshot
from lazystage.outline import Outline, build_outline
from lazystage.render import build_frame_lines, build_status_line, dump_outline, scroll_for_cursor, status_text
from lazystage.state import AppState
from lazystage.ui_theme import PLAIN_THEME
from lazystage.views import diff_view

DIFF = """\
diff --git a/f.txt b/f.txt
index 1111111..2222222 100644
--- a/f.txt
+++ b/f.txt
@@ -1 +1 @@
-foo
+bar
"""


def _state() -> AppState:
    head = HeadInfo(branch="main", commit=Commit("e" * 40, "eeeeeee", "initial"))
    snapshot = Snapshot(state=RepositoryState(head=head), unstaged_text=DIFF, unstaged=tuple(parse_unified_diff(DIFF)))
    outline = build_outline(snapshot)
    return AppState(root=Path("."), snapshot=snapshot, outline=outline, cursor=outline.first_cursor())


class ScrollTests(unittest.TestCase):
    def test_scrolls_down_to_cursor(self) -> None:
        self.assertEqual(scroll_for_cursor(0, 5, 3, 10), 3)

    def test_scrolls_up_to_cursor(self) -> None:
        self.assertEqual(scroll_for_cursor(5, 2, 3, 10), 2)

    def test_offset_is_clamped_to_content(self) -> None:
        self.assertEqual(scroll_for_cursor(8, None, 3, 10), 7)
        self.assertEqual(scroll_for_cursor(0, 0, 5, 2), 0)


class StatusLineTests(unittest.TestCase):
    def test_right_text_is_right_aligned(self) -> None:
        self.assertEqual(build_status_line("left", 10, "right"), "lef right")

    def test_narrow_width_keeps_tail_of_right_text(self) -> None:
        self.assertEqual(build_status_line("abc", 4, "right"), "ght")

    def test_status_text_reports_mode_refresh_and_running_work(self) -> None:
        state = _state()
        state.modes.push(Mode.VISUAL)
        state.refreshing = True
        state.pending_tickets = {1, 2}
        state.notification = "stage: done"
        self.assertEqual(status_text(state), ("main  -- VISUAL --  refreshing  2 running", "stage: done"))

    def test_status_text_defaults_to_help_hint(self) -> None:
        self.assertEqual(status_text(_state()), ("main", "? help"))


class FrameTests(unittest.TestCase):
    def test_frame_has_exactly_height_lines(self) -> None:
        lines = build_frame_lines(_state(), 40, 6, PLAIN_THEME)
        self.assertEqual(len(lines), 6)
        self.assertEqual(lines[0].rstrip(), "  Head:     main  eeeeeee initial")
        self.assertEqual(lines[1].rstrip(), "▾ Unstaged changes (1)")
        self.assertTrue(lines[2].startswith("  ▸ "))
        self.assertEqual(lines[3], "")
        self.assertEqual(lines[5], "main" + " " * 29 + "? help")

    def test_search_mode_shows_query_on_status_line(self) -> None:
        state = _state()
        state.modes.push(Mode.SEARCH)
        state.search_query = "f.txt"
        self.assertEqual(build_frame_lines(state, 40, 6, PLAIN_THEME)[-1], "/f.txt")

    def test_popup_is_docked_above_status_line(self) -> None:
        state = _state()
        state.popup = ConfirmPopup("Discard hunk?")
        lines = build_frame_lines(state, 40, 6, PLAIN_THEME)
        self.assertEqual(len(lines), 6)
        self.assertEqual(lines[3], "─" * 39)
        self.assertEqual(lines[4], "Discard hunk? (y or n)")

    def test_loading_placeholder_before_first_snapshot(self) -> None:
        lines = build_frame_lines(AppState(root=Path(".")), 40, 3, PLAIN_THEME)
        self.assertEqual(lines[0], "loading...")
        self.assertEqual(len(lines), 3)

    def test_open_view_replaces_the_outline_body(self) -> None:
        state = _state()
        view = diff_view("read-diff abc1234", "\n".join(f"+line {index}" for index in range(10)))
        view.move_to(5)
        view.scroll_top = 4
        state.views.append(view)
        lines = build_frame_lines(state, 40, 4, PLAIN_THEME)
        self.assertEqual([line.rstrip() for line in lines[:3]], ["+line 4", "+line 5", "+line 6"])
        self.assertTrue(lines[-1].startswith("main  read-diff abc1234"))


class DumpOutlineTests(unittest.TestCase):
    def test_dump_marks_collapsible_sections(self) -> None:
        text = dump_outline(_state().outline)
        lines = text.splitlines()
        self.assertTrue(text.endswith("\n"))
        self.assertEqual(lines[0], "  Head:     main  eeeeeee initial")
        self.assertEqual(lines[1], "▾ Unstaged changes (1)")
        self.assertTrue(lines[2].startswith("  ▸ "))
        self.assertTrue(lines[2].endswith("f.txt"))

    def test_empty_outline_dumps_nothing(self) -> None:
        self.assertEqual(dump_outline(Outline()), "")


if __name__ == "__main__":
    unittest.main()
