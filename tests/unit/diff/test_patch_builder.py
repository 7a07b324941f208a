"""Selection-to-patch tests.

Exercises the line-level rules per intent (which unselected lines become
context and which are dropped), header arithmetic, context trimming and the
error cases for empty or foreign selections.
"""

from __future__ import annotations

import unittest

from lazystage.diff import (
    ChangeKind,
    FileDiff,
    PatchIntent,
    build_file_patch,
    build_hunk_patch,
    build_line_patch,
    parse_hunk,
    parse_unified_diff,
)
from lazystage.errors import EmptySelection, InvalidSelection


def _file_with(hunk_header: str, body: list[str], path: str = "f.txt", change: ChangeKind = ChangeKind.MODIFIED) -> FileDiff:
    hunk = parse_hunk(hunk_header, body)
    return FileDiff(
        path=path,
        old_path=path,
        change=change,
        hunks=(hunk,),
        header_lines=(f"diff --git a/{path} b/{path}", f"--- a/{path}", f"+++ b/{path}"),
    )


def _body(patch_text: str) -> list[str]:
    lines = patch_text.splitlines()
    start = next(index for index, line in enumerate(lines) if line.startswith("@@"))
    return lines[start:]


TWO_HUNKS = """\
diff --git a/a.txt b/a.txt
index 1111111..2222222 100644
--- a/a.txt
+++ b/a.txt
@@ -1,3 +1,3 @@
 one
-two
+TWO
 three
@@ -10,3 +10,4 @@
 ten
+ten and a half
 eleven
 twelve
"""


class LinePatchTests(unittest.TestCase):
    def setUp(self) -> None:
        self.file_diff = _file_with("@@ -1,2 +1,3 @@", ["-foo", "+bar", "+baz", " qux"])
        self.hunk = self.file_diff.hunks[0]

    def test_stage_single_addition_keeps_unselected_deletion_as_context(self) -> None:
        patch = build_line_patch(self.file_diff, self.hunk, [2], PatchIntent.STAGE)
        self.assertEqual(_body(patch.text), ["@@ -1,2 +1,3 @@", " foo", "+bar", " qux"])
        self.assertNotIn("-foo", patch.text)
        self.assertNotIn("+baz", patch.text)
        self.assertEqual(patch.apply_args, ("--cached",))
        self.assertFalse(patch.unidiff_zero)

    def test_stage_deletion_only(self) -> None:
        patch = build_line_patch(self.file_diff, self.hunk, [1], PatchIntent.STAGE)
        self.assertEqual(_body(patch.text), ["@@ -1,2 +1 @@", "-foo", " qux"])

    def test_unstage_keeps_unselected_addition_as_context_and_drops_deletion(self) -> None:
        patch = build_line_patch(self.file_diff, self.hunk, [2], PatchIntent.UNSTAGE)
        self.assertEqual(_body(patch.text), ["@@ -1,2 +1,3 @@", "+bar", " baz", " qux"])
        self.assertEqual(patch.apply_args, ("--cached", "--reverse"))

    def test_discard_applies_in_reverse_to_worktree(self) -> None:
        patch = build_line_patch(self.file_diff, self.hunk, [3], PatchIntent.DISCARD)
        self.assertEqual(_body(patch.text), ["@@ -1,2 +1,3 @@", " bar", "+baz", " qux"])
        self.assertEqual(patch.apply_args, ("--reverse",))

    def test_header_counts_match_emitted_lines(self) -> None:
        for intent in PatchIntent:
            for positions in ([1], [2], [3], [1, 2], [2, 3], [1, 2, 3]):
                with self.subTest(intent=intent, positions=positions):
                    patch = build_line_patch(self.file_diff, self.hunk, positions, intent)
                    body = _body(patch.text)
                    parsed = parse_hunk(body[0], body[1:])
                    self.assertEqual(len(parsed.lines), len(body) - 1)

    def test_context_only_selection_is_empty(self) -> None:
        with self.assertRaises(EmptySelection):
            build_line_patch(self.file_diff, self.hunk, [4], PatchIntent.STAGE)

    def test_no_positions_is_empty(self) -> None:
        with self.assertRaises(EmptySelection):
            build_line_patch(self.file_diff, self.hunk, [], PatchIntent.STAGE)

    def test_out_of_range_position_is_invalid(self) -> None:
        with self.assertRaises(InvalidSelection):
            build_line_patch(self.file_diff, self.hunk, [2, 9], PatchIntent.STAGE)

    def test_hunk_from_another_file_is_invalid(self) -> None:
        other = _file_with("@@ -5 +5 @@", ["-x", "+y"], path="other.txt")
        with self.assertRaises(InvalidSelection):
            build_line_patch(self.file_diff, other.hunks[0], [1], PatchIntent.STAGE)


class ContextTrimmingTests(unittest.TestCase):
    def setUp(self) -> None:
        body = [f" c{n}" for n in range(1, 6)] + ["-old", "+new"] + [f" d{n}" for n in range(1, 6)]
        self.file_diff = _file_with("@@ -20,11 +20,11 @@", body)
        self.hunk = self.file_diff.hunks[0]

    def test_context_is_trimmed_and_header_start_moves(self) -> None:
        patch = build_line_patch(self.file_diff, self.hunk, [6, 7], PatchIntent.STAGE, context_lines=3)
        self.assertEqual(
            _body(patch.text),
            ["@@ -22,7 +22,7 @@", " c3", " c4", " c5", "-old", "+new", " d1", " d2", " d3"],
        )

    def test_zero_context_requests_unidiff_zero(self) -> None:
        patch = build_line_patch(self.file_diff, self.hunk, [7], PatchIntent.STAGE, context_lines=0)
        self.assertEqual(_body(patch.text), ["@@ -25,0 +26 @@", "+new"])
        self.assertTrue(patch.unidiff_zero)
        self.assertEqual(patch.apply_args, ("--cached", "--unidiff-zero"))

    def test_negative_context_is_rejected(self) -> None:
        with self.assertRaises(ValueError):
            build_line_patch(self.file_diff, self.hunk, [7], PatchIntent.STAGE, context_lines=-1)


class MissingNewlineTests(unittest.TestCase):
    def test_stage_after_line_without_newline_rewrites_it_on_both_sides(self) -> None:
        file_diff = _file_with(
            "@@ -1 +1,2 @@",
            ["-a", "\\ No newline at end of file", "+a", "+b", "\\ No newline at end of file"],
        )
        patch = build_line_patch(file_diff, file_diff.hunks[0], [4], PatchIntent.STAGE)
        self.assertEqual(
            _body(patch.text),
            ["@@ -1 +1,2 @@", "-a", "\\ No newline at end of file", "+a", "+b", "\\ No newline at end of file"],
        )

    def test_marker_on_trailing_context_is_kept(self) -> None:
        file_diff = _file_with("@@ -1,2 +1,2 @@", ["-x", "+y", " end", "\\ No newline at end of file"])
        patch = build_line_patch(file_diff, file_diff.hunks[0], [2], PatchIntent.STAGE)
        self.assertEqual(
            _body(patch.text),
            ["@@ -1,2 +1,3 @@", " x", "+y", " end", "\\ No newline at end of file"],
        )

    def test_discard_drops_marker_of_unselected_deletion(self) -> None:
        file_diff = _file_with(
            "@@ -1 +1,2 @@",
            ["-a", "\\ No newline at end of file", "+a", "+b", "\\ No newline at end of file"],
        )
        patch = build_line_patch(file_diff, file_diff.hunks[0], [4], PatchIntent.DISCARD)
        self.assertEqual(_body(patch.text), ["@@ -1 +1,2 @@", " a", "+b", "\\ No newline at end of file"])


class ZeroContextInteriorTests(unittest.TestCase):
    def test_interior_context_without_edges_still_requests_unidiff_zero(self) -> None:
        file_diff = _file_with("@@ -1,5 +1,7 @@", [" a", "+X", " b", "+Y", " c", " d", " e"])
        patch = build_line_patch(file_diff, file_diff.hunks[0], [2, 3, 4], PatchIntent.STAGE, context_lines=0)
        self.assertEqual(_body(patch.text), ["@@ -2 +2,3 @@", "+X", " b", "+Y"])
        self.assertTrue(patch.unidiff_zero)

    def test_context_on_one_edge_only_requests_unidiff_zero(self) -> None:
        file_diff = _file_with("@@ -1,2 +1,3 @@", [" a", " b", "+c"])
        patch = build_line_patch(file_diff, file_diff.hunks[0], [3], PatchIntent.STAGE)
        self.assertEqual(_body(patch.text), ["@@ -1,2 +1,3 @@", " a", " b", "+c"])
        self.assertTrue(patch.unidiff_zero)


class HunkAndFilePatchTests(unittest.TestCase):
    def setUp(self) -> None:
        [self.file_diff] = parse_unified_diff(TWO_HUNKS)

    def test_hunk_patch_reuses_hunk_verbatim(self) -> None:
        patch = build_hunk_patch(self.file_diff, [self.file_diff.hunks[1]], PatchIntent.STAGE)
        self.assertTrue(patch.text.startswith("diff --git a/a.txt b/a.txt\n"))
        self.assertIn("@@ -10,3 +10,4 @@\n ten\n+ten and a half\n eleven\n twelve\n", patch.text)
        self.assertNotIn("+TWO", patch.text)

    def test_hunks_are_emitted_in_file_order(self) -> None:
        patch = build_hunk_patch(self.file_diff, list(reversed(self.file_diff.hunks)), PatchIntent.STAGE)
        self.assertLess(patch.text.index("@@ -1,3"), patch.text.index("@@ -10,3"))

    def test_empty_hunk_selection(self) -> None:
        with self.assertRaises(EmptySelection):
            build_hunk_patch(self.file_diff, [], PatchIntent.STAGE)

    def test_file_patch_contains_every_hunk(self) -> None:
        patch = build_file_patch(self.file_diff, PatchIntent.STAGE)
        self.assertEqual(patch.text.count("\n@@ "), 2)

    def test_unavailable_file_cannot_be_patched(self) -> None:
        broken = FileDiff(path="x", old_path=None, change=ChangeKind.MODIFIED, error="unmerged")
        with self.assertRaises(InvalidSelection):
            build_file_patch(broken)


class NewFilePartialPatchTests(unittest.TestCase):
    def test_partial_unstage_of_added_file_is_a_modification(self) -> None:
        [added] = parse_unified_diff(
            "diff --git a/n.txt b/n.txt\n"
            "new file mode 100644\n"
            "index 0000000..1111111\n"
            "--- /dev/null\n"
            "+++ b/n.txt\n"
            "@@ -0,0 +1,2 @@\n"
            "+first\n"
            "+second\n"
        )
        patch = build_line_patch(added, added.hunks[0], [2], PatchIntent.UNSTAGE)
        self.assertNotIn("new file mode", patch.text)
        self.assertIn("--- a/n.txt\n+++ b/n.txt\n", patch.text)
        self.assertEqual(_body(patch.text), ["@@ -1 +1,2 @@", " first", "+second"])

    def test_partial_stage_of_added_file_keeps_creation_header(self) -> None:
        [added] = parse_unified_diff(
            "diff --git a/n.txt b/n.txt\n"
            "new file mode 100644\n"
            "--- /dev/null\n"
            "+++ b/n.txt\n"
            "@@ -0,0 +1,2 @@\n"
            "+first\n"
            "+second\n"
        )
        patch = build_line_patch(added, added.hunks[0], [1], PatchIntent.STAGE)
        self.assertIn("--- /dev/null", patch.text)
        self.assertEqual(_body(patch.text), ["@@ -0,0 +1 @@", "+first"])


if __name__ == "__main__":
    unittest.main()
