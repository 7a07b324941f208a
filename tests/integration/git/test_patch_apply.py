"""Line-level patches applied by real git.

Builds patches from real ``git diff`` output and runs them through the same
command path the executor uses, then checks index and worktree contents.
"""

from __future__ import annotations

import shutil
import subprocess
import tempfile
import unittest
from pathlib import Path

from lazystage.diff import PatchIntent, build_hunk_patch, build_line_patch, parse_unified_diff
from lazystage.git.commands import run_operation
from lazystage.git.runner import GitRunner
from lazystage.git.snapshot import DIFF_ARGS
from lazystage.operations import Operation, OperationKind


@unittest.skipIf(shutil.which("git") is None, "git is required for patch apply tests")
class PatchApplyTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name).resolve()
        subprocess.run(["git", "init", "-q"], cwd=self.root, check=True)
        subprocess.run(["git", "config", "user.email", "tests@example.com"], cwd=self.root, check=True)
        subprocess.run(["git", "config", "user.name", "Tests"], cwd=self.root, check=True)
        subprocess.run(["git", "config", "core.autocrlf", "false"], cwd=self.root, check=True)
        (self.root / "f.txt").write_text("foo\nqux\n", encoding="utf-8")
        subprocess.run(["git", "add", "f.txt"], cwd=self.root, check=True)
        subprocess.run(["git", "commit", "-q", "-m", "initial"], cwd=self.root, check=True)
        (self.root / "f.txt").write_text("bar\nbaz\nqux\n", encoding="utf-8")
        self.runner = GitRunner(self.root)

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def _index_text(self) -> str:
        return subprocess.run(
            ["git", "show", ":f.txt"], cwd=self.root, check=True, capture_output=True, text=True
        ).stdout

    def _unstaged(self):
        [file_diff] = parse_unified_diff(self.runner.output(DIFF_ARGS))
        return file_diff

    def _staged(self):
        [file_diff] = parse_unified_diff(self.runner.output([*DIFF_ARGS, "--cached"]))
        return file_diff

    def _apply(self, kind: OperationKind, patch) -> None:
        result = run_operation(self.runner, Operation(kind, paths=(patch.path,), patch=patch))
        self.assertEqual(result.returncode, 0, result.stderr)

    def test_stage_one_added_line(self) -> None:
        file_diff = self._unstaged()
        hunk = file_diff.hunks[0]
        added = [line.position for line in hunk.lines if line.raw == "+bar"]
        patch = build_line_patch(file_diff, hunk, added, PatchIntent.STAGE)

        check = self.runner.run(["apply", "--check", *patch.apply_args, "-"], stdin=patch.text)
        self.assertEqual(check.returncode, 0, check.stderr)
        self._apply(OperationKind.STAGE_LINES, patch)

        self.assertEqual(self._index_text(), "foo\nbar\nqux\n")
        self.assertEqual((self.root / "f.txt").read_text(encoding="utf-8"), "bar\nbaz\nqux\n")

    def test_unstage_lines_restores_index(self) -> None:
        unstaged = self._unstaged()
        self._apply(OperationKind.STAGE_HUNK, build_hunk_patch(unstaged, unstaged.hunks, PatchIntent.STAGE))
        self.assertEqual(self._index_text(), "bar\nbaz\nqux\n")

        staged = self._staged()
        hunk = staged.hunks[0]
        baz = [line.position for line in hunk.lines if line.raw == "+baz"]
        self._apply(OperationKind.UNSTAGE_LINES, build_line_patch(staged, hunk, baz, PatchIntent.UNSTAGE))

        self.assertEqual(self._index_text(), "bar\nqux\n")

    def test_discard_one_added_line_from_worktree(self) -> None:
        file_diff = self._unstaged()
        hunk = file_diff.hunks[0]
        baz = [line.position for line in hunk.lines if line.raw == "+baz"]
        self._apply(OperationKind.DISCARD_LINES, build_line_patch(file_diff, hunk, baz, PatchIntent.DISCARD))

        self.assertEqual((self.root / "f.txt").read_text(encoding="utf-8"), "bar\nqux\n")
        self.assertEqual(self._index_text(), "foo\nqux\n")

    def test_zero_context_stage_applies(self) -> None:
        file_diff = self._unstaged()
        hunk = file_diff.hunks[0]
        removed = [line.position for line in hunk.lines if line.raw == "-foo"]
        patch = build_line_patch(file_diff, hunk, removed, PatchIntent.STAGE, context_lines=0)
        self.assertTrue(patch.unidiff_zero)
        self._apply(OperationKind.STAGE_LINES, patch)

        self.assertEqual(self._index_text(), "qux\n")


@unittest.skipIf(shutil.which("git") is None, "git is required for patch apply tests")
class FileShapePatchTests(unittest.TestCase):
    """Patches against files without a final newline or in a foreign encoding."""

    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name).resolve()
        self._git("init", "-q")
        self._git("config", "user.email", "tests@example.com")
        self._git("config", "user.name", "Tests")
        self._git("config", "core.autocrlf", "false")
        self.runner = GitRunner(self.root)

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def _git(self, *args: str) -> bytes:
        return subprocess.run(["git", *args], cwd=self.root, check=True, capture_output=True).stdout

    def _commit(self, committed: bytes, worktree: bytes) -> None:
        (self.root / "f.txt").write_bytes(committed)
        self._git("add", "f.txt")
        self._git("commit", "-q", "-m", "initial")
        (self.root / "f.txt").write_bytes(worktree)

    def _index_bytes(self) -> bytes:
        return self._git("show", ":f.txt")

    def _unstaged(self):
        [file_diff] = parse_unified_diff(self.runner.output(DIFF_ARGS))
        return file_diff

    def _stage_lines(self, raws: tuple[str, ...], context_lines: int = 3):
        file_diff = self._unstaged()
        hunk = file_diff.hunks[0]
        positions = [line.position for line in hunk.lines if line.raw in raws]
        patch = build_line_patch(file_diff, hunk, positions, PatchIntent.STAGE, context_lines=context_lines)
        result = run_operation(self.runner, Operation(OperationKind.STAGE_LINES, paths=(patch.path,), patch=patch))
        self.assertEqual(result.returncode, 0, result.stderr)
        return patch

    def test_stage_line_appended_after_missing_newline(self) -> None:
        self._commit(b"a", b"a\nb")
        self._stage_lines(("+b",))
        self.assertEqual(self._index_bytes(), b"a\nb")

    def test_zero_context_interior_selection(self) -> None:
        self._commit(b"a\nb\nc\nd\ne\n", b"a\nX\nb\nY\nc\nd\ne\n")
        patch = self._stage_lines(("+X", " b", "+Y"), context_lines=0)
        self.assertTrue(patch.unidiff_zero)
        self.assertEqual(self._index_bytes(), b"a\nX\nb\nY\nc\nd\ne\n")

    def test_non_utf8_content_survives_staging(self) -> None:
        self._commit(b"caf\xe9\nx\n", b"caf\xe9\nx\ny\n")
        self._stage_lines(("+y",))
        self.assertEqual(self._index_bytes(), b"caf\xe9\nx\ny\n")

    def test_user_prefix_settings_do_not_change_paths(self) -> None:
        self._git("config", "diff.noprefix", "true")
        self._git("config", "diff.mnemonicPrefix", "true")
        self._commit(b"one\n", b"two\n")
        file_diff = self._unstaged()
        self.assertEqual(file_diff.path, "f.txt")

        patch = build_hunk_patch(file_diff, file_diff.hunks, PatchIntent.STAGE)
        result = run_operation(self.runner, Operation(OperationKind.STAGE_HUNK, paths=(patch.path,), patch=patch))
        self.assertEqual(result.returncode, 0, result.stderr)
        self.assertEqual(self._index_bytes(), b"two\n")


if __name__ == "__main__":
    unittest.main()
