"""Operation to git argv translation."""

from __future__ import annotations

import unittest
from pathlib import Path

from lazystage.diff import PatchIntent
from lazystage.diff.patch import Patch
from lazystage.git.commands import NON_INTERACTIVE_ENV, build_command, run_operation
from lazystage.git.runner import GitOutput
from lazystage.operations import Operation, OperationKind

K = OperationKind


class _RecordingRunner:
    def __init__(self) -> None:
        self.root = Path(".")
        self.calls: list[tuple[tuple[str, ...], str | None, dict[str, str] | None]] = []

    def run(self, args, stdin=None, env=None) -> GitOutput:
        self.calls.append((tuple(args), stdin, env))
        return GitOutput(tuple(args), 0, "", "")


class BuildCommandTests(unittest.TestCase):
    def test_file_level_index_commands(self) -> None:
        cases = {
            Operation(K.STAGE_FILES, paths=("a.txt", "b.txt")): ("add", "--all", "--", "a.txt", "b.txt"),
            Operation(K.STAGE_ALL): ("add", "--update"),
            Operation(K.UNSTAGE_FILES, paths=("a.txt",)): ("reset", "--quiet", "--", "a.txt"),
            Operation(K.UNSTAGE_ALL): ("reset", "--quiet"),
            Operation(K.DISCARD_FILES, paths=("a.txt",)): ("checkout", "--", "a.txt"),
            Operation(K.DELETE_UNTRACKED, paths=("tmp",)): ("clean", "--force", "-d", "--", "tmp"),
        }
        for operation, expected in cases.items():
            with self.subTest(kind=operation.kind):
                self.assertEqual(build_command(operation).args, expected)

    def test_patch_operations_feed_patch_on_stdin(self) -> None:
        patch = Patch(path="a.txt", intent=PatchIntent.UNSTAGE, text="diff --git a/a.txt b/a.txt\n", unidiff_zero=True)
        command = build_command(Operation(K.UNSTAGE_LINES, paths=("a.txt",), patch=patch))
        self.assertEqual(
            command.args,
            ("apply", "--whitespace=nowarn", "--cached", "--reverse", "--unidiff-zero", "-"),
        )
        self.assertEqual(command.stdin, patch.text)

    def test_remote_commands_carry_sorted_flags(self) -> None:
        fetch = build_command(Operation(K.FETCH, options={"prune", "include-tags"}, target="origin"))
        self.assertEqual(fetch.args, ("fetch", "--tags", "--prune", "origin"))

        push = build_command(Operation(K.PUSH, options={"force-with-lease"}, target="origin", argument="main"))
        self.assertEqual(push.args, ("push", "--porcelain", "--force-with-lease", "origin", "main"))

        fetch_all = build_command(Operation(K.FETCH, options={"all"}, target="origin"))
        self.assertEqual(fetch_all.args, ("fetch", "--all"))

    def test_push_tag_requires_remote_and_tag(self) -> None:
        command = build_command(Operation(K.PUSH_TAG, target="origin", argument="v1.0"))
        self.assertEqual(command.args, ("push", "origin", "refs/tags/v1.0"))
        with self.assertRaises(ValueError):
            build_command(Operation(K.PUSH_TAG, target="origin"))

    def test_commit_message_goes_through_stdin(self) -> None:
        command = build_command(Operation(K.COMMIT, message="Fix parser\n\nDetails"))
        self.assertEqual(command.args, ("commit", "--file=-"))
        self.assertEqual(command.stdin, "Fix parser\n\nDetails")
        with self.assertRaises(ValueError):
            build_command(Operation(K.COMMIT))

    def test_amend_without_message_keeps_existing_one(self) -> None:
        command = build_command(Operation(K.AMEND))
        self.assertEqual(command.args, ("commit", "--amend", "--no-edit"))
        self.assertIsNone(command.stdin)

    def test_branch_commands(self) -> None:
        self.assertEqual(
            build_command(Operation(K.CREATE_BRANCH, target="topic", argument="origin/main")).args,
            ("checkout", "-b", "topic", "origin/main"),
        )
        self.assertEqual(
            build_command(Operation(K.DELETE_BRANCH, options={"force"}, target="old")).args,
            ("branch", "-D", "old"),
        )
        self.assertEqual(
            build_command(Operation(K.RENAME_BRANCH, target="old", argument="new")).args,
            ("branch", "-m", "old", "new"),
        )

    def test_stash_commands(self) -> None:
        push = build_command(Operation(K.STASH_PUSH, options={"include-untracked"}, message="wip"))
        self.assertEqual(push.args, ("stash", "push", "--include-untracked", "--message", "wip"))
        pop = build_command(Operation(K.STASH_POP, target="stash@{1}"))
        self.assertEqual(pop.args, ("stash", "pop", "--quiet", "stash@{1}"))

    def test_commands_never_prompt(self) -> None:
        command = build_command(Operation(K.FETCH))
        self.assertEqual(command.env["GIT_TERMINAL_PROMPT"], "0")
        self.assertEqual(command.env, NON_INTERACTIVE_ENV)

    def test_read_commands_pin_diff_prefixes(self) -> None:
        staged = build_command(Operation(K.READ_DIFF, target="staged", paths=("a.txt",)))
        self.assertEqual(
            staged.args,
            (
                "diff",
                "--no-color",
                "--no-ext-diff",
                "--find-renames",
                "--src-prefix=a/",
                "--dst-prefix=b/",
                "--cached",
                "--",
                "a.txt",
            ),
        )
        commit = build_command(Operation(K.READ_DIFF, argument="abc1234"))
        self.assertEqual(commit.args[:4], ("diff-tree", "--patch", "--root", "--no-commit-id"))
        self.assertIn("--src-prefix=a/", commit.args)
        self.assertIn("--dst-prefix=b/", commit.args)
        self.assertEqual(commit.args[-1], "abc1234")

    def test_log_commands(self) -> None:
        head = build_command(Operation(K.LOG, target="v1.0")).args
        self.assertEqual(head[:2], ("log", "--graph"))
        self.assertEqual(head[-2:], ("v1.0", "--"))
        everything = build_command(Operation(K.LOG, options={"all"})).args
        self.assertEqual(everything[-2:], ("--all", "--"))


class RunOperationTests(unittest.TestCase):
    def test_passes_stdin_and_environment_to_runner(self) -> None:
        runner = _RecordingRunner()
        result = run_operation(runner, Operation(K.COMMIT, message="msg"))
        self.assertTrue(result.ok)
        [(args, stdin, env)] = runner.calls
        self.assertEqual(args, ("commit", "--file=-"))
        self.assertEqual(stdin, "msg")
        self.assertEqual(env, NON_INTERACTIVE_ENV)


if __name__ == "__main__":
    unittest.main()
