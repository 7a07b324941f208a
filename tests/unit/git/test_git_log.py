"""Parsing of ``git log --graph`` output."""

from __future__ import annotations

import unittest

from lazystage.git.log import LogEntry, log_args, parse_decorations, parse_log, parse_log_line

SEP = "\x1f"


class DecorationTests(unittest.TestCase):
    def test_head_branch_comes_first_and_tags_lose_prefix(self) -> None:
        self.assertEqual(
            parse_decorations("origin/main, HEAD -> main, tag: v1.0"),
            ("main", "origin/main", "v1.0"),
        )

    def test_detached_head(self) -> None:
        self.assertEqual(parse_decorations("HEAD, origin/main"), ("@", "origin/main"))

    def test_empty(self) -> None:
        self.assertEqual(parse_decorations(""), ())


class LogLineTests(unittest.TestCase):
    def test_commit_line(self) -> None:
        line = f"* abc1234{SEP}HEAD -> main{SEP}Ada Lovelace{SEP}3 days ago{SEP}Fix the frobnicator"
        self.assertEqual(
            parse_log_line(line),
            LogEntry("* ", "abc1234", ("main",), "Ada Lovelace", "3 days", "Fix the frobnicator"),
        )

    def test_graph_only_line(self) -> None:
        entry = parse_log_line("|\\  ")
        self.assertFalse(entry.is_commit)
        self.assertEqual(entry.graph, "|\\  ")

    def test_merge_lane_keeps_graph_prefix(self) -> None:
        entry = parse_log_line(f"| * def5678{SEP}{SEP}Bob{SEP}1 hour ago{SEP}a{SEP}b")
        self.assertEqual(entry.graph, "| * ")
        self.assertEqual(entry.refs, ())
        self.assertEqual(entry.subject, f"a{SEP}b")

    def test_parse_log_keeps_every_line(self) -> None:
        output = f"* 1111111{SEP}{SEP}A{SEP}now{SEP}one\n|\n* 2222222{SEP}{SEP}A{SEP}now{SEP}two\n"
        entries = parse_log(output)
        self.assertEqual([entry.oid for entry in entries], ["1111111", None, "2222222"])


class LogArgsTests(unittest.TestCase):
    def test_revision_defaults_to_head(self) -> None:
        self.assertEqual(log_args()[-2:], ("HEAD", "--"))

    def test_all_references_ignores_revision(self) -> None:
        args = log_args("main", all_refs=True)
        self.assertIn("--all", args)
        self.assertNotIn("main", args)


if __name__ == "__main__":
    unittest.main()
