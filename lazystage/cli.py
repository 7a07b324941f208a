"""Command-line front door for lazystage.

Parses CLI options, finds the repository, and either prints the status
outline once (``--print``) or starts the interactive runtime.
"""

from __future__ import annotations

import argparse
import sys
from dataclasses import replace
from pathlib import Path

from .config import load_app_config
from .errors import GitError
from .git.runner import GitRunner, discover_repository
from .git.snapshot import collect_snapshot
from .logging_utils import configure_logging
from .outline import build_outline
from .render import dump_outline
from .runtime.app import run_app
from .ui_theme import available_theme_names


def _nonnegative_int(value: str) -> int:
    """argparse type for non-negative integer values."""
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid integer value: {value!r}") from exc
    if parsed < 0:
        raise argparse.ArgumentTypeError("value must be >= 0")
    return parsed


def printable(text: str) -> str:
    """Show bytes git emitted that were not UTF-8 as replacement characters."""
    return text.encode("utf-8", "surrogateescape").decode("utf-8", "replace")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lazystage",
        description="Stage, commit and sync a git repository from a collapsible status outline.",
    )
    parser.add_argument("path", nargs="?", default=None, help="Path inside the repository. Defaults to current directory.")
    parser.add_argument("--style", default=None, help="Pygments style name for diff highlighting.")
    parser.add_argument(
        "--theme",
        default=None,
        help=f"UI theme name ({', '.join(available_theme_names())}).",
    )
    parser.add_argument("--no-color", action="store_true", help="Disable color output even on TTY.")
    parser.add_argument(
        "-U",
        "--context",
        type=_nonnegative_int,
        default=None,
        help="Context lines kept around partial (line) patches.",
    )
    parser.add_argument("--print", action="store_true", help="Print the status outline once and exit.")
    parser.add_argument("--log-file", type=Path, default=None, help="Append log records to this file.")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="More logging (repeatable).")
    parser.add_argument("--config", type=Path, default=None, help="Config file (default: platform config dir).")
    return parser


def main(default_path: Path | None = None, argv: list[str] | None = None) -> None:
    """Parse CLI arguments and launch lazystage.

    ``default_path`` is primarily for tests; when omitted the current working
    directory is used.
    """
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose, args.log_file, interactive=not args.print)

    path = Path(args.path or default_path or Path.cwd())
    if not path.exists():
        raise SystemExit(f"Path not found: {path}")

    config = load_app_config(args.config)
    if args.context is not None:
        config = replace(config, patch_context_lines=args.context)

    try:
        root = discover_repository(path, config.git_timeout_seconds)
        runner = GitRunner(root, config.git_timeout_seconds)
        if args.print:
            snapshot = collect_snapshot(runner, config.recent_commit_count, config.diff_args)
            sys.stdout.write(printable(dump_outline(build_outline(snapshot, policy=config.collapse_policy()))))
            return
    except GitError as exc:
        raise SystemExit(f"lazystage: {exc}") from exc

    if not sys.stdin.isatty() or not sys.stdout.isatty():
        raise SystemExit("lazystage: an interactive terminal is required (use --print for plain output)")
    run_app(root, runner, config, style=args.style, theme_name=args.theme, no_color=args.no_color)


if __name__ == "__main__":
    main()
