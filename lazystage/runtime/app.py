"""Wire configuration, git, the session and the terminal together."""

from __future__ import annotations

import sys
from pathlib import Path

from ..config import AppConfig
from ..git.runner import GitRunner
from ..highlight import DiffHighlighter
from ..state import AppState
from ..terminal import TerminalController
from ..ui_theme import resolve_theme
from .loop import run_main_loop
from .session import Session


def run_app(
    root: Path,
    runner: GitRunner,
    config: AppConfig,
    *,
    style: str | None = None,
    theme_name: str | None = None,
    no_color: bool = False,
) -> None:
    """Run the interactive UI for the repository at ``root`` until quit."""
    state = AppState(root=root, config=config)
    session = Session(state, runner)
    theme = resolve_theme(theme_name or config.theme, no_color=no_color)
    highlighter = None if no_color else DiffHighlighter(style or config.style)

    stdin_fd = sys.stdin.fileno()
    terminal = TerminalController(stdin_fd, sys.stdout.fileno())
    session.start()
    try:
        run_main_loop(session, terminal, stdin_fd, theme, highlighter)
    finally:
        session.close()
