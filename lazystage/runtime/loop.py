"""Main interactive event loop for the terminal UI.

Each iteration applies finished background work, renders if anything
changed, then waits briefly for one key. Feature logic lives in ``Session``.
"""

from __future__ import annotations

import shutil
from dataclasses import dataclass

from ..input import normalize_enter, read_key
from ..render import Highlighter, render_screen, scroll_for_cursor
from ..terminal import TerminalController
from ..ui_theme import UITheme
from .session import Session


@dataclass(frozen=True)
class RuntimeLoopTiming:
    """Timing constants controlling interactive loop behavior."""

    key_poll_ms: int = 120


def run_main_loop(
    session: Session,
    terminal: TerminalController,
    stdin_fd: int,
    theme: UITheme,
    highlighter: Highlighter | None = None,
    timing: RuntimeLoopTiming = RuntimeLoopTiming(),
) -> None:
    """Run the interactive loop until a quit action occurs."""
    state = session.state
    last_size: tuple[int, int] | None = None

    with terminal.raw_mode():
        while True:
            term = shutil.get_terminal_size((80, 24))
            if (term.columns, term.lines) != last_size:
                last_size = (term.columns, term.lines)
                state.dirty = True
            state.viewport_rows = max(1, term.lines - 1)

            session.poll()

            if state.dirty:
                if state.views:
                    view = state.views[-1]
                    view.scroll_top = scroll_for_cursor(
                        view.scroll_top, view.cursor, state.viewport_rows, len(view.lines)
                    )
                else:
                    rows = state.outline.visible_rows()
                    state.scroll_top = scroll_for_cursor(
                        state.scroll_top,
                        state.outline.row_index_for(state.cursor),
                        state.viewport_rows,
                        len(rows),
                    )
                render_screen(state, terminal, term.columns, term.lines, theme, highlighter)
                state.dirty = False

            try:
                key = read_key(stdin_fd, timeout_ms=timing.key_poll_ms)
            except KeyboardInterrupt:
                key = "CTRL_G"
            if not key:
                continue

            key, state.skip_next_lf = normalize_enter(key, state.skip_next_lf)
            if not key:
                continue
            if session.handle_key(key):
                break
