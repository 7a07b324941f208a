"""Frame composition for the outline view.

Builds full ANSI frames from ``AppState`` without mutating it: the outline
rows (or the topmost log/commit view), an optional popup panel docked above
the status line, and the status line itself.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence

from .ansi import pad_ansi_line
from .diff.types import LineOrigin
from .dispatch.modes import Mode
from .dispatch.search import find_matches
from .dispatch.selection import selection_bounds
from .outline import Outline, SectionKind, VisibleRow, mark_rows
from .state import AppState
from .terminal import TerminalController
from .ui_theme import UITheme
from .views import TextView, ViewLineKind

Highlighter = Callable[[str, str], str]

COLLAPSED_MARKER = "▸ "
EXPANDED_MARKER = "▾ "
HEAD_KINDS = frozenset({SectionKind.HEAD, SectionKind.UPSTREAM, SectionKind.PUSH_REMOTE, SectionKind.TAG})


def scroll_for_cursor(top: int, cursor_index: int | None, height: int, total: int) -> int:
    """Return a scroll offset that keeps ``cursor_index`` inside the viewport."""
    height = max(1, height)
    if cursor_index is not None:
        if cursor_index < top:
            top = cursor_index
        elif cursor_index >= top + height:
            top = cursor_index - height + 1
    return max(0, min(top, max(0, total - height)))


def _row_path(row: VisibleRow) -> str:
    return row.address.key[0] if row.address.key else ""


def _section_color(kind: SectionKind, theme: UITheme) -> str:
    if kind.is_group:
        return theme.group_heading
    if kind in HEAD_KINDS:
        return theme.head
    if kind.is_file:
        return theme.file_title
    if kind.is_hunk:
        return theme.hunk_header
    if kind is SectionKind.COMMIT:
        return theme.commit_oid
    return ""


def format_row(row: VisibleRow, theme: UITheme, highlighter: Highlighter | None = None) -> str:
    indent = "  " * row.depth
    if row.origin is not None:
        prefix, body = row.text[:1], row.text[1:]
        if row.origin is LineOrigin.NO_NEWLINE:
            return f"{indent}{theme.dim}{row.text}{theme.reset}"
        color = {LineOrigin.ADDITION: theme.added, LineOrigin.DELETION: theme.removed}.get(row.origin, "")
        if highlighter is not None:
            body = highlighter(body, _row_path(row))
        elif color:
            body = f"{color}{body}{theme.reset}"
        return f"{indent}{color}{prefix}{theme.reset}{body}"

    if row.collapsible:
        marker = COLLAPSED_MARKER if row.collapsed else EXPANDED_MARKER
    else:
        marker = "  "
    color = _section_color(row.kind, theme)
    return f"{indent}{theme.marker}{marker}{theme.reset}{color}{row.text}{theme.reset}"


def _decorate(line: str, row: VisibleRow, theme: UITheme, width: int) -> str:
    padded = pad_ansi_line(line, width)
    if row.is_cursor:
        return f"{theme.reverse}{padded}{theme.reset}"
    if row.in_selection:
        return f"{theme.selection}{padded}{theme.reset}"
    if row.is_match:
        return f"{theme.search_hit}{padded}{theme.reset}"
    return padded


def _view_line_color(kind: ViewLineKind, theme: UITheme) -> str:
    return {
        ViewLineKind.GRAPH: theme.dim,
        ViewLineKind.COMMIT: theme.commit_oid,
        ViewLineKind.FILE: theme.file_title,
        ViewLineKind.HUNK: theme.hunk_header,
        ViewLineKind.ADDED: theme.added,
        ViewLineKind.REMOVED: theme.removed,
    }.get(kind, "")


def view_lines(view: TextView, theme: UITheme, width: int, height: int) -> list[str]:
    out: list[str] = []
    for index, line in enumerate(view.lines[view.scroll_top : view.scroll_top + height], view.scroll_top):
        color = _view_line_color(line.kind, theme)
        padded = pad_ansi_line(f"{color}{line.text}{theme.reset}" if color else line.text, width)
        out.append(f"{theme.reverse}{padded}{theme.reset}" if index == view.cursor else padded)
    return out


def marked_rows(state: AppState) -> list[VisibleRow]:
    outline = state.outline
    rows = outline.visible_rows()
    selection = selection_bounds(outline, state.cursor, state.anchor) if Mode.VISUAL in state.modes else None
    matches = find_matches(rows, state.search_query) if state.search_query else ()
    return mark_rows(rows, outline.row_index_for(state.cursor), selection, set(matches))


def status_text(state: AppState) -> tuple[str, str]:
    left: list[str] = []
    snapshot = state.snapshot
    if snapshot is not None:
        left.append(snapshot.state.head.label)
    if state.views:
        left.append(state.views[-1].title)
    mode = state.modes.current
    if mode is not Mode.NORMAL:
        left.append(f"-- {mode.value.upper()} --")
    if state.refreshing:
        left.append("refreshing")
    if state.pending_tickets:
        left.append(f"{len(state.pending_tickets)} running")
    right = state.notification or "? help"
    return "  ".join(left), right


def build_status_line(left_text: str, width: int, right_text: str) -> str:
    usable = max(1, width - 1)
    if usable <= len(right_text):
        return right_text[-usable:]
    left_limit = max(0, usable - len(right_text) - 1)
    left = left_text[:left_limit]
    gap = " " * (usable - len(left) - len(right_text))
    return f"{left}{gap}{right_text}"


def popup_panel(lines: Sequence[str], width: int, theme: UITheme) -> list[str]:
    if not lines:
        return []
    title, *body = lines
    border = f"{theme.popup_border}{'─' * max(0, width - 1)}{theme.reset}"
    out = [border, f"{theme.popup_title}{title}{theme.reset}"]
    for line in body:
        if line.startswith(" "):
            out.append(f"{theme.popup_key}{line[:4]}{theme.reset}{line[4:]}")
        else:
            out.append(f"{theme.dim}{line}{theme.reset}")
    return out


def build_frame_lines(
    state: AppState,
    width: int,
    height: int,
    theme: UITheme,
    highlighter: Highlighter | None = None,
) -> list[str]:
    """Compose exactly ``height`` display lines for the current state."""
    height = max(1, height)
    panel: list[str] = []
    if state.popup is not None:
        panel = popup_panel(state.popup.lines(), width, theme)[: max(0, height - 2)]
    body_height = max(0, height - 1 - len(panel))

    if state.views:
        out = view_lines(state.views[-1], theme, width, body_height)
    else:
        rows = marked_rows(state)
        visible = rows[state.scroll_top : state.scroll_top + body_height]
        out = [_decorate(format_row(row, theme, highlighter), row, theme, width) for row in visible]
        if not rows and body_height:
            out.append(f"{theme.dim}{'loading...' if state.snapshot is None else 'nothing to show'}{theme.reset}")
    out.extend("" for _ in range(body_height - len(out)))
    out.extend(panel)

    if state.modes.current is Mode.SEARCH:
        status = f"/{state.search_query}"
        color = theme.status_mode
    else:
        left, right = status_text(state)
        status = build_status_line(left, width, right)
        color = theme.status_error if state.notification_is_error else theme.status_bar
    out.append(f"{color}{status}{theme.reset}")
    return out


def render_screen(
    state: AppState,
    terminal: TerminalController,
    width: int,
    height: int,
    theme: UITheme,
    highlighter: Highlighter | None = None,
) -> None:
    lines = build_frame_lines(state, width, height, theme, highlighter)
    terminal.write("\033[H\033[J" + "\r\n".join(pad_ansi_line(line, width) for line in lines))


def dump_outline(outline: Outline) -> str:
    """Plain-text rendering of every visible row, for non-interactive use."""
    out: list[str] = []
    for row in outline.visible_rows():
        if row.origin is not None:
            out.append(f"{'  ' * row.depth}{row.text}")
            continue
        marker = (COLLAPSED_MARKER if row.collapsed else EXPANDED_MARKER) if row.collapsible else "  "
        out.append(f"{'  ' * row.depth}{marker}{row.text}")
    return "\n".join(out) + ("\n" if out else "")
