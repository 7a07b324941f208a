"""Syntax highlighting of diff line content with Pygments.

Also neutralizes terminal control bytes so diffed files cannot move the
cursor or ring the bell.
"""

from __future__ import annotations

import re
from functools import lru_cache

from pygments import highlight
from pygments.formatters import Terminal256Formatter
from pygments.lexer import Lexer
from pygments.lexers import TextLexer, get_lexer_for_filename
from pygments.styles import get_style_by_name
from pygments.util import ClassNotFound

_CONTROL_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f-\x9f]")

FALLBACK_STYLE = "monokai"


def sanitize_terminal_text(source: str) -> str:
    """Escape terminal control bytes to avoid side effects (bell, cursor moves, etc.)."""
    if _CONTROL_RE.search(source) is None:
        return source

    out: list[str] = []
    for ch in source:
        code = ord(ch)
        if ch in {"\n", "\r", "\t"}:
            out.append(ch)
            continue
        # C0 controls + DEL + C1 controls.
        if code < 32 or code == 127 or 0x80 <= code <= 0x9F:
            out.append(f"\\x{code:02x}")
            continue
        out.append(ch)
    return "".join(out)


@lru_cache(maxsize=64)
def normalize_style(style: str) -> str:
    try:
        get_style_by_name(style)
    except ClassNotFound:
        return FALLBACK_STYLE
    return style


@lru_cache(maxsize=16)
def _formatter_for_style(style: str) -> Terminal256Formatter:
    return Terminal256Formatter(style=normalize_style(style))


@lru_cache(maxsize=256)
def _lexer_for_path(path: str) -> Lexer:
    try:
        return get_lexer_for_filename(path, stripnl=False, ensurenl=False)
    except ClassNotFound:
        return TextLexer(stripnl=False, ensurenl=False)


class DiffHighlighter:
    """Highlight single diff lines according to the file they belong to."""

    def __init__(self, style: str = FALLBACK_STYLE) -> None:
        self.style = normalize_style(style)

    def __call__(self, text: str, path: str) -> str:
        text = sanitize_terminal_text(text)
        if not text.strip():
            return text
        rendered = highlight(text, _lexer_for_path(path), _formatter_for_style(self.style))
        return rendered.rstrip("\n")


__all__ = ["DiffHighlighter", "FALLBACK_STYLE", "normalize_style", "sanitize_terminal_text"]
