"""UI theme definitions and selection helpers.

Themes are UI-only ANSI palettes (outline/popups/chrome). Syntax highlighting
style for diff content remains a separate Pygments setting.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class UITheme:
    """Semantic ANSI palette used by renderers."""

    name: str
    reset: str
    reverse: str
    selection: str
    group_heading: str
    head: str
    file_title: str
    hunk_header: str
    added: str
    removed: str
    commit_oid: str
    marker: str
    search_hit: str
    status_bar: str
    status_error: str
    status_mode: str
    popup_title: str
    popup_border: str
    popup_key: str
    dim: str


DEFAULT_THEME = UITheme(
    name="default",
    reset="\033[0m",
    reverse="\033[7m",
    selection="\033[48;5;238m",
    group_heading="\033[1;38;5;81m",
    head="\033[1;38;5;229m",
    file_title="\033[38;5;252m",
    hunk_header="\033[38;5;44m",
    added="\033[38;5;42m",
    removed="\033[38;5;203m",
    commit_oid="\033[38;5;214m",
    marker="\033[38;5;44m",
    search_hit="\033[4m",
    status_bar="\033[2;38;5;250m",
    status_error="\033[1;38;5;203m",
    status_mode="\033[1;38;5;81m",
    popup_title="\033[1;38;5;45m",
    popup_border="\033[38;5;45m",
    popup_key="\033[38;5;229m",
    dim="\033[2m",
)

OCEAN_THEME = UITheme(
    name="ocean",
    reset="\033[0m",
    reverse="\033[7m",
    selection="\033[48;5;24m",
    group_heading="\033[1;38;5;45m",
    head="\033[1;38;5;153m",
    file_title="\033[38;5;117m",
    hunk_header="\033[38;5;39m",
    added="\033[38;5;84m",
    removed="\033[38;5;210m",
    commit_oid="\033[38;5;215m",
    marker="\033[38;5;39m",
    search_hit="\033[4m",
    status_bar="\033[2;38;5;110m",
    status_error="\033[1;38;5;210m",
    status_mode="\033[1;38;5;45m",
    popup_title="\033[1;38;5;39m",
    popup_border="\033[38;5;39m",
    popup_key="\033[38;5;153m",
    dim="\033[2;38;5;110m",
)

PLAIN_THEME = UITheme(
    name="plain",
    reset="",
    reverse="",
    selection="",
    group_heading="",
    head="",
    file_title="",
    hunk_header="",
    added="",
    removed="",
    commit_oid="",
    marker="",
    search_hit="",
    status_bar="",
    status_error="",
    status_mode="",
    popup_title="",
    popup_border="",
    popup_key="",
    dim="",
)

_THEMES: dict[str, UITheme] = {
    DEFAULT_THEME.name: DEFAULT_THEME,
    OCEAN_THEME.name: OCEAN_THEME,
}


def available_theme_names() -> tuple[str, ...]:
    """Return selectable non-plain theme names."""
    return tuple(sorted(_THEMES.keys()))


def normalize_theme_name(name: str | None) -> str:
    """Return a valid theme name, falling back to default."""
    if not name:
        return DEFAULT_THEME.name
    candidate = str(name).strip().lower()
    if candidate in _THEMES:
        return candidate
    return DEFAULT_THEME.name


def resolve_theme(name: str | None, *, no_color: bool = False) -> UITheme:
    """Return concrete theme for requested name and color mode."""
    if no_color:
        return PLAIN_THEME
    return _THEMES[normalize_theme_name(name)]


__all__ = [
    "UITheme",
    "DEFAULT_THEME",
    "OCEAN_THEME",
    "PLAIN_THEME",
    "available_theme_names",
    "normalize_theme_name",
    "resolve_theme",
]
