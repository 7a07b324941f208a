from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from .config import AppConfig
from .dispatch.modes import ModeStack
from .dispatch.popups import Popup
from .git.snapshot import Snapshot
from .outline import Cursor, Outline
from .views import TextView


@dataclass
class AppState:
    root: Path
    config: AppConfig = field(default_factory=AppConfig)
    snapshot: Snapshot | None = None
    outline: Outline = field(default_factory=Outline)
    cursor: Cursor | None = None
    anchor: Cursor | None = None
    modes: ModeStack = field(default_factory=ModeStack)
    popup: Popup | None = None
    views: list[TextView] = field(default_factory=list)
    search_query: str = ""
    notification: str = ""
    notification_is_error: bool = False
    notification_until: float = 0.0
    pending_tickets: set[int] = field(default_factory=set)
    refreshing: bool = False
    scroll_top: int = 0
    viewport_rows: int = 20
    dirty: bool = True
    skip_next_lf: bool = False
