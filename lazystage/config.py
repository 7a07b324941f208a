"""Persistent JSON config.

Read once at startup into a frozen ``AppConfig``. Missing or malformed files
fall back to defaults; individual invalid values are dropped with a warning.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from platformdirs import user_config_dir

from .diff.patch import DEFAULT_CONTEXT_LINES
from .errors import IncompatibleOptions
from .git.runner import DEFAULT_TIMEOUT_SECONDS
from .operations import OperationKind, validate_options
from .outline import CollapsePolicy, SectionKind

LOG = logging.getLogger(__name__)

APP_NAME = "lazystage"
CONFIG_FILENAME = "config.json"
DEFAULT_CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME
CONFIG_PATH = DEFAULT_CONFIG_PATH
DEFAULT_STYLE = "monokai"
DEFAULT_RECENT_COMMIT_COUNT = 10


@dataclass(frozen=True)
class AppConfig:
    patch_context_lines: int = DEFAULT_CONTEXT_LINES
    collapsed_by_default: Mapping[SectionKind, bool] = field(default_factory=dict)
    recent_commit_count: int = DEFAULT_RECENT_COMMIT_COUNT
    operation_defaults: Mapping[OperationKind, frozenset[str]] = field(default_factory=dict)
    diff_args: tuple[str, ...] = ()
    theme: str | None = None
    style: str = DEFAULT_STYLE
    git_timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS

    def collapse_policy(self) -> CollapsePolicy:
        return CollapsePolicy(dict(self.collapsed_by_default))

    def default_options(self, kind: OperationKind) -> frozenset[str]:
        return self.operation_defaults.get(kind, frozenset())


def load_config(path: Path | None = None) -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    config_path = path if path is not None else CONFIG_PATH
    try:
        data = json.loads(config_path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return {}
    except (OSError, ValueError) as exc:
        LOG.warning("ignoring config %s: %s", config_path, exc)
        return {}
    if not isinstance(data, dict):
        LOG.warning("ignoring config %s: top level is not an object", config_path)
        return {}
    return data


def _nonnegative_int(data: Mapping[str, object], key: str, default: int) -> int:
    value = data.get(key, default)
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        LOG.warning("config %s must be a non-negative integer, using %d", key, default)
        return default
    return value


def _optional_str(data: Mapping[str, object], key: str) -> str | None:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, str) or not value.strip():
        LOG.warning("config %s must be a non-empty string", key)
        return None
    return value.strip()


def _collapsed_by_default(value: object) -> dict[SectionKind, bool]:
    if not isinstance(value, dict):
        if value is not None:
            LOG.warning("config collapsed_by_default must be an object")
        return {}
    out: dict[SectionKind, bool] = {}
    for name, flag in value.items():
        try:
            kind = SectionKind(name)
        except ValueError:
            LOG.warning("config collapsed_by_default: unknown section kind %r", name)
            continue
        if not isinstance(flag, bool):
            LOG.warning("config collapsed_by_default[%s] must be a boolean", name)
            continue
        out[kind] = flag
    return out


def _operation_defaults(value: object) -> dict[OperationKind, frozenset[str]]:
    if not isinstance(value, dict):
        if value is not None:
            LOG.warning("config operation_defaults must be an object")
        return {}
    out: dict[OperationKind, frozenset[str]] = {}
    for name, options in value.items():
        try:
            kind = OperationKind(name)
        except ValueError:
            LOG.warning("config operation_defaults: unknown operation %r", name)
            continue
        if not isinstance(options, list) or not all(isinstance(item, str) for item in options):
            LOG.warning("config operation_defaults[%s] must be a list of option names", name)
            continue
        try:
            out[kind] = validate_options(kind, options)
        except IncompatibleOptions as exc:
            LOG.warning("config operation_defaults[%s] dropped: %s", name, exc)
    return out


def _diff_args(value: object) -> tuple[str, ...]:
    if value is None:
        return ()
    if not isinstance(value, list) or not all(isinstance(item, str) and item.startswith("-") for item in value):
        LOG.warning("config diff_args must be a list of options")
        return ()
    return tuple(value)


def _timeout(value: object) -> float:
    if value is None:
        return DEFAULT_TIMEOUT_SECONDS
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
        LOG.warning("config git_timeout_seconds must be a positive number")
        return DEFAULT_TIMEOUT_SECONDS
    return float(value)


def parse_config(data: Mapping[str, object]) -> AppConfig:
    """Validate raw JSON data into an ``AppConfig``."""
    return AppConfig(
        patch_context_lines=_nonnegative_int(data, "patch_context_lines", DEFAULT_CONTEXT_LINES),
        collapsed_by_default=_collapsed_by_default(data.get("collapsed_by_default")),
        recent_commit_count=_nonnegative_int(data, "recent_commit_count", DEFAULT_RECENT_COMMIT_COUNT),
        operation_defaults=_operation_defaults(data.get("operation_defaults")),
        diff_args=_diff_args(data.get("diff_args")),
        theme=_optional_str(data, "theme"),
        style=_optional_str(data, "style") or DEFAULT_STYLE,
        git_timeout_seconds=_timeout(data.get("git_timeout_seconds")),
    )


def load_app_config(path: Path | None = None) -> AppConfig:
    return parse_config(load_config(path))
