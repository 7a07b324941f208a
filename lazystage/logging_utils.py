"""Logging helpers for lazystage.

The interactive UI owns the terminal, so log records only go somewhere when
a log file is given or when running non-interactively.
"""

from __future__ import annotations

import logging
from pathlib import Path

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def level_for_verbosity(verbosity: int) -> int:
    """
    verbosity == 0 -> WARNING
    verbosity == 1 -> INFO
    verbosity >= 2 -> DEBUG
    """
    if verbosity <= 0:
        return logging.WARNING
    if verbosity == 1:
        return logging.INFO
    return logging.DEBUG


def configure_logging(verbosity: int, log_file: Path | None = None, interactive: bool = True) -> None:
    """Configure logging for one run.

    With a ``log_file`` records are appended there. Otherwise interactive runs
    discard them and non-interactive runs write them to stderr.
    """
    level = level_for_verbosity(verbosity)
    if log_file is not None:
        logging.basicConfig(
            level=level, format=LOG_FORMAT, filename=str(log_file), encoding="utf-8", errors="backslashreplace"
        )
        return
    if interactive:
        logging.getLogger("lazystage").addHandler(logging.NullHandler())
        logging.getLogger("lazystage").propagate = False
        return
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")
