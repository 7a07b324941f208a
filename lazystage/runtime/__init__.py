"""Background execution and the interactive session."""

from __future__ import annotations

from .executor import OperationExecutor
from .refresh import RefreshResult, RefreshScheduler
from .session import Session

__all__ = ["OperationExecutor", "RefreshResult", "RefreshScheduler", "Session"]
