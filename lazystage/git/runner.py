"""Thin ``subprocess`` wrapper around the git command line."""

from __future__ import annotations

import logging
import os
import subprocess
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path

from ..errors import GitError

LOG = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 30.0


@dataclass(frozen=True)
class GitOutput:
    """Captured result of one git invocation."""

    args: tuple[str, ...]
    returncode: int
    stdout: str
    stderr: str

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class GitRunner:
    """Run git inside one repository.

    Non-zero exits are returned rather than raised so callers can decide
    whether a failure matters. Only failure to spawn git at all raises
    ``GitError``.
    """

    def __init__(self, root: Path, timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS, git: str = "git") -> None:
        self.root = root
        self.timeout_seconds = timeout_seconds
        self.git = git

    def run(
        self,
        args: Sequence[str],
        stdin: str | None = None,
        env: Mapping[str, str] | None = None,
    ) -> GitOutput:
        argv = [self.git, "-C", str(self.root), *args]
        proc_env = {**os.environ, **env} if env else None
        LOG.debug("git %s", " ".join(args))
        try:
            proc = subprocess.run(
                argv,
                input=stdin,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                stdin=None if stdin is not None else subprocess.DEVNULL,
                text=True,
                encoding="utf-8",
                errors="surrogateescape",
                check=False,
                timeout=self.timeout_seconds,
                env=proc_env,
            )
        except subprocess.TimeoutExpired as exc:
            LOG.warning("git %s timed out after %.1fs", " ".join(args), self.timeout_seconds)
            return GitOutput(tuple(args), 124, "", f"git {args[0]} timed out after {exc.timeout}s")
        except OSError as exc:
            raise GitError(f"cannot run {self.git}: {exc}") from exc
        return GitOutput(tuple(args), proc.returncode, proc.stdout, proc.stderr)

    def output(self, args: Sequence[str]) -> str:
        """Return stdout of a query, or ``""`` when git exits non-zero."""
        result = self.run(args)
        if not result.ok:
            LOG.debug("git %s exited %d: %s", " ".join(args), result.returncode, result.stderr.strip())
            return ""
        return result.stdout


def discover_repository(path: Path, timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS) -> Path:
    """Return the top-level directory of the repository containing ``path``."""
    runner = GitRunner(path, timeout_seconds)
    result = runner.run(["rev-parse", "--show-toplevel"])
    if not result.ok:
        message = result.stderr.strip() or f"{path} is not a git repository"
        raise GitError(message)
    return Path(result.stdout.strip()).resolve()
