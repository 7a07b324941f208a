"""``git log --graph`` output for the log view."""

from __future__ import annotations

from dataclasses import dataclass

MAX_LOG_ENTRIES = 256

_SEP = "\x1f"
_GRAPH_CHARS = frozenset("|/\\*-_<>. ")

LOG_ARGS = (
    "log",
    "--graph",
    "--decorate=short",
    "--no-color",
    f"--format=%h{_SEP}%D{_SEP}%aN{_SEP}%ar{_SEP}%s",
    f"--max-count={MAX_LOG_ENTRIES}",
)


@dataclass(frozen=True)
class LogEntry:
    """One line of graph output; ``oid`` is ``None`` for graph-only lines."""

    graph: str
    oid: str | None = None
    refs: tuple[str, ...] = ()
    author: str = ""
    age: str = ""
    subject: str = ""

    @property
    def is_commit(self) -> bool:
        return self.oid is not None


def log_args(revision: str | None = None, all_refs: bool = False) -> tuple[str, ...]:
    if all_refs:
        return (*LOG_ARGS, "--all", "--")
    return (*LOG_ARGS, revision or "HEAD", "--")


def _graph_end(line: str) -> int:
    end = 0
    for char in line:
        if char not in _GRAPH_CHARS:
            break
        end += 1
    return end


def parse_decorations(text: str) -> tuple[str, ...]:
    """Split ``%D`` output such as ``HEAD -> main, origin/main, tag: v1``."""
    names: list[str] = []
    for part in text.split(", "):
        part = part.strip()
        if not part:
            continue
        if part == "HEAD":
            names.append("@")
        elif part.startswith("HEAD -> "):
            names.insert(0, part[len("HEAD -> "):])
        elif part.startswith("tag: "):
            names.append(part[len("tag: "):])
        else:
            names.append(part)
    return tuple(names)


def parse_log_line(line: str) -> LogEntry:
    end = _graph_end(line)
    graph, rest = line[:end], line[end:]
    if not rest:
        return LogEntry(graph)
    parts = rest.split(_SEP)
    if len(parts) < 5:
        return LogEntry(graph, oid=parts[0], subject=_SEP.join(parts[1:]))
    oid, decorations, author, age, subject = parts[0], parts[1], parts[2], parts[3], _SEP.join(parts[4:])
    return LogEntry(
        graph=graph,
        oid=oid or None,
        refs=parse_decorations(decorations),
        author=author,
        age=age.removesuffix(" ago"),
        subject=subject,
    )


def parse_log(output: str) -> list[LogEntry]:
    return [parse_log_line(line) for line in output.splitlines()]
