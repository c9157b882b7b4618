"""Parsers turning plain git output into wgit models.

Every function here is pure: the same text always yields the same records,
in input order. Lines that do not match the expected shape are skipped.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from datetime import datetime

from pydantic import ValidationError

from wgit.models import (
    BranchInfo,
    ChangeGroup,
    CommitRecord,
    FileStatusEntry,
    RemoteInfo,
    SearchHit,
    StatusCategory,
    SubmoduleInfo,
    WorktreeInfo,
)

log = logging.getLogger(__name__)

# ASCII unit separator, never present in commit subjects or author names
FIELD_SEP = "\x1f"
LOG_FORMAT = FIELD_SEP.join(["%H", "%h", "%s", "%an", "%aI"])

_GREP_LINE = re.compile(r"^([^:]+):(\d+):(.*)$")

_SUBMODULE_STATES = {
    "-": "uninitialized",
    "+": "modified",
    "U": "conflict",
    " ": "up-to-date",
}


def categorize_status(code: str) -> StatusCategory:
    """Map a two-character porcelain code to its display category.

    The first character is the index state and the second the worktree
    state. Codes that fit no rule are shown as modified.
    """
    if code == "??":
        return StatusCategory.UNTRACKED
    if len(code) != 2:
        return StatusCategory.MODIFIED

    index, worktree = code[0], code[1]
    index_set = index not in " ?!"
    worktree_set = worktree not in " ?!"

    if index_set and not worktree_set:
        return StatusCategory.STAGED
    if worktree_set and not index_set:
        return StatusCategory.MODIFIED
    if index_set and worktree_set:
        return StatusCategory.MIXED
    return StatusCategory.MODIFIED


_C_ESCAPES = {
    "a": "\a",
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "v": "\v",
    '"': '"',
    "\\": "\\",
}
_OCTAL = "01234567"


def unquote_path(path: str) -> str:
    """Undo git's C-style path quoting.

    git wraps paths holding spaces, quotes, control characters or (with the
    default `core.quotePath`) non-ASCII bytes in double quotes, escaping the
    bytes as backslash sequences. Octal escapes are raw UTF-8 bytes. Unquoted
    paths are returned as they are.
    """
    if len(path) < 2 or path[0] != '"' or path[-1] != '"':
        return path

    body = path[1:-1]
    raw = bytearray()
    i = 0
    while i < len(body):
        char = body[i]
        if char == "\\" and i + 1 < len(body):
            escape = body[i + 1]
            octal = body[i + 1:i + 4]
            if len(octal) == 3 and all(c in _OCTAL for c in octal):
                raw.append(int(octal, 8) & 0xFF)
                i += 4
                continue
            if escape in _C_ESCAPES:
                raw += _C_ESCAPES[escape].encode()
                i += 2
                continue
        raw += char.encode("utf-8")
        i += 1
    return raw.decode("utf-8", errors="replace")


def parse_status_line(line: str) -> FileStatusEntry | None:
    """Parse one porcelain line, or return None if it is malformed."""
    if len(line) < 4 or line[2] != " ":
        return None

    code = line[:2]
    path = line[3:]
    original_path = None
    if ("R" in code or "C" in code) and " -> " in path:
        original_path, path = path.split(" -> ", 1)
        original_path = unquote_path(original_path)

    return FileStatusEntry(
        code=code,
        path=unquote_path(path),
        original_path=original_path,
        category=categorize_status(code),
    )


def parse_status(output: str) -> list[FileStatusEntry]:
    """Parse `git status --porcelain` output. Empty output means a clean tree."""
    entries: list[FileStatusEntry] = []
    for line in output.splitlines():
        if not line.strip():
            continue
        entry = parse_status_line(line)
        if entry is None:
            log.debug("Skipping unparseable status line: %r", line)
            continue
        entries.append(entry)
    return entries


def change_type_for(code: str) -> str:
    """Conventional commit type used by autocommit for a status code.

    Added wins over Modified, then Deleted, then Renamed.
    """
    if "A" in code:
        return "feat"
    if "M" in code:
        return "fix"
    if "D" in code:
        return "remove"
    if "R" in code:
        return "refactor"
    return "misc"


def group_changes(changes: Iterable[FileStatusEntry | str]) -> list[ChangeGroup]:
    """Partition changed files into commit groups.

    Accepts parsed entries or raw porcelain lines. Groups appear in the order
    their type was first seen.
    """
    groups: dict[str, list[str]] = {}
    for change in changes:
        if isinstance(change, str):
            entry = parse_status_line(change)
            if entry is None:
                continue
        else:
            entry = change
        groups.setdefault(change_type_for(entry.code), []).append(entry.path)

    return [ChangeGroup(commit_type=t, files=files) for t, files in groups.items()]


def parse_grep_output(output: str) -> list[SearchHit]:
    """Parse `git grep -n` output of the form file:line:content."""
    hits: list[SearchHit] = []
    for line in output.splitlines():
        if not line.strip():
            continue
        match = _GREP_LINE.match(line)
        if not match:
            continue
        file, line_number, content = match.groups()
        number = int(line_number)
        if number < 1:
            continue
        hits.append(SearchHit(file=file, line=number, text=content.strip()))
    return hits


def group_hits_by_file(hits: Iterable[SearchHit]) -> dict[str, list[SearchHit]]:
    """Group search hits per file, keeping first-seen file order."""
    grouped: dict[str, list[SearchHit]] = {}
    for hit in hits:
        grouped.setdefault(hit.file, []).append(hit)
    return grouped


def parse_log_output(output: str, sep: str = FIELD_SEP) -> list[CommitRecord]:
    """Parse `git log --pretty=format:<LOG_FORMAT>` output."""
    commits: list[CommitRecord] = []
    for line in output.splitlines():
        if not line.strip():
            continue
        fields = line.split(sep)
        if len(fields) != 5:
            log.debug("Skipping log line with %d fields: %r", len(fields), line)
            continue
        full_hash, short_hash, subject, author, date = fields
        try:
            commits.append(CommitRecord(
                hash=full_hash,
                short_hash=short_hash,
                subject=subject,
                author=author,
                timestamp=datetime.fromisoformat(date.strip()),
            ))
        except (ValueError, ValidationError):
            log.debug("Skipping log line with bad date: %r", line)
    return commits


def parse_branches(output: str) -> list[BranchInfo]:
    """Parse `git branch [-a]` output.

    Symbolic refs (`origin/HEAD -> origin/main`) and detached HEAD markers
    are left out.
    """
    branches: list[BranchInfo] = []
    for line in output.splitlines():
        if not line.strip():
            continue
        current = line.startswith("*")
        name = line[2:].strip() if len(line) > 2 else line.strip("* ")
        if not name or " -> " in name or name.startswith("("):
            continue
        branches.append(BranchInfo(
            name=name,
            current=current,
            remote=name.startswith("remotes/"),
        ))
    return branches


def parse_remotes(output: str) -> list[RemoteInfo]:
    """Parse `git remote -v` output."""
    remotes: list[RemoteInfo] = []
    for line in output.splitlines():
        parts = line.split()
        if len(parts) != 3:
            continue
        name, url, kind = parts
        remotes.append(RemoteInfo(name=name, url=url, kind=kind.strip("()")))
    return remotes


def remote_names(remotes: Iterable[RemoteInfo]) -> list[str]:
    """Unique remote names in first-seen order."""
    names: list[str] = []
    for remote in remotes:
        if remote.name not in names:
            names.append(remote.name)
    return names


def parse_submodules(output: str) -> list[SubmoduleInfo]:
    """Parse `git submodule status` output."""
    submodules: list[SubmoduleInfo] = []
    for line in output.splitlines():
        if len(line) < 2:
            continue
        state = _SUBMODULE_STATES.get(line[0], "up-to-date")
        parts = line[1:].split(maxsplit=2)
        if len(parts) < 2:
            continue
        describe = parts[2].strip("()") if len(parts) == 3 else None
        submodules.append(SubmoduleInfo(
            path=parts[1],
            commit=parts[0],
            state=state,
            describe=describe,
        ))
    return submodules


def parse_worktrees(output: str) -> list[WorktreeInfo]:
    """Parse `git worktree list` output."""
    worktrees: list[WorktreeInfo] = []
    for line in output.splitlines():
        parts = line.split(maxsplit=2)
        if len(parts) < 2:
            continue
        branch = None
        if len(parts) == 3 and parts[2].startswith("["):
            branch = parts[2].strip("[]")
        worktrees.append(WorktreeInfo(path=parts[0], head=parts[1], branch=branch))
    return worktrees
