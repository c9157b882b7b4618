"""Data models for wgit."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import NamedTuple

from pydantic import BaseModel, ConfigDict, Field


class StatusCategory(str, Enum):
    """Display bucket for a porcelain status entry."""

    STAGED = "staged"
    MODIFIED = "modified"
    UNTRACKED = "untracked"
    MIXED = "mixed"


class FileStatusEntry(BaseModel):
    """One line of `git status --porcelain`."""

    code: str = Field(min_length=2, max_length=2, description="Raw two-character status code")
    path: str = Field(description="Path relative to the repository root")
    original_path: str | None = Field(default=None, description="Source path of a rename or copy")
    category: StatusCategory = Field(description="Derived from the status code")


class SearchHit(BaseModel):
    """A single `git grep -n` match."""

    file: str
    line: int = Field(gt=0)
    text: str


class CommitRecord(BaseModel):
    """Represents a commit from git history."""

    hash: str = Field(description="Full commit hash")
    short_hash: str = Field(description="Abbreviated commit hash")
    subject: str = Field(description="First line of the commit message")
    author: str = Field(description="Author name")
    timestamp: datetime = Field(description="Author date")


class ChangeGroup(BaseModel):
    """Files that will be committed together by autocommit."""

    commit_type: str = Field(description="One of feat, fix, remove, refactor, misc")
    files: list[str] = Field(default_factory=list)


class CommitMessage(BaseModel):
    """Parts of a conventional commit message."""

    type: str
    scope: str | None = None
    subject: str
    breaking: bool = False
    breaking_description: str | None = None


class AIProviderConfig(BaseModel):
    """Which hosted model a text-generation call targets."""

    model_config = ConfigDict(frozen=True, protected_namespaces=())

    provider: str = Field(default="openai", description="openai, anthropic or xai")
    model: str | None = Field(default=None, description="Provider model id, provider default if unset")


class BranchInfo(BaseModel):
    """A branch line from `git branch -a`."""

    name: str
    current: bool = False
    remote: bool = False


class RemoteInfo(BaseModel):
    """A line from `git remote -v`."""

    name: str
    url: str
    kind: str = Field(description="fetch or push")


class SubmoduleInfo(BaseModel):
    """A line from `git submodule status`."""

    path: str
    commit: str
    state: str = Field(description="uninitialized, modified, up-to-date or conflict")
    describe: str | None = None


class WorktreeInfo(BaseModel):
    """A line from `git worktree list`."""

    path: str
    head: str
    branch: str | None = None


class RepoStatus(BaseModel):
    """Summary shown at the top of the status view."""

    branch: str
    last_commit: str
    remote: str
    ahead: int = 0
    behind: int = 0
    entries: list[FileStatusEntry] = Field(default_factory=list)

    @property
    def has_changes(self) -> bool:
        return bool(self.entries)


class SearchOptions(BaseModel):
    """Flags passed to `git grep`."""

    ignore_case: bool = False
    whole_word: bool = False
    invert_match: bool = False
    context: int = Field(default=0, ge=0)
    file_pattern: str | None = None


class CommitMode(str, Enum):
    """How the commit flow collects its message."""

    AUTOCOMMIT = "autocommit"
    PROMPT_ENHANCE = "prompt-enhance"
    AI_GENERATE = "ai-generate"
    INTERACTIVE = "interactive"
    CHERRY_PICK = "cherry-pick"


class CommitOptions(BaseModel):
    """Options collected from the command line for `wgit commit`."""

    ai: bool = False
    no_ai: bool = False
    message: str | None = None
    type: str | None = None
    scope: str | None = None
    breaking: bool | None = None
    mode: CommitMode | None = None


class CommitType(NamedTuple):
    value: str
    label: str
    hint: str
