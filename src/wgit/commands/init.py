"""Init command."""

from __future__ import annotations

from pathlib import Path

from rich.markup import escape

from wgit.git_ops import init_repo, is_inside_repo
from wgit.prompts import Prompter


def run(prompter: Prompter, cwd: Path | None = None) -> Path | None:
    """Create a new repository, refusing to nest one inside another."""
    cwd = cwd or Path.cwd()
    if is_inside_repo(cwd):
        prompter.warning("Already inside a git repository")
        return None

    name = prompter.text("Directory name (leave empty for current directory)", placeholder=".")
    target = cwd / name if name else cwd
    if not prompter.confirm(f"Initialize repository in {escape(str(target))}?", default=True):
        prompter.cancelled("Init cancelled")
        return None

    init_repo(target)
    prompter.success(f"Initialized empty repository in {escape(str(target))}")
    return target
