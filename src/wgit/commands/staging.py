"""Stage, unstage, reset and restore individual files."""

from __future__ import annotations

from git import Repo

from wgit.config import Config
from wgit.git_ops import (
    get_staged_files,
    get_status_entries,
    restore_files,
    stage_files,
    unstage_files,
)
from wgit.prompts import Choice, Prompter

ACTIONS = [
    Choice("stage", "Stage files"),
    Choice("unstage", "Unstage files"),
    Choice("reset", "Reset files", "Unstage and discard changes"),
    Choice("restore", "Restore files", "Discard changes in working directory"),
]


def stage_selected(repo: Repo, prompter: Prompter) -> list[str]:
    """Let the user pick unstaged or untracked files and stage them."""
    candidates = [e for e in get_status_entries(repo) if e.code[1] != " "]
    if not candidates:
        prompter.info("No unstaged changes")
        return []

    files = prompter.multiselect(
        "Select files to stage",
        [Choice(e.path, e.path, e.code.strip()) for e in candidates],
        required=True,
    )
    stage_files(repo, files)
    prompter.success(f"Staged {len(files)} file(s)")
    return files


def unstage_selected(repo: Repo, prompter: Prompter) -> list[str]:
    staged = get_staged_files(repo)
    if not staged:
        prompter.info("No staged files")
        return []

    files = prompter.multiselect("Select files to unstage", [Choice(f, f) for f in staged], required=True)
    unstage_files(repo, files)
    prompter.success(f"Unstaged {len(files)} file(s)")
    return files


def reset_selected(repo: Repo, prompter: Prompter) -> list[str]:
    """Unstage files and discard their working tree changes."""
    entries = {e.path: e for e in get_status_entries(repo) if e.code[0] not in " ?"}
    if not entries:
        prompter.info("No staged files")
        return []

    files = prompter.multiselect(
        "Select files to reset (unstage and discard changes)",
        [Choice(path, path, e.code.strip()) for path, e in entries.items()],
        required=True,
    )
    if not prompter.confirm(f"Reset {len(files)} file(s)? This will unstage and discard all changes!", default=False):
        prompter.cancelled("Reset cancelled")
        return []

    unstage_files(repo, files)
    # newly added files have nothing to restore once unstaged
    tracked = [f for f in files if "A" not in entries[f].code]
    if tracked:
        restore_files(repo, tracked)
    prompter.success(f"Reset {len(files)} file(s)")
    return files


def restore_selected(repo: Repo, prompter: Prompter) -> list[str]:
    """Discard working tree changes for chosen files."""
    candidates = [e for e in get_status_entries(repo) if e.code[1] in "MD"]
    if not candidates:
        prompter.info("No modified files to restore")
        return []

    files = prompter.multiselect(
        "Select files to restore (discard changes)",
        [Choice(e.path, e.path, e.code.strip()) for e in candidates],
        required=True,
    )
    if not prompter.confirm(f"Restore {len(files)} file(s)? This will discard all changes!", default=False):
        prompter.cancelled("Restore cancelled")
        return []

    restore_files(repo, files)
    prompter.success(f"Restored {len(files)} file(s)")
    return files


def run(repo: Repo, prompter: Prompter, action: str | None = None, config: Config | None = None) -> None:
    """Run one staging action, asking which one if not given."""
    action = action or prompter.select("What would you like to do?", ACTIONS)

    if action == "stage":
        staged = stage_selected(repo, prompter)
        if staged and prompter.confirm("Would you like to commit the staged files now?", default=False):
            from wgit.commands.commit import run_commit

            run_commit(repo, prompter, config=config)
    elif action == "unstage":
        unstage_selected(repo, prompter)
    elif action == "reset":
        reset_selected(repo, prompter)
    elif action == "restore":
        restore_selected(repo, prompter)
