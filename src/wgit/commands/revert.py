"""Revert command: undo single commits, ranges, or commits picked from history."""

from __future__ import annotations

from git import Repo
from rich.markup import escape

from wgit.git_ops import get_recent_commits, run_git, run_interactive
from wgit.prompts import Choice, Prompter

MODES = [
    Choice("single", "↩️  Revert a commit", "Enter a commit hash"),
    Choice("range", "📚 Revert a range", "Revert every commit in start..end"),
    Choice("browse", "🔍 Browse history", "Pick a commit from the log"),
]

STRATEGIES = [
    Choice("default", "Default", "Create a revert commit with the default message"),
    Choice("no-commit", "No commit", "Apply the revert without committing"),
    Choice("edit", "Edit message", "Open the editor for the revert message"),
]


def revert_with_args(repo: Repo, prompter: Prompter, args: list[str]) -> None:
    """Pass raw arguments to `git revert` after confirmation."""
    if not prompter.confirm(f"Run git revert {escape(' '.join(args))}?", default=True):
        prompter.cancelled("Revert cancelled")
        return
    # attached to the terminal, git may open an editor for the message
    run_interactive(repo, "revert", *args)
    prompter.success("Revert completed")


def revert_commit(repo: Repo, prompter: Prompter, commit: str) -> None:
    strategy = prompter.select("How should the revert be applied?", STRATEGIES)
    if not prompter.confirm(f"Revert commit {escape(commit)}?", default=True):
        prompter.cancelled("Revert cancelled")
        return
    if strategy == "edit":
        run_interactive(repo, "revert", commit)
    elif strategy == "no-commit":
        run_git(repo, "revert", "--no-commit", commit)
    else:
        run_git(repo, "revert", "--no-edit", commit)
    prompter.success(f"Reverted {escape(commit)}")


def revert_range(repo: Repo, prompter: Prompter) -> None:
    start = prompter.text("Oldest commit to revert", validate=_hash_required)
    end = prompter.text("Newest commit to revert", default="HEAD")
    if not prompter.confirm(f"Revert every commit from {escape(start)} to {escape(end)}?", default=False):
        prompter.cancelled("Revert cancelled")
        return
    with prompter.spinner("Reverting commits"):
        output = run_git(repo, "revert", "--no-edit", f"{start}^..{end}")
    prompter.success(f"Reverted {escape(start)}..{escape(end)}")
    prompter.output(output)


def _hash_required(value: str) -> str | None:
    return None if value else "Commit hash is required"


def run(repo: Repo, prompter: Prompter, args: list[str] | None = None) -> None:
    if args:
        revert_with_args(repo, prompter, args)
        return

    mode = prompter.select("What would you like to revert?", MODES)
    if mode == "range":
        revert_range(repo, prompter)
        return
    if mode == "browse":
        commits = get_recent_commits(repo, 50)
        if not commits:
            prompter.info("No commits yet")
            return
        commit = prompter.select(
            "Select a commit to revert",
            [Choice(c.hash, f"{c.short_hash} {c.subject}", c.author) for c in commits],
        )
    else:
        commit = prompter.text("Enter commit hash", validate=_hash_required)
    revert_commit(repo, prompter, commit)
