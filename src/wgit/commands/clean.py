"""Clean command: untracked files and repository maintenance."""

from __future__ import annotations

from git import Repo

from wgit.git_ops import clean_untracked, list_untracked, run_git
from wgit.prompts import Choice, Prompter

ACTIONS = [
    Choice("untracked", "🧹 Untracked files", "Remove files git does not track"),
    Choice("gc", "🗜️  Garbage collection", "git gc"),
    Choice("prune", "✂️  Prune", "Remove unreachable objects"),
    Choice("fsck", "🔍 Check integrity", "git fsck"),
]

UNTRACKED_MODES = [
    Choice("interactive", "Choose files", "Select what to remove"),
    Choice("all", "Remove all", "Remove every untracked file and directory"),
    Choice("dry-run", "Dry run", "Show what would be removed"),
]


def clean_untracked_files(repo: Repo, prompter: Prompter) -> None:
    items = list_untracked(repo)
    if not items:
        prompter.info("No untracked files to clean")
        return

    mode = prompter.select("How do you want to clean?", UNTRACKED_MODES)
    if mode == "dry-run":
        prompter.output("\n".join(f"Would remove {item}" for item in items))
        if not prompter.confirm("Remove these files?", default=False):
            return
        selected = items
    elif mode == "interactive":
        selected = prompter.multiselect(
            "Select files to remove",
            [Choice(item, item) for item in items],
            required=True,
        )
        if not prompter.confirm(f"Remove {len(selected)} item(s)? This cannot be undone!", default=False):
            prompter.cancelled("Clean cancelled")
            return
    else:
        selected = items
        if not prompter.confirm(f"Remove all {len(items)} untracked item(s)? This cannot be undone!", default=False):
            prompter.cancelled("Clean cancelled")
            return

    clean_untracked(repo, selected)
    prompter.success(f"Removed {len(selected)} item(s)")


def run(repo: Repo, prompter: Prompter) -> None:
    action = prompter.select("What would you like to clean?", ACTIONS)
    if action == "untracked":
        clean_untracked_files(repo, prompter)
    elif action == "fsck":
        with prompter.spinner("Checking repository integrity"):
            output = run_git(repo, "fsck")
        prompter.output(output)
        prompter.success("Repository integrity verified")
    else:
        if not prompter.confirm(f"Run git {action}?", default=True):
            prompter.cancelled()
            return
        with prompter.spinner(f"Running git {action}"):
            output = run_git(repo, action)
        prompter.output(output)
        prompter.success(f"git {action} completed")
