"""Worktree command."""

from __future__ import annotations

from git import Repo
from rich.markup import escape
from rich.table import Table

from wgit.git_ops import list_branches, list_worktrees, run_git
from wgit.models import WorktreeInfo
from wgit.prompts import Choice, Prompter

ACTIONS = [
    Choice("add", "➕ Add worktree", "Check out a branch in a new directory"),
    Choice("remove", "🗑️  Remove worktree", "Delete a linked worktree"),
    Choice("prune", "✂️  Prune", "Forget worktrees whose directories are gone"),
    Choice("back", "← Back", "Return to main menu"),
]


def display_worktrees(prompter: Prompter, worktrees: list[WorktreeInfo]) -> None:
    table = Table(title="🌳 Worktrees")
    table.add_column("Path", style="cyan")
    table.add_column("HEAD")
    table.add_column("Branch", style="green")
    for tree in worktrees:
        table.add_row(escape(tree.path), tree.head, escape(tree.branch or "(detached)"))
    prompter.console.print(table)


def add_worktree(repo: Repo, prompter: Prompter) -> None:
    branch = prompter.text("Branch name", validate=lambda v: None if v else "Branch name is required")
    path = prompter.text("Worktree path", default=f"../{branch.replace('/', '-')}")
    existing = {b.name for b in list_branches(repo)}
    if branch in existing:
        args = ["worktree", "add", path, branch]
    else:
        args = ["worktree", "add", "-b", branch, path]
    with prompter.spinner("Creating worktree"):
        run_git(repo, *args)
    prompter.success(f"Created worktree at {escape(path)} for {escape(branch)}")


def remove_worktree(repo: Repo, prompter: Prompter, worktrees: list[WorktreeInfo]) -> None:
    # the first entry is the main working tree
    linked = worktrees[1:]
    if not linked:
        prompter.info("No linked worktrees to remove")
        return
    path = prompter.select("Select worktree to remove", [Choice(t.path, t.path, t.branch or "") for t in linked])
    if not prompter.confirm(f"Remove worktree {escape(path)}?", default=False):
        prompter.cancelled("Remove cancelled")
        return
    run_git(repo, "worktree", "remove", path)
    prompter.success(f"Removed worktree {escape(path)}")


def run(repo: Repo, prompter: Prompter) -> None:
    worktrees = list_worktrees(repo)
    if worktrees:
        display_worktrees(prompter, worktrees)

    action = prompter.select("What would you like to do?", ACTIONS)
    if action == "add":
        add_worktree(repo, prompter)
    elif action == "remove":
        remove_worktree(repo, prompter, worktrees)
    elif action == "prune":
        run_git(repo, "worktree", "prune")
        prompter.success("Pruned stale worktrees")
