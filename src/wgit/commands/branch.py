"""Branch command: list, switch, create, rename, delete and more."""

from __future__ import annotations

from git import Repo
from rich.markup import escape
from rich.table import Table

from wgit.config import Config, load_config
from wgit.git_ops import (
    ahead_behind,
    current_branch,
    git_or_default,
    list_branches,
    list_remotes,
    run_git,
    upstream_of,
)
from wgit.models import BranchInfo
from wgit.parsers import remote_names
from wgit.prompts import Choice, Prompter

ACTIONS = [
    Choice("switch", "🔄 Switch Branch", "Checkout another branch"),
    Choice("create", "🆕 Create Branch", "Create and switch to a new branch"),
    Choice("rename", "✏️  Rename Branch", "Rename the current branch"),
    Choice("delete", "🗑️  Delete Branch", "Delete a local branch"),
    Choice("merge", "🔀 Merge Branch", "Merge another branch into the current one"),
    Choice("rebase", "📐 Rebase Branch", "Rebase the current branch onto another"),
    Choice("track", "🔗 Track Remote", "Set the upstream of the current branch"),
    Choice("push", "⬆️  Push Branch", "Push the current branch to origin"),
    Choice("back", "← Back", "Return to main menu"),
]


def display_branches(prompter: Prompter, branches: list[BranchInfo]) -> None:
    table = Table(title=f"🌿 Branches ({len(branches)})")
    table.add_column("", width=1)
    table.add_column("Branch", style="white")
    table.add_column("Type", style="dim")
    for branch in branches:
        marker = "[green]*[/green]" if branch.current else ""
        name = f"[green]{escape(branch.name)}[/green]" if branch.current else escape(branch.name)
        table.add_row(marker, name, "remote" if branch.remote else "local")
    prompter.console.print(table)


def display_branch_info(repo: Repo, prompter: Prompter) -> str:
    """Print a summary of the current branch and return its name."""
    branch = current_branch(repo)
    upstream = upstream_of(repo)
    ahead, behind = ahead_behind(repo)
    last_commit = git_or_default(repo, "No commits yet", "log", "-1", "--pretty=format:%h %s")

    prompter.console.print(f"\n[bold]Current branch:[/bold] [green]{escape(branch or '(detached)')}[/green]")
    prompter.console.print(f"[bold]Upstream:[/bold] {escape(upstream or 'none')}")
    if ahead or behind:
        prompter.console.print(f"[bold]Sync:[/bold] [blue]↑{ahead}[/blue] [red]↓{behind}[/red]")
    prompter.console.print(f"[bold]Last commit:[/bold] {escape(last_commit)}\n")
    return branch


def _branch_name(value: str) -> str | None:
    if not value:
        return "Branch name is required"
    if any(c.isspace() for c in value):
        return "Branch name cannot contain spaces"
    return None


def _other_branches(repo: Repo, current: str, include_remote: bool = False) -> list[Choice]:
    return [
        Choice(b.name, b.name, "Remote branch" if b.remote else "Local branch")
        for b in list_branches(repo, include_remote)
        if b.name != current
    ]


def switch_branch(repo: Repo, prompter: Prompter, name: str | None = None) -> None:
    if name is None:
        choices = _other_branches(repo, current_branch(repo))
        if not choices:
            prompter.warning("No other branches")
            return
        name = prompter.select("Select branch to switch to", choices)
    run_git(repo, "checkout", name)
    prompter.success(f"Switched to branch {escape(name)}")


def create_branch(repo: Repo, prompter: Prompter, name: str | None = None, config: Config | None = None) -> None:
    if name is None:
        prefixes = (config or load_config()).branch.prefixes
        prefix = ""
        if prefixes:
            prefix = prompter.select(
                "Branch prefix",
                [Choice(p, p) for p in prefixes] + [Choice("", "(none)")],
            )
        name = prefix + prompter.text("Enter new branch name", placeholder="my-feature", validate=_branch_name)
    run_git(repo, "checkout", "-b", name)
    prompter.success(f"Created and switched to branch {escape(name)}")


def rename_branch(repo: Repo, prompter: Prompter) -> None:
    current = current_branch(repo)
    new_name = prompter.text(f"Rename current branch ({escape(current)})", validate=_branch_name)
    run_git(repo, "branch", "-m", new_name)
    prompter.success(f"Renamed {escape(current)} to {escape(new_name)}")


def delete_branch(repo: Repo, prompter: Prompter, name: str | None = None) -> None:
    if name is None:
        choices = _other_branches(repo, current_branch(repo))
        if not choices:
            prompter.warning("No other branches to delete")
            return
        name = prompter.select("Select branch to delete", choices)
    if not prompter.confirm(f"Are you sure you want to delete branch '{escape(name)}'?", default=False):
        prompter.cancelled("Delete cancelled")
        return
    run_git(repo, "branch", "-d", name)
    prompter.success(f"Deleted branch {escape(name)}")


def merge_into_current(repo: Repo, prompter: Prompter, current: str) -> None:
    choices = _other_branches(repo, current)
    if not choices:
        prompter.warning("No other branches to merge")
        return
    branch = prompter.select(f"Select branch to merge into {escape(current)}", choices)
    with prompter.spinner(f"Merging {branch}"):
        output = run_git(repo, "merge", branch)
    prompter.success(f"Merged {escape(branch)} into {escape(current)}")
    prompter.output(output)


def rebase_current(repo: Repo, prompter: Prompter, current: str) -> None:
    choices = _other_branches(repo, current)
    if not choices:
        prompter.warning("No other branches to rebase onto")
        return
    target = prompter.select(f"Select branch to rebase {escape(current)} onto", choices)
    with prompter.spinner(f"Rebasing onto {target}"):
        run_git(repo, "rebase", target)
    prompter.success(f"Rebased {escape(current)} onto {escape(target)}")


def track_remote(repo: Repo, prompter: Prompter, current: str) -> None:
    remotes = remote_names(list_remotes(repo))
    default = remotes[0] if remotes else "origin"
    remote = prompter.text("Enter remote name", default=default)
    run_git(repo, "branch", "--set-upstream-to", f"{remote}/{current}")
    prompter.success(f"{escape(current)} now tracks {escape(remote)}/{escape(current)}")


def push_current(repo: Repo, prompter: Prompter, current: str) -> None:
    if not prompter.confirm(f"Push {escape(current)} to remote?", default=True):
        prompter.cancelled("Push cancelled")
        return
    with prompter.spinner(f"Pushing {current}"):
        run_git(repo, "push", "-u", "origin", current)
    prompter.success(f"Pushed {escape(current)} to origin")


def run(
    repo: Repo,
    prompter: Prompter,
    list_all: bool = False,
    create: str | None = None,
    checkout: str | None = None,
    delete: str | None = None,
    include_remote: bool = False,
    config: Config | None = None,
) -> None:
    if list_all:
        display_branches(prompter, list_branches(repo, include_remote))
        return
    if create:
        create_branch(repo, prompter, create)
        return
    if checkout:
        switch_branch(repo, prompter, checkout)
        return
    if delete:
        delete_branch(repo, prompter, delete)
        return

    current = display_branch_info(repo, prompter)
    action = prompter.select("What would you like to do?", ACTIONS)
    if action == "switch":
        switch_branch(repo, prompter)
    elif action == "create":
        create_branch(repo, prompter, config=config)
    elif action == "rename":
        rename_branch(repo, prompter)
    elif action == "delete":
        delete_branch(repo, prompter)
    elif action == "merge":
        merge_into_current(repo, prompter, current)
    elif action == "rebase":
        rebase_current(repo, prompter, current)
    elif action == "track":
        track_remote(repo, prompter, current)
    elif action == "push":
        push_current(repo, prompter, current)
