"""Submodule command."""

from __future__ import annotations

from git import Repo
from rich.markup import escape
from rich.table import Table

from wgit.git_ops import list_submodules, run_git
from wgit.models import SubmoduleInfo
from wgit.prompts import Choice, Prompter

STATE_STYLES = {
    "up-to-date": "green",
    "modified": "yellow",
    "uninitialized": "dim",
    "conflict": "red",
}

ACTIONS = [
    Choice("update", "🔄 Update all", "git submodule update --init --recursive"),
    Choice("specific", "🎯 Update one", "Initialise and update a single submodule"),
    Choice("add", "➕ Add submodule", "Register a new submodule"),
    Choice("back", "← Back", "Return to main menu"),
]


def display_submodules(prompter: Prompter, submodules: list[SubmoduleInfo]) -> None:
    table = Table(title="📦 Submodules")
    table.add_column("Path", style="cyan")
    table.add_column("Commit")
    table.add_column("State")
    for sub in submodules:
        style = STATE_STYLES.get(sub.state, "white")
        table.add_row(escape(sub.path), sub.commit[:7], f"[{style}]{sub.state}[/{style}]")
    prompter.console.print(table)


def add_submodule(repo: Repo, prompter: Prompter) -> None:
    url = prompter.text("Submodule repository URL", validate=lambda v: None if v else "URL is required")
    path = prompter.text("Path (leave empty for default)")
    args = ["submodule", "add", url]
    if path:
        args.append(path)
    with prompter.spinner("Adding submodule"):
        run_git(repo, *args)
    prompter.success(f"Added submodule {escape(path or url)}")


def run(repo: Repo, prompter: Prompter) -> None:
    submodules = list_submodules(repo)
    if not submodules:
        prompter.info("No submodules found")
        if prompter.confirm("Would you like to add a submodule?", default=False):
            add_submodule(repo, prompter)
        return

    display_submodules(prompter, submodules)
    action = prompter.select("What would you like to do?", ACTIONS)
    if action == "update":
        with prompter.spinner("Updating submodules"):
            run_git(repo, "submodule", "update", "--init", "--recursive")
        prompter.success("Submodules updated")
    elif action == "specific":
        path = prompter.select("Select submodule", [Choice(s.path, s.path, s.state) for s in submodules])
        with prompter.spinner(f"Updating {path}"):
            run_git(repo, "submodule", "update", "--init", "--", path)
        prompter.success(f"Updated {escape(path)}")
    elif action == "add":
        add_submodule(repo, prompter)
