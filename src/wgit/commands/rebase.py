"""Rebase command."""

from __future__ import annotations

from git import Repo
from rich.markup import escape

from wgit.git_ops import current_branch, list_branches, run_git, run_interactive
from wgit.prompts import Choice, Prompter

ACTIONS = [
    Choice("branch", "📐 Rebase onto branch", "Replay the current branch onto another"),
    Choice("interactive", "✏️  Interactive rebase", "Edit, squash or reorder commits"),
    Choice("continue", "▶️  Continue", "Continue after resolving conflicts"),
    Choice("skip", "⏭️  Skip", "Skip the current patch"),
    Choice("abort", "⏹️  Abort", "Return to the state before the rebase"),
]


def rebase_with_args(repo: Repo, prompter: Prompter, args: list[str]) -> None:
    """Pass raw arguments to `git rebase` after confirmation."""
    if not prompter.confirm(f"Run git rebase {escape(' '.join(args))}?", default=True):
        prompter.cancelled("Rebase cancelled")
        return
    if "-i" in args or "--interactive" in args:
        run_interactive(repo, "rebase", *args)
    else:
        prompter.output(run_git(repo, "rebase", *args))
    prompter.success("Rebase completed")


def rebase_onto_branch(repo: Repo, prompter: Prompter) -> None:
    current = current_branch(repo)
    choices = [Choice(b.name, b.name) for b in list_branches(repo) if b.name != current]
    if not choices:
        prompter.warning("No other branches to rebase onto")
        return
    target = prompter.select(f"Rebase {escape(current)} onto", choices)
    if not prompter.confirm(f"Rebase {escape(current)} onto {escape(target)}?", default=True):
        prompter.cancelled("Rebase cancelled")
        return
    with prompter.spinner(f"Rebasing onto {target}"):
        output = run_git(repo, "rebase", target)
    prompter.success(f"Rebased {escape(current)} onto {escape(target)}")
    prompter.output(output)


def rebase_interactive(repo: Repo, prompter: Prompter) -> None:
    base = prompter.text("Rebase commits after", default="HEAD~3")
    if not prompter.confirm(f"Start interactive rebase from {escape(base)}?", default=True):
        prompter.cancelled("Rebase cancelled")
        return
    run_interactive(repo, "rebase", "-i", base)
    prompter.success("Interactive rebase completed")


def run(repo: Repo, prompter: Prompter, args: list[str] | None = None) -> None:
    if args:
        rebase_with_args(repo, prompter, args)
        return

    action = prompter.select("Select rebase operation", ACTIONS)
    if action == "branch":
        rebase_onto_branch(repo, prompter)
    elif action == "interactive":
        rebase_interactive(repo, prompter)
    else:
        if not prompter.confirm(f"Run git rebase --{action}?", default=action != "abort"):
            prompter.cancelled("Rebase cancelled")
            return
        # --continue may open an editor for the commit message
        if action == "continue":
            run_interactive(repo, "rebase", "--continue")
        else:
            run_git(repo, "rebase", f"--{action}")
        prompter.success(f"Rebase {action} completed")
