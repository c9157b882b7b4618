"""Merge command."""

from __future__ import annotations

from git import Repo
from rich.markup import escape

from wgit.git_ops import current_branch, list_branches, run_git
from wgit.prompts import Choice, Prompter


def run(repo: Repo, prompter: Prompter) -> None:
    with prompter.spinner("Fetching branches"):
        current = current_branch(repo)
        branches = [b for b in list_branches(repo, include_remote=True) if b.name != current]

    if not branches:
        prompter.warning("No branches found")
        return

    branch = prompter.select(
        f"Merge into {escape(current)} from",
        [Choice(b.name, b.name, "Remote branch" if b.remote else "Local branch") for b in branches],
    )
    with prompter.spinner(f"Merging {branch} into {current}"):
        output = run_git(repo, "merge", branch)
    prompter.success(f"Successfully merged {escape(branch)} into {escape(current)}")
    prompter.output(output)
