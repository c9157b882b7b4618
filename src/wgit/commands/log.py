"""Log command: browse history or print it in a chosen format."""

from __future__ import annotations

from git import Repo
from rich.rule import Rule

from wgit.git_ops import get_recent_commits, run_git
from wgit.prompts import Choice, Prompter

LOG_FORMATS = {
    "oneline": ["--oneline"],
    "short": ["--pretty=short"],
    "full": ["--pretty=full"],
    "graph": ["--graph", "--oneline"],
}

BROWSE_LIMIT = 100


def show_formatted_log(repo: Repo, prompter: Prompter, fmt: str, limit: int = 20) -> None:
    if fmt not in LOG_FORMATS:
        raise ValueError(f"Unknown log format: {fmt}")
    output = run_git(repo, "log", "-n", str(limit), *LOG_FORMATS[fmt])
    prompter.output(output)


def run(repo: Repo, prompter: Prompter, fmt: str | None = None) -> None:
    if fmt:
        show_formatted_log(repo, prompter, fmt)
        return

    with prompter.spinner("Fetching commit history"):
        commits = get_recent_commits(repo, BROWSE_LIMIT)
    if not commits:
        prompter.info("No commits yet")
        return

    selected = prompter.select(
        "Select a commit",
        [
            Choice(c.hash, f"[{c.timestamp:%Y-%m-%d}] {c.short_hash} {c.subject}", c.author)
            for c in commits
        ],
    )

    prompter.console.print(Rule("📝 Commit Details", style="green"))
    prompter.output(run_git(repo, "show", "--name-status", selected))

    if prompter.confirm("Do you want to see the changes (diff)?", default=False):
        prompter.console.print(Rule("🔄 Changes", style="blue"))
        prompter.output(run_git(repo, "show", selected))
