"""Status command: repository summary plus quick actions."""

from __future__ import annotations

from git import Repo
from rich.columns import Columns
from rich.markup import escape
from rich.panel import Panel

from wgit.commands import staging
from wgit.git_ops import clean_untracked, get_repo_status, restore_files, stage_all, unstage_all
from wgit.models import FileStatusEntry, RepoStatus, StatusCategory
from wgit.prompts import Choice, Prompter

STATUS_STYLES = {
    "??": "red",
    " M": "yellow",
    "M ": "green",
    "A ": "green",
    "D ": "red",
    "MM": "cyan",
}

CATEGORY_TITLES = {
    StatusCategory.STAGED: "[green]📋 Staged[/green]",
    StatusCategory.MODIFIED: "[yellow]📝 Modified[/yellow]",
    StatusCategory.UNTRACKED: "[red]❓ Untracked[/red]",
    StatusCategory.MIXED: "[cyan]🔄 Mixed[/cyan]",
}

ACTIONS = [
    Choice("stage-all", "➕ Stage all", "git add ."),
    Choice("stage-files", "📋 Stage files", "Choose files to stage"),
    Choice("unstage-all", "➖ Unstage all", "git reset HEAD"),
    Choice("unstage-files", "📤 Unstage files", "Choose files to unstage"),
    Choice("restore", "↩️  Restore", "Discard working tree changes"),
    Choice("clean", "🧹 Clean", "Remove untracked files"),
    Choice("refresh", "🔄 Refresh", "Reload status"),
    Choice("back", "← Back", "Return to main menu"),
]


def status_line(status: RepoStatus) -> str:
    line = (
        f"Branch: [bold]{escape(status.branch or '(detached)')}[/bold] | "
        f"Latest: {escape(status.last_commit)} | Remote: {escape(status.remote)}"
    )
    if status.ahead > 0:
        line += f" | [blue]↑{status.ahead}[/blue]"
    if status.behind > 0:
        line += f" | [red]↓{status.behind}[/red]"
    if status.has_changes:
        line += " | [yellow]● Changes[/yellow]"
    return line


def _entry_label(entry: FileStatusEntry) -> str:
    style = STATUS_STYLES.get(entry.code, "dim")
    marker = "?" if entry.code == "??" else entry.code.strip() or entry.code[0]
    return f"[{style}]{escape(marker)}[/{style}] {escape(entry.path)}"


def display_status(prompter: Prompter, status: RepoStatus) -> None:
    console = prompter.console
    console.print(Panel(status_line(status), title="Git Status", title_align="left", border_style="dim"))

    if not status.entries:
        return

    console.print("\n[bold]📂 Changes:[/bold]")
    for category, title in CATEGORY_TITLES.items():
        entries = [e for e in status.entries if e.category is category]
        if not entries:
            continue
        console.print(f"\n  {title}:")
        console.print(Columns([_entry_label(e) for e in entries], padding=(0, 4)))


def run(repo: Repo, prompter: Prompter) -> None:
    while True:
        with prompter.spinner("Loading status"):
            status = get_repo_status(repo)
        display_status(prompter, status)

        if not status.has_changes:
            prompter.success("Working tree clean")
            return

        action = prompter.select("What would you like to do?", ACTIONS)
        if action == "back":
            return
        if action == "stage-all":
            stage_all(repo)
            prompter.success("All changes staged")
        elif action == "stage-files":
            staging.stage_selected(repo, prompter)
        elif action == "unstage-all":
            unstage_all(repo)
            prompter.success("All changes unstaged")
        elif action == "unstage-files":
            staging.unstage_selected(repo, prompter)
        elif action == "restore":
            if prompter.confirm("Discard all working tree changes? This cannot be undone!", default=False):
                restore_files(repo)
                prompter.success("Working tree restored")
        elif action == "clean":
            if prompter.confirm("Remove all untracked files? This cannot be undone!", default=False):
                clean_untracked(repo)
                prompter.success("Untracked files removed")
