"""Remote command: inspect remotes and sync with them."""

from __future__ import annotations

from git import Repo
from rich.markup import escape
from rich.table import Table

from wgit.git_ops import current_branch, list_remotes, run_git
from wgit.models import RemoteInfo
from wgit.parsers import remote_names
from wgit.prompts import Choice, Prompter

ACTIONS = [
    Choice("fetch", "📥 Fetch", "Download objects and refs"),
    Choice("pull", "⬇️  Pull", "Fetch and integrate the current branch"),
    Choice("push", "⬆️  Push", "Upload the current branch"),
    Choice("sync", "🔄 Sync", "Pull, then push"),
    Choice("add", "➕ Add Remote", "Register a new remote"),
    Choice("remove", "🗑️  Remove Remote", "Forget a remote"),
    Choice("rename", "✏️  Rename Remote", "Change a remote's name"),
    Choice("back", "← Back", "Return to main menu"),
]


def display_remotes(prompter: Prompter, remotes: list[RemoteInfo]) -> None:
    table = Table(title="🌐 Remotes")
    table.add_column("Name", style="cyan")
    table.add_column("URL")
    table.add_column("Type", style="dim")
    for remote in remotes:
        table.add_row(escape(remote.name), escape(remote.url), remote.kind)
    prompter.console.print(table)


def pick_remote(repo: Repo, prompter: Prompter, message: str = "Select remote") -> str | None:
    names = remote_names(list_remotes(repo))
    if not names:
        prompter.warning("No remote repository configured")
        return None
    if len(names) == 1:
        return names[0]
    return prompter.select(message, [Choice(n, n) for n in names], default="origin")


def fetch_changes(repo: Repo, prompter: Prompter) -> None:
    remote = pick_remote(repo, prompter, "Fetch from")
    if remote is None:
        return
    with prompter.spinner(f"Fetching from {remote}"):
        output = run_git(repo, "fetch", remote)
    prompter.success(f"Fetched from {escape(remote)}")
    prompter.output(output)


def pull_changes(repo: Repo, prompter: Prompter, confirm: bool = True) -> None:
    remote = pick_remote(repo, prompter, "Pull from")
    if remote is None:
        return
    branch = current_branch(repo)
    if confirm and not prompter.confirm(f"Pull {escape(branch)} from {escape(remote)}?", default=True):
        prompter.cancelled("Pull cancelled")
        return
    with prompter.spinner(f"Pulling {branch} from {remote}"):
        output = run_git(repo, "pull", remote, branch)
    prompter.success(f"Pulled latest changes from {escape(remote)}/{escape(branch)}")
    prompter.output(output)


def push_changes(repo: Repo, prompter: Prompter, confirm: bool = True) -> None:
    remote = pick_remote(repo, prompter, "Push to")
    if remote is None:
        return
    branch = current_branch(repo)
    if confirm and not prompter.confirm(f"Push {escape(branch)} to {escape(remote)}?", default=True):
        prompter.cancelled("Push cancelled")
        return
    with prompter.spinner(f"Pushing {branch} to {remote}"):
        output = run_git(repo, "push", "--set-upstream", remote, branch)
    prompter.success(f"Pushed {escape(branch)} to {escape(remote)}")
    prompter.output(output)


def sync_changes(repo: Repo, prompter: Prompter) -> None:
    if not prompter.confirm("Pull and then push the current branch?", default=True):
        prompter.cancelled("Sync cancelled")
        return
    pull_changes(repo, prompter, confirm=False)
    push_changes(repo, prompter, confirm=False)


def add_remote(repo: Repo, prompter: Prompter) -> None:
    name = prompter.text("Remote name", default="origin", validate=_required("Remote name"))
    url = prompter.text("Remote URL", placeholder="https://github.com/user/repo.git", validate=_required("Remote URL"))
    run_git(repo, "remote", "add", name, url)
    prompter.success(f"Added remote {escape(name)}")


def remove_remote(repo: Repo, prompter: Prompter) -> None:
    name = pick_remote(repo, prompter, "Remote to remove")
    if name is None:
        return
    if not prompter.confirm(f"Remove remote '{escape(name)}'?", default=False):
        prompter.cancelled("Remove cancelled")
        return
    run_git(repo, "remote", "remove", name)
    prompter.success(f"Removed remote {escape(name)}")


def rename_remote(repo: Repo, prompter: Prompter) -> None:
    name = pick_remote(repo, prompter, "Remote to rename")
    if name is None:
        return
    new_name = prompter.text(f"New name for {escape(name)}", validate=_required("Remote name"))
    run_git(repo, "remote", "rename", name, new_name)
    prompter.success(f"Renamed remote {escape(name)} to {escape(new_name)}")


def _required(field: str):
    def check(value: str) -> str | None:
        if not value:
            return f"{field} is required"
        if any(c.isspace() for c in value):
            return f"{field} cannot contain spaces"
        return None
    return check


def run(repo: Repo, prompter: Prompter) -> None:
    remotes = list_remotes(repo)
    if remotes:
        display_remotes(prompter, remotes)
    else:
        prompter.info("No remotes configured")

    handlers = {
        "fetch": fetch_changes,
        "pull": pull_changes,
        "push": push_changes,
        "sync": sync_changes,
        "add": add_remote,
        "remove": remove_remote,
        "rename": rename_remote,
    }
    action = prompter.select("What would you like to do?", ACTIONS)
    if action in handlers:
        handlers[action](repo, prompter)
