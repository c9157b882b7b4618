"""CLI commands for wgit."""

from __future__ import annotations

import logging
import os
from enum import Enum
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from wgit import __version__
from wgit.commands import (
    branch as branch_cmd,
    clean as clean_cmd,
    config_cmd,
    init as init_cmd,
    log as log_cmd,
    merge as merge_cmd,
    rebase as rebase_cmd,
    release as release_cmd,
    remote as remote_cmd,
    reset as reset_cmd,
    revert as revert_cmd,
    search as search_cmd,
    staging as staging_cmd,
    status as status_cmd,
    submodules as submodules_cmd,
    worktree as worktree_cmd,
)
from wgit.commands.commit import run_commit
from wgit.git_ops import GitError, get_repo
from wgit.models import CommitMode, CommitOptions, SearchOptions
from wgit.prompts import Choice, PromptCancelled, Prompter
from wgit.text_generation import TextGenerationError

log = logging.getLogger(__name__)

app = typer.Typer(
    name="wgit",
    help="Interactive git workflow assistant with AI-drafted conventional commits",
    context_settings={"help_option_names": ["-h", "--help"]},
    invoke_without_command=True,
)
console = Console()

RAW_ARGS = {"allow_extra_args": True, "ignore_unknown_options": True}


class CliCommitMode(str, Enum):
    autocommit = "autocommit"
    prompt_enhance = "prompt-enhance"
    ai_generate = "ai-generate"
    interactive = "interactive"


class LogFormat(str, Enum):
    oneline = "oneline"
    short = "short"
    full = "full"
    graph = "graph"


def _print_error(message: str) -> None:
    """Print an error message and exit."""
    console.print(f"[red]✗[/red] {message}")
    raise typer.Exit(1)


def _configure_logging(verbose: bool) -> None:
    """Route library logging through rich. WGIT_LOG_LEVEL wins over --verbose."""
    name = os.getenv("WGIT_LOG_LEVEL") or ("DEBUG" if verbose else "WARNING")
    level = logging.getLevelName(name.upper())
    if not isinstance(level, int):
        level = logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_time=False, show_path=verbose, rich_tracebacks=True)],
        force=True,
    )


def _run(handler, *args, needs_repo: bool = True, **kwargs) -> None:
    """Call a command handler and map its failures to exit codes."""
    prompter = Prompter(console)
    try:
        if needs_repo:
            handler(get_repo(), prompter, *args, **kwargs)
        else:
            handler(prompter, *args, **kwargs)
    except PromptCancelled:
        prompter.cancelled()
    except (GitError, TextGenerationError) as e:
        _print_error(str(e))
    except Exception as e:
        log.debug("Unhandled error", exc_info=True)
        _print_error(f"Unexpected error: {e}")


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"wgit {__version__}")
        raise typer.Exit()


@app.callback()
def root(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging, including git commands"),
    version: Optional[bool] = typer.Option(
        None, "--version", callback=_version_callback, is_eager=True, help="Show version and exit"
    ),
) -> None:
    """Interactive git workflow assistant. Run without a command for the menu."""
    _configure_logging(verbose)
    if ctx.invoked_subcommand is None:
        interactive_menu()


# Commit operations


@app.command(rich_help_panel="Commit Operations")
def commit(
    ai: bool = typer.Option(False, "--ai", "-a", help="Generate the message with AI from staged changes"),
    no_ai: bool = typer.Option(False, "--no-ai", help="Build the message step by step"),
    message: Optional[str] = typer.Option(None, "--message", "-m", help="Commit with this message directly"),
    commit_type: Optional[str] = typer.Option(None, "--type", "-t", help="Conventional commit type"),
    scope: Optional[str] = typer.Option(None, "--scope", "-s", help="Commit scope"),
    breaking: bool = typer.Option(False, "--breaking", "-b", help="Mark as a breaking change"),
    mode: Optional[CliCommitMode] = typer.Option(None, "--mode", help="Commit mode, skips the mode menu"),
) -> None:
    """Create a conventional commit, optionally drafted by AI."""
    options = CommitOptions(
        ai=ai,
        no_ai=no_ai,
        message=message,
        type=commit_type,
        scope=scope,
        # an unset flag means "ask"
        breaking=True if breaking else None,
        mode=CommitMode(mode.value) if mode else None,
    )
    _run(run_commit, options)


@app.command("cherry-pick", rich_help_panel="Commit Operations")
def cherry_pick() -> None:
    """Apply a commit from another branch."""
    _run(run_commit, CommitOptions(mode=CommitMode.CHERRY_PICK))


@app.command(rich_help_panel="Commit Operations")
def stage() -> None:
    """Choose files to stage."""
    _run(staging_cmd.run, "stage")


@app.command(rich_help_panel="Commit Operations")
def unstage() -> None:
    """Choose files to unstage."""
    _run(staging_cmd.run, "unstage")


@app.command(rich_help_panel="Commit Operations")
def staging() -> None:
    """Stage, unstage, reset or restore selected files."""
    _run(staging_cmd.run)


# Repository information


@app.command(rich_help_panel="Repository Info")
def status() -> None:
    """Show repository status with quick actions."""
    _run(status_cmd.run)


@app.command("log", rich_help_panel="Repository Info")
def log_command(
    fmt: Optional[LogFormat] = typer.Option(None, "--format", "-f", help="Print the log in this format"),
) -> None:
    """Browse commit history."""
    _run(log_cmd.run, fmt.value if fmt else None)


@app.command(rich_help_panel="Repository Info")
def search(
    term: Optional[str] = typer.Argument(None, help="Text to search for in tracked files"),
    ignore_case: bool = typer.Option(False, "--ignore-case", "-i", help="Case insensitive"),
    whole_word: bool = typer.Option(False, "--word", "-w", help="Match whole words only"),
    invert_match: bool = typer.Option(False, "--invert-match", help="Show lines that do not match"),
    context: int = typer.Option(0, "--context", "-C", min=0, help="Lines of context"),
    glob: Optional[str] = typer.Option(None, "--glob", "-g", help="Limit to files matching this pattern"),
) -> None:
    """Search file contents, file names or commit messages."""
    options = SearchOptions(
        ignore_case=ignore_case,
        whole_word=whole_word,
        invert_match=invert_match,
        context=context,
        file_pattern=glob,
    )
    _run(search_cmd.run, term, options if term else None)


# Branches and remotes


@app.command(rich_help_panel="Branches & Remotes")
def branch(
    list_all: bool = typer.Option(False, "--list", "-l", help="List branches"),
    create: Optional[str] = typer.Option(None, "--create", "-c", help="Create and switch to a branch"),
    checkout: Optional[str] = typer.Option(None, "--checkout", help="Switch to a branch"),
    delete: Optional[str] = typer.Option(None, "--delete", "-d", help="Delete a branch"),
    remote: bool = typer.Option(False, "--remote", "-r", help="Include remote branches when listing"),
) -> None:
    """Manage branches."""
    _run(
        branch_cmd.run,
        list_all=list_all,
        create=create,
        checkout=checkout,
        delete=delete,
        include_remote=remote,
    )


@app.command(rich_help_panel="Branches & Remotes")
def merge() -> None:
    """Merge a branch into the current one."""
    _run(merge_cmd.run)


@app.command(rich_help_panel="Branches & Remotes")
def remote() -> None:
    """Manage remotes: fetch, pull, push, sync, add, remove, rename."""
    _run(remote_cmd.run)


@app.command(rich_help_panel="Branches & Remotes")
def push() -> None:
    """Push the current branch."""
    _run(remote_cmd.push_changes)


@app.command(rich_help_panel="Branches & Remotes")
def pull() -> None:
    """Pull the current branch."""
    _run(remote_cmd.pull_changes)


# History rewriting


@app.command(context_settings=RAW_ARGS, rich_help_panel="History")
def reset(ctx: typer.Context) -> None:
    """Reset HEAD. Extra arguments are passed to git reset."""
    _run(reset_cmd.run, ctx.args or None)


@app.command(context_settings=RAW_ARGS, rich_help_panel="History")
def revert(ctx: typer.Context) -> None:
    """Revert commits. Extra arguments are passed to git revert."""
    _run(revert_cmd.run, ctx.args or None)


@app.command(context_settings=RAW_ARGS, rich_help_panel="History")
def rebase(ctx: typer.Context) -> None:
    """Rebase the current branch. Extra arguments are passed to git rebase."""
    _run(rebase_cmd.run, ctx.args or None)


# Maintenance


@app.command(rich_help_panel="Maintenance")
def clean() -> None:
    """Remove untracked files or run repository maintenance."""
    _run(clean_cmd.run)


@app.command(rich_help_panel="Maintenance")
def submodules() -> None:
    """Manage submodules."""
    _run(submodules_cmd.run)


@app.command(rich_help_panel="Maintenance")
def worktree() -> None:
    """Manage worktrees."""
    _run(worktree_cmd.run)


@app.command(rich_help_panel="Maintenance")
def release(
    dry_run: bool = typer.Option(False, "--dry-run", "-d", help="Show the release plan without tagging"),
    rollback: bool = typer.Option(False, "--rollback", "-r", help="Delete a release tag"),
) -> None:
    """Bump the version, tag a release and push it."""
    _run(release_cmd.run, dry_run=dry_run, rollback=rollback)


# Setup


@app.command("config", rich_help_panel="Setup")
def config_command(
    show: bool = typer.Option(False, "--show", help="Print the resolved configuration"),
    init: bool = typer.Option(False, "--init", help="Create a config file with the defaults"),
    validate: bool = typer.Option(False, "--validate", help="Check the configuration"),
    global_: bool = typer.Option(False, "--global", "-g", help="Use the global config in the home directory"),
) -> None:
    """Show, create or validate configuration."""
    _run(config_cmd.run, show=show, init=init, check=validate, global_=global_, needs_repo=False)


@app.command("init", rich_help_panel="Setup")
def init_command() -> None:
    """Initialise a new repository."""
    _run(init_cmd.run, needs_repo=False)


# Interactive menu

MENU = [
    Choice("commit", "📝 Commit", "Create a conventional commit"),
    Choice("status", "📊 Status", "Repository status and quick actions"),
    Choice("staging", "📋 Staging", "Stage, unstage, reset or restore files"),
    Choice("branch", "🌿 Branch", "Manage branches"),
    Choice("log", "📜 Log", "Browse commit history"),
    Choice("search", "🔍 Search", "Search files and history"),
    Choice("remote", "🌐 Remote", "Fetch, pull, push and manage remotes"),
    Choice("merge", "🔀 Merge", "Merge a branch"),
    Choice("cherry-pick", "🍒 Cherry-pick", "Apply a commit from another branch"),
    Choice("reset", "⏪ Reset", "Move HEAD back"),
    Choice("revert", "↩️  Revert", "Undo commits with new commits"),
    Choice("rebase", "📐 Rebase", "Rebase the current branch"),
    Choice("clean", "🧹 Clean", "Untracked files and maintenance"),
    Choice("submodules", "📦 Submodules", "Manage submodules"),
    Choice("worktree", "🌳 Worktree", "Manage worktrees"),
    Choice("release", "🚀 Release", "Tag a new version"),
    Choice("config", "⚙️  Config", "Show or create configuration"),
    Choice("init", "🆕 Init", "Initialise a repository"),
    Choice("exit", "👋 Exit", ""),
]


def interactive_menu() -> None:
    """Ask which command to run and run it once."""
    prompter = Prompter(console)
    prompter.intro(f"wgit {__version__}")
    try:
        choice = prompter.select("What would you like to do?", MENU)
    except PromptCancelled:
        prompter.cancelled()
        return

    actions = {
        "commit": lambda: _run(run_commit),
        "status": lambda: _run(status_cmd.run),
        "staging": lambda: _run(staging_cmd.run),
        "branch": lambda: _run(branch_cmd.run),
        "log": lambda: _run(log_cmd.run),
        "search": lambda: _run(search_cmd.run),
        "remote": lambda: _run(remote_cmd.run),
        "merge": lambda: _run(merge_cmd.run),
        "cherry-pick": lambda: _run(run_commit, CommitOptions(mode=CommitMode.CHERRY_PICK)),
        "reset": lambda: _run(reset_cmd.run),
        "revert": lambda: _run(revert_cmd.run),
        "rebase": lambda: _run(rebase_cmd.run),
        "clean": lambda: _run(clean_cmd.run),
        "submodules": lambda: _run(submodules_cmd.run),
        "worktree": lambda: _run(worktree_cmd.run),
        "release": lambda: _run(release_cmd.run),
        "config": lambda: _run(config_cmd.run, needs_repo=False),
        "init": lambda: _run(init_cmd.run, needs_repo=False),
    }
    if choice in actions:
        actions[choice]()


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
