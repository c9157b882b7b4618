"""Search command: file contents, file names and commit history."""

from __future__ import annotations

import re

from git import Repo
from rich.markup import escape

from wgit.git_ops import find_files, grep, search_history
from wgit.models import SearchHit, SearchOptions
from wgit.parsers import group_hits_by_file
from wgit.prompts import Choice, Prompter

SEARCH_ACTIONS = [
    Choice("content", "🔍 Search Content", "Search text within files (git grep)"),
    Choice("files", "📁 Search Files", "Search files by name pattern"),
    Choice("history", "📚 Search History", "Search commit messages"),
    Choice("advanced", "⚙️ Advanced Search", "Search with custom options"),
    Choice("back", "← Back", "Return to main menu"),
]

OPTION_CHOICES = [
    Choice("ignore_case", "Ignore case (-i)", "Case insensitive search"),
    Choice("whole_word", "Whole words (-w)", "Match whole words only"),
    Choice("invert_match", "Invert match (-v)", "Show lines that do NOT match"),
]


def highlight(text: str, term: str) -> str:
    """Escape `text` for rich and highlight every case-insensitive occurrence of `term`."""
    if not term:
        return escape(text)
    parts = re.split(f"({re.escape(term)})", text, flags=re.IGNORECASE)
    return "".join(
        f"[yellow]{escape(part)}[/yellow]" if i % 2 else escape(part)
        for i, part in enumerate(parts)
    )


def display_results(prompter: Prompter, hits: list[SearchHit], term: str) -> None:
    console = prompter.console
    if not hits:
        prompter.warning("No matches found")
        return

    console.print(f"\n[bold]🔍 Found {len(hits)} matches for \"{escape(term)}\":[/bold]")
    for file, file_hits in group_hits_by_file(hits).items():
        console.print(f"\n  [blue]📄[/blue] [bold]{escape(file)}[/bold] [dim]({len(file_hits)} matches)[/dim]")
        for hit in file_hits:
            console.print(f"    [dim]{hit.line}:[/dim] {highlight(hit.text, term)}")


def ask_search_options(prompter: Prompter) -> SearchOptions:
    selected = prompter.multiselect("Search options (optional)", OPTION_CHOICES)
    context = prompter.text("Context lines (optional)", placeholder="0", validate=_number_or_empty)
    file_pattern = prompter.text("File pattern (optional)", placeholder="*.py, *.md, etc.")
    return SearchOptions(
        ignore_case="ignore_case" in selected,
        whole_word="whole_word" in selected,
        invert_match="invert_match" in selected,
        context=int(context) if context else 0,
        file_pattern=file_pattern or None,
    )


def search_content(repo: Repo, prompter: Prompter, term: str, options: SearchOptions | None = None) -> list[SearchHit]:
    with prompter.spinner(f"Searching for \"{term}\""):
        hits = grep(repo, term, options)
    display_results(prompter, hits, term)
    return hits


def search_file_names(repo: Repo, prompter: Prompter, pattern: str) -> list[str]:
    with prompter.spinner(f"Searching files matching \"{pattern}\""):
        files = find_files(repo, pattern)
    if not files:
        prompter.warning(f"No files found matching \"{escape(pattern)}\"")
        return files
    prompter.console.print(f"\n[bold]📁 Files matching \"{escape(pattern)}\":[/bold]")
    for file in files:
        prompter.console.print(f"  [blue]📄[/blue] {highlight(file, pattern)}")
    return files


def search_commit_history(repo: Repo, prompter: Prompter, term: str, ignore_case: bool = False) -> None:
    with prompter.spinner(f"Searching \"{term}\" in git history"):
        commits = search_history(repo, term, ignore_case)
    if not commits:
        prompter.warning(f"No commits found matching \"{escape(term)}\"")
        return
    prompter.console.print(f"\n[bold]📚 Commits matching \"{escape(term)}\":[/bold]")
    for short_hash, subject in commits:
        prompter.console.print(f"  [yellow]{short_hash}[/yellow] {highlight(subject, term)}")


def run(repo: Repo, prompter: Prompter, term: str | None = None, options: SearchOptions | None = None) -> None:
    """Search directly when a term is given, otherwise loop over the search menu."""
    if term:
        search_content(repo, prompter, term, options)
        return

    while True:
        action = prompter.select("What would you like to search?", SEARCH_ACTIONS)
        if action == "back":
            return
        if action == "content":
            term = prompter.text("Enter search term", placeholder="function, class name, etc.", validate=_required)
            search_content(repo, prompter, term)
        elif action == "files":
            pattern = prompter.text("Enter file name pattern", placeholder="component, utils, etc.", validate=_required)
            search_file_names(repo, prompter, pattern)
        elif action == "history":
            term = prompter.text("Enter commit message search term", placeholder="fix, feat, refactor, etc.", validate=_required)
            search_commit_history(repo, prompter, term)
        elif action == "advanced":
            term = prompter.text("Enter search term", placeholder="function, class name, etc.", validate=_required)
            search_content(repo, prompter, term, ask_search_options(prompter))
        prompter.console.print()


def _required(value: str) -> str | None:
    return None if value else "This field is required"


def _number_or_empty(value: str) -> str | None:
    if value and not value.isdigit():
        return "Please enter a valid number"
    return None
