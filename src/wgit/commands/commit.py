"""Commit command: conventional commits, optionally drafted by AI.

The flow checks for pending changes, picks a mode (from the command line or
a menu), collects the message for that mode and then commits. Nothing is
written to the repository until the message has been collected and, for
AI-drafted messages, confirmed.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from enum import Enum

from git import Repo
from rich.markup import escape
from rich.panel import Panel

from wgit.commit_message import build_commit_message, commit_types_for
from wgit.config import Config, load_config
from wgit.git_ops import (
    cherry_pick as git_cherry_pick,
    create_commit,
    get_staged_diff,
    get_staged_files,
    get_status_entries,
    has_changes,
    stage_files,
)
from wgit.models import AIProviderConfig, ChangeGroup, CommitMode, CommitOptions, FileStatusEntry
from wgit.parsers import group_changes
from wgit.prompts import Choice, PromptCancelled, Prompter
from wgit.text_generation import enhance_commit_message, generate_commit_message

log = logging.getLogger(__name__)

Generate = Callable[..., str]
Enhance = Callable[[str, AIProviderConfig], str]


class CommitOutcome(str, Enum):
    COMMITTED = "committed"
    NOTHING_TO_DO = "nothing_to_do"
    CANCELLED = "cancelled"
    DECLINED = "declined"


MODE_CHOICES = [
    Choice(CommitMode.AUTOCOMMIT.value, "Autocommit", "Auto stage and commit all changes with AI"),
    Choice(CommitMode.PROMPT_ENHANCE.value, "Prompt Enhance", "Enhance your commit message with AI"),
    Choice(CommitMode.AI_GENERATE.value, "AI Generate", "Let AI generate commit message from staged changes"),
    Choice(CommitMode.INTERACTIVE.value, "Interactive", "Create commit message step by step"),
]


def resolve_mode(options: CommitOptions) -> CommitMode | None:
    """Mode implied by the command line, or None if the user must choose."""
    if options.mode is not None:
        return options.mode
    if options.no_ai:
        return CommitMode.INTERACTIVE
    if options.ai:
        return CommitMode.AI_GENERATE
    return None


class CommitFlow:
    """One run of the commit command."""

    def __init__(
        self,
        repo: Repo,
        prompter: Prompter,
        options: CommitOptions,
        config: Config,
        generate: Generate = generate_commit_message,
        enhance: Enhance = enhance_commit_message,
    ):
        self.repo = repo
        self.prompter = prompter
        self.options = options
        self.config = config
        self.generate = generate
        self.enhance = enhance

    @property
    def provider(self) -> AIProviderConfig:
        return self.config.ai.provider

    def run(self) -> CommitOutcome:
        if self.options.mode is not CommitMode.CHERRY_PICK:
            with self.prompter.spinner("Checking for changes"):
                pending = has_changes(self.repo)
            if not pending:
                self.prompter.info("No changes to commit")
                return CommitOutcome.NOTHING_TO_DO

        if self.options.message:
            return self._commit(self.options.message)

        mode = resolve_mode(self.options)
        if mode is None:
            if self.config.ai.enabled and self.config.commit.use_ai:
                mode = CommitMode(self.prompter.select("Select commit mode", MODE_CHOICES))
            else:
                mode = CommitMode.INTERACTIVE

        log.debug("Commit mode: %s", mode.value)
        return self._handlers[mode](self)

    # Modes

    def autocommit(self) -> CommitOutcome:
        entries = get_status_entries(self.repo)
        groups = group_changes(entries)
        if not groups:
            self.prompter.info("No changes to commit")
            return CommitOutcome.NOTHING_TO_DO

        for group in groups:
            paths = _pathspecs(group, entries)
            try:
                with self.prompter.spinner(f"Processing {group.commit_type} changes"):
                    stage_files(self.repo, _unstaged(group, entries))
                    diff = get_staged_diff(self.repo, paths)
                    message = self.generate(diff, self.provider, self.config.ai.commit_prompt)
                    short_hash = create_commit(self.repo, message, paths)
            except Exception:
                self.prompter.error(f"Failed to commit {group.commit_type} changes")
                raise
            self.prompter.success(
                f"{group.commit_type} changes committed: {escape(_first_line(message))} ([cyan]{short_hash}[/cyan])"
            )

        self.prompter.success("Auto-commit completed successfully!")
        return CommitOutcome.COMMITTED

    def ai_generate(self) -> CommitOutcome:
        if not self._has_staged():
            return CommitOutcome.NOTHING_TO_DO

        diff = get_staged_diff(self.repo)
        with self.prompter.spinner("Generating commit message"):
            message = self.generate(diff, self.provider, self.config.ai.commit_prompt)
        return self._confirm_and_commit(message, "AI commit created successfully")

    def prompt_enhance(self) -> CommitOutcome:
        if not self._has_staged():
            return CommitOutcome.NOTHING_TO_DO

        draft = self.prompter.text(
            "Enter your commit message (any language)",
            placeholder="add new feature, fix bug, etc.",
            validate=_required("Message is required"),
        )
        with self.prompter.spinner("Enhancing commit message"):
            message = self.enhance(draft, self.provider)
        return self._confirm_and_commit(message, "Enhanced commit created successfully")

    def interactive(self) -> CommitOutcome:
        if not self._has_staged():
            return CommitOutcome.NOTHING_TO_DO

        commit_type = self.options.type
        if not commit_type:
            types = commit_types_for(self.config.commit.types)
            commit_type = self.prompter.select(
                "Select commit type",
                [Choice(t.value, f"{t.label} - {t.hint}" if t.hint else t.label) for t in types],
            )

        scope = self.options.scope
        if scope is None:
            scope = self.prompter.text(
                "Scope (optional)",
                placeholder="e.g., api, ui, auth",
                validate=_required("Scope is required") if self.config.commit.require_scope else None,
            )

        max_length = self.config.commit.max_message_length
        subject = self.prompter.text(
            "Commit message",
            placeholder="Brief description of changes",
            validate=_subject_validator(max_length),
        )

        breaking = self.options.breaking
        if breaking is None:
            breaking = self.prompter.confirm("Is this a breaking change?", default=False)

        breaking_description = ""
        if breaking:
            breaking_description = self.prompter.text(
                "Breaking change description",
                placeholder="Describe the breaking change",
            )

        message = build_commit_message(commit_type, scope, subject, breaking, breaking_description)
        return self._commit(message, "Interactive commit created successfully")

    def cherry_pick(self) -> CommitOutcome:
        commit_hash = self.prompter.text(
            "Enter commit hash to cherry-pick",
            placeholder="abc123def",
            validate=_hash_validator,
        )
        if not self.prompter.confirm(f"Cherry-pick commit {escape(commit_hash)}?", default=True):
            self.prompter.cancelled("Cherry-pick cancelled")
            return CommitOutcome.DECLINED

        with self.prompter.spinner(f"Cherry-picking commit {commit_hash}"):
            git_cherry_pick(self.repo, commit_hash)
        self.prompter.success(f"Commit {escape(commit_hash)} cherry-picked successfully")
        return CommitOutcome.COMMITTED

    _handlers = {
        CommitMode.AUTOCOMMIT: autocommit,
        CommitMode.AI_GENERATE: ai_generate,
        CommitMode.PROMPT_ENHANCE: prompt_enhance,
        CommitMode.INTERACTIVE: interactive,
        CommitMode.CHERRY_PICK: cherry_pick,
    }

    # Helpers

    def _has_staged(self) -> bool:
        if get_staged_files(self.repo):
            return True
        self.prompter.warning("No staged changes to commit")
        return False

    def _confirm_and_commit(self, message: str, success: str) -> CommitOutcome:
        self.prompter.console.print(Panel(escape(message), title="Commit message", border_style="cyan"))
        if not self.prompter.confirm("Proceed with this commit?", default=True):
            self.prompter.cancelled("Commit cancelled")
            return CommitOutcome.DECLINED
        return self._commit(message, success)

    def _commit(self, message: str, success: str = "Commit created successfully") -> CommitOutcome:
        short_hash = create_commit(self.repo, message)
        self.prompter.success(f"{success}: {escape(_first_line(message))} ([cyan]{short_hash}[/cyan])")
        return CommitOutcome.COMMITTED


def run_commit(
    repo: Repo,
    prompter: Prompter,
    options: CommitOptions | None = None,
    config: Config | None = None,
    generate: Generate = generate_commit_message,
    enhance: Enhance = enhance_commit_message,
) -> CommitOutcome:
    """Run the commit flow. Cancelling any prompt leaves the repository untouched."""
    flow = CommitFlow(repo, prompter, options or CommitOptions(), config or load_config(), generate, enhance)
    try:
        return flow.run()
    except PromptCancelled:
        prompter.cancelled()
        return CommitOutcome.CANCELLED


def _pathspecs(group: ChangeGroup, entries: list[FileStatusEntry]) -> list[str]:
    # Renames need the old path too so the deletion lands in the same commit
    originals = {e.path: e.original_path for e in entries if e.original_path}
    paths: list[str] = []
    for path in group.files:
        if path in originals:
            paths.append(originals[path])
        paths.append(path)
    return paths


def _unstaged(group: ChangeGroup, entries: list[FileStatusEntry]) -> list[str]:
    # git add rejects paths already removed from the index
    codes = {e.path: e.code for e in entries}
    return [path for path in group.files if codes.get(path, "  ")[1] != " "]


def _first_line(message: str) -> str:
    return message.strip().splitlines()[0] if message.strip() else ""


def _required(error: str):
    def validate(value: str) -> str | None:
        return None if value else error
    return validate


def _subject_validator(max_length: int):
    def validate(value: str) -> str | None:
        if not value:
            return "Message is required"
        if len(value) > max_length:
            return f"Message should be {max_length} characters or less"
        return None
    return validate


def _hash_validator(value: str) -> str | None:
    if not value:
        return "Commit hash is required"
    if len(value) < 4:
        return "Commit hash is too short"
    return None
