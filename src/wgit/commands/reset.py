"""Reset command."""

from __future__ import annotations

from git import Repo
from rich.markup import escape

from wgit.git_ops import run_git
from wgit.prompts import Choice, Prompter

MODES = [
    Choice("soft", "🔄 Soft reset", "Keep changes staged"),
    Choice("mixed", "📋 Mixed reset", "Keep changes unstaged"),
    Choice("hard", "⚠️  Hard reset", "Discard all changes"),
    Choice("commit", "🎯 Reset to specific commit", "Choose target and reset type"),
]

WARNINGS = {
    "soft": "Changes after the target will stay staged.",
    "mixed": "Changes after the target will be unstaged.",
    "hard": "All changes after the target will be lost!",
}


def reset_with_args(repo: Repo, prompter: Prompter, args: list[str]) -> None:
    """Pass raw arguments to `git reset` after confirmation."""
    joined = " ".join(args)
    if not prompter.confirm(f"Run git reset {escape(joined)}? This may lose changes!", default=False):
        prompter.cancelled("Reset cancelled")
        return
    output = run_git(repo, "reset", *args)
    prompter.success("Reset completed")
    prompter.output(output)


def _reset(repo: Repo, prompter: Prompter, mode: str, target: str) -> None:
    if not prompter.confirm(
        f"{WARNINGS[mode]} Continue with {mode} reset to {escape(target)}?",
        default=mode != "hard",
    ):
        prompter.cancelled("Reset cancelled")
        return
    with prompter.spinner(f"Resetting to {target}"):
        output = run_git(repo, "reset", f"--{mode}", target)
    prompter.success(f"{mode.capitalize()} reset to {escape(target)} completed")
    prompter.output(output)


def _hash_required(value: str) -> str | None:
    return None if value else "Commit hash is required"


def run(repo: Repo, prompter: Prompter, args: list[str] | None = None) -> None:
    if args:
        reset_with_args(repo, prompter, args)
        return

    mode = prompter.select("Select reset type", MODES)
    if mode == "commit":
        target = prompter.text("Enter commit hash", validate=_hash_required)
        mode = prompter.select("Select reset type", MODES[:3])
    else:
        target = prompter.text("Enter commit (leave empty for HEAD~1)", placeholder="HEAD~1") or "HEAD~1"
    _reset(repo, prompter, mode, target)
