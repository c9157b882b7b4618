"""Conventional commit message assembly."""

from __future__ import annotations

from wgit.models import CommitMessage, CommitType

COMMIT_TYPES: tuple[CommitType, ...] = (
    CommitType("feat", "feat", "A new feature"),
    CommitType("fix", "fix", "A bug fix"),
    CommitType("docs", "docs", "Documentation only changes"),
    CommitType("style", "style", "Changes that do not affect the meaning of the code"),
    CommitType("refactor", "refactor", "A code change that neither fixes a bug nor adds a feature"),
    CommitType("perf", "perf", "A code change that improves performance"),
    CommitType("test", "test", "Adding missing tests or correcting existing tests"),
    CommitType("build", "build", "Changes that affect the build system or external dependencies"),
    CommitType("ci", "ci", "Changes to CI configuration files and scripts"),
    CommitType("chore", "chore", "Other changes that don't modify src or test files"),
    CommitType("revert", "revert", "Reverts a previous commit"),
    CommitType("release", "release", "Create a release commit"),
    CommitType("config", "config", "Changes to configuration files"),
    CommitType("security", "security", "Security related changes"),
)


def build_commit_message(
    type: str,
    scope: str | None,
    subject: str,
    breaking: bool,
    breaking_description: str | None = None,
) -> str:
    """Build a conventional commit message.

    Args:
        type: Conventional commit type, e.g. "feat".
        scope: Optional scope, ignored when blank.
        subject: Short description of the change.
        breaking: Whether the change is breaking.
        breaking_description: Footer text, only used when `breaking` is set.

    Returns:
        The message text, `type(scope): subject` with an optional
        `BREAKING CHANGE:` footer.
    """
    message = type
    if scope and scope.strip():
        message += f"({scope.strip()})"
    message += f": {subject}"

    if breaking and breaking_description and breaking_description.strip():
        message += f"\n\nBREAKING CHANGE: {breaking_description.strip()}"

    return message


def render_commit_message(message: CommitMessage) -> str:
    """Render a CommitMessage model with build_commit_message."""
    return build_commit_message(
        message.type,
        message.scope,
        message.subject,
        message.breaking,
        message.breaking_description,
    )


def commit_types_for(allowed: list[str] | None) -> list[CommitType]:
    """Restrict the commit type table to the configured types.

    Types not in the built-in table are kept with an empty hint so a config
    can introduce its own.
    """
    if not allowed:
        return list(COMMIT_TYPES)
    known = {t.value: t for t in COMMIT_TYPES}
    return [known.get(value, CommitType(value, value, "")) for value in allowed]
