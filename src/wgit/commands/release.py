"""Release command: bump the version, tag, changelog and push.

Versions are read from and written as tags of the form ``vMAJOR.MINOR.PATCH``
with an optional ``-<pre>.<n>`` suffix.
"""

from __future__ import annotations

import logging
import re

from git import Repo
from rich.markup import escape
from rich.panel import Panel

from wgit.git_ops import current_branch, get_status_output, latest_tag, run_git
from wgit.prompts import Choice, Prompter

log = logging.getLogger(__name__)

DEFAULT_VERSION = "v0.0.0"

VERSION_RE = re.compile(r"^v?(\d+)\.(\d+)\.(\d+)(?:-([0-9A-Za-z]+)\.(\d+))?$")

BUMPS = [
    Choice("patch", "🐛 Patch", "Bug fixes (0.0.X)"),
    Choice("minor", "✨ Minor", "New features (0.X.0)"),
    Choice("major", "💥 Major", "Breaking changes (X.0.0)"),
    Choice("pre", "🧪 Pre-release", "alpha, beta or rc"),
    Choice("custom", "✏️  Custom", "Enter a version"),
]

PRE_TYPES = [
    Choice("alpha", "alpha"),
    Choice("beta", "beta"),
    Choice("rc", "rc", "Release candidate"),
]

TAG_TYPES = [
    Choice("annotated", "Annotated", "Tag object with a message (recommended)"),
    Choice("lightweight", "Lightweight", "Plain pointer to the commit"),
]


def bump_version(tag: str, bump: str, pre_type: str | None = None) -> str:
    """Compute the next version tag.

    Args:
        tag: Current version, with or without the leading ``v``.
        bump: One of ``patch``, ``minor``, ``major`` or ``pre``.
        pre_type: Pre-release label for ``pre`` bumps, ``alpha`` if unset.

    A ``pre`` bump on a release starts the next patch at ``<pre_type>.1``.
    On an existing pre-release of the same label the counter increments;
    switching label restarts the counter for the same version.

    Raises:
        ValueError: If `tag` is not a version or `bump` is unknown.
    """
    match = VERSION_RE.match(tag.strip())
    if not match:
        raise ValueError(f"Not a version tag: {tag}")
    major, minor, patch = (int(match.group(i)) for i in (1, 2, 3))
    current_pre, current_number = match.group(4), match.group(5)

    if bump == "major":
        return f"v{major + 1}.0.0"
    if bump == "minor":
        return f"v{major}.{minor + 1}.0"
    if bump == "patch":
        # a pre-release already names the upcoming patch
        if current_pre:
            return f"v{major}.{minor}.{patch}"
        return f"v{major}.{minor}.{patch + 1}"
    if bump == "pre":
        pre_type = pre_type or "alpha"
        if current_pre is None:
            return f"v{major}.{minor}.{patch + 1}-{pre_type}.1"
        number = int(current_number) + 1 if current_pre == pre_type else 1
        return f"v{major}.{minor}.{patch}-{pre_type}.{number}"
    raise ValueError(f"Unknown version bump: {bump}")


def normalize_version(version: str) -> str:
    version = version.strip()
    return version if version.startswith("v") else f"v{version}"


def _valid_version(value: str) -> str | None:
    return None if VERSION_RE.match(value) else "Use the form 1.2.3 or 1.2.3-beta.1"


def changelog_since(repo: Repo, previous: str | None) -> str:
    """One bullet per commit since `previous`, or the whole history."""
    revision = f"{previous}..HEAD" if previous else "HEAD"
    return run_git(repo, "log", "--pretty=format:- %s (%an)", revision)


def run(repo: Repo, prompter: Prompter, dry_run: bool = False, rollback: bool = False) -> None:
    if rollback:
        rollback_release(repo, prompter)
        return

    prompter.intro("🚀 Release" + (" (dry run)" if dry_run else ""))
    branch = current_branch(repo)
    previous = latest_tag(repo, default="") or None
    current = previous or DEFAULT_VERSION
    prompter.info(f"Current branch: {escape(branch)}")
    prompter.info(f"Latest version: {escape(current)}")

    status = get_status_output(repo)
    if status.strip():
        prompter.error("Working tree has uncommitted changes. Commit or stash them first.")
        prompter.output(status)
        return

    bump = prompter.select("Select version bump", BUMPS, default="patch")
    if bump == "custom":
        new_version = normalize_version(prompter.text("Enter version", placeholder="1.2.3", validate=_valid_version))
    elif bump == "pre":
        pre_type = prompter.select("Pre-release type", PRE_TYPES)
        new_version = bump_version(current, bump, pre_type)
    else:
        new_version = bump_version(current, bump)
    tag_type = prompter.select("Tag type", TAG_TYPES, default="annotated")

    release_branch = None
    if prompter.confirm(f"Create a release branch release/{escape(new_version)}?", default=False):
        release_branch = f"release/{new_version}"

    prompter.console.print(Panel(
        f"[bold]{escape(current)}[/bold] → [bold green]{escape(new_version)}[/bold green]\n"
        f"Tag: {tag_type}" + (f"\nBranch: {escape(release_branch)}" if release_branch else ""),
        title="Release Plan",
        border_style="blue",
    ))
    if not prompter.confirm("Create this release?", default=True):
        prompter.cancelled("Release cancelled")
        return

    if dry_run:
        prompter.info("Dry run: no branch or tag was created")
        prompter.output(changelog_since(repo, previous))
        return

    if release_branch:
        run_git(repo, "checkout", "-b", release_branch)
        prompter.success(f"Created branch {escape(release_branch)}")

    if tag_type == "annotated":
        run_git(repo, "tag", "-a", new_version, "-m", f"Release {new_version}")
    else:
        run_git(repo, "tag", new_version)
    log.info("Tagged %s", new_version)
    prompter.success(f"Created tag {escape(new_version)}")

    if prompter.confirm("Show changelog since the previous release?", default=True):
        prompter.console.print(f"\n[bold]Changes in {escape(new_version)}:[/bold]")
        prompter.output(changelog_since(repo, previous))

    if prompter.confirm("Push the tag to origin?", default=False):
        with prompter.spinner(f"Pushing {new_version}"):
            run_git(repo, "push", "origin", new_version)
        prompter.success(f"Pushed tag {escape(new_version)}")

    if release_branch and prompter.confirm(f"Push {escape(release_branch)} to origin?", default=False):
        with prompter.spinner(f"Pushing {release_branch}"):
            run_git(repo, "push", "--set-upstream", "origin", release_branch)
        prompter.success(f"Pushed branch {escape(release_branch)}")


def rollback_release(repo: Repo, prompter: Prompter) -> None:
    """Delete a release tag locally and optionally on origin."""
    tags = [t for t in run_git(repo, "tag", "--sort=-v:refname").splitlines() if t]
    if not tags:
        prompter.warning("No tags to roll back")
        return

    tag = prompter.select("Select release to roll back", [Choice(t, t) for t in tags[:20]])
    if not prompter.confirm(f"Delete tag {escape(tag)}?", default=False):
        prompter.cancelled("Rollback cancelled")
        return
    run_git(repo, "tag", "-d", tag)
    prompter.success(f"Deleted local tag {escape(tag)}")

    if prompter.confirm(f"Also delete {escape(tag)} from origin?", default=False):
        with prompter.spinner(f"Deleting remote tag {tag}"):
            run_git(repo, "push", "origin", "--delete", tag)
        prompter.success(f"Deleted remote tag {escape(tag)}")
