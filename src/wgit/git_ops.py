"""Git operations layer for wgit.

Every call goes through `run_git`, which runs `git <args>` in the repository
working tree and turns a non-zero exit into a GitError.
"""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path

from git import Repo
from git.exc import GitCommandError, InvalidGitRepositoryError, NoSuchPathError

from wgit.models import (
    BranchInfo,
    CommitRecord,
    FileStatusEntry,
    RemoteInfo,
    RepoStatus,
    SearchHit,
    SearchOptions,
    SubmoduleInfo,
    WorktreeInfo,
)
from wgit.parsers import (
    LOG_FORMAT,
    parse_branches,
    parse_grep_output,
    parse_log_output,
    parse_remotes,
    parse_status,
    parse_submodules,
    parse_worktrees,
    unquote_path,
)

log = logging.getLogger(__name__)

# `git grep` and `git log --grep` use exit status 1 for "no matches"
NO_MATCH_STATUS = 1


class GitError(Exception):
    """Custom exception for git operation errors."""

    def __init__(self, message: str, status: int | None = None, stderr: str = ""):
        super().__init__(message)
        self.status = status
        self.stderr = stderr


def get_repo(path: str | Path = ".") -> Repo:
    """Get the git repository at the given path.

    Args:
        path: Path inside the repository. Defaults to current directory.

    Returns:
        The git Repo object.

    Raises:
        GitError: If the path is not a valid git repository.
    """
    try:
        return Repo(path, search_parent_directories=True)
    except (InvalidGitRepositoryError, NoSuchPathError):
        raise GitError(f"Not a git repository: {path}")


def get_repo_root(repo: Repo) -> Path:
    """Get the root directory of the repository."""
    return Path(repo.working_dir)


def is_inside_repo(path: str | Path = ".") -> bool:
    """Whether `path` is inside a git working tree."""
    try:
        get_repo(path)
    except GitError:
        return False
    return True


def init_repo(path: str | Path) -> Repo:
    """Initialise a new repository at `path`, creating it if needed."""
    log.debug("Running command: git init %s", path)
    try:
        return Repo.init(path, mkdir=True)
    except GitCommandError as e:
        raise GitError(f"Failed to initialise repository: {e}", e.status, str(e.stderr))


def run_git(repo: Repo, *args: str) -> str:
    """Run `git <args>` and return its stdout.

    Raises:
        GitError: If git exits with a non-zero status. The exit status and
            stderr are kept on the exception.
    """
    command = ["git", *args]
    log.debug("Running command: %s", " ".join(command))
    try:
        return repo.git.execute(command)
    except GitCommandError as e:
        stderr = _clean_stderr(e.stderr)
        message = stderr or f"Command failed with exit code {e.status}: {' '.join(command)}"
        raise GitError(message, status=e.status, stderr=stderr) from e


def _clean_stderr(stderr: object) -> str:
    # GitPython wraps stderr as "stderr: '...'"
    text = str(stderr or "").strip()
    if text.startswith("stderr:"):
        text = text[len("stderr:"):].strip().strip("'")
    return text.strip()


def git_or_default(repo: Repo, default: str, *args: str) -> str:
    """Run `git <args>`, returning `default` if git fails.

    Used for lookups that legitimately fail, such as a branch without an
    upstream or a repository without an origin remote.
    """
    try:
        return run_git(repo, *args)
    except GitError as e:
        log.debug("git %s failed, using %r: %s", " ".join(args), default, e)
        return default


def run_interactive(repo: Repo, *args: str) -> None:
    """Run a git command attached to the terminal, for editor-driven commands.

    Raises:
        GitError: If git exits with a non-zero status.
    """
    command = ["git", *args]
    log.debug("Running interactive command: %s", " ".join(command))
    result = subprocess.run(command, cwd=repo.working_dir, check=False)
    if result.returncode != 0:
        raise GitError(
            f"Command failed with exit code {result.returncode}: {' '.join(command)}",
            status=result.returncode,
        )


# Status and changes


def get_status_output(repo: Repo) -> str:
    """Raw `git status --porcelain` output."""
    return run_git(repo, "status", "--porcelain")


def get_status_entries(repo: Repo) -> list[FileStatusEntry]:
    """Get all uncommitted changes (staged, unstaged and untracked)."""
    return parse_status(get_status_output(repo))


def has_changes(repo: Repo) -> bool:
    """Whether the working tree or index has anything to commit."""
    return bool(get_status_output(repo).strip())


def get_staged_files(repo: Repo) -> list[str]:
    """Paths currently staged in the index."""
    output = run_git(repo, "diff", "--cached", "--name-only")
    return [unquote_path(line) for line in output.splitlines() if line]


def get_staged_diff(repo: Repo, paths: list[str] | None = None) -> str:
    """Diff of the index against HEAD, optionally limited to `paths`."""
    args = ["diff", "--cached"]
    if paths:
        args += ["--", *paths]
    return run_git(repo, *args)


def get_diff(repo: Repo, file_path: str | None = None) -> str:
    """Get the diff of uncommitted changes for one file or the whole tree."""
    if file_path:
        return run_git(repo, "diff", "HEAD", "--", file_path)
    return run_git(repo, "diff", "HEAD")


def stage_files(repo: Repo, file_paths: list[str]) -> None:
    """Stage specific files, including deletions."""
    if file_paths:
        run_git(repo, "add", "-A", "--", *file_paths)


def stage_all(repo: Repo) -> None:
    run_git(repo, "add", ".")


def unstage_files(repo: Repo, file_paths: list[str]) -> None:
    """Remove files from the index, keeping working tree changes."""
    if file_paths:
        run_git(repo, "reset", "HEAD", "--", *file_paths)


def unstage_all(repo: Repo) -> None:
    """Unstage all staged files (reset index to HEAD)."""
    run_git(repo, "reset", "HEAD")


def restore_files(repo: Repo, file_paths: list[str] | None = None) -> None:
    """Discard working tree changes for `file_paths`, or everything."""
    if file_paths:
        run_git(repo, "restore", "--", *file_paths)
    else:
        run_git(repo, "restore", ".")


def create_commit(repo: Repo, message: str, paths: list[str] | None = None) -> str:
    """Create a commit with the staged changes.

    Args:
        repo: The git Repo object.
        message: The commit message.
        paths: If given, commit only these paths.

    Returns:
        The short hash of the new commit.
    """
    args = ["commit", "-m", message]
    if paths:
        args += ["--", *paths]
    run_git(repo, *args)
    return run_git(repo, "rev-parse", "--short=7", "HEAD")


def cherry_pick(repo: Repo, commit_hash: str) -> str:
    return run_git(repo, "cherry-pick", commit_hash)


# Branches, remotes and summary


def current_branch(repo: Repo) -> str:
    return run_git(repo, "branch", "--show-current")


def list_branches(repo: Repo, include_remote: bool = False) -> list[BranchInfo]:
    args = ["branch", "-a"] if include_remote else ["branch"]
    return parse_branches(run_git(repo, *args))


def upstream_of(repo: Repo) -> str | None:
    upstream = git_or_default(repo, "", "rev-parse", "--abbrev-ref", "--symbolic-full-name", "@{u}")
    return upstream or None


def ahead_behind(repo: Repo) -> tuple[int, int]:
    """Commits ahead of and behind the upstream, (0, 0) without one."""
    ahead = git_or_default(repo, "0", "rev-list", "--count", "@{u}..HEAD")
    behind = git_or_default(repo, "0", "rev-list", "--count", "HEAD..@{u}")
    return _to_int(ahead), _to_int(behind)


def _to_int(value: str) -> int:
    try:
        return int(value.strip())
    except ValueError:
        return 0


def list_remotes(repo: Repo) -> list[RemoteInfo]:
    return parse_remotes(run_git(repo, "remote", "-v"))


def origin_display(repo: Repo) -> str:
    """Short form of the origin URL, or "No remote"."""
    url = git_or_default(repo, "No remote", "remote", "get-url", "origin")
    return url.replace("https://github.com/", "github:").removesuffix(".git")


def get_repo_status(repo: Repo) -> RepoStatus:
    """Collect everything the status view shows."""
    ahead, behind = ahead_behind(repo)
    return RepoStatus(
        branch=current_branch(repo),
        last_commit=git_or_default(repo, "No commits yet", "log", "-1", "--pretty=format:%h %s"),
        remote=origin_display(repo),
        ahead=ahead,
        behind=behind,
        entries=get_status_entries(repo),
    )


# History and search


def get_recent_commits(repo: Repo, n: int = 100) -> list[CommitRecord]:
    """Get recent commit history, newest first. Empty for a fresh repository."""
    output = git_or_default(repo, "", "log", "-n", str(n), f"--pretty=format:{LOG_FORMAT}")
    return parse_log_output(output)


def latest_tag(repo: Repo, default: str = "v0.0.0") -> str:
    return git_or_default(repo, default, "describe", "--tags", "--abbrev=0")


def build_grep_args(term: str, options: SearchOptions | None = None) -> list[str]:
    """Build the argument list for `git grep`."""
    options = options or SearchOptions()
    args = ["grep", "-n"]
    if options.ignore_case:
        args.append("-i")
    if options.whole_word:
        args.append("-w")
    if options.invert_match:
        args.append("-v")
    if options.context > 0:
        args.append(f"-C{options.context}")
    args += ["-e", term]
    if options.file_pattern:
        args += ["--", options.file_pattern]
    return args


def grep(repo: Repo, term: str, options: SearchOptions | None = None) -> list[SearchHit]:
    """Search tracked files. No matches yields an empty list.

    Raises:
        GitError: For any failure other than "no matches".
    """
    try:
        output = run_git(repo, *build_grep_args(term, options))
    except GitError as e:
        if e.status == NO_MATCH_STATUS:
            return []
        raise
    return parse_grep_output(output)


def search_history(repo: Repo, term: str, ignore_case: bool = False) -> list[tuple[str, str]]:
    """Commits whose message matches `term`, as (short hash, subject) pairs."""
    args = ["log", f"--grep={term}", "--oneline"]
    if ignore_case:
        args.append("-i")
    output = run_git(repo, *args)
    results = []
    for line in output.splitlines():
        if not line.strip():
            continue
        short_hash, _, subject = line.partition(" ")
        results.append((short_hash, subject))
    return results


def find_files(repo: Repo, pattern: str) -> list[str]:
    """Tracked files whose path contains `pattern`."""
    output = run_git(repo, "ls-files", "--", f"*{pattern}*")
    return [unquote_path(line) for line in output.splitlines() if line]


# Submodules and worktrees


def list_submodules(repo: Repo) -> list[SubmoduleInfo]:
    return parse_submodules(run_git(repo, "submodule", "status"))


def list_worktrees(repo: Repo) -> list[WorktreeInfo]:
    return parse_worktrees(git_or_default(repo, "", "worktree", "list"))


def list_untracked(repo: Repo) -> list[str]:
    """Untracked files and directories that `git clean -fd` would remove."""
    output = run_git(repo, "clean", "-nd")
    prefix = "Would remove "
    return [unquote_path(line[len(prefix):]) for line in output.splitlines() if line.startswith(prefix)]


def clean_untracked(repo: Repo, paths: list[str] | None = None) -> str:
    """Remove untracked files and directories, all of them or only `paths`."""
    args = ["clean", "-fd"]
    if paths:
        args += ["--", *paths]
    return run_git(repo, *args)
