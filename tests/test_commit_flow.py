"""Tests for the commit command flow, driven by scripted prompts."""

import pytest

from wgit.commands.commit import CommitOutcome, resolve_mode, run_commit
from wgit.git_ops import get_staged_files, get_status_entries, stage_files
from wgit.models import CommitMode, CommitOptions
from wgit.prompts import PromptCancelled


def commit_count(repo):
    return len(list(repo.iter_commits()))


def head_message(repo):
    return repo.head.commit.message.strip()


def no_ai(*args, **kwargs):
    raise AssertionError("AI should not be called")


@pytest.fixture
def staged_repo(repo_with_commit, tmp_path):
    """A repo with one staged new file."""
    (tmp_path / "feature.py").write_text("def feature():\n    return 1\n")
    stage_files(repo_with_commit, ["feature.py"])
    return repo_with_commit


class TestResolveMode:
    """Tests for resolve_mode function."""

    def test_explicit_mode_wins(self):
        options = CommitOptions(ai=True, mode=CommitMode.AUTOCOMMIT)
        assert resolve_mode(options) is CommitMode.AUTOCOMMIT

    def test_no_ai_is_interactive(self):
        assert resolve_mode(CommitOptions(ai=True, no_ai=True)) is CommitMode.INTERACTIVE

    def test_ai_flag(self):
        assert resolve_mode(CommitOptions(ai=True)) is CommitMode.AI_GENERATE

    def test_unresolved(self):
        assert resolve_mode(CommitOptions()) is None


class TestNothingToCommit:
    """The flow must not touch a clean repository."""

    def test_clean_tree(self, repo_with_commit, make_prompter, config):
        prompter = make_prompter()
        outcome = run_commit(repo_with_commit, prompter, CommitOptions(), config, no_ai, no_ai)

        assert outcome is CommitOutcome.NOTHING_TO_DO
        assert commit_count(repo_with_commit) == 1
        assert prompter.asked == []
        assert "No changes to commit" in prompter.out

    def test_unstaged_only(self, repo_with_commit, tmp_path, make_prompter, config):
        """Should warn instead of prompting when nothing is staged."""
        (tmp_path / "initial.txt").write_text("edited")
        prompter = make_prompter()

        outcome = run_commit(repo_with_commit, prompter, CommitOptions(no_ai=True), config, no_ai, no_ai)

        assert outcome is CommitOutcome.NOTHING_TO_DO
        assert "No staged changes to commit" in prompter.out
        assert commit_count(repo_with_commit) == 1


class TestInteractive:
    """Tests for the step by step mode."""

    def test_builds_message(self, staged_repo, make_prompter, config):
        prompter = make_prompter("feat", "api", "add feature", False)

        outcome = run_commit(staged_repo, prompter, CommitOptions(no_ai=True), config, no_ai, no_ai)

        assert outcome is CommitOutcome.COMMITTED
        assert head_message(staged_repo) == "feat(api): add feature"
        assert commit_count(staged_repo) == 2

    def test_flags_skip_prompts(self, staged_repo, make_prompter, config):
        """Should only ask for the subject and breaking description."""
        prompter = make_prompter("remove old api", "clients must upgrade")
        options = CommitOptions(no_ai=True, type="refactor", scope="", breaking=True)

        run_commit(staged_repo, prompter, options, config, no_ai, no_ai)

        assert head_message(staged_repo) == (
            "refactor: remove old api\n\nBREAKING CHANGE: clients must upgrade"
        )
        assert prompter.asked == ["Commit message", "Breaking change description"]

    def test_menu_when_no_mode(self, staged_repo, make_prompter, config):
        prompter = make_prompter("interactive", "fix", "", "handle empty input", False)

        run_commit(staged_repo, prompter, CommitOptions(), config, no_ai, no_ai)

        assert prompter.asked[0] == "Select commit mode"
        assert head_message(staged_repo) == "fix: handle empty input"

    def test_ai_disabled_skips_menu(self, staged_repo, make_prompter, config):
        config.commit.use_ai = False
        prompter = make_prompter("docs", "", "explain usage", False)

        run_commit(staged_repo, prompter, CommitOptions(), config, no_ai, no_ai)

        assert "Select commit mode" not in prompter.asked
        assert head_message(staged_repo) == "docs: explain usage"

    def test_cancel_leaves_repo_untouched(self, staged_repo, make_prompter, config):
        prompter = make_prompter("feat", PromptCancelled())

        outcome = run_commit(staged_repo, prompter, CommitOptions(no_ai=True), config, no_ai, no_ai)

        assert outcome is CommitOutcome.CANCELLED
        assert commit_count(staged_repo) == 1
        assert get_staged_files(staged_repo) == ["feature.py"]
        assert "Operation cancelled" in prompter.out


class TestDirectMessage:
    def test_commits_message(self, staged_repo, make_prompter, config):
        prompter = make_prompter()
        outcome = run_commit(staged_repo, prompter, CommitOptions(message="chore: direct"), config, no_ai, no_ai)

        assert outcome is CommitOutcome.COMMITTED
        assert head_message(staged_repo) == "chore: direct"
        assert prompter.asked == []


class TestAIGenerate:
    """Tests for the AI generated message mode."""

    def test_confirmed(self, staged_repo, make_prompter, config):
        seen = {}

        def generate(diff, provider, instruction=None):
            seen["diff"] = diff
            seen["provider"] = provider.provider
            return "feat: add feature function"

        prompter = make_prompter(True)
        outcome = run_commit(staged_repo, prompter, CommitOptions(ai=True), config, generate, no_ai)

        assert outcome is CommitOutcome.COMMITTED
        assert "feature.py" in seen["diff"]
        assert seen["provider"] == "openai"
        assert head_message(staged_repo) == "feat: add feature function"

    def test_declined(self, staged_repo, make_prompter, config):
        """Should not commit when the proposal is rejected."""
        prompter = make_prompter(False)
        outcome = run_commit(
            staged_repo, prompter, CommitOptions(ai=True), config,
            lambda diff, provider, instruction=None: "feat: nope", no_ai,
        )

        assert outcome is CommitOutcome.DECLINED
        assert commit_count(staged_repo) == 1
        assert get_staged_files(staged_repo) == ["feature.py"]

    def test_provider_error_propagates(self, staged_repo, make_prompter, config):
        def failing(diff, provider, instruction=None):
            raise RuntimeError("network down")

        with pytest.raises(RuntimeError, match="network down"):
            run_commit(staged_repo, make_prompter(), CommitOptions(ai=True), config, failing, no_ai)
        assert commit_count(staged_repo) == 1


class TestPromptEnhance:
    def test_enhanced_message(self, staged_repo, make_prompter, config):
        drafts = []

        def enhance(draft, provider):
            drafts.append(draft)
            return "feat: add feature helper"

        prompter = make_prompter("agregar funcion", True)
        options = CommitOptions(mode=CommitMode.PROMPT_ENHANCE)
        outcome = run_commit(staged_repo, prompter, options, config, no_ai, enhance)

        assert outcome is CommitOutcome.COMMITTED
        assert drafts == ["agregar funcion"]
        assert head_message(staged_repo) == "feat: add feature helper"


class TestAutocommit:
    """Tests for the grouped autocommit mode."""

    def test_one_commit_per_group(self, repo_with_commit, tmp_path, make_prompter, config):
        (tmp_path / "initial.txt").write_text("changed\n")
        (tmp_path / "new.txt").write_text("new\n")
        stage_files(repo_with_commit, ["new.txt"])

        def generate(diff, provider, instruction=None):
            return "feat: add new" if "new.txt" in diff else "fix: update initial"

        outcome = run_commit(
            repo_with_commit, make_prompter(), CommitOptions(mode=CommitMode.AUTOCOMMIT),
            config, generate, no_ai,
        )

        assert outcome is CommitOutcome.COMMITTED
        assert commit_count(repo_with_commit) == 3
        head = repo_with_commit.head.commit
        assert head.message.strip() == "feat: add new"
        assert set(head.stats.files) == {"new.txt"}
        assert head.parents[0].message.strip() == "fix: update initial"
        assert set(head.parents[0].stats.files) == {"initial.txt"}
        assert get_status_entries(repo_with_commit) == []

    def test_rename_committed_whole(self, repo_with_commit, make_prompter, config):
        """Should include the removed path of a rename in its commit."""
        repo_with_commit.git.mv("initial.txt", "renamed.txt")

        run_commit(
            repo_with_commit, make_prompter(), CommitOptions(mode=CommitMode.AUTOCOMMIT),
            config, lambda diff, provider, instruction=None: "refactor: rename", no_ai,
        )

        assert head_message(repo_with_commit) == "refactor: rename"
        assert get_status_entries(repo_with_commit) == []

    def test_quoted_file_names(self, repo_with_commit, tmp_path, make_prompter, config):
        """Should stage and commit files git quotes in its status output."""
        (tmp_path / "my notes.txt").write_text("notes\n")
        (tmp_path / "café.txt").write_text("menu\n")

        outcome = run_commit(
            repo_with_commit, make_prompter(), CommitOptions(mode=CommitMode.AUTOCOMMIT),
            config, lambda diff, provider, instruction=None: "chore: add notes", no_ai,
        )

        assert outcome is CommitOutcome.COMMITTED
        assert commit_count(repo_with_commit) == 2
        assert get_status_entries(repo_with_commit) == []
        tracked = repo_with_commit.git.ls_files("-z").split("\0")
        assert {"my notes.txt", "café.txt"} <= set(tracked)

    def test_failing_group_stops_remaining(self, repo_with_commit, tmp_path, make_prompter, config):
        """Should keep earlier commits, skip later groups and re-raise."""
        (tmp_path / "initial.txt").write_text("changed\n")
        (tmp_path / "new.txt").write_text("new\n")
        stage_files(repo_with_commit, ["new.txt"])
        messages = iter(["fix: update initial"])

        def generate(diff, provider, instruction=None):
            try:
                return next(messages)
            except StopIteration:
                raise RuntimeError("provider unavailable") from None

        prompter = make_prompter()
        with pytest.raises(RuntimeError, match="provider unavailable"):
            run_commit(
                repo_with_commit, prompter, CommitOptions(mode=CommitMode.AUTOCOMMIT),
                config, generate, no_ai,
            )

        assert commit_count(repo_with_commit) == 2
        assert head_message(repo_with_commit) == "fix: update initial"
        assert set(repo_with_commit.head.commit.stats.files) == {"initial.txt"}
        assert [(e.code, e.path) for e in get_status_entries(repo_with_commit)] == [("A ", "new.txt")]
        assert "Failed to commit feat changes" in prompter.out


class TestCherryPick:
    def test_applies_commit(self, repo_with_commit, tmp_path, make_prompter, config):
        main = repo_with_commit.active_branch.name
        repo_with_commit.git.checkout("-b", "feature")
        (tmp_path / "picked.txt").write_text("picked\n")
        repo_with_commit.index.add(["picked.txt"])
        picked = repo_with_commit.index.commit("feat: picked").hexsha
        repo_with_commit.git.checkout(main)

        prompter = make_prompter(picked[:8], True)
        outcome = run_commit(
            repo_with_commit, prompter, CommitOptions(mode=CommitMode.CHERRY_PICK), config, no_ai, no_ai,
        )

        assert outcome is CommitOutcome.COMMITTED
        assert (tmp_path / "picked.txt").exists()
        assert head_message(repo_with_commit) == "feat: picked"
