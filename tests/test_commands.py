"""Tests for the smaller command handlers."""

import json

from wgit.commands import branch, clean, config_cmd, init, log, reset, search, staging, status
from wgit.git_ops import current_branch, get_staged_files, get_status_entries, list_branches, run_git, stage_files
from wgit.models import SearchOptions


class TestStatus:
    """Tests for the status view."""

    def test_clean_tree(self, repo_with_commit, make_prompter):
        prompter = make_prompter()
        status.run(repo_with_commit, prompter)

        assert "Working tree clean" in prompter.out
        assert "Initial commit" in prompter.out
        assert prompter.asked == []

    def test_stage_all_then_back(self, repo_with_commit, tmp_path, make_prompter):
        (tmp_path / "new.txt").write_text("new")
        prompter = make_prompter("stage-all", "back")

        status.run(repo_with_commit, prompter)

        assert get_staged_files(repo_with_commit) == ["new.txt"]
        assert "Untracked" in prompter.out


class TestStaging:
    """Tests for file staging actions."""

    def test_stage_selected(self, repo_with_commit, tmp_path, make_prompter):
        (tmp_path / "a.txt").write_text("a")
        (tmp_path / "b.txt").write_text("b")
        prompter = make_prompter(["b.txt"], False)

        staging.run(repo_with_commit, prompter, "stage")

        assert get_staged_files(repo_with_commit) == ["b.txt"]

    def test_unstage_selected(self, repo_with_commit, tmp_path, make_prompter):
        (tmp_path / "a.txt").write_text("a")
        stage_files(repo_with_commit, ["a.txt"])

        staging.run(repo_with_commit, make_prompter(["a.txt"]), "unstage")

        assert get_staged_files(repo_with_commit) == []

    def test_restore_declined(self, repo_with_commit, tmp_path, make_prompter):
        target = tmp_path / "initial.txt"
        target.write_text("edited")

        staging.run(repo_with_commit, make_prompter(["initial.txt"], False), "restore")

        assert target.read_text() == "edited"

    def test_restore_confirmed(self, repo_with_commit, tmp_path, make_prompter):
        target = tmp_path / "initial.txt"
        target.write_text("edited")

        staging.run(repo_with_commit, make_prompter(["initial.txt"], True), "restore")

        assert target.read_text() == "initial content\n"

    def test_reset_new_file_kept(self, repo_with_commit, tmp_path, make_prompter):
        """Should unstage a newly added file without deleting it."""
        (tmp_path / "a.txt").write_text("a")
        stage_files(repo_with_commit, ["a.txt"])

        staging.run(repo_with_commit, make_prompter(["a.txt"], True), "reset")

        assert get_staged_files(repo_with_commit) == []
        assert (tmp_path / "a.txt").exists()


class TestBranch:
    """Tests for branch actions."""

    def test_create_flag(self, repo_with_commit, make_prompter):
        branch.run(repo_with_commit, make_prompter(), create="feature/login")
        assert current_branch(repo_with_commit) == "feature/login"

    def test_create_with_prefix(self, repo_with_commit, make_prompter, config):
        prompter = make_prompter("create", "bugfix/", "crash-on-start")
        branch.run(repo_with_commit, prompter, config=config)
        assert current_branch(repo_with_commit) == "bugfix/crash-on-start"

    def test_switch(self, repo_with_commit, make_prompter):
        main = current_branch(repo_with_commit)
        run_git(repo_with_commit, "checkout", "-b", "other")

        branch.run(repo_with_commit, make_prompter("switch", main))

        assert current_branch(repo_with_commit) == main

    def test_delete_requires_confirmation(self, repo_with_commit, make_prompter):
        run_git(repo_with_commit, "branch", "old")

        branch.run(repo_with_commit, make_prompter(False), delete="old")
        assert "old" in {b.name for b in list_branches(repo_with_commit)}

        branch.run(repo_with_commit, make_prompter(True), delete="old")
        assert "old" not in {b.name for b in list_branches(repo_with_commit)}

    def test_list(self, repo_with_commit, make_prompter):
        prompter = make_prompter()
        branch.run(repo_with_commit, prompter, list_all=True)
        assert current_branch(repo_with_commit) in prompter.out


class TestSearch:
    def test_direct_term(self, repo_with_commit, make_prompter):
        prompter = make_prompter()
        search.run(repo_with_commit, prompter, "initial", SearchOptions(ignore_case=True))

        assert "initial.txt" in prompter.out
        assert "1 matches" in prompter.out

    def test_no_matches(self, repo_with_commit, make_prompter):
        prompter = make_prompter()
        search.run(repo_with_commit, prompter, "zzz-not-here")
        assert "No matches found" in prompter.out

    def test_menu_history(self, repo_with_commit, make_prompter):
        prompter = make_prompter("history", "Initial", "back")
        search.run(repo_with_commit, prompter)
        assert "Initial commit" in prompter.out

    def test_highlight_escapes_markup(self):
        assert search.highlight("a [b] Foo", "foo") == "a \\[b] [yellow]Foo[/yellow]"


class TestLog:
    def test_formatted(self, repo_with_commit, make_prompter):
        prompter = make_prompter()
        log.run(repo_with_commit, prompter, "oneline")
        assert "Initial commit" in prompter.out

    def test_browse(self, repo_with_commit, make_prompter):
        sha = repo_with_commit.head.commit.hexsha
        prompter = make_prompter(sha, False)

        log.run(repo_with_commit, prompter)

        assert "initial.txt" in prompter.out


class TestReset:
    def test_soft_reset_keeps_changes_staged(self, repo_with_commit, tmp_path, make_prompter):
        (tmp_path / "second.txt").write_text("two")
        stage_files(repo_with_commit, ["second.txt"])
        run_git(repo_with_commit, "commit", "-m", "feat: second")

        reset.run(repo_with_commit, make_prompter("soft", "", True))

        assert repo_with_commit.head.commit.message.strip() == "Initial commit"
        assert get_staged_files(repo_with_commit) == ["second.txt"]

    def test_raw_args_declined(self, repo_with_commit, tmp_path, make_prompter):
        (tmp_path / "initial.txt").write_text("edited")

        reset.run(repo_with_commit, make_prompter(False), ["--hard"])

        assert (tmp_path / "initial.txt").read_text() == "edited"


class TestClean:
    def test_interactive_selection(self, repo_with_commit, tmp_path, make_prompter):
        (tmp_path / "a.tmp").write_text("a")
        (tmp_path / "b.tmp").write_text("b")

        clean.run(repo_with_commit, make_prompter("untracked", "interactive", ["a.tmp"], True))

        assert not (tmp_path / "a.tmp").exists()
        assert [e.path for e in get_status_entries(repo_with_commit)] == ["b.tmp"]

    def test_nothing_to_clean(self, repo_with_commit, make_prompter):
        prompter = make_prompter("untracked")
        clean.run(repo_with_commit, prompter)
        assert "No untracked files" in prompter.out


class TestConfigCommand:
    def test_init_and_validate(self, tmp_path, make_prompter, monkeypatch):
        monkeypatch.delenv("WGIT_AI_PROVIDER", raising=False)
        project, home = tmp_path / "project", tmp_path / "home"
        project.mkdir()
        home.mkdir()

        path = config_cmd.init_config(make_prompter(), cwd=project, home=home)
        assert json.loads(path.read_text())["commit"]["maxMessageLength"] == 72

        assert config_cmd.validate(make_prompter(), project, home) == []

    def test_init_keeps_existing(self, tmp_path, make_prompter):
        existing = tmp_path / "w-git.config.json"
        existing.write_text("{}")

        assert config_cmd.init_config(make_prompter(False), cwd=tmp_path, home=tmp_path) is None
        assert existing.read_text() == "{}"


class TestInit:
    def test_creates_repository(self, tmp_path, make_prompter):
        target = init.run(make_prompter("app", True), cwd=tmp_path)

        assert target == tmp_path / "app"
        assert (tmp_path / "app" / ".git").is_dir()

    def test_refuses_inside_repository(self, repo_with_commit, tmp_path, make_prompter):
        prompter = make_prompter()
        assert init.run(prompter, cwd=tmp_path) is None
        assert "Already inside a git repository" in prompter.out
