"""Unit tests for config module."""

import copy
import json
import logging

import pytest

from wgit.config import (
    DEFAULT_CONFIG,
    create_config_file,
    deep_merge,
    find_config_file,
    get_config_info,
    load_config,
    load_config_file,
    validate_config,
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    monkeypatch.delenv("WGIT_AI_PROVIDER", raising=False)
    monkeypatch.delenv("WGIT_AI_MODEL", raising=False)


@pytest.fixture
def dirs(tmp_path):
    """Separate project and home directories."""
    project = tmp_path / "project"
    home = tmp_path / "home"
    project.mkdir()
    home.mkdir()
    return project, home


class TestDeepMerge:
    """Tests for deep_merge function."""

    def test_override_one_key(self):
        """Should change only the overridden key."""
        defaults = copy.deepcopy(DEFAULT_CONFIG)
        merged = deep_merge(defaults, {"commit": {"useAI": False}})

        assert merged["commit"]["useAI"] is False
        assert merged["commit"]["conventionalCommits"] is True
        assert merged["ai"] == DEFAULT_CONFIG["ai"]
        assert merged["branch"] == DEFAULT_CONFIG["branch"]

    def test_does_not_mutate_inputs(self):
        target = {"a": {"b": 1}}
        deep_merge(target, {"a": {"b": 2}})
        assert target == {"a": {"b": 1}}

    def test_lists_replaced(self):
        merged = deep_merge({"types": ["feat", "fix"]}, {"types": ["chore"]})
        assert merged["types"] == ["chore"]

    def test_null_replaces(self):
        """Should let a JSON null replace the default like any other value."""
        merged = deep_merge(copy.deepcopy(DEFAULT_CONFIG), {"ai": {"commitPrompt": None}})
        assert merged["ai"]["commitPrompt"] is None
        assert deep_merge({"a": {"b": 1}}, {"a": None}) == {"a": None}


class TestLoadConfig:
    """Tests for config file discovery and loading."""

    def test_defaults_without_file(self, dirs):
        project, home = dirs
        config = load_config(project, home)

        assert config.source is None
        assert config.ai.provider.provider == "openai"
        assert config.commit.max_message_length == 72
        assert config.branch.prefixes == ["feature/", "bugfix/", "hotfix/", "release/"]

    def test_project_file_overrides(self, dirs):
        """Should merge a project JSON file over the defaults."""
        project, home = dirs
        (project / "w-git.config.json").write_text(json.dumps({
            "ai": {"provider": {"provider": "anthropic"}},
            "commit": {"useAI": False},
        }))

        config = load_config(project, home)
        assert config.ai.provider.provider == "anthropic"
        assert config.commit.use_ai is False
        assert config.commit.conventional_commits is True
        assert config.source == project / "w-git.config.json"

    def test_project_before_global(self, dirs):
        project, home = dirs
        (project / ".w-git.config.json").write_text("{}")
        (home / "w-git.config.json").write_text("{}")
        assert find_config_file(project, home) == project / ".w-git.config.json"

    def test_global_file(self, dirs):
        project, home = dirs
        (home / "w-git.config.json").write_text(json.dumps({"ui": {"theme": "dark"}}))
        assert load_config(project, home).ui.theme == "dark"
        assert get_config_info(project, home) == ("global", home / "w-git.config.json")

    def test_script_config_ignored(self, dirs, caplog):
        """Should warn about JS/TS configs and use the defaults."""
        project, home = dirs
        (project / "w-git.config.ts").write_text("export default { commit: { useAI: false } }")

        with caplog.at_level(logging.WARNING):
            config = load_config(project, home)
        assert config.commit.use_ai is True
        assert "not supported" in caplog.text

    def test_invalid_json(self, dirs):
        project, _ = dirs
        path = project / "w-git.config.json"
        path.write_text("{not json")
        assert load_config_file(path) == {}

    def test_env_overrides_file(self, dirs, monkeypatch):
        project, home = dirs
        (project / "w-git.config.json").write_text(json.dumps({"ai": {"provider": {"provider": "anthropic"}}}))
        monkeypatch.setenv("WGIT_AI_PROVIDER", "xai")
        monkeypatch.setenv("WGIT_AI_MODEL", "grok-test")

        provider = load_config(project, home).ai.provider
        assert provider.provider == "xai"
        assert provider.model == "grok-test"


class TestValidateConfig:
    """Tests for validate_config function."""

    def test_defaults_valid(self):
        assert validate_config(DEFAULT_CONFIG) == []

    def test_reports_problems(self):
        data = {
            "ai": {"provider": {"provider": "gemini"}},
            "commit": {"types": "feat"},
            "branch": {"namingConvention": "SCREAMING"},
            "ui": {"theme": "neon"},
        }
        assert validate_config(data) == [
            "Invalid AI provider: gemini",
            "commit.types must be an array",
            "Invalid branch naming convention: SCREAMING",
            "Invalid UI theme: neon",
        ]


class TestCreateConfigFile:
    """Tests for create_config_file function."""

    def test_writes_defaults(self, dirs):
        project, home = dirs
        path = create_config_file("project", project, home)

        assert path == project / "w-git.config.json"
        assert json.loads(path.read_text()) == DEFAULT_CONFIG
        assert get_config_info(project, home) == ("project", path)

    def test_global(self, dirs):
        project, home = dirs
        assert create_config_file("global", project, home) == home / "w-git.config.json"
