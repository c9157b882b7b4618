"""Configuration management for wgit.

Configuration comes from, lowest priority first: built-in defaults, the first
config file found in the working directory or the home directory, and
environment variables.
"""

from __future__ import annotations

import copy
import json
import logging
import os
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from wgit.models import AIProviderConfig

log = logging.getLogger(__name__)

CONFIG_FILENAMES = [
    "w-git.config.ts",
    "w-git.config.js",
    "w-git.config.json",
    ".w-git.config.ts",
    ".w-git.config.js",
    ".w-git.config.json",
]

SUPPORTED_PROVIDERS = ("openai", "anthropic", "xai")
NAMING_CONVENTIONS = ("kebab-case", "camelCase", "snake_case")
THEMES = ("auto", "light", "dark")

DEFAULT_CONFIG: dict[str, Any] = {
    "ai": {
        "provider": {"provider": "openai"},
        "enabled": True,
        "commitPrompt": "Generate a conventional commit message for these changes:",
    },
    "commit": {
        "useAI": True,
        "conventionalCommits": True,
        "maxMessageLength": 72,
        "types": [
            "feat", "fix", "docs", "style", "refactor", "perf",
            "test", "build", "ci", "chore", "revert",
        ],
        "requireScope": False,
    },
    "branch": {
        "defaultBranch": "main",
        "prefixes": ["feature/", "bugfix/", "hotfix/", "release/"],
        "namingConvention": "kebab-case",
        "autoDeleteMerged": False,
    },
    "ui": {
        "theme": "auto",
        "animations": True,
        "emojis": True,
        "colors": {
            "primary": "#3b82f6",
            "success": "#10b981",
            "warning": "#f59e0b",
            "error": "#ef4444",
        },
    },
    "hooks": {},
    "aliases": {},
    "project": {},
    "remotes": {},
    "workflow": {
        "gitflow": False,
        "autoSync": False,
        "syncBranches": ["main", "develop"],
        "releaseBranches": ["main", "master"],
    },
    "integrations": {},
}


class _Section(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow")


class AIConfig(_Section):
    provider: AIProviderConfig = Field(default_factory=AIProviderConfig)
    enabled: bool = True
    commit_prompt: str | None = Field(default=None, alias="commitPrompt")


class CommitConfig(_Section):
    use_ai: bool = Field(default=True, alias="useAI")
    conventional_commits: bool = Field(default=True, alias="conventionalCommits")
    template: str | None = None
    types: list[str] = Field(default_factory=list)
    require_scope: bool = Field(default=False, alias="requireScope")
    max_message_length: int = Field(default=72, alias="maxMessageLength")


class BranchConfig(_Section):
    default_branch: str = Field(default="main", alias="defaultBranch")
    prefixes: list[str] = Field(default_factory=list)
    naming_convention: str = Field(default="kebab-case", alias="namingConvention")
    auto_delete_merged: bool = Field(default=False, alias="autoDeleteMerged")


class UIConfig(_Section):
    theme: str = "auto"
    animations: bool = True
    emojis: bool = True
    colors: dict[str, str] = Field(default_factory=dict)


class WorkflowConfig(_Section):
    gitflow: bool = False
    auto_sync: bool = Field(default=False, alias="autoSync")
    sync_branches: list[str] = Field(default_factory=list, alias="syncBranches")
    release_branches: list[str] = Field(default_factory=list, alias="releaseBranches")


class Config(_Section):
    """Application configuration, resolved from defaults and overrides."""

    ai: AIConfig = Field(default_factory=AIConfig)
    commit: CommitConfig = Field(default_factory=CommitConfig)
    branch: BranchConfig = Field(default_factory=BranchConfig)
    ui: UIConfig = Field(default_factory=UIConfig)
    hooks: dict[str, Any] = Field(default_factory=dict)
    aliases: dict[str, str] = Field(default_factory=dict)
    project: dict[str, Any] = Field(default_factory=dict)
    remotes: dict[str, Any] = Field(default_factory=dict)
    workflow: WorkflowConfig = Field(default_factory=WorkflowConfig)
    integrations: dict[str, Any] = Field(default_factory=dict)
    source: Path | None = Field(default=None, exclude=True)


def get_config_paths(cwd: Path | None = None, home: Path | None = None) -> list[Path]:
    """Candidate config files: project-level first, then global."""
    cwd = cwd or Path.cwd()
    home = home or Path.home()
    return [cwd / name for name in CONFIG_FILENAMES] + [home / name for name in CONFIG_FILENAMES]


def find_config_file(cwd: Path | None = None, home: Path | None = None) -> Path | None:
    """Find the first existing config file."""
    for path in get_config_paths(cwd, home):
        if path.exists():
            return path
    return None


def load_config_file(config_path: Path) -> dict[str, Any]:
    """Read overrides from a config file.

    Only JSON is parsed. Script configs (.ts/.js) are not executed and
    contribute no overrides.
    """
    if config_path.suffix in (".ts", ".js"):
        log.warning(
            "JavaScript/TypeScript config files are not supported, ignoring %s. "
            "Please use w-git.config.json instead.",
            config_path,
        )
        return {}

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        log.error("Error loading config from %s: %s", config_path, e)
        return {}

    if not isinstance(data, dict):
        log.error("Config file %s must contain a JSON object", config_path)
        return {}
    return data


def deep_merge(target: dict[str, Any], source: dict[str, Any]) -> dict[str, Any]:
    """Merge `source` onto a copy of `target`.

    Mappings present on both sides are merged recursively. Any other value
    from `source`, lists and None included, replaces the target value.
    """
    result = dict(target)
    for key, value in source.items():
        if isinstance(value, dict) and isinstance(result.get(key), dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _env_overrides() -> dict[str, Any]:
    provider: dict[str, Any] = {}
    if name := os.getenv("WGIT_AI_PROVIDER"):
        provider["provider"] = name
    if model := os.getenv("WGIT_AI_MODEL"):
        provider["model"] = model
    return {"ai": {"provider": provider}} if provider else {}


def resolve_config_data(cwd: Path | None = None, home: Path | None = None) -> tuple[dict[str, Any], Path | None]:
    """Merged config mapping and the file it came from, if any."""
    config_path = find_config_file(cwd, home)
    overrides: dict[str, Any] = {}
    if config_path is not None:
        overrides = load_config_file(config_path)
        log.info("Loaded config from: %s", config_path)

    data = deep_merge(copy.deepcopy(DEFAULT_CONFIG), overrides)
    return deep_merge(data, _env_overrides()), config_path


def load_config(cwd: Path | None = None, home: Path | None = None) -> Config:
    """Load configuration from defaults, config file and environment variables.

    Priority: Environment variables > Config file > Defaults
    """
    data, config_path = resolve_config_data(cwd, home)
    config = Config.model_validate(data)
    config.source = config_path
    return config


def validate_config(data: dict[str, Any]) -> list[str]:
    """Check a raw config mapping, returning a list of problems."""
    errors: list[str] = []

    provider = (data.get("ai") or {}).get("provider") or {}
    if isinstance(provider, dict):
        name = provider.get("provider")
        if name and name not in SUPPORTED_PROVIDERS:
            errors.append(f"Invalid AI provider: {name}")
    else:
        errors.append("ai.provider must be an object")

    types = (data.get("commit") or {}).get("types")
    if types is not None and not isinstance(types, list):
        errors.append("commit.types must be an array")

    convention = (data.get("branch") or {}).get("namingConvention")
    if convention and convention not in NAMING_CONVENTIONS:
        errors.append(f"Invalid branch naming convention: {convention}")

    theme = (data.get("ui") or {}).get("theme")
    if theme and theme not in THEMES:
        errors.append(f"Invalid UI theme: {theme}")

    return errors


def get_config_info(cwd: Path | None = None, home: Path | None = None) -> tuple[Literal["project", "global", "none"], Path | None]:
    """Whether the active config file is project-level or global."""
    cwd = cwd or Path.cwd()
    config_path = find_config_file(cwd, home)
    if config_path is None:
        return "none", None
    kind: Literal["project", "global"] = "project" if config_path.parent == cwd else "global"
    return kind, config_path


def create_config_file(kind: Literal["project", "global"] = "project", cwd: Path | None = None, home: Path | None = None) -> Path:
    """Write the default configuration as w-git.config.json."""
    base = (cwd or Path.cwd()) if kind == "project" else (home or Path.home())
    config_path = base / "w-git.config.json"
    with open(config_path, "w", encoding="utf-8") as f:
        json.dump(DEFAULT_CONFIG, f, indent=2)
        f.write("\n")
    return config_path
