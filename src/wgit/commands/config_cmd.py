"""Config command: show, create and validate configuration files."""

from __future__ import annotations

import json
from pathlib import Path

from rich.markup import escape

from wgit.config import create_config_file, get_config_info, resolve_config_data, validate_config
from wgit.prompts import Choice, Prompter

ACTIONS = [
    Choice("show", "📄 Show", "Print the resolved configuration"),
    Choice("init", "🆕 Init", "Create a config file with the defaults"),
    Choice("validate", "✅ Validate", "Check the configuration for problems"),
    Choice("info", "ℹ️  Info", "Which config file is active"),
]


def show_config(prompter: Prompter, cwd: Path | None = None, home: Path | None = None) -> None:
    data, path = resolve_config_data(cwd, home)
    prompter.console.print_json(json.dumps(data))
    prompter.info(f"Source: {escape(str(path)) if path else 'built-in defaults'}")


def init_config(
    prompter: Prompter,
    global_: bool = False,
    cwd: Path | None = None,
    home: Path | None = None,
) -> Path | None:
    kind = "global" if global_ else "project"
    base = (home or Path.home()) if global_ else (cwd or Path.cwd())
    target = base / "w-git.config.json"
    if target.exists() and not prompter.confirm(f"{escape(str(target))} already exists. Overwrite?", default=False):
        prompter.cancelled("Config init cancelled")
        return None
    path = create_config_file(kind, cwd, home)
    prompter.success(f"Created {kind} config at {escape(str(path))}")
    return path


def validate(prompter: Prompter, cwd: Path | None = None, home: Path | None = None) -> list[str]:
    data, _ = resolve_config_data(cwd, home)
    errors = validate_config(data)
    if errors:
        prompter.error("Configuration has problems:")
        for error in errors:
            prompter.console.print(f"  • {escape(error)}")
    else:
        prompter.success("Configuration is valid")
    return errors


def show_info(prompter: Prompter, cwd: Path | None = None, home: Path | None = None) -> None:
    kind, path = get_config_info(cwd, home)
    if path is None:
        prompter.info("No config file found, using defaults")
        return
    prompter.info(f"Using {kind} config: {escape(str(path))}")


def run(
    prompter: Prompter,
    show: bool = False,
    init: bool = False,
    check: bool = False,
    global_: bool = False,
) -> None:
    if show:
        action = "show"
    elif init:
        action = "init"
    elif check:
        action = "validate"
    else:
        action = prompter.select("What would you like to do?", ACTIONS)

    if action == "show":
        show_config(prompter)
    elif action == "init":
        init_config(prompter, global_)
    elif action == "validate":
        validate(prompter)
    else:
        show_info(prompter)
