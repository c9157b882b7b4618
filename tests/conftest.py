"""Shared fixtures for wgit tests."""

import copy
import io

import pytest
from git import Repo
from rich.console import Console

from wgit.config import DEFAULT_CONFIG, Config
from wgit.prompts import Prompter


class FakePrompter(Prompter):
    """Prompter answering from a script instead of the terminal.

    Answers are consumed in order. An exception instance in the script is
    raised instead of answering, e.g. PromptCancelled().
    """

    def __init__(self, answers=None):
        super().__init__(Console(file=io.StringIO(), width=120))
        self.answers = list(answers or [])
        self.asked = []

    def _next(self, message):
        self.asked.append(message)
        if not self.answers:
            raise AssertionError(f"Unexpected prompt: {message}")
        answer = self.answers.pop(0)
        if isinstance(answer, BaseException):
            raise answer
        return answer

    def select(self, message, choices, default=None):
        answer = self._next(message)
        values = [c.value for c in choices]
        assert answer in values, f"{answer!r} is not one of {values}"
        return answer

    def multiselect(self, message, choices, required=False):
        return self._next(message)

    def text(self, message, placeholder=None, default=None, validate=None):
        answer = self._next(message)
        if not answer and default:
            answer = default
        if validate:
            error = validate(answer)
            assert error is None, f"Answer {answer!r} rejected: {error}"
        return answer

    def confirm(self, message, default=True):
        return self._next(message)

    @property
    def out(self):
        return self.console.file.getvalue()


@pytest.fixture
def make_prompter():
    """Build a FakePrompter from scripted answers."""
    def make(*answers):
        return FakePrompter(answers)
    return make


@pytest.fixture
def config():
    """The built-in default configuration."""
    return Config.model_validate(copy.deepcopy(DEFAULT_CONFIG))


@pytest.fixture
def temp_repo(tmp_path):
    """Create a temporary git repository for testing."""
    repo = Repo.init(tmp_path)

    # Configure git user for commits
    repo.config_writer().set_value("user", "name", "Test User").release()
    repo.config_writer().set_value("user", "email", "test@example.com").release()

    return repo


@pytest.fixture
def repo_with_commit(temp_repo, tmp_path):
    """Create a repo with an initial commit."""
    test_file = tmp_path / "initial.txt"
    test_file.write_text("initial content\n")
    temp_repo.index.add(["initial.txt"])
    temp_repo.index.commit("Initial commit")

    return temp_repo
