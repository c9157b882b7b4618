"""Unit tests for text_generation module. No requests leave the process."""

import pytest

from wgit import text_generation
from wgit.models import AIProviderConfig
from wgit.text_generation import (
    TextGenerationError,
    UnsupportedProviderError,
    enhance_commit_message,
    generate_commit_message,
)


@pytest.fixture
def calls(monkeypatch):
    """Replace every provider with a recorder."""
    recorded = []

    def fake(name):
        async def complete(prompt, model):
            recorded.append((name, prompt, model))
            return f"feat: from {name}"
        return complete

    for name in list(text_generation.COMPLETERS):
        monkeypatch.setitem(text_generation.COMPLETERS, name, fake(name))
    return recorded


class TestGenerateCommitMessage:
    """Tests for generate_commit_message function."""

    def test_default_provider(self, calls):
        """Should use openai with its default model."""
        message = generate_commit_message("diff --git a/x b/x")

        assert message == "feat: from openai"
        name, prompt, model = calls[0]
        assert (name, model) == ("openai", "gpt-4")
        assert "diff --git a/x b/x" in prompt
        assert "conventional commits" in prompt

    @pytest.mark.parametrize(
        "provider, model",
        [("anthropic", "claude-3-haiku-20240307"), ("xai", "grok-3-beta")],
    )
    def test_provider_defaults(self, calls, provider, model):
        generate_commit_message("diff", AIProviderConfig(provider=provider))
        assert calls[0][0] == provider
        assert calls[0][2] == model

    def test_model_override(self, calls):
        generate_commit_message("diff", AIProviderConfig(provider="openai", model="gpt-4o-mini"))
        assert calls[0][2] == "gpt-4o-mini"

    def test_custom_instruction(self, calls):
        generate_commit_message("diff", instruction="Describe briefly:")
        assert calls[0][1].startswith("Describe briefly:")

    def test_unsupported_provider(self, calls):
        """Should fail before any provider is called."""
        with pytest.raises(UnsupportedProviderError, match="Unsupported AI provider: gemini"):
            generate_commit_message("diff", AIProviderConfig(provider="gemini"))
        assert calls == []


class TestEnhanceCommitMessage:
    """Tests for enhance_commit_message function."""

    def test_includes_draft(self, calls):
        message = enhance_commit_message("arreglar el login", AIProviderConfig(provider="anthropic"))

        assert message == "feat: from anthropic"
        assert "arreglar el login" in calls[0][1]

    def test_unsupported_provider(self, calls):
        with pytest.raises(UnsupportedProviderError):
            enhance_commit_message("draft", AIProviderConfig(provider="local"))
        assert calls == []


class TestXAICredentials:
    """The xAI client must only ever be given the xAI key."""

    @pytest.fixture
    def clients(self, monkeypatch):
        import openai

        created = []

        class RecordingClient:
            def __init__(self, **kwargs):
                created.append(kwargs)
                raise AssertionError("No client should be built without XAI_API_KEY")

        monkeypatch.setattr(openai, "AsyncOpenAI", RecordingClient)
        return created

    def test_missing_key_does_not_use_openai_key(self, clients, monkeypatch):
        """Should fail naming XAI_API_KEY instead of sending OPENAI_API_KEY to x.ai."""
        monkeypatch.setenv("OPENAI_API_KEY", "sk-openai-secret")
        monkeypatch.delenv("XAI_API_KEY", raising=False)

        with pytest.raises(TextGenerationError, match="XAI_API_KEY"):
            generate_commit_message("diff", AIProviderConfig(provider="xai"))
        assert clients == []
