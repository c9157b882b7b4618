"""Commit message drafting with hosted language models.

Three providers are supported: OpenAI, Anthropic and xAI. xAI exposes an
OpenAI-compatible API, so it goes through the openai client with its own
base URL and key.
"""

from __future__ import annotations

import asyncio
import logging
import os
from collections.abc import Awaitable, Callable

from wgit.models import AIProviderConfig

log = logging.getLogger(__name__)

DEFAULT_MODELS = {
    "openai": "gpt-4",
    "anthropic": "claude-3-haiku-20240307",
    "xai": "grok-3-beta",
}

XAI_BASE_URL = "https://api.x.ai/v1"
MAX_TOKENS = 1024

DEFAULT_COMMIT_INSTRUCTION = "Generate a commit message for these changes:"


class TextGenerationError(Exception):
    """Base error for text generation failures raised by wgit itself."""


class UnsupportedProviderError(TextGenerationError):
    """The configured provider is not one of the supported ones."""

    def __init__(self, provider: str):
        super().__init__(f"Unsupported AI provider: {provider}")
        self.provider = provider


def commit_prompt(diff: str, instruction: str | None = None) -> str:
    """Prompt asking for a conventional commit message for `diff`."""
    return (
        f"{instruction or DEFAULT_COMMIT_INSTRUCTION}\n\n{diff}\n\n"
        "The message should follow conventional commits format and be under 72 characters."
    )


def enhance_prompt(draft: str) -> str:
    """Prompt asking to rewrite a user's draft as a conventional commit message."""
    return (
        "Rewrite the following commit message draft as a single conventional commit "
        "message in English. The draft may be written in any language. Keep the "
        "meaning, use the imperative mood, use the format type(scope): subject and "
        "keep the subject under 72 characters. Reply with the commit message only.\n\n"
        f"Draft: {draft}"
    )


async def _complete_openai(prompt: str, model: str) -> str:
    from openai import AsyncOpenAI

    client = AsyncOpenAI()
    response = await client.chat.completions.create(
        model=model,
        messages=[{"role": "user", "content": prompt}],
    )
    return response.choices[0].message.content or ""


async def _complete_xai(prompt: str, model: str) -> str:
    from openai import AsyncOpenAI

    api_key = os.getenv("XAI_API_KEY")
    if not api_key:
        # the openai client would otherwise fall back to OPENAI_API_KEY
        raise TextGenerationError("XAI_API_KEY environment variable is not set")
    client = AsyncOpenAI(api_key=api_key, base_url=XAI_BASE_URL)
    response = await client.chat.completions.create(
        model=model,
        messages=[{"role": "user", "content": prompt}],
    )
    return response.choices[0].message.content or ""


async def _complete_anthropic(prompt: str, model: str) -> str:
    from anthropic import AsyncAnthropic

    client = AsyncAnthropic()
    response = await client.messages.create(
        model=model,
        max_tokens=MAX_TOKENS,
        messages=[{"role": "user", "content": prompt}],
    )
    return "".join(block.text for block in response.content if block.type == "text")


COMPLETERS: dict[str, Callable[[str, str], Awaitable[str]]] = {
    "openai": _complete_openai,
    "anthropic": _complete_anthropic,
    "xai": _complete_xai,
}


def complete(prompt: str, config: AIProviderConfig) -> str:
    """Send `prompt` to the configured provider and return its text.

    Raises:
        UnsupportedProviderError: Before any request if the provider is unknown.
    """
    completer = COMPLETERS.get(config.provider)
    if completer is None:
        raise UnsupportedProviderError(config.provider)

    model = config.model or DEFAULT_MODELS.get(config.provider, "")
    log.debug("Requesting completion from %s (%s)", config.provider, model)
    return asyncio.run(completer(prompt, model))


def generate_commit_message(
    diff: str,
    config: AIProviderConfig | None = None,
    instruction: str | None = None,
) -> str:
    """Draft a commit message from a diff. The reply is returned unmodified."""
    return complete(commit_prompt(diff, instruction), config or AIProviderConfig())


def enhance_commit_message(draft: str, config: AIProviderConfig | None = None) -> str:
    """Turn a free-form draft into a conventional commit message."""
    return complete(enhance_prompt(draft), config or AIProviderConfig())
