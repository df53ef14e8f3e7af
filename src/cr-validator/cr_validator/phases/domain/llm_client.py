"""LLMClient Protocol: opaque completion interface to the LLM provider."""

from typing import Protocol

from cr_validator.prompts.domain.prompt import Prompt


class LLMClient(Protocol):
    """Sends a rendered prompt and returns the raw completion text.

    Raises LLMTimeout or LLMProviderError on transport failure. Implementations
    never retry; retry policy belongs to the orchestrator.
    """

    async def complete(self, prompt: Prompt) -> str: ...
