"""PhaseValidator Protocol: maps a prompt to a typed phase result."""

from typing import Protocol

from cr_validator.phases.domain.results import PhaseResult
from cr_validator.prompts.domain.phase import Phase
from cr_validator.prompts.domain.prompt import Prompt


class PhaseValidator(Protocol):
    """One analysis phase: sends the prompt and parses the typed result."""

    @property
    def phase(self) -> Phase: ...

    async def validate(self, prompt: Prompt) -> PhaseResult: ...
