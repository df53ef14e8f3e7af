"""LLMPhaseValidator: parses a phase's LLM completion into its typed result."""

import re

from pydantic import ValidationError

from cr_validator.phases.domain.llm_client import LLMClient
from cr_validator.phases.domain.results import RESULT_TYPES, PhaseResult
from cr_validator.phases.infrastructure.errors import LLMResponseParseError
from cr_validator.prompts.application.errors import TemplateError
from cr_validator.prompts.domain.phase import GENERATIVE_PHASES, Phase
from cr_validator.prompts.domain.prompt import Prompt

_FENCE = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL)


def strip_code_fence(text: str) -> str:
    """Remove a single surrounding Markdown code fence, if present."""
    text = text.strip()
    match = _FENCE.match(text)
    return match.group(1) if match else text


class LLMPhaseValidator:
    """Sends one phase's prompt and validates the answer against its result model.

    Never retries; a parse failure is raised as a retriable error so the
    orchestrator's retry policy can ask again.
    """

    def __init__(self, phase: Phase, llm: LLMClient) -> None:
        self._phase = phase
        self._result_type = RESULT_TYPES[phase]
        self._llm = llm

    @property
    def phase(self) -> Phase:
        return self._phase

    async def validate(self, prompt: Prompt) -> PhaseResult:
        """Return the typed result for prompt.

        Raises:
            TemplateError: if prompt was built for a different phase.
            LLMResponseParseError: if the completion does not match the schema.
            LLMTimeout, LLMProviderError: propagated from the LLM client.
        """
        if prompt.phase != self._phase:
            raise TemplateError(
                phase=self._phase,
                reason=f"received a prompt built for '{prompt.phase}'",
            )

        raw = await self._llm.complete(prompt)
        try:
            result = self._result_type.model_validate_json(strip_code_fence(raw))
        except ValidationError as exc:
            raise LLMResponseParseError(
                phase=self._phase,
                reason=f"{exc.error_count()} validation error(s)",
            ) from exc

        # Violation flags are set only by evidence enforcement.
        return result.map_findings(
            lambda _field, _index, finding: finding.model_copy(
                update={"citation_violation": False}
            )
        )


def create_phase_validators(llm: LLMClient) -> dict[Phase, LLMPhaseValidator]:
    """One validator per generative phase, all sharing the same LLM client."""
    return {
        phase: LLMPhaseValidator(phase=phase, llm=llm) for phase in GENERATIVE_PHASES
    }
