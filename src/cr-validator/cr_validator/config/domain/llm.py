"""LLM provider configuration model."""

from pydantic import BaseModel, Field

from cr_validator.prompts.domain.phase import Phase


class LLMConfig(BaseModel, frozen=True):
    model: str = Field(min_length=1)
    temperature: float = Field(default=0.0, ge=0.0)
    timeout_seconds: float = Field(default=60.0, gt=0.0)
    phase_timeouts: dict[Phase, float] = Field(default_factory=dict)

    def timeout_for(self, phase: Phase) -> float:
        """Per-phase timeout budget, falling back to the default."""
        return self.phase_timeouts.get(phase, self.timeout_seconds)
