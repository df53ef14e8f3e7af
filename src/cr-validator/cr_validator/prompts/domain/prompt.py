"""Prompt and PromptTemplate value objects."""

from pydantic import BaseModel, Field

from cr_validator.prompts.domain.phase import Phase


class PromptTemplate(BaseModel, frozen=True):
    """Versioned template for one phase.

    The version is recorded on every ValidationResult; bump it whenever the
    wording or placeholders change so stored results stay attributable.
    """

    phase: Phase
    version: str = Field(min_length=1)
    system: str = Field(min_length=1)
    user: str = Field(min_length=1)


class Prompt(BaseModel, frozen=True):
    """A fully rendered prompt, ready to send to the LLM provider."""

    phase: Phase
    template_version: str
    system: str
    user: str
