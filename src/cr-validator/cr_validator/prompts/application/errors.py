"""Error types raised while building prompts."""

from cr_validator.core.errors import ConfigurationError


class TemplateError(ConfigurationError):
    """Raised when a prompt cannot be built because a required input is absent."""

    def __init__(self, phase: str, reason: str) -> None:
        self.phase = phase
        super().__init__(f"Failed to build prompt for phase '{phase}': {reason}")
