"""Error types raised by LLM phase infrastructure."""

from cr_validator.core.errors import UpstreamError


class LLMProviderError(UpstreamError):
    """Raised when the LLM provider rejects or fails a completion request."""

    def __init__(self, phase: str, reason: str, retriable: bool = False) -> None:
        self.phase = phase
        super().__init__(
            f"Failed to complete phase '{phase}': {reason}", retriable=retriable
        )


class LLMTimeout(LLMProviderError):
    """Raised when the LLM provider does not answer within the phase budget."""

    def __init__(self, phase: str, timeout_seconds: float) -> None:
        super().__init__(
            phase=phase,
            reason=f"provider timed out after {timeout_seconds}s",
            retriable=True,
        )


class LLMResponseParseError(LLMProviderError):
    """Raised when the completion is not valid JSON for the phase's result type.

    Retriable: asking again frequently yields a well-formed answer.
    """

    def __init__(self, phase: str, reason: str) -> None:
        super().__init__(
            phase=phase, reason=f"unparseable response: {reason}", retriable=True
        )
