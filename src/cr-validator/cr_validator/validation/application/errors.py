"""Error types raised by the validation orchestrator."""

from cr_validator.core.errors import InputError, UpstreamError


class StorySelectionError(InputError):
    """Raised when the story or the CR selection is malformed."""

    def __init__(self, reason: str) -> None:
        super().__init__(f"Failed to accept validation request: {reason}")


class StageTimeoutError(UpstreamError):
    """Raised when one attempt of an external call exceeds its time budget."""

    def __init__(self, operation: str, timeout_seconds: float) -> None:
        self.operation = operation
        super().__init__(
            f"Failed to complete '{operation}' within {timeout_seconds}s",
            retriable=True,
        )
