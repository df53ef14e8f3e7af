"""Error types raised by embedding infrastructure."""

from cr_validator.core.errors import UpstreamError


class EmbeddingFailure(UpstreamError):
    """Raised when the provider times out or returns an unusable embedding."""

    def __init__(self, reason: str, retriable: bool = False) -> None:
        super().__init__(f"Failed to embed text: {reason}", retriable=retriable)
