"""Error types raised by vector store infrastructure."""

from cr_validator.core.errors import UpstreamError


class VectorStoreError(UpstreamError):
    """Raised when the vector store cannot be queried, loaded or written."""

    def __init__(self, reason: str, retriable: bool = False) -> None:
        super().__init__(f"Failed to access vector store: {reason}", retriable=retriable)
