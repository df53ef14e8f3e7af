"""Error types raised while reading documents for ingestion."""

from cr_validator.core.errors import InputError


class DocumentLoadError(InputError):
    """Raised when the documents file is missing or contains invalid records."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        super().__init__(f"Failed to load documents from '{path}': {reason}")
