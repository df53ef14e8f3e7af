"""Error types raised by storage adapters."""

from cr_validator.core.errors import PersistenceError


class ReportPersistError(PersistenceError):
    """Raised when the HTML report cannot be written."""

    def __init__(self, reason: str, retriable: bool = False) -> None:
        super().__init__(f"Failed to persist report: {reason}", retriable=retriable)


class ResultStoreError(PersistenceError):
    """Raised when a result, comment or audit event cannot be stored or read."""

    def __init__(self, reason: str, retriable: bool = False) -> None:
        super().__init__(f"Failed to access result store: {reason}", retriable=retriable)
