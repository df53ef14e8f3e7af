"""Error types raised by evidence enforcement."""

from collections.abc import Sequence

from cr_validator.core.errors import ValidatorError


class CitationIntegrityViolation(ValidatorError):
    """Raised when a finding cites chunks outside the run's context.

    Also raised when a coverage claim cites no evidence at all. The
    orchestrator never fails a run on this error: the offending finding is
    downgraded and flagged instead.
    """

    def __init__(
        self, finding: str, missing_chunk_ids: Sequence[str], reason: str
    ) -> None:
        self.finding = finding
        self.missing_chunk_ids = tuple(missing_chunk_ids)
        self.reason = reason
        super().__init__(f"Failed to verify citations for '{finding}': {reason}")
