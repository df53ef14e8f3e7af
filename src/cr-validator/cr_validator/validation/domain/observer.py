"""Observer port for the validation domain: defines events in domain language."""

from typing import Protocol


class ValidationObserver(Protocol):
    """Observer port emitting structured events during a validation run.

    Implementations may log to structlog, render progress, or record for tests.
    """

    def validation_started(
        self, validation_id: str, story_id: str, cr_ids: list[str]
    ) -> None: ...

    def validation_stage_completed(
        self, validation_id: str, stage: str, duration_ms: int
    ) -> None: ...

    def validation_phase_completed(
        self, validation_id: str, phase: str, findings: int
    ) -> None: ...

    def validation_retry(
        self,
        validation_id: str,
        operation: str,
        attempt: int,
        reason: str,
        backoff_seconds: float,
    ) -> None: ...

    def validation_citation_violation(
        self, validation_id: str, phase: str, field: str, index: int, reason: str
    ) -> None: ...

    def validation_persistence_failed(
        self, validation_id: str, target: str, reason: str
    ) -> None: ...

    def validation_completed(
        self,
        validation_id: str,
        overall: float,
        risk_band: str,
        elapsed_seconds: float,
    ) -> None: ...

    def validation_failed(
        self, validation_id: str, stage: str, error_type: str, reason: str
    ) -> None: ...
