"""CompositeValidationObserver: fans out all events to a list of observers."""

from cr_validator.validation.domain.observer import ValidationObserver


class CompositeValidationObserver:
    """Delegates every observer event to each observer in order.

    Does NOT inherit from ValidationObserver (structural typing via Protocol).
    """

    def __init__(self, observers: list[ValidationObserver]) -> None:
        self._observers = observers

    def validation_started(
        self, validation_id: str, story_id: str, cr_ids: list[str]
    ) -> None:
        for obs in self._observers:
            obs.validation_started(
                validation_id=validation_id, story_id=story_id, cr_ids=cr_ids
            )

    def validation_stage_completed(
        self, validation_id: str, stage: str, duration_ms: int
    ) -> None:
        for obs in self._observers:
            obs.validation_stage_completed(
                validation_id=validation_id, stage=stage, duration_ms=duration_ms
            )

    def validation_phase_completed(
        self, validation_id: str, phase: str, findings: int
    ) -> None:
        for obs in self._observers:
            obs.validation_phase_completed(
                validation_id=validation_id, phase=phase, findings=findings
            )

    def validation_retry(
        self,
        validation_id: str,
        operation: str,
        attempt: int,
        reason: str,
        backoff_seconds: float,
    ) -> None:
        for obs in self._observers:
            obs.validation_retry(
                validation_id=validation_id,
                operation=operation,
                attempt=attempt,
                reason=reason,
                backoff_seconds=backoff_seconds,
            )

    def validation_citation_violation(
        self, validation_id: str, phase: str, field: str, index: int, reason: str
    ) -> None:
        for obs in self._observers:
            obs.validation_citation_violation(
                validation_id=validation_id,
                phase=phase,
                field=field,
                index=index,
                reason=reason,
            )

    def validation_persistence_failed(
        self, validation_id: str, target: str, reason: str
    ) -> None:
        for obs in self._observers:
            obs.validation_persistence_failed(
                validation_id=validation_id, target=target, reason=reason
            )

    def validation_completed(
        self,
        validation_id: str,
        overall: float,
        risk_band: str,
        elapsed_seconds: float,
    ) -> None:
        for obs in self._observers:
            obs.validation_completed(
                validation_id=validation_id,
                overall=overall,
                risk_band=risk_band,
                elapsed_seconds=elapsed_seconds,
            )

    def validation_failed(
        self, validation_id: str, stage: str, error_type: str, reason: str
    ) -> None:
        for obs in self._observers:
            obs.validation_failed(
                validation_id=validation_id,
                stage=stage,
                error_type=error_type,
                reason=reason,
            )
