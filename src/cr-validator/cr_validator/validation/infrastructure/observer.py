"""StructlogValidationObserver: production observer that delegates to structlog."""

import structlog


class StructlogValidationObserver:
    """Logs validation domain events to structlog.

    Does NOT inherit from ValidationObserver (structural typing via Protocol).
    """

    def __init__(self) -> None:
        self._log = structlog.get_logger()

    def validation_started(
        self, validation_id: str, story_id: str, cr_ids: list[str]
    ) -> None:
        self._log.info(
            "validation.started",
            validation_id=validation_id,
            story_id=story_id,
            cr_ids=cr_ids,
        )

    def validation_stage_completed(
        self, validation_id: str, stage: str, duration_ms: int
    ) -> None:
        self._log.info(
            "validation.stage.completed",
            validation_id=validation_id,
            stage=stage,
            duration_ms=duration_ms,
        )

    def validation_phase_completed(
        self, validation_id: str, phase: str, findings: int
    ) -> None:
        self._log.info(
            "validation.phase.completed",
            validation_id=validation_id,
            phase=phase,
            findings=findings,
        )

    def validation_retry(
        self,
        validation_id: str,
        operation: str,
        attempt: int,
        reason: str,
        backoff_seconds: float,
    ) -> None:
        self._log.warning(
            "validation.retry",
            validation_id=validation_id,
            operation=operation,
            attempt=attempt,
            reason=reason,
            backoff_seconds=backoff_seconds,
        )

    def validation_citation_violation(
        self, validation_id: str, phase: str, field: str, index: int, reason: str
    ) -> None:
        self._log.warning(
            "validation.citation_violation",
            validation_id=validation_id,
            phase=phase,
            field=field,
            index=index,
            reason=reason,
        )

    def validation_persistence_failed(
        self, validation_id: str, target: str, reason: str
    ) -> None:
        self._log.error(
            "validation.persistence_failed",
            validation_id=validation_id,
            target=target,
            reason=reason,
        )

    def validation_completed(
        self,
        validation_id: str,
        overall: float,
        risk_band: str,
        elapsed_seconds: float,
    ) -> None:
        self._log.info(
            "validation.completed",
            validation_id=validation_id,
            overall=overall,
            risk_band=risk_band,
            elapsed_seconds=round(elapsed_seconds, 2),
        )

    def validation_failed(
        self, validation_id: str, stage: str, error_type: str, reason: str
    ) -> None:
        self._log.error(
            "validation.failed",
            validation_id=validation_id,
            stage=stage,
            error_type=error_type,
            reason=reason,
        )
