"""Structlog implementation of the PhaseObserver port."""

import structlog


class StructlogPhaseObserver:
    """Delegates LLM phase events to structlog.

    Satisfies the PhaseObserver protocol structurally.
    """

    def __init__(self) -> None:
        self._log = structlog.get_logger()

    def phase_call_started(
        self, phase: str, model: str, template_version: str
    ) -> None:
        self._log.info(
            "phase.call_started",
            phase=phase,
            model=model,
            template_version=template_version,
        )

    def phase_call_completed(self, phase: str, duration_ms: int) -> None:
        self._log.info("phase.call_completed", phase=phase, duration_ms=duration_ms)

    def phase_call_failed(self, phase: str, reason: str) -> None:
        self._log.error("phase.call_failed", phase=phase, reason=reason)
