"""PhaseObserver port: domain events emitted around LLM phase calls."""

from typing import Protocol


class PhaseObserver(Protocol):
    """Observer port for LLM phase events.

    Implementations may log to structlog, record for tests, or emit metrics.
    """

    def phase_call_started(
        self, phase: str, model: str, template_version: str
    ) -> None: ...

    def phase_call_completed(self, phase: str, duration_ms: int) -> None: ...

    def phase_call_failed(self, phase: str, reason: str) -> None: ...
