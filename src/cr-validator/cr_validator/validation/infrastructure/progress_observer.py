"""ProgressValidationObserver: renders stage and phase progress bars to stderr."""

from rich.console import Console
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    TaskID,
    TextColumn,
    TimeElapsedColumn,
)

from cr_validator.prompts.domain.phase import Phase
from cr_validator.validation.domain.stage import STAGE_ORDER

_STAGES = "Stages"
_PHASES = "Phases"


def _make_progress(console: Console) -> Progress:
    """Create a Progress instance with the standard column layout."""
    return Progress(
        TextColumn("{task.description:<8}"),
        BarColumn(bar_width=40, complete_style="bright_green"),
        MofNCompleteColumn(),
        TimeElapsedColumn(),
        TextColumn("[dim]{task.fields[current]}"),
        console=console,
        refresh_per_second=10,
        transient=False,
    )


class ProgressValidationObserver:
    """Renders one row for run stages and one for analysis phases on stderr.

    Only started, stage_completed, phase_completed, completed and failed
    produce output; all other events are no-ops.

    Pass ``disabled=True`` to suppress all terminal output (useful in tests).
    Counters are still maintained so tests can inspect them.

    Does NOT inherit from ValidationObserver (structural typing via Protocol).
    """

    def __init__(self, disabled: bool = False) -> None:
        self._disabled = disabled
        self._progress: Progress | None = None
        self._task_ids: dict[str, TaskID] = {}
        self.stages_done = 0
        self.phases_done = 0

    def _update(self, key: str, completed: int, current: str) -> None:
        if self._progress is None or key not in self._task_ids:
            return
        self._progress.update(self._task_ids[key], completed=completed, current=current)

    def _stop(self) -> None:
        if self._progress is not None:
            self._progress.stop()
        self._progress = None
        self._task_ids = {}

    def validation_started(
        self, validation_id: str, story_id: str, cr_ids: list[str]
    ) -> None:
        self.stages_done = 0
        self.phases_done = 0
        if self._disabled:
            return

        self._progress = _make_progress(Console(stderr=True))
        self._task_ids[_STAGES] = self._progress.add_task(
            _STAGES, total=len(STAGE_ORDER), current=story_id
        )
        self._task_ids[_PHASES] = self._progress.add_task(
            _PHASES, total=len(Phase), current=""
        )
        self._progress.start()

    def validation_stage_completed(
        self, validation_id: str, stage: str, duration_ms: int
    ) -> None:
        self.stages_done += 1
        self._update(_STAGES, completed=self.stages_done, current=stage)

    def validation_phase_completed(
        self, validation_id: str, phase: str, findings: int
    ) -> None:
        self.phases_done += 1
        self._update(_PHASES, completed=self.phases_done, current=phase)

    def validation_retry(
        self,
        validation_id: str,
        operation: str,
        attempt: int,
        reason: str,
        backoff_seconds: float,
    ) -> None:
        pass

    def validation_citation_violation(
        self, validation_id: str, phase: str, field: str, index: int, reason: str
    ) -> None:
        pass

    def validation_persistence_failed(
        self, validation_id: str, target: str, reason: str
    ) -> None:
        pass

    def validation_completed(
        self,
        validation_id: str,
        overall: float,
        risk_band: str,
        elapsed_seconds: float,
    ) -> None:
        self._stop()

    def validation_failed(
        self, validation_id: str, stage: str, error_type: str, reason: str
    ) -> None:
        self._update(_STAGES, completed=self.stages_done, current=f"failed at {stage}")
        self._stop()
