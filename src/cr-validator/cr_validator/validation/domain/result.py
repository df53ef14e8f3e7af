"""ValidationResult and FailureReport: the two outcomes of a validation run."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

from cr_validator.phases.domain.results import CitationViolation, PhaseResults
from cr_validator.prompts.domain.phase import Phase
from cr_validator.retrieval.domain.chunk import DocId
from cr_validator.scoring.domain.dimension import DimensionScore
from cr_validator.scoring.domain.readiness import ReadinessScore, RiskBand
from cr_validator.story.domain.story import StoryId
from cr_validator.validation.domain.stage import Stage

type ValidationId = str


class ValidationResult(BaseModel, frozen=True):
    """Complete, immutable outcome of a successful validation run.

    persistence_errors lists storage failures that happened after the result
    was computed; they do not invalidate it.
    """

    validation_id: ValidationId = Field(min_length=1)
    story_id: StoryId
    cr_ids: tuple[DocId, ...]
    cr_versions: dict[DocId, str]
    phase_results: PhaseResults
    dimension_scores: tuple[DimensionScore, ...]
    readiness: ReadinessScore
    risk_band: RiskBand
    prompt_versions: dict[Phase, str]
    citation_violations: tuple[CitationViolation, ...] = ()
    report_path: str | None = None
    persistence_errors: tuple[str, ...] = ()
    created_at: datetime
    status: Literal["complete"] = "complete"


class FailureReport(BaseModel, frozen=True):
    """Outcome of a run that stopped before completion.

    stage is the stage the run was trying to reach when it failed.
    """

    validation_id: ValidationId
    story_id: StoryId
    stage: Stage
    error_type: str
    cause: str
    retriable: bool = False
    created_at: datetime
    status: Literal["failed"] = "failed"
