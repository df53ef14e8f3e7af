"""Deterministic adjustments for runs without CR context or acceptance criteria.

The LLM is free to be optimistic about a story it cannot check against
anything; these guards make the outcome of such runs independent of the model.
"""

from cr_validator.phases.domain.finding import Confidence, Finding, Severity
from cr_validator.phases.domain.results import (
    PRIMARY_GAP_FIELD,
    FunctionalAlignmentResult,
    PhaseResult,
)
from cr_validator.prompts.domain.phase import Phase
from cr_validator.retrieval.domain.chunk import ExpandedContext
from cr_validator.scoring.domain.dimension import Dimension, DimensionScore
from cr_validator.story.domain.story import Story

NO_CONTEXT_GAP = Finding(
    description="No applicable CR context; the story cannot be verified.",
    severity=Severity.CRITICAL,
    confidence=Confidence.HIGH,
)

NO_AC_GAP = Finding(
    description="The story has no acceptance criteria.",
    severity=Severity.CRITICAL,
    confidence=Confidence.HIGH,
)

# Dimensions that measure agreement with CR context.
CONTEXT_DIMENSIONS = frozenset(
    {
        Dimension.FUNCTIONAL_ALIGNMENT,
        Dimension.AC,
        Dimension.BUSINESS_RULES,
        Dimension.NFR,
        Dimension.TRACEABILITY,
    }
)


def apply_context_guards(
    result: PhaseResult, story: Story, context: ExpandedContext
) -> PhaseResult:
    """Add the critical gaps an empty context or empty AC list implies."""
    phase = result.phase
    if context.is_empty and phase in PRIMARY_GAP_FIELD:
        result = result.with_findings(PRIMARY_GAP_FIELD[phase], NO_CONTEXT_GAP)
        if isinstance(result, FunctionalAlignmentResult):
            result = result.model_copy(update={"alignment_score": 0.0})
    if phase == Phase.AC_GAP_DETECTION and not story.acceptance_criteria:
        result = result.with_findings(PRIMARY_GAP_FIELD[phase], NO_AC_GAP)
    return result


def clamp_dimension_scores(
    scores: tuple[DimensionScore, ...], story: Story, context: ExpandedContext
) -> tuple[DimensionScore, ...]:
    """Force context-dependent dimensions to 0 when there is nothing to check."""
    clamped: list[DimensionScore] = []
    for score in scores:
        if context.is_empty and score.dimension in CONTEXT_DIMENSIONS:
            score = _zeroed(score, "no applicable CR context")
        elif score.dimension == Dimension.AC and not story.acceptance_criteria:
            score = _zeroed(score, "no acceptance criteria")
        clamped.append(score)
    return tuple(clamped)


def _zeroed(score: DimensionScore, reason: str) -> DimensionScore:
    if score.score == 0.0:
        return score
    return score.model_copy(
        update={"score": 0.0, "rationale": f"{reason} (model scored {score.score:g})"}
    )
