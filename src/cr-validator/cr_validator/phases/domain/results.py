"""PhaseResult variants: typed, immutable output of each analysis phase."""

from collections.abc import Callable
from typing import ClassVar, Self

from pydantic import BaseModel, Field

from cr_validator.phases.domain.finding import Finding
from cr_validator.prompts.domain.phase import Phase
from cr_validator.scoring.domain.dimension import DimensionScore


class PhaseResult(BaseModel, frozen=True):
    """Base class for all phase results.

    Subclasses declare their findings as tuple[Finding, ...] fields. Fields
    named in coverage_fields are coverage claims and must cite evidence.
    """

    phase: ClassVar[Phase]
    coverage_fields: ClassVar[tuple[str, ...]] = ()

    def finding_fields(self) -> dict[str, tuple[Finding, ...]]:
        return {
            name: getattr(self, name)
            for name, field in type(self).model_fields.items()
            if field.annotation == tuple[Finding, ...]
        }

    def findings(self) -> tuple[Finding, ...]:
        return tuple(f for group in self.finding_fields().values() for f in group)

    def evidence(self) -> frozenset[str]:
        return frozenset(chunk_id for f in self.findings() for chunk_id in f.evidence)

    def map_findings(self, fn: Callable[[str, int, Finding], Finding]) -> Self:
        """Return a copy with fn(field_name, index, finding) applied to every finding."""
        return self.model_copy(
            update={
                name: tuple(fn(name, i, finding) for i, finding in enumerate(group))
                for name, group in self.finding_fields().items()
            }
        )

    def with_findings(self, field: str, *extra: Finding) -> Self:
        """Return a copy with extra findings prepended to the named field."""
        current: tuple[Finding, ...] = getattr(self, field)
        return self.model_copy(update={field: (*extra, *current)})


class FunctionalAlignmentResult(PhaseResult, frozen=True):
    phase: ClassVar[Phase] = Phase.FUNCTIONAL_ALIGNMENT

    alignment_score: float = Field(ge=0.0, le=100.0)
    coverage_gaps: tuple[Finding, ...] = ()
    missing_features: tuple[Finding, ...] = ()
    summary: str = ""


class AcGapResult(PhaseResult, frozen=True):
    phase: ClassVar[Phase] = Phase.AC_GAP_DETECTION
    coverage_fields: ClassVar[tuple[str, ...]] = ("covered_ac",)

    missing_ac: tuple[Finding, ...] = ()
    covered_ac: tuple[Finding, ...] = ()


class BusinessRuleResult(PhaseResult, frozen=True):
    phase: ClassVar[Phase] = Phase.BUSINESS_RULE_VALIDATION

    rule_gaps: tuple[Finding, ...] = ()
    conflicting_rules: tuple[Finding, ...] = ()


class NfrResult(PhaseResult, frozen=True):
    phase: ClassVar[Phase] = Phase.NFR_VALIDATION

    implied_nfrs: tuple[Finding, ...] = ()
    missing_nfrs: tuple[Finding, ...] = ()


class AmbiguityResult(PhaseResult, frozen=True):
    phase: ClassVar[Phase] = Phase.AMBIGUITY_DETECTION

    ambiguous_phrases: tuple[Finding, ...] = ()
    unclear_ac: tuple[Finding, ...] = ()


class RiskResult(PhaseResult, frozen=True):
    phase: ClassVar[Phase] = Phase.RISK_CLASSIFICATION

    technical_risks: tuple[Finding, ...] = ()
    business_risks: tuple[Finding, ...] = ()
    schedule_risks: tuple[Finding, ...] = ()


class ReadinessScoringResult(PhaseResult, frozen=True):
    phase: ClassVar[Phase] = Phase.READINESS_SCORING

    dimension_scores: tuple[DimensionScore, ...]
    justification: str = ""


class CitationViolation(BaseModel, frozen=True):
    """Record of a finding whose citations do not resolve in the run's context."""

    phase: Phase
    field: str
    index: int = Field(ge=0)
    finding: str
    missing_chunk_ids: tuple[str, ...] = ()
    reason: str


class EvidenceEnforcementResult(PhaseResult, frozen=True):
    phase: ClassVar[Phase] = Phase.EVIDENCE_ENFORCEMENT

    checked_findings: int = Field(ge=0)
    violations: tuple[CitationViolation, ...] = ()


# Gap field that receives synthetic findings when CR context is missing.
PRIMARY_GAP_FIELD: dict[Phase, str] = {
    Phase.FUNCTIONAL_ALIGNMENT: "coverage_gaps",
    Phase.AC_GAP_DETECTION: "missing_ac",
    Phase.BUSINESS_RULE_VALIDATION: "rule_gaps",
    Phase.NFR_VALIDATION: "missing_nfrs",
}

RESULT_TYPES: dict[Phase, type[PhaseResult]] = {
    cls.phase: cls
    for cls in (
        FunctionalAlignmentResult,
        AcGapResult,
        BusinessRuleResult,
        NfrResult,
        AmbiguityResult,
        RiskResult,
        ReadinessScoringResult,
        EvidenceEnforcementResult,
    )
}


class PhaseResults(BaseModel, frozen=True):
    """All eight phase results of one validation run."""

    functional_alignment: FunctionalAlignmentResult
    ac_gap_detection: AcGapResult
    business_rule_validation: BusinessRuleResult
    nfr_validation: NfrResult
    ambiguity_detection: AmbiguityResult
    risk_classification: RiskResult
    readiness_scoring: ReadinessScoringResult
    evidence_enforcement: EvidenceEnforcementResult

    @classmethod
    def from_mapping(cls, results: dict[Phase, PhaseResult]) -> "PhaseResults":
        return cls.model_validate(
            {phase.value: result for phase, result in results.items()}
        )

    def by_phase(self) -> dict[Phase, PhaseResult]:
        return {phase: getattr(self, phase.value) for phase in Phase}
