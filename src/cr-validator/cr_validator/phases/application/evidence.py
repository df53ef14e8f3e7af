"""EvidenceEnforcer: deterministic citation integrity check over all phase results."""

from collections.abc import Mapping

from cr_validator.phases.application.errors import CitationIntegrityViolation
from cr_validator.phases.domain.finding import Finding
from cr_validator.phases.domain.results import (
    CitationViolation,
    EvidenceEnforcementResult,
    PhaseResult,
    ReadinessScoringResult,
)
from cr_validator.prompts.domain.phase import Phase
from cr_validator.retrieval.domain.chunk import ExpandedContext


class EvidenceEnforcer:
    """Phase 8. Verifies that every cited chunk id resolves in the run's context.

    Violations are collected, never dropped: the orchestrator downgrades the
    offending findings and records them on the ValidationResult.
    """

    def check(
        self,
        finding: Finding,
        context: ExpandedContext,
        coverage_claim: bool = False,
    ) -> None:
        """Raise CitationIntegrityViolation if finding's citations do not hold.

        A finding fails when it cites a chunk id absent from context, or when it
        claims coverage (explicitly, or by sitting in a coverage field) and
        cites nothing.
        """
        missing = sorted(set(finding.evidence) - context.chunk_ids)
        if missing:
            raise CitationIntegrityViolation(
                finding=finding.description,
                missing_chunk_ids=missing,
                reason=f"cites chunks absent from context: {', '.join(missing)}",
            )
        if (coverage_claim or finding.claims_coverage) and not finding.evidence:
            raise CitationIntegrityViolation(
                finding=finding.description,
                missing_chunk_ids=(),
                reason="coverage claim without evidence",
            )

    def enforce(
        self, results: Mapping[Phase, PhaseResult], context: ExpandedContext
    ) -> EvidenceEnforcementResult:
        """Check every finding and dimension score of results against context."""
        checked = 0
        violations: list[CitationViolation] = []
        for phase, result in results.items():
            for field, findings in result.finding_fields().items():
                coverage_claim = field in result.coverage_fields
                for index, finding in enumerate(findings):
                    checked += 1
                    try:
                        self.check(finding, context, coverage_claim=coverage_claim)
                    except CitationIntegrityViolation as exc:
                        violations.append(_violation(phase, field, index, exc))

            if isinstance(result, ReadinessScoringResult):
                for index, score in enumerate(result.dimension_scores):
                    checked += 1
                    missing = sorted(set(score.evidence) - context.chunk_ids)
                    if missing:
                        violations.append(
                            CitationViolation(
                                phase=phase,
                                field="dimension_scores",
                                index=index,
                                finding=score.dimension.value,
                                missing_chunk_ids=tuple(missing),
                                reason="cites chunks absent from context: "
                                + ", ".join(missing),
                            )
                        )

        return EvidenceEnforcementResult(
            checked_findings=checked, violations=tuple(violations)
        )


def downgrade_violations(
    results: Mapping[Phase, PhaseResult],
    violations: tuple[CitationViolation, ...],
) -> dict[Phase, PhaseResult]:
    """Return results with every violating finding downgraded and flagged."""
    flagged = {(v.phase, v.field, v.index) for v in violations}
    affected = {v.phase for v in violations}

    downgraded: dict[Phase, PhaseResult] = {}
    for phase, result in results.items():
        if phase not in affected:
            downgraded[phase] = result
            continue
        downgraded[phase] = result.map_findings(
            lambda field, index, finding, phase=phase: (
                finding.downgraded()
                if (phase, field, index) in flagged
                else finding
            )
        )
    return downgraded


def _violation(
    phase: Phase, field: str, index: int, exc: CitationIntegrityViolation
) -> CitationViolation:
    return CitationViolation(
        phase=phase,
        field=field,
        index=index,
        finding=exc.finding,
        missing_chunk_ids=exc.missing_chunk_ids,
        reason=exc.reason,
    )
