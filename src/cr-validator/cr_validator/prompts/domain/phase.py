"""Phase: the eight analysis phases of a validation run and their dependencies."""

from enum import StrEnum


class Phase(StrEnum):
    FUNCTIONAL_ALIGNMENT = "functional_alignment"
    AC_GAP_DETECTION = "ac_gap_detection"
    BUSINESS_RULE_VALIDATION = "business_rule_validation"
    NFR_VALIDATION = "nfr_validation"
    AMBIGUITY_DETECTION = "ambiguity_detection"
    RISK_CLASSIFICATION = "risk_classification"
    READINESS_SCORING = "readiness_scoring"
    EVIDENCE_ENFORCEMENT = "evidence_enforcement"


# Phases with no dependency on one another; dispatched concurrently.
INDEPENDENT_PHASES: tuple[Phase, ...] = (
    Phase.FUNCTIONAL_ALIGNMENT,
    Phase.AC_GAP_DETECTION,
    Phase.BUSINESS_RULE_VALIDATION,
    Phase.NFR_VALIDATION,
    Phase.AMBIGUITY_DETECTION,
)

# Phases that emit an LLM prompt. Evidence enforcement is computed locally.
GENERATIVE_PHASES: tuple[Phase, ...] = (
    *INDEPENDENT_PHASES,
    Phase.RISK_CLASSIFICATION,
    Phase.READINESS_SCORING,
)

PHASE_DEPENDENCIES: dict[Phase, tuple[Phase, ...]] = {
    **{phase: () for phase in INDEPENDENT_PHASES},
    Phase.RISK_CLASSIFICATION: INDEPENDENT_PHASES,
    Phase.READINESS_SCORING: (*INDEPENDENT_PHASES, Phase.RISK_CLASSIFICATION),
    Phase.EVIDENCE_ENFORCEMENT: GENERATIVE_PHASES,
}
