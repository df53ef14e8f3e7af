"""Fixed readiness weights. The values are part of the scoring contract."""

from cr_validator.scoring.domain.dimension import Dimension

WEIGHTS: dict[Dimension, float] = {
    Dimension.FUNCTIONAL_ALIGNMENT: 0.25,
    Dimension.AC: 0.15,
    Dimension.BUSINESS_RULES: 0.15,
    Dimension.NFR: 0.15,
    Dimension.AMBIGUITY: 0.10,
    Dimension.RISK: 0.10,
    Dimension.TRACEABILITY: 0.10,
}

# Dimensions where a higher raw score is worse; contributed as 100 - raw.
INVERTED: frozenset[Dimension] = frozenset({Dimension.AMBIGUITY, Dimension.RISK})
