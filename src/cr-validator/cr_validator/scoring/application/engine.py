"""ScoringEngine: weighted aggregation of dimension scores and risk banding."""

import math
from collections import Counter
from collections.abc import Iterable, Mapping

from cr_validator.scoring.application.errors import (
    IncompleteScoreSet,
    ScoringConfigError,
)
from cr_validator.scoring.domain.dimension import Dimension, DimensionScore
from cr_validator.scoring.domain.readiness import (
    ReadinessScore,
    RiskBand,
    WeightedComponent,
)
from cr_validator.scoring.domain.weights import INVERTED, WEIGHTS

LOW_RISK_THRESHOLD = 80.0
MEDIUM_RISK_THRESHOLD = 60.0


class ScoringEngine:
    """Pure, deterministic readiness scoring.

    The weight table is checked once, at construction: every dimension must be
    weighted and the weights must sum to 1.0.
    """

    def __init__(self, weights: Mapping[Dimension, float] = WEIGHTS) -> None:
        missing = sorted(d.value for d in Dimension if d not in weights)
        if missing:
            raise ScoringConfigError(f"no weight for {', '.join(missing)}")
        total = sum(weights.values())
        if not math.isclose(total, 1.0, abs_tol=1e-9):
            raise ScoringConfigError(f"weights sum to {total}, expected 1.0")
        self._weights = dict(weights)

    def calculate_readiness_score(
        self, scores: Iterable[DimensionScore]
    ) -> ReadinessScore:
        """Aggregate exactly one score per dimension into a 0-100 overall.

        Raises:
            IncompleteScoreSet: if any dimension is missing or repeated.
        """
        scores = tuple(scores)
        counts = Counter(score.dimension for score in scores)
        missing = [d.value for d in Dimension if counts[d] == 0]
        duplicated = [d.value for d, n in counts.items() if n > 1]
        if missing or duplicated:
            raise IncompleteScoreSet(missing=missing, duplicated=duplicated)

        by_dimension = {score.dimension: score for score in scores}
        breakdown: list[WeightedComponent] = []
        for dimension in Dimension:
            raw = by_dimension[dimension].score
            effective = 100.0 - raw if dimension in INVERTED else raw
            weight = self._weights[dimension]
            breakdown.append(
                WeightedComponent(
                    dimension=dimension,
                    raw=raw,
                    effective=effective,
                    weight=weight,
                    contribution=round(effective * weight, 4),
                )
            )

        total = sum(c.effective * c.weight for c in breakdown)
        overall = round(min(100.0, max(0.0, total)), 2)
        weakest = min(breakdown, key=lambda c: (c.effective, c.dimension.value))
        return ReadinessScore(
            overall=overall,
            breakdown=tuple(breakdown),
            rationale=(
                f"Weighted readiness {overall:g}/100; weakest dimension is "
                f"{weakest.dimension.value} at {weakest.effective:g}."
            ),
        )

    def classify_risk(self, overall: float) -> RiskBand:
        if overall >= LOW_RISK_THRESHOLD:
            return RiskBand.LOW
        if overall >= MEDIUM_RISK_THRESHOLD:
            return RiskBand.MEDIUM
        return RiskBand.HIGH
