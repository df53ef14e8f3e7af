"""Finding: one gap, risk, ambiguity or coverage claim produced by a phase."""

from enum import StrEnum

from pydantic import BaseModel, Field


class Severity(StrEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class Confidence(StrEnum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class Finding(BaseModel, frozen=True):
    """An evidence-bearing claim. evidence lists the cited chunk ids."""

    description: str = Field(min_length=1)
    severity: Severity = Severity.MEDIUM
    confidence: Confidence = Confidence.HIGH
    evidence: tuple[str, ...] = ()
    claims_coverage: bool = False
    citation_violation: bool = False

    def downgraded(self) -> "Finding":
        """Copy flagged as a citation violation with low confidence."""
        return self.model_copy(
            update={"confidence": Confidence.LOW, "citation_violation": True}
        )
