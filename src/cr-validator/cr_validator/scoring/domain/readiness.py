"""ReadinessScore and RiskBand: the aggregate outcome of a validation run."""

from enum import StrEnum

from pydantic import BaseModel, Field

from cr_validator.scoring.domain.dimension import Dimension


class RiskBand(StrEnum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


class WeightedComponent(BaseModel, frozen=True):
    """One dimension's contribution to the overall score."""

    dimension: Dimension
    raw: float = Field(ge=0.0, le=100.0)
    effective: float = Field(ge=0.0, le=100.0)
    weight: float
    contribution: float


class ReadinessScore(BaseModel, frozen=True):
    overall: float = Field(ge=0.0, le=100.0)
    breakdown: tuple[WeightedComponent, ...]
    rationale: str = ""
