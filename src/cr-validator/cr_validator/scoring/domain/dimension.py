"""Readiness dimensions and per-dimension scores."""

from enum import StrEnum

from pydantic import BaseModel, Field


class Dimension(StrEnum):
    FUNCTIONAL_ALIGNMENT = "functional_alignment"
    AC = "ac"
    BUSINESS_RULES = "business_rules"
    NFR = "nfr"
    AMBIGUITY = "ambiguity"
    RISK = "risk"
    TRACEABILITY = "traceability"


class DimensionScore(BaseModel, frozen=True):
    """Raw 0-100 score for one dimension, as produced by the readiness phase.

    For ambiguity and risk a high raw score is a worse outcome; inversion
    happens in the scoring engine, never here.
    """

    dimension: Dimension
    score: float = Field(ge=0.0, le=100.0)
    rationale: str = ""
    evidence: tuple[str, ...] = ()
