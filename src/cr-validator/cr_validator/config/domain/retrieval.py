"""Retrieval and context-expansion configuration model."""

from pydantic import BaseModel, Field

from cr_validator.retrieval.domain.chunk import SourceType


class RetrievalConfig(BaseModel, frozen=True):
    top_k: int = Field(default=10, ge=1)
    relevance_threshold: float = Field(default=0.75, ge=0.0, le=1.0)
    expansion_top_k: int = Field(default=5, ge=0)
    expansion_source_types: tuple[SourceType, ...] = (
        SourceType.TECH_DOC,
        SourceType.NFR,
    )
    timeout_seconds: float = Field(default=10.0, gt=0.0)
