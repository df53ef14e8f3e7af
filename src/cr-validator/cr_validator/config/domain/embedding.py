"""Embedding provider configuration model."""

from pydantic import BaseModel, Field


class EmbeddingConfig(BaseModel, frozen=True):
    model: str = Field(min_length=1)
    dimensions: int = Field(ge=1)
    timeout_seconds: float = Field(default=10.0, gt=0.0)
