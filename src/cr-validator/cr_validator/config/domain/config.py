"""Top-level ValidatorConfig aggregate: the root configuration object."""

from pydantic import BaseModel, Field

from cr_validator.config.domain.embedding import EmbeddingConfig
from cr_validator.config.domain.execution import ExecutionConfig
from cr_validator.config.domain.llm import LLMConfig
from cr_validator.config.domain.retrieval import RetrievalConfig
from cr_validator.config.domain.storage import StorageConfig


class ValidatorConfig(BaseModel, frozen=True):
    """Root configuration aggregate for a cr-validator deployment."""

    name: str = Field(min_length=1)
    version: str = Field(min_length=1)
    embedding: EmbeddingConfig
    retrieval: RetrievalConfig
    llm: LLMConfig
    execution: ExecutionConfig
    storage: StorageConfig
