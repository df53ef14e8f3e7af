"""Retry and time budgets for calls that leave the process."""

from pydantic import BaseModel, Field


class RetryConfig(BaseModel, frozen=True):
    """Bounded exponential backoff. max_attempts counts the first call."""

    max_attempts: int = Field(ge=1)
    initial_backoff_seconds: int = Field(ge=0)
    backoff_multiplier: int = Field(ge=1)

    def backoff_after(self, failed_attempt: int) -> float:
        return float(
            self.initial_backoff_seconds
            * self.backoff_multiplier ** (failed_attempt - 1)
        )


class ExecutionConfig(BaseModel, frozen=True):
    retry: RetryConfig
    # Story lookup, and report/result writes. Embedding, retrieval and LLM
    # budgets live in their own sections.
    fetch_timeout_seconds: float = Field(default=10.0, gt=0.0)
    persist_timeout_seconds: float = Field(default=10.0, gt=0.0)
