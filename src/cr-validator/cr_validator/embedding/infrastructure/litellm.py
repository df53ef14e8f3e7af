"""LiteLLMEmbedder: embedder implementation using LiteLLM."""

import time
from typing import Any

import litellm

from cr_validator.config.domain.embedding import EmbeddingConfig
from cr_validator.core.provider_errors import is_retriable, is_timeout
from cr_validator.embedding.domain.embedder import Vector
from cr_validator.embedding.domain.observer import EmbeddingObserver
from cr_validator.embedding.infrastructure.errors import EmbeddingFailure


class LiteLLMEmbedder:
    """Embedder that delegates to any LiteLLM-supported embedding model."""

    def __init__(self, config: EmbeddingConfig, observer: EmbeddingObserver) -> None:
        self._config = config
        self._observer = observer

    async def embed(self, text: str) -> Vector:
        """Embed a single text.

        Raises:
            EmbeddingFailure: retriable on timeout or transient provider error;
                not retriable on a malformed response or wrong dimensionality.
        """
        self._observer.embedding_requested(
            model=self._config.model, text_chars=len(text)
        )
        start = time.monotonic()
        try:
            response = await litellm.aembedding(
                model=self._config.model,
                input=[text],
                timeout=self._config.timeout_seconds,
            )
        except Exception as exc:
            reason = "provider timed out" if is_timeout(exc) else str(exc)
            self._observer.embedding_failed(model=self._config.model, reason=reason)
            raise EmbeddingFailure(reason=reason, retriable=is_retriable(exc)) from exc

        try:
            vector = _extract_vector(response)
        except (AttributeError, IndexError, KeyError, TypeError, ValueError) as exc:
            reason = f"malformed response: {exc}"
            self._observer.embedding_failed(model=self._config.model, reason=reason)
            raise EmbeddingFailure(reason=reason) from exc

        if len(vector) != self._config.dimensions:
            reason = (
                f"expected {self._config.dimensions} dimensions, got {len(vector)}"
            )
            self._observer.embedding_failed(model=self._config.model, reason=reason)
            raise EmbeddingFailure(reason=reason)

        self._observer.embedding_completed(
            model=self._config.model,
            duration_ms=int((time.monotonic() - start) * 1000),
        )
        return vector


def _extract_vector(response: Any) -> Vector:
    item = response.data[0]
    raw = item["embedding"] if isinstance(item, dict) else item.embedding
    if not raw:
        raise ValueError("empty embedding")
    return tuple(float(value) for value in raw)
