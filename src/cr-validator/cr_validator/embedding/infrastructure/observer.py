"""Structlog implementation of the EmbeddingObserver port."""

import structlog


class StructlogEmbeddingObserver:
    """Delegates embedding domain events to structlog.

    Satisfies the EmbeddingObserver protocol structurally.
    """

    def __init__(self) -> None:
        self._log = structlog.get_logger()

    def embedding_requested(self, model: str, text_chars: int) -> None:
        self._log.debug("embedding.requested", model=model, text_chars=text_chars)

    def embedding_completed(self, model: str, duration_ms: int) -> None:
        self._log.info("embedding.completed", model=model, duration_ms=duration_ms)

    def embedding_failed(self, model: str, reason: str) -> None:
        self._log.error("embedding.failed", model=model, reason=reason)

    def embedding_cache_hit(self, text_chars: int) -> None:
        self._log.debug("embedding.cache_hit", text_chars=text_chars)
