"""EmbeddingObserver port: domain events emitted while embedding text."""

from typing import Protocol


class EmbeddingObserver(Protocol):
    def embedding_requested(self, model: str, text_chars: int) -> None: ...

    def embedding_completed(self, model: str, duration_ms: int) -> None: ...

    def embedding_failed(self, model: str, reason: str) -> None: ...

    def embedding_cache_hit(self, text_chars: int) -> None: ...
