"""MemoizingEmbedder: per-run cache in front of an Embedder."""

import asyncio

from cr_validator.embedding.domain.embedder import Embedder, Vector
from cr_validator.embedding.domain.observer import EmbeddingObserver


def normalize_text(text: str) -> str:
    """Cache key: whitespace collapsed, stripped, case-folded."""
    return " ".join(text.split()).casefold()


class MemoizingEmbedder:
    """Satisfies the Embedder protocol; identical text is embedded at most once.

    Construct one instance per validation run and discard it afterwards; the
    cache is never shared across runs or persisted. Concurrent requests for the
    same key share a single in-flight call.
    """

    def __init__(self, inner: Embedder, observer: EmbeddingObserver) -> None:
        self._inner = inner
        self._observer = observer
        self._cache: dict[str, Vector] = {}
        self._locks: dict[str, asyncio.Lock] = {}

    async def embed(self, text: str) -> Vector:
        key = normalize_text(text)
        lock = self._locks.setdefault(key, asyncio.Lock())
        async with lock:
            cached = self._cache.get(key)
            if cached is not None:
                self._observer.embedding_cache_hit(text_chars=len(text))
                return cached
            vector = await self._inner.embed(text)
            self._cache[key] = vector
            return vector
