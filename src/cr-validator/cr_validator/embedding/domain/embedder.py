"""Embedder Protocol: structural interface for turning text into a vector."""

from typing import Protocol

type Vector = tuple[float, ...]


class Embedder(Protocol):
    """Embeds free text into a vector of fixed dimensionality.

    Raises EmbeddingFailure on provider timeout or a malformed response. There
    is no zero-vector fallback.
    """

    async def embed(self, text: str) -> Vector: ...
