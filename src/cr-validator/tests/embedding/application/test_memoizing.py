"""Tests for the per-run MemoizingEmbedder."""

import asyncio

import pytest

from cr_validator.embedding.application.memoizing import (
    MemoizingEmbedder,
    normalize_text,
)
from cr_validator.embedding.infrastructure.errors import EmbeddingFailure
from tests.embedding.fake_embedder import FakeEmbedder
from tests.embedding.fake_observer import FakeEmbeddingObserver


class TestNormalizeText:
    def test_collapses_whitespace_and_case(self) -> None:
        assert normalize_text("  Refund\n a   PAYMENT ") == "refund a payment"


class TestMemoizingEmbedder:
    async def test_identical_text_embedded_once(self) -> None:
        inner = FakeEmbedder()
        observer = FakeEmbeddingObserver()
        embedder = MemoizingEmbedder(inner=inner, observer=observer)

        first = await embedder.embed("Refund a payment")
        second = await embedder.embed("refund  a payment")

        assert first == second
        assert inner.calls == ["Refund a payment"]
        assert observer.cache_hits == [len("refund  a payment")]

    async def test_different_text_embedded_separately(self) -> None:
        inner = FakeEmbedder(vectors={"a": (1.0, 0.0), "b": (0.0, 1.0)})
        embedder = MemoizingEmbedder(inner=inner, observer=FakeEmbeddingObserver())

        assert await embedder.embed("a") == (1.0, 0.0)
        assert await embedder.embed("b") == (0.0, 1.0)
        assert inner.calls == ["a", "b"]

    async def test_concurrent_requests_share_one_call(self) -> None:
        inner = FakeEmbedder(delay=0.01)
        embedder = MemoizingEmbedder(inner=inner, observer=FakeEmbeddingObserver())

        vectors = await asyncio.gather(*(embedder.embed("same") for _ in range(5)))

        assert len(set(vectors)) == 1
        assert inner.calls == ["same"]

    async def test_failure_is_not_cached(self) -> None:
        inner = FakeEmbedder(side_effects=[EmbeddingFailure(reason="quota")])
        embedder = MemoizingEmbedder(inner=inner, observer=FakeEmbeddingObserver())

        with pytest.raises(EmbeddingFailure):
            await embedder.embed("text")
        vector = await embedder.embed("text")

        assert vector == (1.0, 0.0, 0.0)
        assert len(inner.calls) == 2

    async def test_separate_instances_do_not_share_cache(self) -> None:
        inner = FakeEmbedder()
        observer = FakeEmbeddingObserver()

        await MemoizingEmbedder(inner=inner, observer=observer).embed("text")
        await MemoizingEmbedder(inner=inner, observer=observer).embed("text")

        assert len(inner.calls) == 2
        assert observer.cache_hits == []
