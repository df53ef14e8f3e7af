"""Tests for InMemoryVectorStore."""

from pathlib import Path

import pytest

from cr_validator.retrieval.domain.vector_store import EmbeddedChunk, SearchFilters
from cr_validator.retrieval.infrastructure.errors import VectorStoreError
from cr_validator.retrieval.infrastructure.memory_store import InMemoryVectorStore
from tests.retrieval.fake_vector_store import make_chunk


def _entry(
    doc_id: str = "CR-001", section_id: str = "s1", vector: tuple[float, ...] = (1, 0)
) -> EmbeddedChunk:
    return EmbeddedChunk(
        chunk=make_chunk(doc_id=doc_id, section_id=section_id, score=None),
        vector=vector,
    )


class TestCosineScoring:
    async def test_parallel_and_orthogonal(self) -> None:
        store = InMemoryVectorStore(
            [
                _entry(section_id="parallel", vector=(2.0, 0.0)),
                _entry(section_id="orthogonal", vector=(0.0, 1.0)),
            ]
        )

        chunks = await store.search((1.0, 0.0), top_k=2, filters=SearchFilters())

        scores = {c.section_id: c.relevance_score for c in chunks}
        assert scores["parallel"] == pytest.approx(1.0)
        assert scores["orthogonal"] == pytest.approx(0.0)

    async def test_zero_vector_scores_zero(self) -> None:
        store = InMemoryVectorStore([_entry(vector=(0.0, 0.0))])

        chunks = await store.search((1.0, 0.0), top_k=1, filters=SearchFilters())

        assert chunks[0].relevance_score == 0.0

    async def test_empty_store_returns_nothing(self) -> None:
        chunks = await InMemoryVectorStore().search(
            (1.0, 0.0), top_k=3, filters=SearchFilters()
        )

        assert chunks == []


class TestSearch:
    async def test_ranks_by_similarity_with_clamped_scores(self) -> None:
        store = InMemoryVectorStore(
            [
                _entry(section_id="far", vector=(-1.0, 0.0)),
                _entry(section_id="near", vector=(1.0, 0.1)),
                _entry(section_id="exact", vector=(1.0, 0.0)),
            ]
        )

        chunks = await store.search((1.0, 0.0), top_k=3, filters=SearchFilters())

        assert [c.section_id for c in chunks] == ["exact", "near", "far"]
        assert chunks[0].relevance_score == pytest.approx(1.0)
        assert chunks[-1].relevance_score == 0.0

    async def test_filters_applied_before_ranking(self) -> None:
        store = InMemoryVectorStore(
            [_entry(doc_id="CR-001"), _entry(doc_id="CR-002")]
        )

        chunks = await store.search(
            (1.0, 0.0), top_k=5, filters=SearchFilters(doc_ids=frozenset({"CR-002"}))
        )

        assert [c.doc_id for c in chunks] == ["CR-002"]

    async def test_dimension_mismatch_raises(self) -> None:
        store = InMemoryVectorStore([_entry(vector=(1.0, 0.0, 0.0))])

        with pytest.raises(VectorStoreError, match="dimension mismatch"):
            await store.search((1.0, 0.0), top_k=1, filters=SearchFilters())


class TestWrites:
    async def test_index_rejects_duplicate_chunk_ids(self) -> None:
        store = InMemoryVectorStore([_entry()])

        with pytest.raises(VectorStoreError, match="already indexed"):
            await store.index_document([_entry()])

    async def test_delete_by_doc_id_counts_removed(self) -> None:
        store = InMemoryVectorStore(
            [_entry(section_id="a"), _entry(section_id="b"), _entry(doc_id="X")]
        )

        assert await store.delete_by_doc_id("CR-001") == 2
        assert len(store) == 1

    async def test_update_rejects_chunks_of_other_documents(self) -> None:
        store = InMemoryVectorStore()

        with pytest.raises(VectorStoreError, match="contains chunks of X"):
            await store.update_document("CR-001", [_entry(doc_id="X")])


class TestPersistence:
    async def test_dump_then_load(self, tmp_path: Path) -> None:
        path = tmp_path / "index" / "index.jsonl"
        InMemoryVectorStore([_entry(section_id="a"), _entry(section_id="b")]).dump(
            path
        )

        loaded = InMemoryVectorStore.load(path)

        assert len(loaded) == 2

    def test_load_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(VectorStoreError, match="not found"):
            InMemoryVectorStore.load(tmp_path / "absent.jsonl")

    def test_load_reports_bad_lines(self, tmp_path: Path) -> None:
        path = tmp_path / "index.jsonl"
        path.write_text("{}\n")

        with pytest.raises(VectorStoreError, match="line 0"):
            InMemoryVectorStore.load(path)

    def test_load_directory_raises_store_error(self, tmp_path: Path) -> None:
        with pytest.raises(VectorStoreError, match="cannot read"):
            InMemoryVectorStore.load(tmp_path)

    def test_load_invalid_utf8_raises_store_error(self, tmp_path: Path) -> None:
        path = tmp_path / "index.jsonl"
        path.write_bytes(b"\xff\xfe\x00broken\n")

        with pytest.raises(VectorStoreError, match="cannot read"):
            InMemoryVectorStore.load(path)


class TestMatrixConsistency:
    def test_mixed_dimensions_rejected(self) -> None:
        with pytest.raises(VectorStoreError, match="mixed embedding dimensions"):
            InMemoryVectorStore([_entry(section_id="a"), _entry(vector=(1, 0, 0))])

    async def test_index_rejects_other_dimension(self) -> None:
        store = InMemoryVectorStore([_entry()])

        with pytest.raises(VectorStoreError, match=r"\[2, 3\]"):
            await store.index_document([_entry(section_id="b", vector=(1, 0, 0))])

    async def test_search_after_delete_uses_remaining_rows(self) -> None:
        store = InMemoryVectorStore(
            [
                _entry(doc_id="CR-001", vector=(1.0, 0.0)),
                _entry(doc_id="CR-002", vector=(0.0, 1.0)),
            ]
        )
        await store.delete_by_doc_id("CR-001")

        chunks = await store.search((0.0, 1.0), top_k=5, filters=SearchFilters())

        assert [c.doc_id for c in chunks] == ["CR-002"]
        assert chunks[0].relevance_score == pytest.approx(1.0)

    async def test_emptied_store_accepts_new_dimension(self) -> None:
        store = InMemoryVectorStore([_entry()])
        await store.delete_by_doc_id("CR-001")

        await store.index_document([_entry(vector=(0.0, 0.0, 1.0))])

        assert store.dimension == 3
