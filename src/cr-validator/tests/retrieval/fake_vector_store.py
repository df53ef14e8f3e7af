"""Fake vector stores and chunk builders for retrieval tests."""

from collections.abc import Sequence

from cr_validator.embedding.domain.embedder import Vector
from cr_validator.retrieval.domain.chunk import (
    CRChunk,
    DocId,
    SourceType,
    compute_checksum,
)
from cr_validator.retrieval.domain.vector_store import EmbeddedChunk, SearchFilters


def make_chunk(
    doc_id: str = "CR-001",
    section_id: str = "s1",
    score: float | None = 0.9,
    source_type: SourceType = SourceType.CR,
    project_id: str = "",
    linked_doc_ids: tuple[str, ...] = (),
    text: str | None = None,
    version: str = "1",
) -> CRChunk:
    body = text if text is not None else f"{doc_id} section {section_id}"
    return CRChunk(
        chunk_id=f"{doc_id}#{section_id}",
        doc_id=doc_id,
        version=version,
        section_id=section_id,
        project_id=project_id,
        source_type=source_type,
        text=body,
        checksum=compute_checksum(body),
        linked_doc_ids=linked_doc_ids,
        relevance_score=score,
    )


class LeakyVectorStore:
    """Returns its preset chunks for every search, ignoring filters.

    Models an adapter that does not honour the hard filter, so the retriever's
    own filtering can be asserted. Records every search's filters.
    """

    def __init__(self, results: Sequence[Sequence[CRChunk]]) -> None:
        self._results = [list(r) for r in results]
        self.searches: list[SearchFilters] = []

    async def search(
        self, vector: Vector, top_k: int, filters: SearchFilters
    ) -> list[CRChunk]:
        self.searches.append(filters)
        if not self._results:
            return []
        if len(self._results) == 1:
            return list(self._results[0])
        return self._results.pop(0)

    async def index_document(self, chunks: Sequence[EmbeddedChunk]) -> None:
        raise NotImplementedError

    async def delete_by_doc_id(self, doc_id: DocId) -> int:
        raise NotImplementedError

    async def update_document(
        self, doc_id: DocId, chunks: Sequence[EmbeddedChunk]
    ) -> None:
        raise NotImplementedError
