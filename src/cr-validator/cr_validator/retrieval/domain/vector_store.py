"""VectorStore Protocol and its value objects."""

from collections.abc import Sequence
from typing import Protocol

from pydantic import BaseModel

from cr_validator.embedding.domain.embedder import Vector
from cr_validator.retrieval.domain.chunk import CRChunk, DocId, SourceType


class SearchFilters(BaseModel, frozen=True):
    """Metadata filters applied before similarity ranking. None means unrestricted."""

    doc_ids: frozenset[DocId] | None = None
    source_types: frozenset[SourceType] | None = None
    project_ids: frozenset[str] | None = None

    def matches(self, chunk: CRChunk) -> bool:
        if self.doc_ids is not None and chunk.doc_id not in self.doc_ids:
            return False
        if self.source_types is not None and chunk.source_type not in self.source_types:
            return False
        if self.project_ids is not None and chunk.project_id not in self.project_ids:
            return False
        return True


class EmbeddedChunk(BaseModel, frozen=True):
    """A chunk paired with its stored embedding, as written by ingestion."""

    chunk: CRChunk
    vector: Vector


class VectorStore(Protocol):
    """Opaque nearest-neighbour service over ingested chunks.

    search returns chunks carrying a per-query relevance_score in [0, 1],
    ranked by descending relevance. The write operations belong to the offline
    ingestion pipeline and are never called on the validation path.
    """

    async def search(
        self, vector: Vector, top_k: int, filters: SearchFilters
    ) -> list[CRChunk]: ...

    async def index_document(self, chunks: Sequence[EmbeddedChunk]) -> None: ...

    async def delete_by_doc_id(self, doc_id: DocId) -> int: ...

    async def update_document(
        self, doc_id: DocId, chunks: Sequence[EmbeddedChunk]
    ) -> None: ...
