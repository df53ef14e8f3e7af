"""CRChunk and ExpandedContext: retrievable units of CR and related document text."""

import hashlib
from collections.abc import Iterable
from enum import StrEnum

from pydantic import BaseModel, Field

type ChunkId = str
type DocId = str


class SourceType(StrEnum):
    CR = "cr"
    TECH_DOC = "tech_doc"
    NFR = "nfr"
    DEFECT = "defect"
    RELEASE = "release"


def compute_checksum(text: str) -> str:
    """Return the SHA-256 hex digest of the chunk text."""
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


class CRChunk(BaseModel, frozen=True):
    """One retrievable section of a CR, tech doc, NFR, defect or release note.

    relevance_score is attached per query by the vector store; it is not a
    property of the stored chunk and is None outside a search result.
    """

    chunk_id: ChunkId = Field(min_length=1)
    doc_id: DocId = Field(min_length=1)
    version: str = Field(min_length=1)
    section_id: str = Field(min_length=1)
    project_id: str = ""
    source_type: SourceType
    text: str
    checksum: str = Field(min_length=1)
    linked_doc_ids: tuple[DocId, ...] = ()
    relevance_score: float | None = None

    @property
    def dedup_key(self) -> tuple[str, str]:
        return (self.doc_id, self.section_id)

    def with_relevance(self, score: float) -> "CRChunk":
        return self.model_copy(update={"relevance_score": score})


def cr_versions(chunks: Iterable[CRChunk]) -> dict[DocId, str]:
    """Map each CR document among chunks to its version."""
    return {
        chunk.doc_id: chunk.version
        for chunk in chunks
        if chunk.source_type == SourceType.CR
    }


def rank_key(chunk: CRChunk) -> tuple[float, str, str]:
    """Sort key: descending relevance, ties broken by (doc_id, section_id)."""
    score = chunk.relevance_score if chunk.relevance_score is not None else 0.0
    return (-score, chunk.doc_id, chunk.section_id)


class ExpandedContext(BaseModel, frozen=True):
    """Ordered chunks available to the analysis phases for one validation run.

    Relevant chunks come first in rank order, followed by chunks pulled in by
    metadata linkage. An empty context is a valid "no applicable CR context"
    state.
    """

    chunks: tuple[CRChunk, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.chunks

    @property
    def chunk_ids(self) -> frozenset[ChunkId]:
        return frozenset(chunk.chunk_id for chunk in self.chunks)

    def cr_versions(self) -> dict[DocId, str]:
        """Map each CR document present in the context to its version."""
        return cr_versions(self.chunks)
