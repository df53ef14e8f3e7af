"""InMemoryVectorStore: cosine-similarity store persisted as a JSONL index file."""

from collections.abc import Sequence
from pathlib import Path

import numpy as np
from pydantic import ValidationError
from sklearn.metrics.pairwise import cosine_similarity

from cr_validator.embedding.domain.embedder import Vector
from cr_validator.retrieval.domain.chunk import CRChunk, DocId, rank_key
from cr_validator.retrieval.domain.vector_store import EmbeddedChunk, SearchFilters
from cr_validator.retrieval.infrastructure.errors import VectorStoreError


class InMemoryVectorStore:
    """Satisfies the VectorStore protocol with an exact nearest-neighbour scan.

    Vectors are kept as one row per chunk in a numpy matrix, so every entry
    shares the same dimension. Relevance is cosine similarity clamped into
    [0, 1]; a zero vector scores 0.
    """

    def __init__(self, entries: Sequence[EmbeddedChunk] = ()) -> None:
        self._entries: list[EmbeddedChunk] = []
        self._matrix = np.empty((0, 0), dtype=np.float64)
        self._append(entries)

    @classmethod
    def load(cls, path: Path) -> "InMemoryVectorStore":
        """Load a store written by `dump`.

        Raises:
            VectorStoreError: if the file is missing or unreadable, or any line
                is malformed (every bad line is reported).
        """
        try:
            with open(path, encoding="utf-8") as fh:
                lines = [line for line in fh if line.strip()]
        except FileNotFoundError as exc:
            raise VectorStoreError(reason=f"index file not found: {path}") from exc
        except (OSError, UnicodeDecodeError) as exc:
            raise VectorStoreError(reason=f"cannot read {path}: {exc}") from exc

        entries: list[EmbeddedChunk] = []
        errors: list[str] = []
        for index, line in enumerate(lines):
            try:
                entries.append(EmbeddedChunk.model_validate_json(line))
            except ValidationError as exc:
                errors.append(f"line {index}: {exc.error_count()} validation error(s)")
        if errors:
            raise VectorStoreError(reason="; ".join(errors))
        return cls(entries)

    def dump(self, path: Path) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as fh:
            for entry in self._entries:
                fh.write(entry.model_dump_json() + "\n")

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def dimension(self) -> int | None:
        return self._matrix.shape[1] if self._entries else None

    def _append(self, chunks: Sequence[EmbeddedChunk]) -> None:
        dimensions = {len(entry.vector) for entry in chunks}
        if self.dimension is not None:
            dimensions.add(self.dimension)
        if len(dimensions) > 1:
            raise VectorStoreError(
                reason=f"mixed embedding dimensions: {sorted(dimensions)}"
            )
        if not chunks:
            return
        rows = np.array([entry.vector for entry in chunks], dtype=np.float64)
        self._matrix = np.vstack([self._matrix, rows]) if self._entries else rows
        self._entries.extend(chunks)

    async def search(
        self, vector: Vector, top_k: int, filters: SearchFilters
    ) -> list[CRChunk]:
        if not self._entries:
            return []
        if len(vector) != self.dimension:
            raise VectorStoreError(
                reason=(
                    f"dimension mismatch: index has {self.dimension},"
                    f" query has {len(vector)}"
                )
            )

        mask = np.array([filters.matches(entry.chunk) for entry in self._entries])
        if not mask.any():
            return []
        query = np.asarray(vector, dtype=np.float64).reshape(1, -1)
        similarities = np.clip(cosine_similarity(query, self._matrix[mask])[0], 0, 1)

        candidates = [e for e, keep in zip(self._entries, mask) if keep]
        scored = [
            entry.chunk.with_relevance(float(similarity))
            for entry, similarity in zip(candidates, similarities, strict=True)
        ]
        scored.sort(key=rank_key)
        return scored[:top_k]

    async def index_document(self, chunks: Sequence[EmbeddedChunk]) -> None:
        existing = {entry.chunk.chunk_id for entry in self._entries}
        duplicates = sorted(
            entry.chunk.chunk_id for entry in chunks if entry.chunk.chunk_id in existing
        )
        if duplicates:
            raise VectorStoreError(
                reason=f"chunk ids already indexed: {', '.join(duplicates)}"
            )
        self._append(chunks)

    async def delete_by_doc_id(self, doc_id: DocId) -> int:
        keep = np.array([e.chunk.doc_id != doc_id for e in self._entries], dtype=bool)
        removed = int((~keep).sum())
        if removed:
            self._entries = [e for e, kept in zip(self._entries, keep) if kept]
            self._matrix = self._matrix[keep]
        return removed

    async def update_document(
        self, doc_id: DocId, chunks: Sequence[EmbeddedChunk]
    ) -> None:
        foreign = sorted({e.chunk.doc_id for e in chunks if e.chunk.doc_id != doc_id})
        if foreign:
            raise VectorStoreError(
                reason=f"update for '{doc_id}' contains chunks of {', '.join(foreign)}"
            )
        await self.delete_by_doc_id(doc_id)
        await self.index_document(chunks)
