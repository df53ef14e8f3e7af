"""ContextRetriever: ranked, hard-filtered retrieval plus metadata-linked expansion."""

from collections.abc import Collection, Iterable

from cr_validator.config.domain.retrieval import RetrievalConfig
from cr_validator.embedding.domain.embedder import Vector
from cr_validator.retrieval.domain.chunk import (
    CRChunk,
    DocId,
    ExpandedContext,
    SourceType,
    rank_key,
)
from cr_validator.retrieval.domain.observer import RetrievalObserver
from cr_validator.retrieval.domain.vector_store import SearchFilters, VectorStore


class ContextRetriever:
    """Turns a query vector and a caller-selected CR set into an ExpandedContext.

    allowed_doc_ids is a hard filter: the store is asked to honour it and every
    returned chunk is checked again here, so a CR the caller did not select can
    never reach the analysis phases regardless of its relevance.
    """

    def __init__(
        self,
        vector_store: VectorStore,
        config: RetrievalConfig,
        observer: RetrievalObserver,
    ) -> None:
        self._store = vector_store
        self._config = config
        self._observer = observer

    async def retrieve(
        self,
        query_vector: Vector,
        allowed_doc_ids: Collection[DocId],
        top_k: int,
    ) -> tuple[CRChunk, ...]:
        """Return up to top_k chunks from allowed documents, ranked."""
        allowed = frozenset(allowed_doc_ids)
        if not allowed:
            self._observer.retrieval_search_completed(
                allowed_doc_ids=[], top_k=top_k, returned=0
            )
            return ()

        found = await self._store.search(
            vector=query_vector,
            top_k=top_k,
            filters=SearchFilters(
                doc_ids=allowed, source_types=frozenset({SourceType.CR})
            ),
        )
        kept: list[CRChunk] = []
        for chunk in found:
            if chunk.doc_id not in allowed:
                self._observer.retrieval_foreign_chunk_dropped(
                    chunk_id=chunk.chunk_id, doc_id=chunk.doc_id
                )
                continue
            kept.append(chunk)

        ranked = tuple(sorted(kept, key=rank_key)[:top_k])
        self._observer.retrieval_search_completed(
            allowed_doc_ids=sorted(allowed), top_k=top_k, returned=len(ranked)
        )
        return ranked

    def filter_by_relevance(
        self, chunks: Iterable[CRChunk], threshold: float
    ) -> tuple[CRChunk, ...]:
        """Keep chunks scoring at or above threshold, preserving order."""
        chunks = tuple(chunks)
        kept = tuple(
            chunk
            for chunk in chunks
            if chunk.relevance_score is not None and chunk.relevance_score >= threshold
        )
        self._observer.retrieval_relevance_filtered(
            kept=len(kept), dropped=len(chunks) - len(kept), threshold=threshold
        )
        return kept

    async def expand_context(
        self,
        chunks: Iterable[CRChunk],
        query_vector: Vector,
        allowed_doc_ids: Collection[DocId],
    ) -> ExpandedContext:
        """Deduplicate relevant chunks and append metadata-linked related chunks.

        Related chunks are selected by metadata (explicitly linked doc ids, or a
        shared project id) and restricted to the configured expansion source
        types; similarity to the query only orders them. CR chunks outside
        allowed_doc_ids are never admitted.
        """
        allowed = frozenset(allowed_doc_ids)
        relevant = _dedupe(sorted(chunks, key=rank_key), seen=set())
        if not relevant:
            self._observer.retrieval_context_expanded(relevant=0, expanded=0, total=0)
            return ExpandedContext()

        related = await self._related_chunks(relevant, query_vector, allowed)
        seen = {chunk.dedup_key for chunk in relevant}
        expanded = _dedupe(sorted(related, key=rank_key), seen=seen)
        expanded = expanded[: self._config.expansion_top_k]

        context = ExpandedContext(chunks=(*relevant, *expanded))
        self._observer.retrieval_context_expanded(
            relevant=len(relevant),
            expanded=len(expanded),
            total=len(context.chunks),
        )
        return context

    async def _related_chunks(
        self,
        relevant: tuple[CRChunk, ...],
        query_vector: Vector,
        allowed: frozenset[DocId],
    ) -> list[CRChunk]:
        limit = self._config.expansion_top_k
        source_types = frozenset(self._config.expansion_source_types)
        if limit == 0 or not source_types:
            return []

        linked = frozenset(
            doc_id for chunk in relevant for doc_id in chunk.linked_doc_ids
        )
        projects = frozenset(chunk.project_id for chunk in relevant if chunk.project_id)

        filter_sets: list[SearchFilters] = []
        if linked:
            filter_sets.append(SearchFilters(doc_ids=linked, source_types=source_types))
        if projects:
            filter_sets.append(
                SearchFilters(project_ids=projects, source_types=source_types)
            )

        related: list[CRChunk] = []
        for filters in filter_sets:
            for chunk in await self._store.search(
                vector=query_vector, top_k=limit, filters=filters
            ):
                if chunk.source_type == SourceType.CR and chunk.doc_id not in allowed:
                    self._observer.retrieval_foreign_chunk_dropped(
                        chunk_id=chunk.chunk_id, doc_id=chunk.doc_id
                    )
                    continue
                if not filters.matches(chunk):
                    continue
                related.append(chunk)
        return related


def _dedupe(
    chunks: Iterable[CRChunk], seen: set[tuple[str, str]]
) -> tuple[CRChunk, ...]:
    """Keep the first chunk per (doc_id, section_id), in the given order."""
    unique: list[CRChunk] = []
    for chunk in chunks:
        if chunk.dedup_key in seen:
            continue
        seen.add(chunk.dedup_key)
        unique.append(chunk)
    return tuple(unique)
