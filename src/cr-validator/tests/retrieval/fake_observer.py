"""FakeRetrievalObserver: records retrieval events for assertion in tests."""

from dataclasses import dataclass


@dataclass(frozen=True)
class SearchCompletedEvent:
    allowed_doc_ids: list[str]
    top_k: int
    returned: int


@dataclass(frozen=True)
class ForeignChunkDroppedEvent:
    chunk_id: str
    doc_id: str


@dataclass(frozen=True)
class RelevanceFilteredEvent:
    kept: int
    dropped: int
    threshold: float


@dataclass(frozen=True)
class ContextExpandedEvent:
    relevant: int
    expanded: int
    total: int


class FakeRetrievalObserver:
    def __init__(self) -> None:
        self.searches: list[SearchCompletedEvent] = []
        self.dropped: list[ForeignChunkDroppedEvent] = []
        self.filtered: list[RelevanceFilteredEvent] = []
        self.expanded: list[ContextExpandedEvent] = []

    def retrieval_search_completed(
        self, allowed_doc_ids: list[str], top_k: int, returned: int
    ) -> None:
        self.searches.append(
            SearchCompletedEvent(
                allowed_doc_ids=allowed_doc_ids, top_k=top_k, returned=returned
            )
        )

    def retrieval_foreign_chunk_dropped(self, chunk_id: str, doc_id: str) -> None:
        self.dropped.append(ForeignChunkDroppedEvent(chunk_id=chunk_id, doc_id=doc_id))

    def retrieval_relevance_filtered(
        self, kept: int, dropped: int, threshold: float
    ) -> None:
        self.filtered.append(
            RelevanceFilteredEvent(kept=kept, dropped=dropped, threshold=threshold)
        )

    def retrieval_context_expanded(
        self, relevant: int, expanded: int, total: int
    ) -> None:
        self.expanded.append(
            ContextExpandedEvent(relevant=relevant, expanded=expanded, total=total)
        )
