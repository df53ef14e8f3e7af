"""RetrievalObserver port: domain events emitted while assembling context."""

from typing import Protocol


class RetrievalObserver(Protocol):
    def retrieval_search_completed(
        self, allowed_doc_ids: list[str], top_k: int, returned: int
    ) -> None: ...

    def retrieval_foreign_chunk_dropped(self, chunk_id: str, doc_id: str) -> None: ...

    def retrieval_relevance_filtered(
        self, kept: int, dropped: int, threshold: float
    ) -> None: ...

    def retrieval_context_expanded(
        self, relevant: int, expanded: int, total: int
    ) -> None: ...
