"""Structlog implementation of the RetrievalObserver port."""

import structlog


class StructlogRetrievalObserver:
    """Delegates retrieval domain events to structlog.

    Satisfies the RetrievalObserver protocol structurally.
    """

    def __init__(self) -> None:
        self._log = structlog.get_logger()

    def retrieval_search_completed(
        self, allowed_doc_ids: list[str], top_k: int, returned: int
    ) -> None:
        self._log.info(
            "retrieval.search.completed",
            allowed_doc_ids=allowed_doc_ids,
            top_k=top_k,
            returned=returned,
        )

    def retrieval_foreign_chunk_dropped(self, chunk_id: str, doc_id: str) -> None:
        self._log.warning(
            "retrieval.foreign_chunk_dropped", chunk_id=chunk_id, doc_id=doc_id
        )

    def retrieval_relevance_filtered(
        self, kept: int, dropped: int, threshold: float
    ) -> None:
        self._log.info(
            "retrieval.relevance_filtered",
            kept=kept,
            dropped=dropped,
            threshold=threshold,
        )

    def retrieval_context_expanded(
        self, relevant: int, expanded: int, total: int
    ) -> None:
        self._log.info(
            "retrieval.context_expanded",
            relevant=relevant,
            expanded=expanded,
            total=total,
        )
