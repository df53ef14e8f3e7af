"""Structlog implementation of the IngestionObserver port."""

import structlog


class StructlogIngestionObserver:
    """Delegates ingestion events to structlog.

    Satisfies the IngestionObserver protocol structurally.
    """

    def __init__(self) -> None:
        self._log = structlog.get_logger()

    def ingestion_document_indexed(
        self, doc_id: str, version: str, chunks: int
    ) -> None:
        self._log.info(
            "ingestion.document.indexed",
            doc_id=doc_id,
            version=version,
            chunks=chunks,
        )

    def ingestion_completed(self, documents: int, chunks: int) -> None:
        self._log.info("ingestion.completed", documents=documents, chunks=chunks)
