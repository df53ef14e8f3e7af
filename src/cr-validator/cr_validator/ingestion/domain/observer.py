"""IngestionObserver port: events emitted while indexing documents."""

from typing import Protocol


class IngestionObserver(Protocol):
    def ingestion_document_indexed(
        self, doc_id: str, version: str, chunks: int
    ) -> None: ...

    def ingestion_completed(self, documents: int, chunks: int) -> None: ...
