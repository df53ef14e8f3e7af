"""DocumentIngestor: offline indexing of source documents into the vector store."""

import asyncio
from collections.abc import Sequence

from pydantic import BaseModel

from cr_validator.core.errors import ValidatorError
from cr_validator.embedding.domain.embedder import Embedder
from cr_validator.ingestion.domain.document import SourceDocument
from cr_validator.ingestion.domain.observer import IngestionObserver
from cr_validator.retrieval.domain.vector_store import EmbeddedChunk, VectorStore


class IngestionSummary(BaseModel, frozen=True):
    documents: int
    chunks: int


class DocumentIngestor:
    """Embeds every section of each document and replaces it in the store.

    Documents are written with update_document, so re-ingesting a new version
    of a document replaces all of its previous chunks. Never called on the
    validation path.
    """

    def __init__(
        self,
        embedder: Embedder,
        vector_store: VectorStore,
        observer: IngestionObserver,
    ) -> None:
        self._embedder = embedder
        self._store = vector_store
        self._observer = observer

    async def ingest(self, documents: Sequence[SourceDocument]) -> IngestionSummary:
        """Index documents in order. The first failure aborts the remainder."""
        total_chunks = 0
        for document in documents:
            total_chunks += await self._ingest_one(document)
        self._observer.ingestion_completed(
            documents=len(documents), chunks=total_chunks
        )
        return IngestionSummary(documents=len(documents), chunks=total_chunks)

    async def _ingest_one(self, document: SourceDocument) -> int:
        chunks = document.to_chunks()
        try:
            async with asyncio.TaskGroup() as tg:
                tasks = [tg.create_task(self._embedder.embed(c.text)) for c in chunks]
        except* ValidatorError as eg:
            raise eg.exceptions[0]

        embedded = [
            EmbeddedChunk(chunk=chunk, vector=task.result())
            for chunk, task in zip(chunks, tasks, strict=True)
        ]
        await self._store.update_document(document.doc_id, embedded)
        self._observer.ingestion_document_indexed(
            doc_id=document.doc_id,
            version=document.version,
            chunks=len(embedded),
        )
        return len(embedded)
