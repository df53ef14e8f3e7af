"""FakeIngestionObserver: records ingestion events for assertion in tests."""


class FakeIngestionObserver:
    def __init__(self) -> None:
        self.indexed: list[tuple[str, str, int]] = []
        self.completed: list[tuple[int, int]] = []

    def ingestion_document_indexed(self, doc_id: str, version: str, chunks: int) -> None:
        self.indexed.append((doc_id, version, chunks))

    def ingestion_completed(self, documents: int, chunks: int) -> None:
        self.completed.append((documents, chunks))
