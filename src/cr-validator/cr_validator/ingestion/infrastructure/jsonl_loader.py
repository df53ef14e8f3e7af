"""Load SourceDocuments from a JSONL file, one document per line."""

from pathlib import Path

from pydantic import ValidationError

from cr_validator.ingestion.domain.document import SourceDocument
from cr_validator.ingestion.infrastructure.errors import DocumentLoadError


def load_documents(path: Path) -> list[SourceDocument]:
    """Parse every line of path into a SourceDocument.

    Raises:
        DocumentLoadError: if the file is missing, empty, repeats a doc id, or
            has invalid lines (every bad line is reported).
    """
    try:
        with open(path, encoding="utf-8") as fh:
            lines = [line for line in fh if line.strip()]
    except FileNotFoundError as exc:
        raise DocumentLoadError(path=str(path), reason="file not found") from exc

    if not lines:
        raise DocumentLoadError(path=str(path), reason="file contains no documents")

    documents: list[SourceDocument] = []
    errors: list[str] = []
    for index, line in enumerate(lines):
        try:
            documents.append(SourceDocument.model_validate_json(line))
        except ValidationError as exc:
            errors.append(f"line {index}: {exc.error_count()} validation error(s)")
    if errors:
        raise DocumentLoadError(path=str(path), reason="; ".join(errors))

    doc_ids = [d.doc_id for d in documents]
    duplicated = sorted({d for d in doc_ids if doc_ids.count(d) > 1})
    if duplicated:
        raise DocumentLoadError(
            path=str(path), reason=f"duplicate doc ids: {', '.join(duplicated)}"
        )
    return documents
