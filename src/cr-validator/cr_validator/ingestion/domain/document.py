"""SourceDocument: a CR, tech doc, NFR, defect or release note awaiting ingestion."""

from pydantic import BaseModel, Field, model_validator

from cr_validator.retrieval.domain.chunk import (
    ChunkId,
    CRChunk,
    DocId,
    SourceType,
    compute_checksum,
)


class SourceSection(BaseModel, frozen=True):
    section_id: str = Field(min_length=1)
    text: str = Field(min_length=1)


class SourceDocument(BaseModel, frozen=True):
    """One versioned document, already split into sections by its author."""

    doc_id: DocId = Field(min_length=1)
    version: str = Field(min_length=1)
    source_type: SourceType
    project_id: str = ""
    linked_doc_ids: tuple[DocId, ...] = ()
    sections: tuple[SourceSection, ...] = Field(min_length=1)

    @model_validator(mode="after")
    def _unique_sections(self) -> "SourceDocument":
        ids = [s.section_id for s in self.sections]
        duplicated = sorted({i for i in ids if ids.count(i) > 1})
        if duplicated:
            raise ValueError(f"duplicate section ids: {', '.join(duplicated)}")
        return self

    def chunk_id(self, section: SourceSection) -> ChunkId:
        return f"{self.doc_id}#{section.section_id}"

    def to_chunks(self) -> tuple[CRChunk, ...]:
        """One chunk per section, carrying the document's metadata."""
        return tuple(
            CRChunk(
                chunk_id=self.chunk_id(section),
                doc_id=self.doc_id,
                version=self.version,
                section_id=section.section_id,
                project_id=self.project_id,
                source_type=self.source_type,
                text=section.text,
                checksum=compute_checksum(section.text),
                linked_doc_ids=self.linked_doc_ids,
            )
            for section in self.sections
        )
