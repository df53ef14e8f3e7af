"""ReportSink Protocol and the report naming contract."""

from datetime import UTC, datetime
from pathlib import Path
from typing import Protocol

TIMESTAMP_FORMAT = "%Y%m%dT%H%M%SZ"


def report_filename(story_id: str, validation_id: str, created_at: datetime) -> str:
    """Return '{story_id}_{validation_id}_{timestamp}.html' with a UTC timestamp."""
    timestamp = created_at.astimezone(UTC).strftime(TIMESTAMP_FORMAT)
    return f"{story_id}_{validation_id}_{timestamp}.html"


class ReportSink(Protocol):
    """Persists a rendered HTML report and returns where it was written."""

    async def persist(
        self,
        html: str,
        story_id: str,
        validation_id: str,
        created_at: datetime,
    ) -> Path: ...
