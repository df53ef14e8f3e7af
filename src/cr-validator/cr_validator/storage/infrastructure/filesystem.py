"""Filesystem adapters for the ResultStore and ReportSink ports."""

import asyncio
import re
from collections.abc import Callable, Mapping
from datetime import UTC, datetime
from pathlib import Path

from pydantic import BaseModel, ValidationError

from cr_validator.storage.domain.records import AuditEvent, Comment
from cr_validator.storage.domain.report_sink import report_filename
from cr_validator.storage.infrastructure.errors import (
    ReportPersistError,
    ResultStoreError,
)
from cr_validator.validation.domain.result import ValidationResult

_SAFE_ID = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._-]*$")


def _utc_now() -> datetime:
    return datetime.now(UTC)


def _check_id(kind: str, value: str) -> str | None:
    if _SAFE_ID.match(value):
        return None
    return f"{kind} '{value}' contains characters not allowed in a file name"


def _write_new(path: Path, payload: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "x", encoding="utf-8") as fh:
        fh.write(payload)


class FileResultStore:
    """Satisfies the ResultStore protocol with plain files under one directory.

    Layout::

        <root>/results/<validation_id>.json   one file per result, written once
        <root>/comments.jsonl                 append-only
        <root>/audit.jsonl                    append-only
    """

    def __init__(self, root: Path, clock: Callable[[], datetime] = _utc_now) -> None:
        self._root = root
        self._clock = clock
        self._append_lock = asyncio.Lock()

    @property
    def _results_dir(self) -> Path:
        return self._root / "results"

    @property
    def _comments_path(self) -> Path:
        return self._root / "comments.jsonl"

    @property
    def _audit_path(self) -> Path:
        return self._root / "audit.jsonl"

    async def save(self, result: ValidationResult) -> None:
        """Write result once.

        Raises:
            ResultStoreError: if a result with the same id already exists
                (never retriable) or the write fails.
        """
        problem = _check_id("validation id", result.validation_id)
        if problem:
            raise ResultStoreError(reason=problem)
        path = self._results_dir / f"{result.validation_id}.json"
        payload = result.model_dump_json(indent=2)
        try:
            await asyncio.to_thread(_write_new, path, payload)
        except FileExistsError as exc:
            raise ResultStoreError(
                reason=f"result '{result.validation_id}' already exists"
            ) from exc
        except OSError as exc:
            raise ResultStoreError(reason=str(exc), retriable=True) from exc

    async def find_by_id(self, validation_id: str) -> ValidationResult | None:
        if _check_id("validation id", validation_id):
            return None
        path = self._results_dir / f"{validation_id}.json"
        try:
            raw = await asyncio.to_thread(path.read_text, encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as exc:
            raise ResultStoreError(reason=str(exc), retriable=True) from exc
        try:
            return ValidationResult.model_validate_json(raw)
        except ValidationError as exc:
            raise ResultStoreError(
                reason=f"stored result '{validation_id}' is corrupt: {exc}"
            ) from exc

    async def add_comment(self, validation_id: str, author: str, text: str) -> Comment:
        """Append a comment to an existing result.

        Raises:
            ResultStoreError: if no result with validation_id exists.
        """
        if await self.find_by_id(validation_id) is None:
            raise ResultStoreError(reason=f"no result with id '{validation_id}'")
        comment = Comment(
            validation_id=validation_id,
            author=author,
            text=text,
            created_at=self._clock(),
        )
        await self._append(self._comments_path, comment)
        return comment

    async def comments_for(self, validation_id: str) -> list[Comment]:
        return [
            c
            for c in await self._read_all(self._comments_path, Comment)
            if c.validation_id == validation_id
        ]

    async def log(
        self,
        event_type: str,
        validation_id: str,
        actor: str,
        metadata: Mapping[str, str],
    ) -> AuditEvent:
        event = AuditEvent(
            event_type=event_type,
            validation_id=validation_id,
            actor=actor,
            metadata=dict(metadata),
            created_at=self._clock(),
        )
        await self._append(self._audit_path, event)
        return event

    async def audit_events_for(self, validation_id: str) -> list[AuditEvent]:
        return [
            e
            for e in await self._read_all(self._audit_path, AuditEvent)
            if e.validation_id == validation_id
        ]

    async def _append(self, path: Path, record: BaseModel) -> None:
        line = record.model_dump_json() + "\n"
        async with self._append_lock:
            try:
                await asyncio.to_thread(self._append_line, path, line)
            except OSError as exc:
                raise ResultStoreError(reason=str(exc), retriable=True) from exc

    async def _read_all[M: BaseModel](self, path: Path, model: type[M]) -> list[M]:
        try:
            raw = await asyncio.to_thread(path.read_text, encoding="utf-8")
        except FileNotFoundError:
            return []
        except OSError as exc:
            raise ResultStoreError(reason=str(exc), retriable=True) from exc

        records: list[M] = []
        for index, line in enumerate(raw.splitlines()):
            if not line.strip():
                continue
            try:
                records.append(model.model_validate_json(line))
            except ValidationError as exc:
                raise ResultStoreError(
                    reason=f"{path.name} line {index} is corrupt: {exc}"
                ) from exc
        return records

    @staticmethod
    def _append_line(path: Path, line: str) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "a", encoding="utf-8") as fh:
            fh.write(line)


class FileReportSink:
    """Satisfies the ReportSink protocol by writing reports into one directory."""

    def __init__(self, reports_dir: Path) -> None:
        self._reports_dir = reports_dir

    async def persist(
        self,
        html: str,
        story_id: str,
        validation_id: str,
        created_at: datetime,
    ) -> Path:
        """Write html as '{story_id}_{validation_id}_{timestamp}.html'.

        Raises:
            ReportPersistError: if an id is unsafe as a file name, the file
                already exists, or the write fails.
        """
        for kind, value in (("story id", story_id), ("validation id", validation_id)):
            problem = _check_id(kind, value)
            if problem:
                raise ReportPersistError(reason=problem)

        path = self._reports_dir / report_filename(story_id, validation_id, created_at)
        try:
            await asyncio.to_thread(_write_new, path, html)
        except FileExistsError as exc:
            raise ReportPersistError(reason=f"report already exists: {path}") from exc
        except OSError as exc:
            raise ReportPersistError(reason=str(exc), retriable=True) from exc
        return path
