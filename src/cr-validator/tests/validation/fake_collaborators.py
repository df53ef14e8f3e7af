"""In-memory story source, result store and report sink for orchestrator tests."""

from collections.abc import Mapping
from datetime import datetime
from pathlib import Path

from cr_validator.storage.domain.records import AuditEvent, Comment
from cr_validator.storage.domain.report_sink import report_filename
from cr_validator.storage.infrastructure.errors import (
    ReportPersistError,
    ResultStoreError,
)
from cr_validator.story.domain.story import Story
from cr_validator.story.infrastructure.errors import StoryNotFound
from cr_validator.validation.domain.result import ValidationResult


class FakeStorySource:
    def __init__(
        self,
        stories: list[Story] | None = None,
        side_effects: list[Exception] | None = None,
    ) -> None:
        self._stories = {s.story_id: s for s in stories or []}
        self._side_effects = list(side_effects or [])
        self.calls: list[str] = []

    async def get_story_by_id(self, story_id: str) -> Story:
        self.calls.append(story_id)
        if self._side_effects:
            raise self._side_effects.pop(0)
        if story_id not in self._stories:
            raise StoryNotFound(story_id=story_id)
        return self._stories[story_id]


class FakeReportSink:
    def __init__(self, fail: bool = False) -> None:
        self._fail = fail
        self.reports: dict[str, str] = {}

    async def persist(
        self,
        html: str,
        story_id: str,
        validation_id: str,
        created_at: datetime,
    ) -> Path:
        if self._fail:
            raise ReportPersistError(reason="disk full")
        name = report_filename(story_id, validation_id, created_at)
        self.reports[name] = html
        return Path("/reports") / name


class FakeResultStore:
    """Write-once in-memory store; fail_save / fail_log simulate outages."""

    def __init__(self, fail_save: bool = False, fail_log: bool = False) -> None:
        self._fail_save = fail_save
        self._fail_log = fail_log
        self.results: dict[str, ValidationResult] = {}
        self.comments: list[Comment] = []
        self.events: list[AuditEvent] = []
        self.now = datetime(2026, 1, 1)

    async def save(self, result: ValidationResult) -> None:
        if self._fail_save:
            raise ResultStoreError(reason="database unavailable")
        if result.validation_id in self.results:
            raise ResultStoreError(
                reason=f"result '{result.validation_id}' already exists"
            )
        self.results[result.validation_id] = result

    async def find_by_id(self, validation_id: str) -> ValidationResult | None:
        return self.results.get(validation_id)

    async def add_comment(self, validation_id: str, author: str, text: str) -> Comment:
        comment = Comment(
            validation_id=validation_id, author=author, text=text, created_at=self.now
        )
        self.comments.append(comment)
        return comment

    async def comments_for(self, validation_id: str) -> list[Comment]:
        return [c for c in self.comments if c.validation_id == validation_id]

    async def log(
        self,
        event_type: str,
        validation_id: str,
        actor: str,
        metadata: Mapping[str, str],
    ) -> AuditEvent:
        if self._fail_log:
            raise ResultStoreError(reason="audit log unavailable")
        event = AuditEvent(
            event_type=event_type,
            validation_id=validation_id,
            actor=actor,
            metadata=dict(metadata),
            created_at=self.now,
        )
        self.events.append(event)
        return event

    async def audit_events_for(self, validation_id: str) -> list[AuditEvent]:
        return [e for e in self.events if e.validation_id == validation_id]
