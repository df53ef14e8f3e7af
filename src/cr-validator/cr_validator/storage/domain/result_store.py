"""ResultStore Protocol: durable, write-once storage for validation results."""

from collections.abc import Mapping
from typing import Protocol

from cr_validator.storage.domain.records import AuditEvent, Comment
from cr_validator.validation.domain.result import ValidationResult


class ResultStore(Protocol):
    """Stores results once and keeps append-only comment and audit trails.

    Every method raises a PersistenceError subclass on failure.
    """

    async def save(self, result: ValidationResult) -> None: ...

    async def find_by_id(self, validation_id: str) -> ValidationResult | None: ...

    async def add_comment(
        self, validation_id: str, author: str, text: str
    ) -> Comment: ...

    async def comments_for(self, validation_id: str) -> list[Comment]: ...

    async def log(
        self,
        event_type: str,
        validation_id: str,
        actor: str,
        metadata: Mapping[str, str],
    ) -> AuditEvent: ...

    async def audit_events_for(self, validation_id: str) -> list[AuditEvent]: ...
