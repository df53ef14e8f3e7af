"""Append-only records attached to a validation result."""

from datetime import datetime

from pydantic import BaseModel, Field


class Comment(BaseModel, frozen=True):
    """Reviewer comment on a stored validation result."""

    validation_id: str = Field(min_length=1)
    author: str = Field(min_length=1)
    text: str = Field(min_length=1)
    created_at: datetime


class AuditEvent(BaseModel, frozen=True):
    """One entry of the audit trail. metadata values are plain strings."""

    event_type: str = Field(min_length=1)
    validation_id: str = Field(min_length=1)
    actor: str = Field(min_length=1)
    metadata: dict[str, str] = Field(default_factory=dict)
    created_at: datetime
