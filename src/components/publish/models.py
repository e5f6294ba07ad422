"""Publish component models - frozen dataclass inputs and outputs."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any
from uuid import UUID

from src.domain.entities import ProjectFile
from src.domain.errors import FieldError
from src.ports.publisher import PublishResult


@dataclass(frozen=True)
class SaveContentInput:
    """Input for persisting an edit (autosave target)."""

    file_id: UUID
    content: str
    title: str | None = None
    platform_settings: dict[str, Any] | None = None


@dataclass(frozen=True)
class ScheduleInput:
    """Input for scheduling a post."""

    file_id: UUID
    scheduled_at: datetime
    content: str
    title: str | None = None
    platform_settings: dict[str, Any] | None = None


@dataclass(frozen=True)
class SubmitInput:
    """Input for an immediate (or retried) submission."""

    file_id: UUID


@dataclass(frozen=True)
class ProcessDueInput:
    """Input for processing due scheduled posts - empty input."""

    pass


@dataclass(frozen=True)
class PostOutput:
    """Output for save, schedule and submit operations."""

    post: ProjectFile | None
    errors: list[FieldError]
    success: bool


@dataclass(frozen=True)
class SubmitOutcome:
    """
    Result of PostService.submit.

    submitted is False when the call was a duplicate of a submission that
    already produced a posted record.
    """

    post: ProjectFile
    submitted: bool
    result: PublishResult | None = None


@dataclass(frozen=True)
class DueItemResult:
    file_id: UUID
    success: bool
    error: str | None = None


@dataclass(frozen=True)
class ProcessDueOutput:
    """Output for processing due scheduled posts."""

    processed: int
    succeeded: int
    failed: int
    skipped: int
    results: list[DueItemResult] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return self.failed == 0
