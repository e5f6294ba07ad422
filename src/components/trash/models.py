"""Trash component models - frozen dataclass inputs and outputs."""

from dataclasses import dataclass, field
from uuid import UUID

from src.domain.entities import SweepResult, TrashedFile, TrashedProject, TrashStats
from src.domain.errors import FieldError


@dataclass(frozen=True)
class DeleteProjectInput:
    project_id: UUID
    deleted_by: str | None = None


@dataclass(frozen=True)
class DeleteFileInput:
    file_id: UUID
    deleted_by: str | None = None


@dataclass(frozen=True)
class RestoreProjectInput:
    deleted_project_id: UUID


@dataclass(frozen=True)
class RestoreFileInput:
    deleted_file_id: UUID
    target_project_id: UUID | None = None


@dataclass(frozen=True)
class PurgeProjectInput:
    deleted_project_id: UUID


@dataclass(frozen=True)
class PurgeFileInput:
    deleted_file_id: UUID


@dataclass(frozen=True)
class ListDeletedProjectsInput:
    user_id: str | None = None
    limit: int | None = None


@dataclass(frozen=True)
class ListDeletedFilesInput:
    user_id: str | None = None
    project_id: UUID | None = None
    limit: int | None = None


@dataclass(frozen=True)
class TrashStatsInput:
    user_id: str | None = None


@dataclass(frozen=True)
class CleanupInput:
    """Input for the expiry sweep - empty input."""

    pass


@dataclass(frozen=True)
class TrashOperationOutput:
    """Output of a mutating trash operation."""

    record_id: UUID | None
    errors: list[FieldError]
    success: bool


@dataclass(frozen=True)
class DeletedProjectsOutput:
    items: list[TrashedProject]
    total: int


@dataclass(frozen=True)
class DeletedFilesOutput:
    items: list[TrashedFile]
    total: int


@dataclass(frozen=True)
class TrashStatsOutput:
    stats: TrashStats


@dataclass(frozen=True)
class CleanupOutput:
    result: SweepResult
    errors: list[FieldError] = field(default_factory=list)
