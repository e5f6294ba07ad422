from datetime import UTC, datetime
from typing import Any, Literal
from uuid import UUID, uuid4

from pydantic import BaseModel, Field

# --- Enums / Literals ---
ProjectStatus = Literal["active", "completed", "on-hold"]
FileType = Literal["post", "campaign", "note", "document", "image", "video", "other"]
Platform = Literal["facebook", "instagram", "twitter", "linkedin", "reddit", "youtube"]
PostStatus = Literal["draft", "scheduled", "posting", "posted", "failed"]
PostKind = Literal["self", "link", "image", "video"]


def utcnow() -> datetime:
    return datetime.now(UTC)


# --- Live records ---

class Project(BaseModel):
    id: UUID = Field(default_factory=uuid4)
    name: str
    description: str | None = None
    status: ProjectStatus = "active"
    budget: float | None = None
    project_no: str | None = None
    user_id: str | None = None
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class ProjectFile(BaseModel):
    id: UUID = Field(default_factory=uuid4)
    name: str
    type: FileType = "post"
    extension: str | None = None
    content: str = ""
    size: int = 0
    project_id: UUID
    user_id: str | None = None
    path: str | None = None
    mime_type: str | None = None
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)
    last_modified: datetime = Field(default_factory=utcnow)

    # Social post fields
    platform: Platform | None = None
    post_status: PostStatus | None = None
    scheduled_at: datetime | None = None
    title: str | None = None
    platform_settings: dict[str, Any] = Field(default_factory=dict)
    post_id: str | None = None
    post_url: str | None = None
    posted_at: datetime | None = None
    error_message: str | None = None
    retry_count: int = 0
    last_attempt_at: datetime | None = None
    submission_key: str | None = None

    @property
    def status(self) -> PostStatus:
        return self.post_status or "draft"


# --- Trash snapshots ---

class AssociatedFile(BaseModel):
    """Display-only summary of a file trashed alongside its project."""

    file_id: UUID
    name: str
    type: FileType
    size: int = 0


class TrashedProject(BaseModel):
    id: UUID = Field(default_factory=uuid4)
    original_id: UUID
    name: str
    description: str | None = None
    status: ProjectStatus = "active"
    budget: float | None = None
    project_no: str | None = None
    user_id: str | None = None
    original_created_at: datetime
    original_updated_at: datetime
    deleted_at: datetime
    deleted_by: str | None = None
    associated_files: list[AssociatedFile] = Field(default_factory=list)


class TrashedFile(BaseModel):
    id: UUID = Field(default_factory=uuid4)
    original_id: UUID
    name: str
    type: FileType = "post"
    extension: str | None = None
    content: str = ""
    size: int = 0
    # Historical parent id; the project itself may be trashed or gone.
    project_id: UUID
    user_id: str | None = None
    path: str | None = None
    mime_type: str | None = None
    original_created_at: datetime
    original_updated_at: datetime
    original_last_modified: datetime

    platform: Platform | None = None
    post_status: PostStatus | None = None
    scheduled_at: datetime | None = None
    title: str | None = None
    platform_settings: dict[str, Any] = Field(default_factory=dict)
    post_id: str | None = None
    post_url: str | None = None
    posted_at: datetime | None = None
    error_message: str | None = None
    retry_count: int = 0
    last_attempt_at: datetime | None = None
    submission_key: str | None = None

    deleted_at: datetime
    deleted_by: str | None = None
    parent_project_name: str


# --- Aggregates ---

class TrashStats(BaseModel):
    project_count: int
    file_count: int
    total_size: int
    oldest_item_age_days: int
    items_near_expiry_count: int


class SweepResult(BaseModel):
    deleted_projects_count: int
    deleted_files_count: int

    @property
    def total_cleaned(self) -> int:
        return self.deleted_projects_count + self.deleted_files_count
