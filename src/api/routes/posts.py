"""
Post API Routes.

Content saves, scheduling, immediate submission and due-post processing.
Publish failures are returned as the persisted failed post, not as errors.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any
from uuid import UUID

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from src.api.deps import get_post_service
from src.api.errors import to_http_exception
from src.components.publish import PostService
from src.domain.entities import PostStatus, ProjectFile
from src.domain.errors import LifecycleError

router = APIRouter()


# --- Request/Response Models ---


class SaveContentRequest(BaseModel):
    content: str
    title: str | None = None
    platform_settings: dict[str, Any] | None = None


class ScheduleRequest(BaseModel):
    """Request to schedule a post."""

    scheduled_at: datetime = Field(..., description="Target publish time (timezone-aware)")
    content: str
    title: str | None = None
    platform_settings: dict[str, Any] | None = None


class SubmitResponse(BaseModel):
    post: ProjectFile
    submitted: bool


class DueItemResponse(BaseModel):
    file_id: UUID
    success: bool
    error: str | None = None


class ProcessDueResponse(BaseModel):
    processed: int
    succeeded: int
    failed: int
    skipped: int
    results: list[DueItemResponse]


# --- Routes ---


@router.get("", response_model=list[ProjectFile])
def list_posts(
    status: PostStatus,
    service: PostService = Depends(get_post_service),
) -> Any:
    return service.list_posts_by_status(status)


@router.get("/{file_id}", response_model=ProjectFile)
def get_post(file_id: UUID, service: PostService = Depends(get_post_service)) -> Any:
    try:
        return service.get_post(file_id)
    except LifecycleError as e:
        raise to_http_exception(e) from e


@router.put("/{file_id}/content", response_model=ProjectFile)
def save_content(
    file_id: UUID,
    request: SaveContentRequest,
    service: PostService = Depends(get_post_service),
) -> Any:
    """Persist an edit (autosave target). Never changes publish status."""
    try:
        return service.save_content(
            file_id,
            request.content,
            title=request.title,
            platform_settings=request.platform_settings,
        )
    except LifecycleError as e:
        raise to_http_exception(e) from e


@router.post("/{file_id}/schedule", response_model=ProjectFile)
def schedule_post(
    file_id: UUID,
    request: ScheduleRequest,
    service: PostService = Depends(get_post_service),
) -> Any:
    try:
        return service.schedule_post(
            file_id,
            request.scheduled_at,
            request.content,
            title=request.title,
            platform_settings=request.platform_settings,
        )
    except LifecycleError as e:
        raise to_http_exception(e) from e


@router.post("/{file_id}/submit", response_model=SubmitResponse)
def submit_post(file_id: UUID, service: PostService = Depends(get_post_service)) -> Any:
    """
    Submit a post now (also the retry path for failed posts).

    A failed submission returns 200 with the post in failed status.
    """
    try:
        outcome = service.submit(file_id)
    except LifecycleError as e:
        raise to_http_exception(e) from e
    return SubmitResponse(post=outcome.post, submitted=outcome.submitted)


@router.post("/process-due", response_model=ProcessDueResponse)
def process_due(service: PostService = Depends(get_post_service)) -> Any:
    result = service.process_due_posts()
    return ProcessDueResponse(
        processed=result.processed,
        succeeded=result.succeeded,
        failed=result.failed,
        skipped=result.skipped,
        results=[
            DueItemResponse(file_id=r.file_id, success=r.success, error=r.error)
            for r in result.results
        ],
    )
