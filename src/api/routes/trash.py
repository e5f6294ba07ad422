"""
Trash API Routes.

Soft delete, restore, permanent delete, listing and stats for trashed
projects and files.
"""

from __future__ import annotations

from typing import Any
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from src.api.deps import get_trash_service
from src.api.errors import to_http_exception
from src.components.trash import TrashService
from src.domain.entities import SweepResult, TrashedFile, TrashedProject, TrashStats
from src.domain.errors import LifecycleError

router = APIRouter()


# --- Request/Response Models ---


class DeleteRequest(BaseModel):
    deleted_by: str | None = None


class RestoreFileRequest(BaseModel):
    target_project_id: UUID | None = None


class RecordIdResponse(BaseModel):
    id: UUID


class SweepResponse(BaseModel):
    deleted_projects_count: int
    deleted_files_count: int
    total_cleaned: int


def _sweep_to_response(result: SweepResult) -> SweepResponse:
    return SweepResponse(
        deleted_projects_count=result.deleted_projects_count,
        deleted_files_count=result.deleted_files_count,
        total_cleaned=result.total_cleaned,
    )


# --- Soft delete ---


@router.post("/projects/{project_id}", response_model=RecordIdResponse, status_code=201)
def delete_project(
    project_id: UUID,
    request: DeleteRequest | None = None,
    service: TrashService = Depends(get_trash_service),
) -> Any:
    """Move a project and all its files to the trash."""
    try:
        snapshot_id = service.delete_project(project_id, request.deleted_by if request else None)
    except LifecycleError as e:
        raise to_http_exception(e) from e
    return RecordIdResponse(id=snapshot_id)


@router.post("/files/{file_id}", response_model=RecordIdResponse, status_code=201)
def delete_file(
    file_id: UUID,
    request: DeleteRequest | None = None,
    service: TrashService = Depends(get_trash_service),
) -> Any:
    try:
        snapshot_id = service.delete_file(file_id, request.deleted_by if request else None)
    except LifecycleError as e:
        raise to_http_exception(e) from e
    return RecordIdResponse(id=snapshot_id)


# --- Read surface ---


@router.get("/projects", response_model=list[TrashedProject])
def list_deleted_projects(
    user_id: str | None = None,
    limit: int | None = Query(default=None, gt=0),
    service: TrashService = Depends(get_trash_service),
) -> Any:
    return service.get_deleted_projects(user_id=user_id, limit=limit)


@router.get("/files", response_model=list[TrashedFile])
def list_deleted_files(
    user_id: str | None = None,
    project_id: UUID | None = None,
    limit: int | None = Query(default=None, gt=0),
    service: TrashService = Depends(get_trash_service),
) -> Any:
    """List trashed files; user_id takes precedence over project_id."""
    return service.get_deleted_files(user_id=user_id, project_id=project_id, limit=limit)


@router.get("/stats", response_model=TrashStats)
def trash_stats(
    user_id: str | None = None,
    service: TrashService = Depends(get_trash_service),
) -> Any:
    return service.get_trash_stats(user_id=user_id)


# --- Restore ---


@router.post("/projects/{deleted_project_id}/restore", response_model=RecordIdResponse)
def restore_project(
    deleted_project_id: UUID,
    service: TrashService = Depends(get_trash_service),
) -> Any:
    """Restore a trashed project; the response carries its new identity."""
    try:
        return RecordIdResponse(id=service.restore_project(deleted_project_id))
    except LifecycleError as e:
        raise to_http_exception(e) from e


@router.post("/files/{deleted_file_id}/restore", response_model=RecordIdResponse)
def restore_file(
    deleted_file_id: UUID,
    request: RestoreFileRequest | None = None,
    service: TrashService = Depends(get_trash_service),
) -> Any:
    target = request.target_project_id if request else None
    try:
        return RecordIdResponse(id=service.restore_file(deleted_file_id, target))
    except LifecycleError as e:
        raise to_http_exception(e) from e


# --- Permanent delete ---


@router.delete("/projects/{deleted_project_id}")
def purge_project(
    deleted_project_id: UUID,
    service: TrashService = Depends(get_trash_service),
) -> dict[str, Any]:
    try:
        service.permanently_delete_project(deleted_project_id)
    except LifecycleError as e:
        raise to_http_exception(e) from e
    return {"success": True, "id": str(deleted_project_id)}


@router.delete("/files/{deleted_file_id}")
def purge_file(
    deleted_file_id: UUID,
    service: TrashService = Depends(get_trash_service),
) -> dict[str, Any]:
    try:
        service.permanently_delete_file(deleted_file_id)
    except LifecycleError as e:
        raise to_http_exception(e) from e
    return {"success": True, "id": str(deleted_file_id)}


@router.post("/cleanup", response_model=SweepResponse)
def cleanup(service: TrashService = Depends(get_trash_service)) -> Any:
    """Run the expiry sweep now."""
    return _sweep_to_response(service.cleanup_expired_trash())
