"""Project API Routes - create and read live projects and files."""

from __future__ import annotations

from typing import Any
from uuid import UUID

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from src.api.deps import get_project_service
from src.api.errors import to_http_exception
from src.components.projects import ProjectService
from src.domain.entities import FileType, Platform, Project, ProjectFile, ProjectStatus
from src.domain.errors import LifecycleError

router = APIRouter()


class CreateProjectRequest(BaseModel):
    name: str
    description: str | None = None
    status: ProjectStatus = "active"
    budget: float | None = None
    project_no: str | None = None
    user_id: str | None = None


class CreateFileRequest(BaseModel):
    name: str
    type: FileType = "post"
    content: str = ""
    extension: str | None = None
    user_id: str | None = None
    path: str | None = None
    mime_type: str | None = None
    platform: Platform | None = None
    title: str | None = None
    platform_settings: dict[str, Any] | None = None


@router.post("", response_model=Project, status_code=201)
def create_project(
    request: CreateProjectRequest,
    service: ProjectService = Depends(get_project_service),
) -> Any:
    return service.create_project(**request.model_dump())


@router.get("", response_model=list[Project])
def list_projects(
    user_id: str | None = None,
    service: ProjectService = Depends(get_project_service),
) -> Any:
    return service.list_projects(user_id=user_id)


@router.get("/{project_id}", response_model=Project)
def get_project(project_id: UUID, service: ProjectService = Depends(get_project_service)) -> Any:
    try:
        return service.get_project(project_id)
    except LifecycleError as e:
        raise to_http_exception(e) from e


@router.post("/{project_id}/files", response_model=ProjectFile, status_code=201)
def create_file(
    project_id: UUID,
    request: CreateFileRequest,
    service: ProjectService = Depends(get_project_service),
) -> Any:
    try:
        return service.create_file(project_id, **request.model_dump())
    except LifecycleError as e:
        raise to_http_exception(e) from e


@router.get("/{project_id}/files", response_model=list[ProjectFile])
def list_files(project_id: UUID, service: ProjectService = Depends(get_project_service)) -> Any:
    return service.list_files(project_id)
