"""
ProjectService - creation and lookup of live projects and files.

A file can only be created under a live project.
"""

from __future__ import annotations

import logging
from typing import Any
from uuid import UUID

from src.domain.entities import FileType, Platform, Project, ProjectFile, ProjectStatus
from src.domain.errors import NotFoundError, TargetMissingError
from src.domain.records import FILES, PROJECTS, from_record, to_record

from .ports import ClockPort, EntityStorePort

logger = logging.getLogger(__name__)


class ProjectService:
    def __init__(self, store: EntityStorePort, clock: ClockPort) -> None:
        self._store = store
        self._clock = clock

    def create_project(
        self,
        name: str,
        description: str | None = None,
        status: ProjectStatus = "active",
        budget: float | None = None,
        project_no: str | None = None,
        user_id: str | None = None,
    ) -> Project:
        now = self._clock.now()
        project = Project(
            name=name,
            description=description,
            status=status,
            budget=budget,
            project_no=project_no,
            user_id=user_id,
            created_at=now,
            updated_at=now,
        )
        self._store.insert(PROJECTS, to_record(project))
        logger.debug("Created project %s (%s)", project.id, name)
        return project

    def get_project(self, project_id: UUID) -> Project:
        record = self._store.get(PROJECTS, str(project_id))
        if not record:
            raise NotFoundError("Project", project_id)
        return from_record(Project, record)

    def list_projects(self, user_id: str | None = None) -> list[Project]:
        if user_id:
            rows = self._store.query_by_index(PROJECTS, "by_user", eq=user_id, order="desc")
        else:
            rows = self._store.query_by_index(PROJECTS, "by_created_at", order="desc")
        return [from_record(Project, r) for r in rows]

    def create_file(
        self,
        project_id: UUID,
        name: str,
        type: FileType = "post",
        content: str = "",
        extension: str | None = None,
        user_id: str | None = None,
        path: str | None = None,
        mime_type: str | None = None,
        platform: Platform | None = None,
        title: str | None = None,
        platform_settings: dict[str, Any] | None = None,
    ) -> ProjectFile:
        """
        Create a live file under a live project.

        Social posts (files with a platform) start in draft.
        """
        if self._store.get(PROJECTS, str(project_id)) is None:
            raise TargetMissingError(project_id)

        now = self._clock.now()
        file = ProjectFile(
            name=name,
            type=type,
            extension=extension or (name.rsplit(".", 1)[-1] if "." in name else None),
            content=content,
            size=len(content.encode("utf-8")),
            project_id=project_id,
            user_id=user_id,
            path=path,
            mime_type=mime_type,
            created_at=now,
            updated_at=now,
            last_modified=now,
            platform=platform,
            post_status="draft" if platform else None,
            title=title,
            platform_settings=platform_settings or {},
        )
        self._store.insert(FILES, to_record(file))
        logger.debug("Created file %s in project %s", file.id, project_id)
        return file

    def get_file(self, file_id: UUID) -> ProjectFile:
        record = self._store.get(FILES, str(file_id))
        if not record:
            raise NotFoundError("File", file_id)
        return from_record(ProjectFile, record)

    def list_files(self, project_id: UUID) -> list[ProjectFile]:
        rows = self._store.query_by_index(FILES, "by_project", eq=str(project_id))
        return [from_record(ProjectFile, r) for r in rows]
