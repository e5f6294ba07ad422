"""
TrashService - soft delete, restore and expiry of projects and files.

Moves records between the live families (projects, files) and the trash
families (deleted_projects, deleted_files).

Key behaviors:
- Cascades run as one unit of work: every step commits or none does
- Child files are moved before their parent project in every cascade
- The live file set is always re-read by indexed query, never taken
  from the denormalized associated_files list
- Restore creates new identities; files follow the new project id
- Sweep removes trash strictly older than the TTL (exactly TTL is kept)
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from uuid import UUID

from src.domain.entities import (
    AssociatedFile,
    Project,
    ProjectFile,
    SweepResult,
    TrashedFile,
    TrashedProject,
    TrashStats,
)
from src.domain.errors import InvalidTransitionError, NotFoundError, TargetMissingError
from src.domain.records import (
    DELETED_FILES,
    DELETED_PROJECTS,
    FILES,
    PROJECTS,
    format_ts,
    from_record,
    to_record,
)
from src.rules.models import TrashRules

from .ports import ClockPort, EntityStorePort

logger = logging.getLogger(__name__)


# --- Snapshot construction ---


def snapshot_file(
    file: ProjectFile,
    parent_project_name: str,
    deleted_at: datetime,
    deleted_by: str | None,
) -> TrashedFile:
    """Build the trash snapshot for a live file."""
    return TrashedFile(
        original_id=file.id,
        name=file.name,
        type=file.type,
        extension=file.extension,
        content=file.content,
        size=file.size,
        project_id=file.project_id,
        user_id=file.user_id,
        path=file.path,
        mime_type=file.mime_type,
        original_created_at=file.created_at,
        original_updated_at=file.updated_at,
        original_last_modified=file.last_modified,
        platform=file.platform,
        post_status=file.post_status,
        scheduled_at=file.scheduled_at,
        title=file.title,
        platform_settings=file.platform_settings,
        post_id=file.post_id,
        post_url=file.post_url,
        posted_at=file.posted_at,
        error_message=file.error_message,
        retry_count=file.retry_count,
        last_attempt_at=file.last_attempt_at,
        submission_key=file.submission_key,
        deleted_at=deleted_at,
        deleted_by=deleted_by,
        parent_project_name=parent_project_name,
    )


def revive_file(snapshot: TrashedFile, project_id: UUID, now: datetime) -> ProjectFile:
    """Build a new live file (new identity) from a trash snapshot."""
    return ProjectFile(
        name=snapshot.name,
        type=snapshot.type,
        extension=snapshot.extension,
        content=snapshot.content,
        size=snapshot.size,
        project_id=project_id,
        user_id=snapshot.user_id,
        path=snapshot.path,
        mime_type=snapshot.mime_type,
        created_at=snapshot.original_created_at,
        updated_at=now,
        last_modified=snapshot.original_last_modified,
        platform=snapshot.platform,
        post_status=snapshot.post_status,
        scheduled_at=snapshot.scheduled_at,
        title=snapshot.title,
        platform_settings=snapshot.platform_settings,
        post_id=snapshot.post_id,
        post_url=snapshot.post_url,
        posted_at=snapshot.posted_at,
        error_message=snapshot.error_message,
        retry_count=snapshot.retry_count,
        last_attempt_at=snapshot.last_attempt_at,
        submission_key=snapshot.submission_key,
    )


# --- TrashService ---


class TrashService:
    """
    Trash manager.

    All identifiers are UUIDs at the service boundary and strings in the store.
    """

    def __init__(
        self,
        store: EntityStorePort,
        clock: ClockPort,
        rules: TrashRules | None = None,
    ) -> None:
        self._store = store
        self._clock = clock
        self._rules = rules or TrashRules()

    # --- Lookups ---

    def _get_project(self, project_id: UUID) -> Project | None:
        record = self._store.get(PROJECTS, str(project_id))
        return from_record(Project, record) if record else None

    def _get_file(self, file_id: UUID) -> ProjectFile | None:
        record = self._store.get(FILES, str(file_id))
        return from_record(ProjectFile, record) if record else None

    def _get_trashed_project(self, deleted_project_id: UUID) -> TrashedProject:
        record = self._store.get(DELETED_PROJECTS, str(deleted_project_id))
        if not record:
            raise NotFoundError("Deleted project", deleted_project_id)
        return from_record(TrashedProject, record)

    def _get_trashed_file(self, deleted_file_id: UUID) -> TrashedFile:
        record = self._store.get(DELETED_FILES, str(deleted_file_id))
        if not record:
            raise NotFoundError("Deleted file", deleted_file_id)
        return from_record(TrashedFile, record)

    def _live_files_of(self, project_id: UUID) -> list[ProjectFile]:
        rows = self._store.query_by_index(FILES, "by_project", eq=str(project_id))
        return [from_record(ProjectFile, r) for r in rows]

    def _trashed_files_of(self, original_project_id: UUID) -> list[TrashedFile]:
        rows = self._store.query_by_index(DELETED_FILES, "by_project", eq=str(original_project_id))
        return [from_record(TrashedFile, r) for r in rows]

    def _ensure_not_posting(self, file: ProjectFile) -> None:
        # The in-flight submission records its outcome on the live file
        if file.post_status == "posting":
            raise InvalidTransitionError("posting", "delete")

    # --- Soft delete ---

    def delete_project(self, project_id: UUID, deleted_by: str | None = None) -> UUID:
        """
        Move a project and every file under it to the trash.

        Returns:
            Identity of the new trashed-project snapshot

        Raises:
            NotFoundError: project missing
            InvalidTransitionError: a file is mid-submission; nothing moves
        """
        with self._store.transaction():
            project = self._get_project(project_id)
            if project is None:
                raise NotFoundError("Project", project_id)

            files = self._live_files_of(project.id)
            for file in files:
                self._ensure_not_posting(file)
            now = self._clock.now()

            snapshot = TrashedProject(
                original_id=project.id,
                name=project.name,
                description=project.description,
                status=project.status,
                budget=project.budget,
                project_no=project.project_no,
                user_id=project.user_id,
                original_created_at=project.created_at,
                original_updated_at=project.updated_at,
                deleted_at=now,
                deleted_by=deleted_by,
                associated_files=[
                    AssociatedFile(file_id=f.id, name=f.name, type=f.type, size=f.size)
                    for f in files
                ],
            )
            self._store.insert(DELETED_PROJECTS, to_record(snapshot))

            for file in files:
                trashed = snapshot_file(file, project.name, now, deleted_by)
                self._store.insert(DELETED_FILES, to_record(trashed))
                self._store.delete(FILES, str(file.id))

            self._store.delete(PROJECTS, str(project.id))

        logger.info(
            "Project %s moved to trash with %d files (snapshot %s)",
            project.id,
            len(files),
            snapshot.id,
        )
        return snapshot.id

    def delete_file(self, file_id: UUID, deleted_by: str | None = None) -> UUID:
        """
        Move a single file to the trash and return the snapshot identity.

        A post whose submission is in flight cannot be trashed.
        """
        with self._store.transaction():
            file = self._get_file(file_id)
            if file is None:
                raise NotFoundError("File", file_id)
            self._ensure_not_posting(file)

            project = self._get_project(file.project_id)
            parent_name = project.name if project else self._rules.unknown_project_name

            trashed = snapshot_file(file, parent_name, self._clock.now(), deleted_by)
            self._store.insert(DELETED_FILES, to_record(trashed))
            self._store.delete(FILES, str(file.id))

        logger.info("File %s moved to trash (snapshot %s)", file.id, trashed.id)
        return trashed.id

    # --- Restore ---

    def restore_project(self, deleted_project_id: UUID) -> UUID:
        """
        Restore a trashed project and all files trashed under it.

        The project gets a new identity and its files are re-parented to it.
        """
        with self._store.transaction():
            snapshot = self._get_trashed_project(deleted_project_id)
            now = self._clock.now()

            project = Project(
                name=snapshot.name,
                description=snapshot.description,
                status=snapshot.status,
                budget=snapshot.budget,
                project_no=snapshot.project_no,
                user_id=snapshot.user_id,
                created_at=snapshot.original_created_at,
                updated_at=now,
            )
            self._store.insert(PROJECTS, to_record(project))

            trashed_files = self._trashed_files_of(snapshot.original_id)
            for trashed in trashed_files:
                self._store.insert(FILES, to_record(revive_file(trashed, project.id, now)))
                self._store.delete(DELETED_FILES, str(trashed.id))

            self._store.delete(DELETED_PROJECTS, str(snapshot.id))

        logger.info(
            "Project snapshot %s restored as %s with %d files",
            snapshot.id,
            project.id,
            len(trashed_files),
        )
        return project.id

    def restore_file(self, deleted_file_id: UUID, target_project_id: UUID | None = None) -> UUID:
        """
        Restore a trashed file into its original project or a given one.

        Raises:
            NotFoundError: snapshot missing
            TargetMissingError: resolved project is not live; nothing changes
        """
        with self._store.transaction():
            snapshot = self._get_trashed_file(deleted_file_id)
            project_id = target_project_id or snapshot.project_id

            if self._get_project(project_id) is None:
                raise TargetMissingError(project_id)

            file = revive_file(snapshot, project_id, self._clock.now())
            self._store.insert(FILES, to_record(file))
            self._store.delete(DELETED_FILES, str(snapshot.id))

        logger.info("File snapshot %s restored as %s in project %s", snapshot.id, file.id, project_id)
        return file.id

    # --- Permanent delete ---

    def permanently_delete_project(self, deleted_project_id: UUID) -> UUID:
        with self._store.transaction():
            snapshot = self._get_trashed_project(deleted_project_id)
            for trashed in self._trashed_files_of(snapshot.original_id):
                self._store.delete(DELETED_FILES, str(trashed.id))
            self._store.delete(DELETED_PROJECTS, str(snapshot.id))

        logger.info("Project snapshot %s permanently deleted", snapshot.id)
        return snapshot.id

    def permanently_delete_file(self, deleted_file_id: UUID) -> UUID:
        with self._store.transaction():
            snapshot = self._get_trashed_file(deleted_file_id)
            self._store.delete(DELETED_FILES, str(snapshot.id))

        logger.info("File snapshot %s permanently deleted", snapshot.id)
        return snapshot.id

    # --- Read surface ---

    def get_deleted_projects(
        self,
        user_id: str | None = None,
        limit: int | None = None,
    ) -> list[TrashedProject]:
        """Trashed projects, newest deletion first."""
        limit = limit or self._rules.default_list_limit
        if user_id:
            rows = self._store.query_by_index(
                DELETED_PROJECTS, "by_user", eq=user_id, order="desc", limit=limit
            )
        else:
            rows = self._store.query_by_index(
                DELETED_PROJECTS, "by_deleted_at", order="desc", limit=limit
            )
        return [from_record(TrashedProject, r) for r in rows]

    def get_deleted_files(
        self,
        user_id: str | None = None,
        project_id: UUID | None = None,
        limit: int | None = None,
    ) -> list[TrashedFile]:
        """
        Trashed files, newest deletion first.

        The user filter wins over the project filter when both are given.
        """
        limit = limit or self._rules.default_list_limit
        if user_id:
            rows = self._store.query_by_index(
                DELETED_FILES, "by_user", eq=user_id, order="desc", limit=limit
            )
        elif project_id:
            rows = self._store.query_by_index(
                DELETED_FILES, "by_project", eq=str(project_id), order="desc", limit=limit
            )
        else:
            rows = self._store.query_by_index(
                DELETED_FILES, "by_deleted_at", order="desc", limit=limit
            )
        return [from_record(TrashedFile, r) for r in rows]

    def get_trash_stats(self, user_id: str | None = None) -> TrashStats:
        if user_id:
            projects = self._store.query_by_index(DELETED_PROJECTS, "by_user", eq=user_id)
            files = self._store.query_by_index(DELETED_FILES, "by_user", eq=user_id)
        else:
            projects = self._store.query_by_index(DELETED_PROJECTS, "by_deleted_at")
            files = self._store.query_by_index(DELETED_FILES, "by_deleted_at")

        trashed_projects = [from_record(TrashedProject, r) for r in projects]
        trashed_files = [from_record(TrashedFile, r) for r in files]

        now = self._clock.now()
        ages = [now - p.deleted_at for p in trashed_projects]
        ages += [now - f.deleted_at for f in trashed_files]
        near_expiry = timedelta(days=self._rules.near_expiry_days)

        return TrashStats(
            project_count=len(trashed_projects),
            file_count=len(trashed_files),
            total_size=sum(f.size for f in trashed_files),
            oldest_item_age_days=max(ages).days if ages else 0,
            items_near_expiry_count=sum(1 for age in ages if age >= near_expiry),
        )

    # --- Sweep ---

    def expiry_cutoff(self) -> datetime:
        return self._clock.now() - timedelta(days=self._rules.ttl_days)

    def cleanup_expired_trash(self) -> SweepResult:
        """
        Permanently delete every trash record deleted strictly before the cutoff.

        Each record is removed on its own; a rerun only matches what is left.
        """
        cutoff = format_ts(self.expiry_cutoff())

        expired_projects = self._store.query_by_index(DELETED_PROJECTS, "by_deleted_at", lt=cutoff)
        expired_files = self._store.query_by_index(DELETED_FILES, "by_deleted_at", lt=cutoff)

        for record in expired_projects:
            self._store.delete(DELETED_PROJECTS, record["id"])
        for record in expired_files:
            self._store.delete(DELETED_FILES, record["id"])

        result = SweepResult(
            deleted_projects_count=len(expired_projects),
            deleted_files_count=len(expired_files),
        )
        logger.info(
            "Trash cleanup completed: %d projects, %d files permanently deleted",
            result.deleted_projects_count,
            result.deleted_files_count,
        )
        return result
