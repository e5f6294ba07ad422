"""
Trash component - soft delete, restore and expiry.

Shell Layer - dispatches inputs and converts lookup errors to outputs.
"""

from __future__ import annotations

from collections.abc import Callable
from uuid import UUID

from src.domain.errors import (
    FieldError,
    InvalidTransitionError,
    NotFoundError,
    TargetMissingError,
)

from ._impl import TrashService
from .models import (
    CleanupInput,
    CleanupOutput,
    DeletedFilesOutput,
    DeletedProjectsOutput,
    DeleteFileInput,
    DeleteProjectInput,
    ListDeletedFilesInput,
    ListDeletedProjectsInput,
    PurgeFileInput,
    PurgeProjectInput,
    RestoreFileInput,
    RestoreProjectInput,
    TrashOperationOutput,
    TrashStatsInput,
    TrashStatsOutput,
)

MutationInput = (
    DeleteProjectInput
    | DeleteFileInput
    | RestoreProjectInput
    | RestoreFileInput
    | PurgeProjectInput
    | PurgeFileInput
)


def _guard(operation: Callable[[], UUID], field: str) -> TrashOperationOutput:
    try:
        record_id = operation()
    except TargetMissingError as e:
        error = FieldError(code="TARGET_MISSING", message=str(e), field="target_project_id")
        return TrashOperationOutput(record_id=None, errors=[error], success=False)
    except NotFoundError as e:
        error = FieldError(code="NOT_FOUND", message=str(e), field=field)
        return TrashOperationOutput(record_id=None, errors=[error], success=False)
    except InvalidTransitionError as e:
        error = FieldError(code="TRANSITION_ERROR", message=str(e), field="post_status")
        return TrashOperationOutput(record_id=None, errors=[error], success=False)
    return TrashOperationOutput(record_id=record_id, errors=[], success=True)


def run_delete_project(input_data: DeleteProjectInput, service: TrashService) -> TrashOperationOutput:
    return _guard(
        lambda: service.delete_project(input_data.project_id, input_data.deleted_by),
        "project_id",
    )


def run_delete_file(input_data: DeleteFileInput, service: TrashService) -> TrashOperationOutput:
    return _guard(
        lambda: service.delete_file(input_data.file_id, input_data.deleted_by),
        "file_id",
    )


def run_restore_project(
    input_data: RestoreProjectInput, service: TrashService
) -> TrashOperationOutput:
    return _guard(
        lambda: service.restore_project(input_data.deleted_project_id),
        "deleted_project_id",
    )


def run_restore_file(input_data: RestoreFileInput, service: TrashService) -> TrashOperationOutput:
    return _guard(
        lambda: service.restore_file(input_data.deleted_file_id, input_data.target_project_id),
        "deleted_file_id",
    )


def run_purge_project(input_data: PurgeProjectInput, service: TrashService) -> TrashOperationOutput:
    return _guard(
        lambda: service.permanently_delete_project(input_data.deleted_project_id),
        "deleted_project_id",
    )


def run_purge_file(input_data: PurgeFileInput, service: TrashService) -> TrashOperationOutput:
    return _guard(
        lambda: service.permanently_delete_file(input_data.deleted_file_id),
        "deleted_file_id",
    )


def run_list_projects(
    input_data: ListDeletedProjectsInput, service: TrashService
) -> DeletedProjectsOutput:
    items = service.get_deleted_projects(user_id=input_data.user_id, limit=input_data.limit)
    return DeletedProjectsOutput(items=items, total=len(items))


def run_list_files(input_data: ListDeletedFilesInput, service: TrashService) -> DeletedFilesOutput:
    items = service.get_deleted_files(
        user_id=input_data.user_id,
        project_id=input_data.project_id,
        limit=input_data.limit,
    )
    return DeletedFilesOutput(items=items, total=len(items))


def run_stats(input_data: TrashStatsInput, service: TrashService) -> TrashStatsOutput:
    return TrashStatsOutput(stats=service.get_trash_stats(input_data.user_id))


def run_cleanup(input_data: CleanupInput, service: TrashService) -> CleanupOutput:
    _ = input_data  # Explicitly mark as intentionally unused
    return CleanupOutput(result=service.cleanup_expired_trash())


def run(input_data: MutationInput, service: TrashService) -> TrashOperationOutput:
    """Main dispatcher for mutating trash operations."""
    if isinstance(input_data, DeleteProjectInput):
        return run_delete_project(input_data, service)
    elif isinstance(input_data, DeleteFileInput):
        return run_delete_file(input_data, service)
    elif isinstance(input_data, RestoreProjectInput):
        return run_restore_project(input_data, service)
    elif isinstance(input_data, RestoreFileInput):
        return run_restore_file(input_data, service)
    elif isinstance(input_data, PurgeProjectInput):
        return run_purge_project(input_data, service)
    elif isinstance(input_data, PurgeFileInput):
        return run_purge_file(input_data, service)
    else:
        raise TypeError(f"Unknown input type: {type(input_data)}")
