"""
Trash component - soft delete, cascaded restore, permanent delete and
the TTL expiry sweep for projects and files.
"""

from ._impl import TrashService, revive_file, snapshot_file
from .component import (
    run,
    run_cleanup,
    run_delete_file,
    run_delete_project,
    run_list_files,
    run_list_projects,
    run_purge_file,
    run_purge_project,
    run_restore_file,
    run_restore_project,
    run_stats,
)
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
from .ports import ClockPort, EntityStorePort

__all__ = [
    # Service
    "TrashService",
    "revive_file",
    "snapshot_file",
    # Entry points
    "run",
    "run_cleanup",
    "run_delete_file",
    "run_delete_project",
    "run_list_files",
    "run_list_projects",
    "run_purge_file",
    "run_purge_project",
    "run_restore_file",
    "run_restore_project",
    "run_stats",
    # Input models
    "CleanupInput",
    "DeleteFileInput",
    "DeleteProjectInput",
    "ListDeletedFilesInput",
    "ListDeletedProjectsInput",
    "PurgeFileInput",
    "PurgeProjectInput",
    "RestoreFileInput",
    "RestoreProjectInput",
    "TrashStatsInput",
    # Output models
    "CleanupOutput",
    "DeletedFilesOutput",
    "DeletedProjectsOutput",
    "TrashOperationOutput",
    "TrashStatsOutput",
    # Ports
    "ClockPort",
    "EntityStorePort",
]
