"""
Record encoding for the entity store.

Entities are stored as JSON-compatible dicts. Timestamps are encoded as
fixed-width UTC ISO-8601 strings so that string order equals time order,
which lets stores compare and sort them without parsing.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any, TypeVar
from uuid import UUID

from pydantic import BaseModel

M = TypeVar("M", bound=BaseModel)

# --- Record families ---

PROJECTS = "projects"
FILES = "files"
DELETED_PROJECTS = "deleted_projects"
DELETED_FILES = "deleted_files"

# index name -> (equality field or None, ordering field)
INDEXES: dict[str, dict[str, tuple[str | None, str]]] = {
    PROJECTS: {
        "by_created_at": (None, "created_at"),
        "by_user": ("user_id", "created_at"),
    },
    FILES: {
        "by_project": ("project_id", "created_at"),
        "by_user": ("user_id", "created_at"),
        "by_status": ("post_status", "scheduled_at"),
    },
    DELETED_PROJECTS: {
        "by_deleted_at": (None, "deleted_at"),
        "by_user": ("user_id", "deleted_at"),
    },
    DELETED_FILES: {
        "by_deleted_at": (None, "deleted_at"),
        "by_user": ("user_id", "deleted_at"),
        "by_project": ("project_id", "deleted_at"),
    },
}


def index_fields(table: str, index_name: str) -> tuple[str | None, str]:
    """Look up an index definition. Raises KeyError for unknown names."""
    try:
        return INDEXES[table][index_name]
    except KeyError:
        raise KeyError(f"Unknown index {index_name!r} on table {table!r}") from None


def format_ts(dt: datetime) -> str:
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC).isoformat(timespec="microseconds")


def _encode(value: Any) -> Any:
    if isinstance(value, datetime):
        return format_ts(value)
    if isinstance(value, UUID):
        return str(value)
    if isinstance(value, dict):
        return {k: _encode(v) for k, v in value.items()}
    if isinstance(value, list | tuple):
        return [_encode(v) for v in value]
    return value


def to_record(model: BaseModel) -> dict[str, Any]:
    """Encode an entity as a store record."""
    encoded: dict[str, Any] = _encode(model.model_dump())
    return encoded


def from_record(model_cls: type[M], record: dict[str, Any]) -> M:
    return model_cls.model_validate(record)


def encode_fields(fields: dict[str, Any]) -> dict[str, Any]:
    """Encode a partial update the same way as a full record."""
    encoded: dict[str, Any] = _encode(fields)
    return encoded
