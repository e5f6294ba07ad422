"""
Lifecycle error taxonomy.

Lookup errors abort an operation before anything is written. Publish
failures are recorded on the file instead of being raised to callers.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class FieldError:
    """Validation error details for a single field."""

    code: str
    message: str
    field: str


class LifecycleError(Exception):
    """Base class for content lifecycle errors."""

    code = "lifecycle_error"


class NotFoundError(LifecycleError):
    """A referenced project, file or trash snapshot does not exist."""

    code = "not_found"

    def __init__(self, kind: str, record_id: object) -> None:
        super().__init__(f"{kind} not found: {record_id}")
        self.kind = kind
        self.record_id = record_id


class TargetMissingError(LifecycleError):
    """The project a file would be restored into is not live."""

    code = "target_missing"

    def __init__(self, project_id: object) -> None:
        super().__init__(f"Target project not found: {project_id}")
        self.project_id = project_id


class PostValidationError(LifecycleError):
    """A post failed validation before any status change."""

    code = "validation_error"

    def __init__(self, errors: list[FieldError]) -> None:
        message = "; ".join(e.message for e in errors) or "Validation failed"
        super().__init__(message)
        self.errors = errors


class PublishError(LifecycleError):
    """Remote submission failed."""

    code = "publish_error"


class InvalidTransitionError(LifecycleError):
    """Attempted status change is not in the allowed set."""

    code = "invalid_transition"

    def __init__(self, current: str, event: str) -> None:
        super().__init__(f"Invalid transition: cannot {event} from {current}")
        self.current = current
        self.event = event
