"""Mapping of lifecycle errors to HTTP responses."""

from __future__ import annotations

from typing import Any

from fastapi import HTTPException, status

from src.domain.errors import (
    FieldError,
    InvalidTransitionError,
    LifecycleError,
    NotFoundError,
    PostValidationError,
    TargetMissingError,
)


def _serialize_errors(errors: list[FieldError]) -> list[dict[str, Any]]:
    """Serialize errors for JSON response."""
    return [{"code": e.code, "message": e.message, "field": e.field} for e in errors]


def to_http_exception(exc: LifecycleError) -> HTTPException:
    if isinstance(exc, NotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    if isinstance(exc, TargetMissingError | InvalidTransitionError):
        return HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail={"code": exc.code, "message": str(exc)},
        )
    if isinstance(exc, PostValidationError):
        return HTTPException(
            status_code=422,
            detail={"errors": _serialize_errors(exc.errors)},
        )
    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail={"code": exc.code, "message": str(exc)},
    )
