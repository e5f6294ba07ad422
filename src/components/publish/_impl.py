"""
PostService - publish lifecycle for social post files.

Drives post_status through the transition table in src.domain.state:
draft -> scheduled -> posting -> posted | failed, with failed -> posting
as the retry path.

Key behaviors:
- Validation runs before any status change and before the Publisher
- Claiming a post (-> posting) is atomic and records an idempotency key
  (file id + title + content + scheduled slot), so a scheduler tick racing
  a manual submit cannot double-submit
- Publisher failures are written onto the record, never raised
"""

from __future__ import annotations

import hashlib
import logging
from datetime import datetime
from typing import Any
from uuid import UUID

from src.domain.entities import PostStatus, ProjectFile
from src.domain.errors import (
    FieldError,
    InvalidTransitionError,
    NotFoundError,
    PostValidationError,
    PublishError,
)
from src.domain.records import FILES, encode_fields, format_ts, from_record
from src.domain.state import transition
from src.rules.models import PublishRules

from .models import DueItemResult, ProcessDueOutput, SubmitOutcome
from .ports import ClockPort, EntityStorePort, PublisherPort, PublishResult

logger = logging.getLogger(__name__)


# --- Validation Functions ---


def post_kind(file: ProjectFile, rules: PublishRules) -> str:
    return str(file.platform_settings.get("kind") or rules.default_kind)


def validate_post(file: ProjectFile, rules: PublishRules) -> list[FieldError]:
    """Check that a post has what its kind and platform require."""
    errors: list[FieldError] = []
    platform_rules = rules.for_platform(file.platform)
    kind = post_kind(file, rules)
    title = (file.title or "").strip()
    content = file.content.strip()

    if platform_rules.requires_title and not title:
        errors.append(
            FieldError(code="title_required", message="Title is required", field="title")
        )

    if kind == "self" or not platform_rules.requires_title:
        if not content:
            errors.append(
                FieldError(code="content_required", message="Content is required", field="content")
            )
    elif kind == "link":
        url = str(file.platform_settings.get("url") or "").strip()
        if not url:
            errors.append(
                FieldError(
                    code="url_required",
                    message="Link posts require a URL",
                    field="platform_settings.url",
                )
            )

    max_title = platform_rules.max_title_length
    if max_title is not None and len(title) > max_title:
        errors.append(
            FieldError(
                code="title_too_long",
                message=f"Title must be {max_title} characters or less",
                field="title",
            )
        )

    max_content = platform_rules.max_content_length
    if max_content is not None and len(file.content) > max_content:
        errors.append(
            FieldError(
                code="content_too_long",
                message=f"Content must be {max_content} characters or less",
                field="content",
            )
        )

    return errors


def validate_schedule_time(scheduled_at: datetime, now: datetime) -> list[FieldError]:
    if scheduled_at.tzinfo is None:
        return [
            FieldError(
                code="schedule_time_naive",
                message="Schedule time must include a timezone",
                field="scheduled_at",
            )
        ]
    if scheduled_at <= now:
        return [
            FieldError(
                code="schedule_time_past",
                message="Cannot schedule in the past",
                field="scheduled_at",
            )
        ]
    return []


def submission_key(file: ProjectFile) -> str:
    """Idempotency key for one logical submission of a post."""
    slot = format_ts(file.scheduled_at) if file.scheduled_at else "now"
    material = "\x1f".join([str(file.id), file.title or "", file.content, slot])
    return hashlib.sha256(material.encode("utf-8")).hexdigest()


# --- PostService ---


class PostService:
    def __init__(
        self,
        store: EntityStorePort,
        publisher: PublisherPort,
        clock: ClockPort,
        rules: PublishRules | None = None,
    ) -> None:
        self._store = store
        self._publisher = publisher
        self._clock = clock
        self._rules = rules or PublishRules()

    def get_post(self, file_id: UUID) -> ProjectFile:
        record = self._store.get(FILES, str(file_id))
        if not record:
            raise NotFoundError("File", file_id)
        return from_record(ProjectFile, record)

    def _patch(self, file_id: UUID, fields: dict[str, Any]) -> None:
        self._store.update(FILES, str(file_id), encode_fields(fields))

    def list_posts_by_status(self, status: PostStatus) -> list[ProjectFile]:
        rows = self._store.query_by_index(FILES, "by_status", eq=status)
        return [from_record(ProjectFile, r) for r in rows]

    # --- Editing ---

    def save_content(
        self,
        file_id: UUID,
        content: str,
        title: str | None = None,
        platform_settings: dict[str, Any] | None = None,
    ) -> ProjectFile:
        """
        Persist an edit without touching the publish status.

        A post file that has never had a status becomes a draft.
        """
        with self._store.transaction():
            file = self.get_post(file_id)
            now = self._clock.now()
            fields: dict[str, Any] = {
                "content": content,
                "size": len(content.encode("utf-8")),
                "last_modified": now,
                "updated_at": now,
            }
            if title is not None:
                fields["title"] = title
            if platform_settings is not None:
                fields["platform_settings"] = platform_settings
            if file.post_status is None and file.platform is not None:
                fields["post_status"] = "draft"
            self._patch(file.id, fields)
            return self.get_post(file.id)

    # --- Scheduling ---

    def schedule_post(
        self,
        file_id: UUID,
        scheduled_at: datetime,
        content: str,
        title: str | None = None,
        platform_settings: dict[str, Any] | None = None,
    ) -> ProjectFile:
        """
        Persist content and mark the post scheduled for scheduled_at.

        Raises:
            NotFoundError: file missing
            InvalidTransitionError: post already posted
            PostValidationError: missing fields or bad schedule time
        """
        with self._store.transaction():
            file = self.get_post(file_id)
            new_status = transition(file.status, "schedule")

            now = self._clock.now()
            updates: dict[str, Any] = {"content": content}
            if title is not None:
                updates["title"] = title
            if platform_settings is not None:
                updates["platform_settings"] = platform_settings
            candidate = file.model_copy(update=updates)

            errors = validate_schedule_time(scheduled_at, now) + validate_post(candidate, self._rules)
            if errors:
                raise PostValidationError(errors)

            self._patch(
                file.id,
                {
                    **updates,
                    "size": len(content.encode("utf-8")),
                    "post_status": new_status,
                    "scheduled_at": scheduled_at,
                    "last_modified": now,
                    "updated_at": now,
                },
            )
            scheduled = self.get_post(file.id)

        logger.info("Post %s scheduled for %s", file.id, format_ts(scheduled_at))
        return scheduled

    # --- Submission ---

    def _claim(self, file_id: UUID) -> tuple[ProjectFile, str, bool]:
        """
        Atomically move a post to posting.

        Returns (file, key, fresh); fresh is False for a duplicate of an
        already posted submission.
        """
        with self._store.transaction():
            file = self.get_post(file_id)
            key = submission_key(file)

            if file.status == "posted" and file.submission_key == key:
                return file, key, False

            new_status = transition(file.status, "submit")
            errors = validate_post(file, self._rules)
            if errors:
                raise PostValidationError(errors)

            now = self._clock.now()
            self._patch(
                file.id,
                {
                    "post_status": new_status,
                    "submission_key": key,
                    "last_attempt_at": now,
                    "updated_at": now,
                },
            )
            return self.get_post(file.id), key, True

    def _call_publisher(self, file: ProjectFile, key: str) -> PublishResult:
        try:
            return self._publisher.submit(
                platform=file.platform or "",
                title=file.title,
                content=file.content,
                settings=file.platform_settings,
                idempotency_key=key,
            )
        except PublishError as e:
            logger.warning("Publisher rejected post %s: %s", file.id, e)
            return PublishResult(success=False, error=str(e))
        except Exception as e:  # Publisher failures are recorded, not raised
            logger.exception("Publisher raised while submitting post %s", file.id)
            return PublishResult(success=False, error=str(e) or type(e).__name__)

    def _record(self, file: ProjectFile, result: PublishResult) -> ProjectFile:
        now = self._clock.now()
        with self._store.transaction():
            current = self.get_post(file.id)
            if current.status != "posting":
                logger.warning(
                    "Post %s left posting (now %s) before its submission completed",
                    file.id,
                    current.status,
                )

            if result.success:
                fields: dict[str, Any] = {
                    "post_status": transition("posting", "succeed"),
                    "post_id": result.remote_id,
                    "post_url": result.url,
                    "posted_at": now,
                    "updated_at": now,
                }
                if self._rules.clear_error_on_success:
                    fields["error_message"] = None
            else:
                fields = {
                    "post_status": transition("posting", "fail"),
                    "error_message": result.error or "Unknown error",
                    "retry_count": current.retry_count + 1,
                    "updated_at": now,
                }
            self._patch(file.id, fields)
            return self.get_post(file.id)

    def submit(self, file_id: UUID) -> SubmitOutcome:
        """
        Submit a post now (manual post, retry, or scheduler tick).

        Raises:
            NotFoundError: file missing
            InvalidTransitionError: post is posting or already posted
            PostValidationError: post is incomplete; status is unchanged
        """
        file, key, fresh = self._claim(file_id)
        if not fresh:
            logger.info("Post %s already submitted with key %s; skipping", file.id, key[:12])
            return SubmitOutcome(post=file, submitted=False)

        result = self._call_publisher(file, key)
        updated = self._record(file, result)

        if result.success:
            logger.info("Post %s posted as %s", file.id, result.remote_id)
        else:
            logger.warning("Post %s failed: %s", file.id, updated.error_message)
        return SubmitOutcome(post=updated, submitted=True, result=result)

    def _reject(self, file_id: UUID, error: PostValidationError) -> None:
        """Mark a due post that no longer validates as failed."""
        with self._store.transaction():
            file = self.get_post(file_id)
            if file.status != "scheduled":
                return
            self._patch(
                file.id,
                {
                    "post_status": transition(file.status, "reject"),
                    "error_message": str(error),
                    "updated_at": self._clock.now(),
                },
            )
        logger.warning("Due post %s failed validation and was marked failed: %s", file_id, error)

    def process_due_posts(self, limit: int | None = None) -> ProcessDueOutput:
        """Submit every scheduled post whose time has come."""
        now = self._clock.now()
        rows = self._store.query_by_index(
            FILES, "by_status", eq="scheduled", lte=format_ts(now), limit=limit
        )

        results: list[DueItemResult] = []
        succeeded = failed = skipped = 0

        for row in rows:
            file_id = UUID(row["id"])
            try:
                outcome = self.submit(file_id)
            except (InvalidTransitionError, NotFoundError) as e:
                # Claimed or removed by someone else since the query
                logger.info("Skipping due post %s: %s", file_id, e)
                skipped += 1
                continue
            except PostValidationError as e:
                self._reject(file_id, e)
                results.append(DueItemResult(file_id=file_id, success=False, error=str(e)))
                failed += 1
                continue

            if not outcome.submitted:
                skipped += 1
            elif outcome.result is not None and outcome.result.success:
                succeeded += 1
                results.append(DueItemResult(file_id=file_id, success=True))
            else:
                failed += 1
                results.append(
                    DueItemResult(
                        file_id=file_id, success=False, error=outcome.post.error_message
                    )
                )

        return ProcessDueOutput(
            processed=len(rows),
            succeeded=succeeded,
            failed=failed,
            skipped=skipped,
            results=results,
        )
