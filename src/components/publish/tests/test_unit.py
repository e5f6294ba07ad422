"""
Publish component unit tests.

Tests for post validation, scheduling, submission and due-post processing.
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import Any
from uuid import uuid4

import pytest

from src.adapters.dev_publisher import DevPublisher
from src.adapters.memory_store import InMemoryEntityStore
from src.components.projects import ProjectService
from src.components.publish import (
    PostService,
    ProcessDueInput,
    PublishComponent,
    PublishResult,
    SaveContentInput,
    ScheduleInput,
    SubmitInput,
    submission_key,
    validate_post,
)
from src.domain.entities import ProjectFile
from src.domain.errors import (
    InvalidTransitionError,
    NotFoundError,
    PostValidationError,
    PublishError,
)
from src.domain.records import FILES, encode_fields
from src.rules.models import PlatformRules, PublishRules

# --- Mock Implementations ---


class MockClockPort:
    """Mock clock for deterministic testing."""

    def __init__(self, fixed_time: datetime | None = None) -> None:
        self._time = fixed_time or datetime(2024, 6, 15, 12, 0, 0, tzinfo=UTC)

    def now(self) -> datetime:
        return self._time

    def advance(self, delta: timedelta) -> None:
        self._time = self._time + delta


class FailingPublisher:
    """Publisher that reports failure for every submission."""

    def __init__(self, error: str = "Rate limited") -> None:
        self.error = error
        self.calls = 0

    def submit(
        self,
        platform: str,
        title: str | None,
        content: str,
        settings: dict[str, Any],
        idempotency_key: str,
    ) -> PublishResult:
        self.calls += 1
        return PublishResult(success=False, error=self.error)


class ExplodingPublisher:
    """Publisher whose transport raises."""

    def submit(
        self,
        platform: str,
        title: str | None,
        content: str,
        settings: dict[str, Any],
        idempotency_key: str,
    ) -> PublishResult:
        raise ConnectionError("connection reset")


class RejectingPublisher:
    """Publisher that rejects every submission with PublishError."""

    def submit(
        self,
        platform: str,
        title: str | None,
        content: str,
        settings: dict[str, Any],
        idempotency_key: str,
    ) -> PublishResult:
        raise PublishError("Subreddit is private")


# --- Fixtures ---


@pytest.fixture
def store() -> InMemoryEntityStore:
    return InMemoryEntityStore()


@pytest.fixture
def clock() -> MockClockPort:
    return MockClockPort()


@pytest.fixture
def publisher() -> DevPublisher:
    return DevPublisher()


@pytest.fixture
def rules() -> PublishRules:
    return PublishRules(
        platforms={
            "reddit": PlatformRules(requires_title=True, max_title_length=300),
            "twitter": PlatformRules(requires_title=False, max_content_length=280),
        }
    )


@pytest.fixture
def service(
    store: InMemoryEntityStore,
    publisher: DevPublisher,
    clock: MockClockPort,
    rules: PublishRules,
) -> PostService:
    return PostService(store=store, publisher=publisher, clock=clock, rules=rules)


@pytest.fixture
def projects(store: InMemoryEntityStore, clock: MockClockPort) -> ProjectService:
    return ProjectService(store=store, clock=clock)


@pytest.fixture
def draft_post(projects: ProjectService) -> ProjectFile:
    project = projects.create_project(name="Launch")
    return projects.create_file(
        project.id,
        name="announcement.md",
        content="We are live!",
        platform="reddit",
        title="Launch day",
    )


def _force(store: InMemoryEntityStore, post: ProjectFile, **fields: Any) -> None:
    store.update(FILES, str(post.id), encode_fields(fields))


# --- Validation Tests ---


class TestValidatePost:
    def test_self_post_requires_title_and_content(
        self, draft_post: ProjectFile, rules: PublishRules
    ) -> None:
        post = draft_post.model_copy(update={"title": "", "content": "  "})
        codes = {e.code for e in validate_post(post, rules)}
        assert codes == {"title_required", "content_required"}

    def test_link_post_requires_url(self, draft_post: ProjectFile, rules: PublishRules) -> None:
        post = draft_post.model_copy(update={"content": "", "platform_settings": {"kind": "link"}})
        codes = [e.code for e in validate_post(post, rules)]
        assert codes == ["url_required"]

    def test_link_post_with_url_is_valid(
        self, draft_post: ProjectFile, rules: PublishRules
    ) -> None:
        post = draft_post.model_copy(
            update={
                "content": "",
                "platform_settings": {"kind": "link", "url": "https://example.com"},
            }
        )
        assert validate_post(post, rules) == []

    def test_image_post_only_needs_title(
        self, draft_post: ProjectFile, rules: PublishRules
    ) -> None:
        post = draft_post.model_copy(update={"content": "", "platform_settings": {"kind": "image"}})
        assert validate_post(post, rules) == []

    def test_untitled_platform_needs_content_only(
        self, draft_post: ProjectFile, rules: PublishRules
    ) -> None:
        post = draft_post.model_copy(update={"platform": "twitter", "title": None})
        assert validate_post(post, rules) == []

    def test_content_length_limit(self, draft_post: ProjectFile, rules: PublishRules) -> None:
        post = draft_post.model_copy(update={"platform": "twitter", "content": "x" * 281})
        codes = [e.code for e in validate_post(post, rules)]
        assert codes == ["content_too_long"]


class TestSubmissionKey:
    def test_key_changes_with_content(self, draft_post: ProjectFile) -> None:
        edited = draft_post.model_copy(update={"content": "Edited"})
        assert submission_key(draft_post) != submission_key(edited)

    def test_key_changes_with_slot(self, draft_post: ProjectFile) -> None:
        slot = datetime(2024, 7, 1, 9, 0, tzinfo=UTC)
        scheduled = draft_post.model_copy(update={"scheduled_at": slot})
        assert submission_key(draft_post) != submission_key(scheduled)

    def test_key_is_stable(self, draft_post: ProjectFile) -> None:
        assert submission_key(draft_post) == submission_key(draft_post.model_copy())


# --- Save Content Tests ---


class TestSaveContent:
    def test_save_updates_content_and_size(
        self, service: PostService, draft_post: ProjectFile, clock: MockClockPort
    ) -> None:
        clock.advance(timedelta(minutes=5))
        saved = service.save_content(draft_post.id, "héllo", title="New title")

        assert saved.content == "héllo"
        assert saved.size == 6
        assert saved.title == "New title"
        assert saved.last_modified == clock.now()
        assert saved.status == "draft"

    def test_save_does_not_revert_posted(
        self, service: PostService, store: InMemoryEntityStore, draft_post: ProjectFile
    ) -> None:
        _force(store, draft_post, post_status="posted", post_id="abc", post_url="https://x")

        saved = service.save_content(draft_post.id, "Edited after posting")

        assert saved.status == "posted"
        assert saved.post_id == "abc"

    def test_save_missing_file_raises(self, service: PostService) -> None:
        with pytest.raises(NotFoundError):
            service.save_content(uuid4(), "content")


# --- Schedule Tests ---


class TestSchedule:
    def test_schedule_success(
        self, service: PostService, draft_post: ProjectFile, clock: MockClockPort
    ) -> None:
        future_time = clock.now() + timedelta(days=1)
        post = service.schedule_post(draft_post.id, future_time, "Final copy")

        assert post.status == "scheduled"
        assert post.scheduled_at == future_time
        assert post.content == "Final copy"

    def test_schedule_past_time_fails(
        self, service: PostService, draft_post: ProjectFile, clock: MockClockPort
    ) -> None:
        with pytest.raises(PostValidationError) as exc:
            service.schedule_post(draft_post.id, clock.now() - timedelta(hours=1), "Copy")

        assert exc.value.errors[0].code == "schedule_time_past"
        assert service.get_post(draft_post.id).status == "draft"

    def test_schedule_naive_time_fails(
        self, service: PostService, draft_post: ProjectFile
    ) -> None:
        with pytest.raises(PostValidationError) as exc:
            service.schedule_post(draft_post.id, datetime(2030, 1, 1), "Copy")

        assert exc.value.errors[0].code == "schedule_time_naive"

    def test_schedule_invalid_post_leaves_content(
        self, service: PostService, draft_post: ProjectFile, clock: MockClockPort
    ) -> None:
        with pytest.raises(PostValidationError):
            service.schedule_post(draft_post.id, clock.now() + timedelta(days=1), "")

        post = service.get_post(draft_post.id)
        assert post.status == "draft"
        assert post.content == "We are live!"

    def test_schedule_posted_is_invalid_transition(
        self,
        service: PostService,
        store: InMemoryEntityStore,
        draft_post: ProjectFile,
        clock: MockClockPort,
    ) -> None:
        _force(store, draft_post, post_status="posted")

        with pytest.raises(InvalidTransitionError):
            service.schedule_post(draft_post.id, clock.now() + timedelta(days=1), "Again")

        assert service.get_post(draft_post.id).content == "We are live!"

    def test_reschedule_stuck_posting(
        self,
        service: PostService,
        store: InMemoryEntityStore,
        draft_post: ProjectFile,
        clock: MockClockPort,
    ) -> None:
        _force(store, draft_post, post_status="posting")

        post = service.schedule_post(draft_post.id, clock.now() + timedelta(hours=2), "Retry")

        assert post.status == "scheduled"


# --- Submit Tests ---


class TestSubmit:
    def test_submit_success(
        self, service: PostService, draft_post: ProjectFile, publisher: DevPublisher
    ) -> None:
        outcome = service.submit(draft_post.id)

        assert outcome.submitted is True
        assert outcome.post.status == "posted"
        assert outcome.post.post_id is not None
        assert outcome.post.post_url is not None
        assert outcome.post.posted_at is not None
        assert len(publisher.submissions) == 1

    def test_empty_content_rejected_before_publisher(
        self,
        service: PostService,
        store: InMemoryEntityStore,
        draft_post: ProjectFile,
        publisher: DevPublisher,
    ) -> None:
        _force(store, draft_post, content="")

        with pytest.raises(PostValidationError):
            service.submit(draft_post.id)

        post = service.get_post(draft_post.id)
        assert post.status == "draft"
        assert post.post_id is None
        assert post.post_url is None
        assert publisher.submissions == []

    def test_empty_title_rejected_from_scheduled(
        self,
        service: PostService,
        store: InMemoryEntityStore,
        draft_post: ProjectFile,
        publisher: DevPublisher,
    ) -> None:
        _force(store, draft_post, post_status="scheduled", title="")

        with pytest.raises(PostValidationError):
            service.submit(draft_post.id)

        assert service.get_post(draft_post.id).status == "scheduled"
        assert publisher.submissions == []

    def test_failure_is_recorded_not_raised(
        self, store: InMemoryEntityStore, clock: MockClockPort, draft_post: ProjectFile
    ) -> None:
        failing = FailingPublisher("Rate limited")
        service = PostService(store=store, publisher=failing, clock=clock)

        outcome = service.submit(draft_post.id)

        assert outcome.post.status == "failed"
        assert outcome.post.error_message == "Rate limited"
        assert outcome.post.retry_count == 1
        assert outcome.post.post_id is None

    def test_publisher_exception_is_recorded(
        self, store: InMemoryEntityStore, clock: MockClockPort, draft_post: ProjectFile
    ) -> None:
        service = PostService(store=store, publisher=ExplodingPublisher(), clock=clock)

        outcome = service.submit(draft_post.id)

        assert outcome.post.status == "failed"
        assert outcome.post.error_message == "connection reset"

    def test_publish_error_is_recorded(
        self, store: InMemoryEntityStore, clock: MockClockPort, draft_post: ProjectFile
    ) -> None:
        service = PostService(store=store, publisher=RejectingPublisher(), clock=clock)

        outcome = service.submit(draft_post.id)

        assert outcome.submitted is True
        assert outcome.post.status == "failed"
        assert outcome.post.error_message == "Subreddit is private"

    def test_retry_keeps_stale_error_message(
        self,
        service: PostService,
        store: InMemoryEntityStore,
        draft_post: ProjectFile,
    ) -> None:
        _force(store, draft_post, post_status="failed", error_message="Rate limited")

        outcome = service.submit(draft_post.id)

        assert outcome.post.status == "posted"
        assert outcome.post.error_message == "Rate limited"

    def test_retry_clears_error_when_configured(
        self,
        store: InMemoryEntityStore,
        publisher: DevPublisher,
        clock: MockClockPort,
        draft_post: ProjectFile,
    ) -> None:
        service = PostService(
            store=store,
            publisher=publisher,
            clock=clock,
            rules=PublishRules(clear_error_on_success=True),
        )
        _force(store, draft_post, post_status="failed", error_message="Rate limited")

        outcome = service.submit(draft_post.id)

        assert outcome.post.status == "posted"
        assert outcome.post.error_message is None

    def test_submit_while_posting_is_rejected(
        self,
        service: PostService,
        store: InMemoryEntityStore,
        draft_post: ProjectFile,
        publisher: DevPublisher,
    ) -> None:
        _force(store, draft_post, post_status="posting")

        with pytest.raises(InvalidTransitionError):
            service.submit(draft_post.id)

        assert publisher.submissions == []

    def test_duplicate_submit_is_noop(
        self, service: PostService, draft_post: ProjectFile, publisher: DevPublisher
    ) -> None:
        first = service.submit(draft_post.id)
        second = service.submit(draft_post.id)

        assert first.submitted is True
        assert second.submitted is False
        assert second.post.post_id == first.post.post_id
        assert len(publisher.submissions) == 1


# --- Process Due Tests ---


class TestProcessDue:
    def test_process_due_submits_ready_posts(
        self, service: PostService, draft_post: ProjectFile, clock: MockClockPort
    ) -> None:
        service.schedule_post(draft_post.id, clock.now() + timedelta(minutes=30), "Go")
        clock.advance(timedelta(hours=1))

        result = service.process_due_posts()

        assert result.processed == 1
        assert result.succeeded == 1
        assert result.success is True
        assert service.get_post(draft_post.id).status == "posted"

    def test_process_due_skips_future_posts(
        self, service: PostService, draft_post: ProjectFile, clock: MockClockPort
    ) -> None:
        service.schedule_post(draft_post.id, clock.now() + timedelta(days=1), "Later")

        result = service.process_due_posts()

        assert result.processed == 0
        assert service.get_post(draft_post.id).status == "scheduled"

    def test_process_due_due_at_exact_time(
        self, service: PostService, draft_post: ProjectFile, clock: MockClockPort
    ) -> None:
        slot = clock.now() + timedelta(minutes=10)
        service.schedule_post(draft_post.id, slot, "On the dot")
        clock.advance(timedelta(minutes=10))

        result = service.process_due_posts()

        assert result.succeeded == 1

    def test_process_due_counts_failures(
        self, store: InMemoryEntityStore, clock: MockClockPort, draft_post: ProjectFile
    ) -> None:
        service = PostService(store=store, publisher=FailingPublisher(), clock=clock)
        service.schedule_post(draft_post.id, clock.now() + timedelta(minutes=1), "Go")
        clock.advance(timedelta(minutes=2))

        result = service.process_due_posts()

        assert result.failed == 1
        assert result.success is False
        assert result.results[0].error == "Rate limited"
        # Failed posts are not picked up again
        assert service.process_due_posts().processed == 0

    def test_invalid_due_post_is_marked_failed(
        self,
        service: PostService,
        draft_post: ProjectFile,
        clock: MockClockPort,
        publisher: DevPublisher,
    ) -> None:
        service.schedule_post(draft_post.id, clock.now() + timedelta(minutes=1), "Go")
        service.save_content(draft_post.id, "")
        clock.advance(timedelta(minutes=2))

        result = service.process_due_posts()

        assert result.failed == 1
        post = service.get_post(draft_post.id)
        assert post.status == "failed"
        assert post.error_message == "Content is required"
        assert post.retry_count == 0
        assert publisher.submissions == []
        assert service.process_due_posts().processed == 0

    def test_invalid_due_post_does_not_block_later_posts(
        self,
        service: PostService,
        projects: ProjectService,
        draft_post: ProjectFile,
        clock: MockClockPort,
    ) -> None:
        later = projects.create_file(
            draft_post.project_id,
            name="followup.md",
            content="Part two",
            platform="reddit",
            title="Follow-up",
        )
        service.schedule_post(draft_post.id, clock.now() + timedelta(minutes=1), "Go")
        service.schedule_post(later.id, clock.now() + timedelta(minutes=2), "Part two")
        service.save_content(draft_post.id, "")
        clock.advance(timedelta(minutes=5))

        first = service.process_due_posts(limit=1)
        second = service.process_due_posts(limit=1)

        assert first.failed == 1
        assert second.succeeded == 1
        assert service.get_post(later.id).status == "posted"

    def test_list_posts_by_status(
        self, service: PostService, draft_post: ProjectFile, clock: MockClockPort
    ) -> None:
        service.schedule_post(draft_post.id, clock.now() + timedelta(days=1), "Later")

        assert [p.id for p in service.list_posts_by_status("scheduled")] == [draft_post.id]
        assert service.list_posts_by_status("draft") == []


# --- Component Shell Tests ---


class TestPublishComponent:
    def test_dispatch_schedule(
        self, service: PostService, draft_post: ProjectFile, clock: MockClockPort
    ) -> None:
        component = PublishComponent(service)
        result = component.run(
            ScheduleInput(
                file_id=draft_post.id,
                scheduled_at=clock.now() + timedelta(days=1),
                content="Copy",
            )
        )

        assert result.success is True

    def test_validation_errors_become_output(
        self, service: PostService, draft_post: ProjectFile, clock: MockClockPort
    ) -> None:
        component = PublishComponent(service)
        result = component.run_schedule(
            ScheduleInput(
                file_id=draft_post.id,
                scheduled_at=clock.now() - timedelta(days=1),
                content="Copy",
            )
        )

        assert result.success is False
        assert any(e.code == "schedule_time_past" for e in result.errors)

    def test_missing_file(self, service: PostService) -> None:
        result = PublishComponent(service).run(SaveContentInput(file_id=uuid4(), content="x"))

        assert result.success is False
        assert result.errors[0].code == "ITEM_NOT_FOUND"

    def test_failed_submit_reports_error(
        self, store: InMemoryEntityStore, clock: MockClockPort, draft_post: ProjectFile
    ) -> None:
        service = PostService(store=store, publisher=FailingPublisher(), clock=clock)
        result = PublishComponent(service).run(SubmitInput(file_id=draft_post.id))

        assert result.success is False
        assert result.post is not None
        assert result.post.status == "failed"
        assert result.errors[0].code == "PUBLISH_FAILED"

    def test_process_due_dispatch(self, service: PostService) -> None:
        result = PublishComponent(service).run(ProcessDueInput())

        assert result.processed == 0
