"""Publish component - shell over PostService that converts errors to outputs."""

from __future__ import annotations

from collections.abc import Callable

from src.domain.entities import ProjectFile
from src.domain.errors import (
    FieldError,
    InvalidTransitionError,
    NotFoundError,
    PostValidationError,
)

from ._impl import PostService
from .models import (
    PostOutput,
    ProcessDueInput,
    ProcessDueOutput,
    SaveContentInput,
    ScheduleInput,
    SubmitInput,
)

# Type alias for all supported inputs
PublishInput = SaveContentInput | ScheduleInput | SubmitInput | ProcessDueInput
PublishOutput = PostOutput | ProcessDueOutput


class PublishComponent:
    """Component for managing the post publishing lifecycle."""

    def __init__(self, service: PostService) -> None:
        self._service = service

    def run(self, input_data: PublishInput) -> PublishOutput:
        """Main dispatcher - routes to appropriate handler based on input type."""
        if isinstance(input_data, SaveContentInput):
            return self.run_save_content(input_data)
        elif isinstance(input_data, ScheduleInput):
            return self.run_schedule(input_data)
        elif isinstance(input_data, SubmitInput):
            return self.run_submit(input_data)
        elif isinstance(input_data, ProcessDueInput):
            return self.run_process_due(input_data)
        else:
            raise TypeError(f"Unknown input type: {type(input_data)}")

    def _guard(self, operation: Callable[[], ProjectFile]) -> PostOutput:
        try:
            post = operation()
        except NotFoundError as e:
            error = FieldError(code="ITEM_NOT_FOUND", message=str(e), field="file_id")
            return PostOutput(post=None, errors=[error], success=False)
        except InvalidTransitionError as e:
            error = FieldError(code="TRANSITION_ERROR", message=str(e), field="post_status")
            return PostOutput(post=None, errors=[error], success=False)
        except PostValidationError as e:
            return PostOutput(post=None, errors=list(e.errors), success=False)
        return PostOutput(post=post, errors=[], success=True)

    def run_save_content(self, input_data: SaveContentInput) -> PostOutput:
        return self._guard(
            lambda: self._service.save_content(
                input_data.file_id,
                input_data.content,
                title=input_data.title,
                platform_settings=input_data.platform_settings,
            )
        )

    def run_schedule(self, input_data: ScheduleInput) -> PostOutput:
        """Schedule a post for future publication."""
        return self._guard(
            lambda: self._service.schedule_post(
                input_data.file_id,
                input_data.scheduled_at,
                input_data.content,
                title=input_data.title,
                platform_settings=input_data.platform_settings,
            )
        )

    def run_submit(self, input_data: SubmitInput) -> PostOutput:
        """
        Submit a post now.

        A publisher failure still returns the updated (failed) post; success
        reflects whether the post ended up posted.
        """
        output = self._guard(lambda: self._service.submit(input_data.file_id).post)
        if output.post is not None and output.post.status == "failed":
            error = FieldError(
                code="PUBLISH_FAILED",
                message=output.post.error_message or "Publish failed",
                field="post_status",
            )
            return PostOutput(post=output.post, errors=[error], success=False)
        return output

    def run_process_due(self, input_data: ProcessDueInput) -> ProcessDueOutput:
        """Submit all scheduled posts whose time has come."""
        _ = input_data  # Explicitly mark as intentionally unused
        return self._service.process_due_posts()


def run(input_data: PublishInput, service: PostService) -> PublishOutput:
    """Convenience entry point - builds a component around the service."""
    return PublishComponent(service).run(input_data)
