"""Publish component - manages the social post publishing lifecycle."""

from src.components.publish._impl import (
    PostService,
    submission_key,
    validate_post,
    validate_schedule_time,
)
from src.components.publish.component import PublishComponent, run
from src.components.publish.models import (
    DueItemResult,
    PostOutput,
    ProcessDueInput,
    ProcessDueOutput,
    SaveContentInput,
    ScheduleInput,
    SubmitInput,
    SubmitOutcome,
)
from src.components.publish.ports import ClockPort, EntityStorePort, PublisherPort, PublishResult

__all__ = [
    # Entry point
    "run",
    # Component
    "PublishComponent",
    "PostService",
    "submission_key",
    "validate_post",
    "validate_schedule_time",
    # Models
    "SaveContentInput",
    "ScheduleInput",
    "SubmitInput",
    "ProcessDueInput",
    "PostOutput",
    "SubmitOutcome",
    "DueItemResult",
    "ProcessDueOutput",
    # Ports
    "EntityStorePort",
    "PublisherPort",
    "PublishResult",
    "ClockPort",
]
