from typing import Literal

from src.domain.entities import PostStatus
from src.domain.errors import InvalidTransitionError

PostEvent = Literal["schedule", "submit", "succeed", "fail", "reject"]

# Closed transition table: (current status, event) -> new status.
# posting -> scheduled is the manual reconciliation path for a stuck submission.
# scheduled -> failed (reject) applies to a due post that no longer validates.
TRANSITIONS: dict[tuple[PostStatus, PostEvent], PostStatus] = {
    ("draft", "schedule"): "scheduled",
    ("draft", "submit"): "posting",
    ("scheduled", "schedule"): "scheduled",
    ("scheduled", "submit"): "posting",
    ("scheduled", "reject"): "failed",
    ("posting", "schedule"): "scheduled",
    ("posting", "succeed"): "posted",
    ("posting", "fail"): "failed",
    ("failed", "schedule"): "scheduled",
    ("failed", "submit"): "posting",
}


def can_transition(current: PostStatus, event: PostEvent) -> bool:
    return (current, event) in TRANSITIONS


def transition(current: PostStatus, event: PostEvent) -> PostStatus:
    """
    Return the status reached by applying event to current.
    Raises InvalidTransitionError if the pair is not in the table.
    """
    try:
        return TRANSITIONS[(current, event)]
    except KeyError:
        raise InvalidTransitionError(current, event) from None


def can_post(status: PostStatus) -> bool:
    """False while a submission is in flight or after it succeeded."""
    return can_transition(status, "submit")


def can_schedule(status: PostStatus) -> bool:
    return can_transition(status, "schedule")
