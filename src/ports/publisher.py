from dataclasses import dataclass
from typing import Any, Protocol


@dataclass(frozen=True)
class PublishResult:
    """Outcome of a remote submission."""

    success: bool
    remote_id: str | None = None
    url: str | None = None
    error: str | None = None


class PublisherPort(Protocol):
    def submit(
        self,
        platform: str,
        title: str | None,
        content: str,
        settings: dict[str, Any],
        idempotency_key: str,
    ) -> PublishResult:
        """
        Submit a post to the remote platform.

        Implementations should treat a repeated idempotency_key as the same
        logical post and reports a rejected submission through the result or
        by raising PublishError.
        """
        ...
