"""
Dev Publisher Adapter.

Logs submissions instead of calling a social platform.
Used for local development and testing.

Key behaviors:
- Logs submission details
- Returns a deterministic remote id and url derived from the idempotency key
- A repeated idempotency key returns the first result without a second log entry
- Stores submissions in memory for test assertions
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from src.ports.publisher import PublishResult

logger = logging.getLogger(__name__)


@dataclass
class SubmittedPost:
    """Record of a logged submission for test assertions."""

    remote_id: str
    platform: str
    title: str | None
    content: str
    settings: dict[str, Any]
    idempotency_key: str
    submitted_at: datetime


@dataclass
class DevPublisher:
    """
    Dev publisher that logs instead of posting.

    Implements PublisherPort.
    """

    submissions: list[SubmittedPost] = field(default_factory=list)
    base_url: str = "https://example.invalid/posts"
    log_level: int = logging.INFO
    content_preview_length: int = 80

    def submit(
        self,
        platform: str,
        title: str | None,
        content: str,
        settings: dict[str, Any],
        idempotency_key: str,
    ) -> PublishResult:
        for previous in self.submissions:
            if previous.idempotency_key == idempotency_key:
                logger.debug("Dev publisher: duplicate submission %s ignored", idempotency_key)
                return self._result(previous)

        submitted = SubmittedPost(
            remote_id=f"dev_{idempotency_key[:12]}",
            platform=platform,
            title=title,
            content=content,
            settings=dict(settings),
            idempotency_key=idempotency_key,
            submitted_at=datetime.now(UTC),
        )
        self.submissions.append(submitted)

        preview = content[: self.content_preview_length]
        if len(content) > self.content_preview_length:
            preview += "..."
        logger.log(
            self.log_level,
            "Dev publisher: would post to %s (title=%r): %s",
            platform,
            title,
            preview,
        )
        return self._result(submitted)

    def _result(self, submitted: SubmittedPost) -> PublishResult:
        return PublishResult(
            success=True,
            remote_id=submitted.remote_id,
            url=f"{self.base_url}/{submitted.platform}/{submitted.remote_id}",
        )

    def clear(self) -> None:
        self.submissions.clear()
