"""
Unit tests for DevPublisher.

Tests cover:
1. Deterministic remote id and url
2. Idempotency-key deduplication
3. Submission storage for test assertions
4. Log output
"""

import logging

import pytest

from src.adapters.dev_publisher import DevPublisher


class TestDevPublisherSubmit:
    def test_submit_succeeds_with_remote_id(self) -> None:
        publisher = DevPublisher()

        result = publisher.submit("reddit", "Title", "Body", {}, idempotency_key="a" * 64)

        assert result.success is True
        assert result.remote_id == "dev_aaaaaaaaaaaa"
        assert result.url == "https://example.invalid/posts/reddit/dev_aaaaaaaaaaaa"
        assert result.error is None

    def test_submissions_are_stored(self) -> None:
        publisher = DevPublisher()

        publisher.submit("twitter", None, "Hello", {"thread": False}, idempotency_key="k1")

        assert len(publisher.submissions) == 1
        submitted = publisher.submissions[0]
        assert submitted.platform == "twitter"
        assert submitted.title is None
        assert submitted.settings == {"thread": False}

    def test_same_key_is_deduplicated(self) -> None:
        publisher = DevPublisher()

        first = publisher.submit("reddit", "T", "B", {}, idempotency_key="same-key")
        second = publisher.submit("reddit", "T", "B", {}, idempotency_key="same-key")

        assert first == second
        assert len(publisher.submissions) == 1

    def test_clear(self) -> None:
        publisher = DevPublisher()
        publisher.submit("reddit", "T", "B", {}, idempotency_key="k")

        publisher.clear()

        assert publisher.submissions == []


class TestDevPublisherLogging:
    def test_logs_preview(self, caplog: pytest.LogCaptureFixture) -> None:
        publisher = DevPublisher(content_preview_length=5)

        with caplog.at_level(logging.INFO, logger="src.adapters.dev_publisher"):
            publisher.submit("linkedin", "T", "Hello world", {}, idempotency_key="k")

        assert "would post to linkedin" in caplog.text
        assert "Hello..." in caplog.text
