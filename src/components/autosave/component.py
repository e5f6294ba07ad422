"""
Autosave component - wires a coordinator to the post service.

Shell Layer - loads the file first so the coordinator is initialized
before the first edit reaches it.
"""

from __future__ import annotations

from typing import Any
from uuid import UUID

from src.components.publish import PostService
from src.rules.models import AutosaveRules

from ._impl import AutosaveCoordinator
from .ports import TimerFactoryPort


def open_autosave(
    service: PostService,
    file_id: UUID,
    timer_factory: TimerFactoryPort,
    rules: AutosaveRules | None = None,
) -> AutosaveCoordinator:
    """Open an autosave session for a file. Raises NotFoundError if missing."""
    rules = rules or AutosaveRules()

    def save(
        target: UUID, content: str, title: str | None, platform_settings: dict[str, Any]
    ) -> None:
        service.save_content(target, content, title=title, platform_settings=platform_settings)

    coordinator = AutosaveCoordinator(
        file_id=file_id,
        save=save,
        timer_factory=timer_factory,
        quiet_period_seconds=rules.quiet_period_seconds,
    )
    post = service.get_post(file_id)
    coordinator.mark_loaded(post.content, post.title, post.platform_settings)
    return coordinator
