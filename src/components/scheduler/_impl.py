"""
LifecycleScheduler - time-driven entry points into the lifecycle core.

Key behaviors:
- Due scheduled posts are processed on every tick
- The trash sweep runs once per day, on the first tick at or after the
  daily sweep time (UTC); a missed slot is caught up on the next tick
- A stuck posting is never retried here; only scheduled posts are picked up
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime, timedelta

from src.components.publish import PostService, ProcessDueOutput
from src.components.trash import TrashService
from src.domain.entities import SweepResult
from src.rules.models import SchedulerRules

from .models import TickResult
from .ports import ClockPort

logger = logging.getLogger(__name__)


def latest_sweep_slot(now: datetime, rules: SchedulerRules) -> datetime:
    """Most recent daily sweep time at or before now."""
    now = now.astimezone(UTC)
    slot = now.replace(
        hour=rules.sweep_hour_utc,
        minute=rules.sweep_minute_utc,
        second=0,
        microsecond=0,
    )
    if slot > now:
        slot -= timedelta(days=1)
    return slot


class LifecycleScheduler:
    def __init__(
        self,
        trash: TrashService,
        posts: PostService,
        clock: ClockPort,
        rules: SchedulerRules | None = None,
    ) -> None:
        self._trash = trash
        self._posts = posts
        self._clock = clock
        self._rules = rules or SchedulerRules()
        self.last_sweep_at: datetime | None = None

    def run_trash_sweep(self, now: datetime | None = None) -> SweepResult:
        result = self._trash.cleanup_expired_trash()
        self.last_sweep_at = now or self._clock.now()
        return result

    def run_due_publishes(self) -> ProcessDueOutput:
        result = self._posts.process_due_posts(limit=self._rules.max_posts_per_tick)
        if result.processed:
            logger.info(
                "Processed %d due posts: %d posted, %d failed, %d skipped",
                result.processed,
                result.succeeded,
                result.failed,
                result.skipped,
            )
        return result

    def sweep_due(self, now: datetime) -> bool:
        if self.last_sweep_at is None:
            return True
        return self.last_sweep_at < latest_sweep_slot(now, self._rules)

    def tick(self, now: datetime | None = None) -> TickResult:
        """Run whatever is due at now (defaults to the clock)."""
        now = now or self._clock.now()
        publishes = self.run_due_publishes()

        sweep = None
        if self.sweep_due(now):
            sweep = self.run_trash_sweep(now)

        return TickResult(ran_at=now, publishes=publishes, sweep=sweep)
