"""
Dev Lifecycle Runner Adapter.

In-process background runner for development and single-node deployments.
Polls on a fixed interval and runs one scheduler tick per poll.

Production can instead invoke the CLI (`publish_due`, `sweep`) from an
external cron; this provides equivalent behavior for local development.

Key behaviors:
- Synchronous ticks for predictable testing (trigger_now)
- Configurable poll interval for background mode
- Exceptions in a tick are logged and never stop the loop
"""

from __future__ import annotations

import logging
import threading

from src.components.scheduler import LifecycleScheduler, TickResult

logger = logging.getLogger(__name__)


class DevLifecycleRunner:
    """
    Dev runner with background polling.

    Runs a background thread that ticks the scheduler at a configurable
    interval.
    """

    def __init__(
        self,
        scheduler: LifecycleScheduler,
        poll_interval_seconds: float = 60.0,
    ) -> None:
        """
        Initialize runner.

        Args:
            scheduler: Scheduler to tick
            poll_interval_seconds: Interval between polls
        """
        self._scheduler = scheduler
        self._poll_interval = poll_interval_seconds
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None
        self._running = False

    def start(self) -> None:
        """Start the background runner."""
        if self._running:
            return

        self._stop_event.clear()
        self._thread = threading.Thread(target=self._poll_loop, daemon=True)
        self._thread.start()
        self._running = True
        logger.info("Lifecycle runner started (poll interval: %.1fs)", self._poll_interval)

    def stop(self) -> None:
        """Stop the runner gracefully."""
        if not self._running:
            return

        self._stop_event.set()
        if self._thread:
            self._thread.join(timeout=5.0)
        self._running = False
        logger.info("Lifecycle runner stopped")

    def wait(self, timeout: float | None = None) -> bool:
        """Block until stop() is called. Returns True if stopped."""
        return self._stop_event.wait(timeout=timeout)

    def trigger_now(self) -> TickResult:
        """Run one tick immediately on the calling thread."""
        return self._scheduler.tick()

    @property
    def is_running(self) -> bool:
        """Check if runner is active."""
        return self._running

    def _poll_loop(self) -> None:
        """Background polling loop."""
        while not self._stop_event.wait(timeout=self._poll_interval):
            try:
                result = self._scheduler.tick()
                if result.sweep is not None:
                    logger.info(
                        "Scheduled sweep removed %d trash records",
                        result.sweep.total_cleaned,
                    )
            except Exception:
                logger.exception("Error in lifecycle runner poll loop")


def create_dev_runner(
    scheduler: LifecycleScheduler,
    poll_interval_seconds: float = 60.0,
) -> DevLifecycleRunner:
    """
    Create a dev lifecycle runner.

    Args:
        scheduler: Scheduler to tick
        poll_interval_seconds: Interval between polls

    Returns:
        Configured DevLifecycleRunner
    """
    return DevLifecycleRunner(scheduler, poll_interval_seconds)
