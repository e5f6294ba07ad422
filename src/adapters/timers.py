"""
Timer adapters for delayed tasks.

ThreadingTimerFactory arms real one-shot timers on daemon threads.
ManualTimerFactory records armed timers and fires them on demand, for
deterministic tests and for hosts that drive time themselves.
"""

from __future__ import annotations

import threading
from collections.abc import Callable


class ThreadingTimerFactory:
    def call_later(self, delay_seconds: float, callback: Callable[[], None]) -> threading.Timer:
        timer = threading.Timer(delay_seconds, callback)
        timer.daemon = True
        timer.start()
        return timer


class ManualTimer:
    def __init__(self, delay_seconds: float, callback: Callable[[], None]) -> None:
        self.delay_seconds = delay_seconds
        self.callback = callback
        self.cancelled = False
        self.fired = False

    def cancel(self) -> None:
        self.cancelled = True

    @property
    def pending(self) -> bool:
        return not (self.cancelled or self.fired)

    def fire(self) -> None:
        if self.pending:
            self.fired = True
            self.callback()


class ManualTimerFactory:
    def __init__(self) -> None:
        self.timers: list[ManualTimer] = []

    def call_later(self, delay_seconds: float, callback: Callable[[], None]) -> ManualTimer:
        timer = ManualTimer(delay_seconds, callback)
        self.timers.append(timer)
        return timer

    @property
    def pending(self) -> list[ManualTimer]:
        return [t for t in self.timers if t.pending]

    def fire_all(self) -> int:
        """Fire every pending timer; returns how many fired."""
        due = self.pending
        for timer in due:
            timer.fire()
        return len(due)
