from collections.abc import Callable
from typing import Protocol


class TimerHandle(Protocol):
    def cancel(self) -> None:
        """Disarm the timer. Cancelling a fired timer is a no-op."""
        ...


class TimerFactoryPort(Protocol):
    def call_later(self, delay_seconds: float, callback: Callable[[], None]) -> TimerHandle:
        """Arm a one-shot timer."""
        ...
