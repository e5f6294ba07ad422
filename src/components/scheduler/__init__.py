"""Scheduler component - time-driven sweep and scheduled publishing."""

from ._impl import LifecycleScheduler, latest_sweep_slot
from .component import run
from .models import RunDuePublishesInput, RunSweepInput, TickInput, TickResult
from .ports import ClockPort

__all__ = [
    "LifecycleScheduler",
    "latest_sweep_slot",
    "run",
    "RunDuePublishesInput",
    "RunSweepInput",
    "TickInput",
    "TickResult",
    "ClockPort",
]
