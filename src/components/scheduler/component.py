"""
Scheduler component - periodic sweep and due-post processing.

Invariants:
- Due posts are processed on every tick
- The trash sweep runs at most once per daily slot
"""

from __future__ import annotations

from src.components.publish import ProcessDueOutput
from src.domain.entities import SweepResult

from ._impl import LifecycleScheduler
from .models import RunDuePublishesInput, RunSweepInput, TickInput, TickResult

SchedulerInput = RunSweepInput | RunDuePublishesInput | TickInput
SchedulerOutput = SweepResult | ProcessDueOutput | TickResult


def run(input_data: SchedulerInput, scheduler: LifecycleScheduler) -> SchedulerOutput:
    """Main dispatcher for scheduler operations."""
    if isinstance(input_data, RunSweepInput):
        return scheduler.run_trash_sweep()
    elif isinstance(input_data, RunDuePublishesInput):
        return scheduler.run_due_publishes()
    elif isinstance(input_data, TickInput):
        return scheduler.tick(input_data.now)
    else:
        raise TypeError(f"Unknown input type: {type(input_data)}")
