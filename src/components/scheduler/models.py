"""Scheduler component input/output models."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from src.components.publish import ProcessDueOutput
from src.domain.entities import SweepResult


@dataclass(frozen=True)
class RunSweepInput:
    """Run the trash expiry sweep now - empty input."""

    pass


@dataclass(frozen=True)
class RunDuePublishesInput:
    """Submit due scheduled posts now - empty input."""

    pass


@dataclass(frozen=True)
class TickInput:
    now: datetime | None = None


@dataclass(frozen=True)
class TickResult:
    """Outcome of one scheduler tick. sweep is None when no sweep was due."""

    ran_at: datetime
    publishes: ProcessDueOutput
    sweep: SweepResult | None = None
