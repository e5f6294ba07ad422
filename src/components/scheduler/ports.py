"""Scheduler component port definitions."""

from src.ports.clock import ClockPort

__all__ = ["ClockPort"]
