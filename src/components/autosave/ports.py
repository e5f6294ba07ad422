"""Autosave component port definitions."""

from src.ports.timer import TimerFactoryPort, TimerHandle

__all__ = ["TimerFactoryPort", "TimerHandle"]
