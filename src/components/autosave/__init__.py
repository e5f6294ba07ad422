"""Autosave component - debounced persistence of in-progress edits."""

from ._impl import AutosaveBuffer, AutosaveCoordinator, SaveFn
from .component import open_autosave
from .ports import TimerFactoryPort, TimerHandle

__all__ = [
    "AutosaveBuffer",
    "AutosaveCoordinator",
    "SaveFn",
    "open_autosave",
    "TimerFactoryPort",
    "TimerHandle",
]
