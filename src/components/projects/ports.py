"""Projects component port definitions."""

from src.ports.clock import ClockPort
from src.ports.store import EntityStorePort

__all__ = ["ClockPort", "EntityStorePort"]
