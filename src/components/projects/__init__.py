"""Projects component - creation and lookup of live projects and files."""

from ._impl import ProjectService
from .ports import ClockPort, EntityStorePort

__all__ = ["ProjectService", "ClockPort", "EntityStorePort"]
