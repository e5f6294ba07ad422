"""Publish component port definitions - protocols for dependencies."""

from src.ports.clock import ClockPort
from src.ports.publisher import PublisherPort, PublishResult
from src.ports.store import EntityStorePort

__all__ = ["ClockPort", "EntityStorePort", "PublisherPort", "PublishResult"]
