"""
AutosaveCoordinator - coalesces rapid edits into one delayed write per file.

Key behaviors:
- Nothing is written until mark_loaded() records the persisted values;
  edits arriving before that are discarded
- Every edit cancels the armed timer and re-arms it for the quiet period
- On expiry exactly one write is issued with the latest buffered values
  (last write wins per field, no merge of intermediate states)
- A failed write keeps the buffer dirty; the next edit or flush retries
- No publish status check: saving never changes post status
"""

from __future__ import annotations

import copy
import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any
from uuid import UUID

from src.rules.models import AutosaveRules

from .ports import TimerFactoryPort, TimerHandle

logger = logging.getLogger(__name__)

# save(file_id, content, title, platform_settings)
SaveFn = Callable[[UUID, str, str | None, dict[str, Any]], Any]


@dataclass
class AutosaveBuffer:
    """Latest known values for the editable fields of one file."""

    content: str = ""
    title: str | None = None
    platform_settings: dict[str, Any] = field(default_factory=dict)


class AutosaveCoordinator:
    def __init__(
        self,
        file_id: UUID,
        save: SaveFn,
        timer_factory: TimerFactoryPort,
        quiet_period_seconds: float | None = None,
    ) -> None:
        self.file_id = file_id
        self._save = save
        self._timers = timer_factory
        self._quiet = quiet_period_seconds or AutosaveRules().quiet_period_seconds

        self._lock = threading.RLock()
        self._buffer = AutosaveBuffer()
        self._loaded = False
        self._dirty = False
        self._closed = False
        self._timer: TimerHandle | None = None
        self._generation = 0
        self.writes = 0

    @property
    def loaded(self) -> bool:
        return self._loaded

    @property
    def dirty(self) -> bool:
        return self._dirty

    @property
    def buffer(self) -> AutosaveBuffer:
        with self._lock:
            return copy.deepcopy(self._buffer)

    def mark_loaded(
        self,
        content: str,
        title: str | None = None,
        platform_settings: dict[str, Any] | None = None,
    ) -> None:
        """Record the persisted values; edits are accepted from now on."""
        with self._lock:
            self._buffer = AutosaveBuffer(
                content=content,
                title=title,
                platform_settings=dict(platform_settings or {}),
            )
            self._loaded = True
            self._dirty = False

    def edit(
        self,
        content: str | None = None,
        title: str | None = None,
        platform_settings: dict[str, Any] | None = None,
    ) -> bool:
        """
        Buffer an edit and restart the quiet period.

        Returns:
            False if the edit was discarded (not loaded yet, or closed)
        """
        with self._lock:
            if not self._loaded or self._closed:
                logger.debug("Autosave for %s ignored edit before load", self.file_id)
                return False

            if content is not None:
                self._buffer.content = content
            if title is not None:
                self._buffer.title = title
            if platform_settings is not None:
                self._buffer.platform_settings = dict(platform_settings)
            self._dirty = True
            self._arm()
            return True

    def _arm(self) -> None:
        self._disarm()
        self._generation += 1
        generation = self._generation
        self._timer = self._timers.call_later(self._quiet, lambda: self._on_quiet(generation))

    def _disarm(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _on_quiet(self, generation: int) -> None:
        with self._lock:
            # A timer that was superseded before it could be cancelled
            if generation != self._generation:
                return
            self._timer = None
            self._write()

    def _write(self) -> bool:
        if not self._dirty:
            return False

        snapshot = copy.deepcopy(self._buffer)
        try:
            self._save(
                self.file_id,
                snapshot.content,
                snapshot.title,
                snapshot.platform_settings,
            )
        except Exception:
            logger.exception("Autosave for %s failed; keeping buffered edits", self.file_id)
            return False

        self._dirty = False
        self.writes += 1
        logger.debug("Autosaved %s", self.file_id)
        return True

    def flush(self) -> bool:
        """Write pending edits now. Returns True if a write happened."""
        with self._lock:
            self._disarm()
            self._generation += 1
            return self._write()

    def close(self) -> bool:
        """Flush pending edits and stop accepting new ones."""
        with self._lock:
            written = self.flush()
            self._closed = True
            return written
