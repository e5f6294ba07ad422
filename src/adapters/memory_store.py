"""
In-memory entity store.

Implements EntityStorePort over plain dicts. Used by tests and by
single-process development runs. A re-entrant lock serialises access;
transactions snapshot the tables and restore them if the block raises.
"""

from __future__ import annotations

import copy
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any
from uuid import uuid4

from src.domain.records import INDEXES, index_fields
from src.ports.store import SortOrder


class InMemoryEntityStore:
    def __init__(self) -> None:
        self._tables: dict[str, dict[str, dict[str, Any]]] = {name: {} for name in INDEXES}
        self._lock = threading.RLock()
        self._depth = 0

    def _table(self, table: str) -> dict[str, dict[str, Any]]:
        if table not in self._tables:
            raise KeyError(f"Unknown table {table!r}")
        return self._tables[table]

    def get(self, table: str, record_id: str) -> dict[str, Any] | None:
        with self._lock:
            record = self._table(table).get(str(record_id))
            return copy.deepcopy(record) if record is not None else None

    def insert(self, table: str, record: dict[str, Any]) -> str:
        with self._lock:
            record_id = str(record.get("id") or uuid4())
            rows = self._table(table)
            if record_id in rows:
                raise ValueError(f"Duplicate id {record_id} in {table}")
            rows[record_id] = {**copy.deepcopy(record), "id": record_id}
            return record_id

    def update(self, table: str, record_id: str, fields: dict[str, Any]) -> None:
        with self._lock:
            row = self._table(table).get(str(record_id))
            if row is not None:
                row.update(copy.deepcopy(fields))

    def delete(self, table: str, record_id: str) -> None:
        with self._lock:
            self._table(table).pop(str(record_id), None)

    def query_by_index(
        self,
        table: str,
        index_name: str,
        eq: Any = None,
        lt: Any = None,
        lte: Any = None,
        order: SortOrder = "asc",
        limit: int | None = None,
    ) -> list[dict[str, Any]]:
        key_field, sort_field = index_fields(table, index_name)
        with self._lock:
            rows = list(self._table(table).values())

        if key_field is not None:
            rows = [r for r in rows if r.get(key_field) == eq]
        if lt is not None:
            rows = [r for r in rows if r.get(sort_field) is not None and r[sort_field] < lt]
        if lte is not None:
            rows = [r for r in rows if r.get(sort_field) is not None and r[sort_field] <= lte]

        # None sorts first, like SQLite NULLs
        rows.sort(
            key=lambda r: (r.get(sort_field) is not None, r.get(sort_field) or ""),
            reverse=(order == "desc"),
        )
        if limit is not None:
            rows = rows[:limit]
        return copy.deepcopy(rows)

    @contextmanager
    def transaction(self) -> Iterator[None]:
        with self._lock:
            if self._depth > 0:
                self._depth += 1
                try:
                    yield
                finally:
                    self._depth -= 1
                return

            snapshot = copy.deepcopy(self._tables)
            self._depth = 1
            try:
                yield
            except BaseException:
                self._tables = snapshot
                raise
            finally:
                self._depth = 0

    def count(self, table: str) -> int:
        with self._lock:
            return len(self._table(table))
