"""
Entity store port.

Point lookups, inserts, partial updates, deletes and indexed range
queries over the four record families, plus a unit-of-work transaction
used by the trash cascades.

Invariants:
- Each single call is atomic.
- Calls issued inside ``transaction()`` commit together or not at all.
- ``transaction()`` is reentrant: nested blocks join the outer unit.
"""

from __future__ import annotations

from contextlib import AbstractContextManager
from typing import Any, Literal, Protocol

SortOrder = Literal["asc", "desc"]


class EntityStorePort(Protocol):
    def get(self, table: str, record_id: str) -> dict[str, Any] | None:
        """Return the record or None."""
        ...

    def insert(self, table: str, record: dict[str, Any]) -> str:
        """
        Insert a record and return its id.

        A fresh id is assigned when the record carries none.
        """
        ...

    def update(self, table: str, record_id: str, fields: dict[str, Any]) -> None:
        """Merge fields into an existing record. Missing records are ignored."""
        ...

    def delete(self, table: str, record_id: str) -> None:
        ...

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
        """
        Range query over a declared index.

        Args:
            eq: Value the index key field must equal (ignored for
                indexes without a key field)
            lt: Strict upper bound on the index ordering field
            lte: Inclusive upper bound on the index ordering field
            order: Ordering by the index ordering field
            limit: Maximum records returned
        """
        ...

    def transaction(self) -> AbstractContextManager[None]:
        """Open a unit of work (rolled back if the block raises)."""
        ...
