"""
SQLite entity store.

Implements EntityStorePort with one table per record family. Each row
holds the record as JSON; declared indexes are SQLite expression indexes
over json_extract (see migrations/0001_lifecycle_tables.sql).

Single calls run in their own short-lived connection. Inside
``transaction()`` all calls on the same thread share one connection
opened with BEGIN IMMEDIATE, so a cascade commits or rolls back as a unit.
"""

from __future__ import annotations

import json
import sqlite3
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any
from uuid import uuid4

from src.domain.records import INDEXES, index_fields
from src.ports.store import SortOrder


def dict_factory(cursor: sqlite3.Cursor, row: tuple[Any, ...]) -> dict[str, Any]:
    """Convert SQLite row to dictionary."""
    return {col[0]: row[idx] for idx, col in enumerate(cursor.description)}


def _check_table(table: str) -> str:
    # Table names are interpolated into SQL; only declared families pass.
    if table not in INDEXES:
        raise KeyError(f"Unknown table {table!r}")
    return table


class SQLiteEntityStore:
    def __init__(self, db_path: str):
        self.db_path = db_path
        self._local = threading.local()

    # --- Connection handling ---

    def _open(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path, isolation_level=None)
        conn.row_factory = dict_factory
        return conn

    @contextmanager
    def _conn(self) -> Iterator[sqlite3.Connection]:
        shared: sqlite3.Connection | None = getattr(self._local, "conn", None)
        if shared is not None:
            yield shared
            return

        conn = self._open()
        try:
            yield conn
        finally:
            conn.close()

    @contextmanager
    def transaction(self) -> Iterator[None]:
        if getattr(self._local, "conn", None) is not None:
            # Nested block joins the outer unit of work
            yield
            return

        conn = self._open()
        conn.execute("BEGIN IMMEDIATE")
        self._local.conn = conn
        try:
            yield
            conn.execute("COMMIT")
        except BaseException:
            conn.execute("ROLLBACK")
            raise
        finally:
            self._local.conn = None
            conn.close()

    # --- EntityStorePort ---

    def get(self, table: str, record_id: str) -> dict[str, Any] | None:
        with self._conn() as conn:
            row = conn.execute(
                f"SELECT data FROM {_check_table(table)} WHERE id = ?", (str(record_id),)
            ).fetchone()
            return json.loads(row["data"]) if row else None

    def insert(self, table: str, record: dict[str, Any]) -> str:
        record_id = str(record.get("id") or uuid4())
        data = {**record, "id": record_id}
        with self._conn() as conn:
            try:
                conn.execute(
                    f"INSERT INTO {_check_table(table)} (id, data) VALUES (?, ?)",
                    (record_id, json.dumps(data)),
                )
            except sqlite3.IntegrityError as e:
                raise ValueError(f"Duplicate id {record_id} in {table}") from e
        return record_id

    def update(self, table: str, record_id: str, fields: dict[str, Any]) -> None:
        with self.transaction(), self._conn() as conn:
            row = conn.execute(
                f"SELECT data FROM {_check_table(table)} WHERE id = ?", (str(record_id),)
            ).fetchone()
            if not row:
                return
            data = json.loads(row["data"])
            data.update(fields)
            conn.execute(
                f"UPDATE {table} SET data = ? WHERE id = ?",
                (json.dumps(data), str(record_id)),
            )

    def delete(self, table: str, record_id: str) -> None:
        with self._conn() as conn:
            conn.execute(f"DELETE FROM {_check_table(table)} WHERE id = ?", (str(record_id),))

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
        sort_expr = f"json_extract(data, '$.{sort_field}')"

        query = f"SELECT data FROM {_check_table(table)} WHERE 1=1"
        params: list[Any] = []

        if key_field is not None:
            query += f" AND json_extract(data, '$.{key_field}') IS ?"
            params.append(eq)
        if lt is not None:
            query += f" AND {sort_expr} < ?"
            params.append(lt)
        if lte is not None:
            query += f" AND {sort_expr} <= ?"
            params.append(lte)

        query += f" ORDER BY {sort_expr} {'DESC' if order == 'desc' else 'ASC'}"
        if limit is not None:
            query += " LIMIT ?"
            params.append(limit)

        with self._conn() as conn:
            rows = conn.execute(query, params).fetchall()
        return [json.loads(row["data"]) for row in rows]
