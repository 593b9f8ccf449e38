from __future__ import annotations

import sqlite3
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from typing import Any


class BaseRepo:
    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn

    @contextmanager
    def transaction(self) -> Iterator[sqlite3.Connection]:
        """Commit the writes made inside the block, or roll them all back if it raises."""
        try:
            yield self.conn
        except BaseException:
            self.conn.rollback()
            raise
        self.conn.commit()

    def _one(self, sql: str, params: Sequence[Any] | None = None) -> sqlite3.Row | None:
        cur = self.conn.execute(sql, params or [])
        return cur.fetchone()

    def _all(self, sql: str, params: Sequence[Any] | None = None) -> list[sqlite3.Row]:
        cur = self.conn.execute(sql, params or [])
        return cur.fetchall()

    def _execute(self, sql: str, params: Sequence[Any] | None = None) -> sqlite3.Cursor:
        return self.conn.execute(sql, params or [])
