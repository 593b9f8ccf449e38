from __future__ import annotations

from .base import BaseRepo


class KeyValueRepo(BaseRepo):
    """
    Byte-valued key/value slots in a single SQLite table.

    Every write replaces the whole value for its key; there is no partial
    update and no history.

    Schema
    ------
    kv_store
        key        TEXT PRIMARY KEY
        value      BLOB NOT NULL
        updated_at TEXT DEFAULT CURRENT_TIMESTAMP
    """

    def ensure_schema(self) -> None:
        with self.transaction():
            self._execute(
                """
                CREATE TABLE IF NOT EXISTS kv_store (
                    key        TEXT PRIMARY KEY,
                    value      BLOB NOT NULL,
                    updated_at TEXT DEFAULT CURRENT_TIMESTAMP
                )
                """
            )

    def get(self, key: str) -> bytes | None:
        row = self._one("SELECT value FROM kv_store WHERE key = ?", [key])
        if row is None:
            return None
        value = row["value"]
        return value.encode("utf-8") if isinstance(value, str) else bytes(value)

    def set(self, key: str, value: bytes) -> None:
        with self.transaction():
            self._execute(
                """
                INSERT INTO kv_store (key, value) VALUES (?, ?)
                ON CONFLICT(key) DO UPDATE
                    SET value = excluded.value, updated_at = CURRENT_TIMESTAMP
                """,
                [key, value],
            )

    def delete(self, key: str) -> None:
        with self.transaction():
            self._execute("DELETE FROM kv_store WHERE key = ?", [key])

    def keys(self) -> list[str]:
        return [row["key"] for row in self._all("SELECT key FROM kv_store ORDER BY key")]
