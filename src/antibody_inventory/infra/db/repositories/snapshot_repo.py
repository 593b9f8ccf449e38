from __future__ import annotations

import json
import logging
from datetime import date
from pathlib import Path

import pydantic

from antibody_inventory.core.errors import DeserializationError
from antibody_inventory.core.migrations import normalize_database
from antibody_inventory.core.models import Database

from .kv_repo import KeyValueRepo

logger = logging.getLogger(__name__)

EXPORT_FILENAME_TEMPLATE = "Antibody_Storage_Backup_{day}.json"


class SnapshotRepo:
    """
    Whole-database persistence in one key/value slot.

    The slot always holds the complete document; ``save`` overwrites it and
    ``export_snapshot`` produces the same bytes for download.
    """

    def __init__(self, kv: KeyValueRepo, key: str) -> None:
        self._kv = kv
        self._key = key

    @property
    def key(self) -> str:
        return self._key

    # Serialization
    def export_snapshot(self, database: Database) -> bytes:
        return database.model_dump_json(by_alias=True).encode("utf-8")

    def parse_snapshot(self, blob: bytes | str) -> Database:
        """Decode, normalize and validate a snapshot. Raises DeserializationError."""
        database, _ = self._decode(blob)
        return database

    def _decode(self, blob: bytes | str) -> tuple[Database, bool]:
        try:
            raw = json.loads(blob)
        except (TypeError, ValueError) as e:
            raise DeserializationError(f"Snapshot is not valid JSON: {e}") from e
        if not isinstance(raw, dict) or "containers" not in raw:
            raise DeserializationError("Snapshot has no top-level 'containers' mapping")
        if not isinstance(raw["containers"], dict):
            raise DeserializationError("'containers' must be a mapping")
        changed = normalize_database(raw)
        try:
            return Database.model_validate(raw), changed
        except pydantic.ValidationError as e:
            raise DeserializationError(f"Snapshot failed validation: {e}") from e

    # Slot access
    def load(self) -> Database:
        """Read the slot; an absent or unreadable slot yields an empty database."""
        blob = self._kv.get(self._key)
        if blob is None:
            return Database()
        try:
            database, normalized = self._decode(blob)
        except DeserializationError as e:
            logger.warning("discarding unreadable inventory in slot %r: %s", self._key, e)
            return Database()
        if normalized:
            self.save(database)
            logger.info("normalized legacy inventory in slot %r", self._key)
        return database

    def save(self, database: Database) -> None:
        self._kv.set(self._key, self.export_snapshot(database))

    # Export file helpers
    @staticmethod
    def export_filename(today: date | None = None) -> str:
        day = (today or date.today()).isoformat()
        return EXPORT_FILENAME_TEMPLATE.format(day=day)

    def write_export(self, database: Database, directory: Path, today: date | None = None) -> Path:
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / self.export_filename(today)
        path.write_bytes(self.export_snapshot(database))
        logger.info("exported %d containers to %s", len(database.containers), path)
        return path
