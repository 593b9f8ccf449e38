from __future__ import annotations

import logging
import time
from collections.abc import Callable, Iterable, Mapping
from datetime import date
from pathlib import Path
from typing import Any, Protocol

import pydantic

from antibody_inventory.core.dtos import ContainerSummaryDTO, GridCellDTO, NameStatsDTO
from antibody_inventory.core.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
)
from antibody_inventory.core.models import Container, Database, Position, Sample

logger = logging.getLogger(__name__)

# A name held in this many positions or fewer (but at least one) is flagged as running low.
LOW_STOCK_NAME_COUNT = 3

PositionLike = Position | str | tuple[int, int]


# Keep persistence abstract; infra.db.repositories.SnapshotRepo satisfies this
class SnapshotGateway(Protocol):
    def load(self) -> Database: ...
    def save(self, database: Database) -> None: ...
    def parse_snapshot(self, blob: bytes | str) -> Database: ...
    def export_snapshot(self, database: Database) -> bytes: ...
    def write_export(self, database: Database, directory: Path, today: date | None = None) -> Path: ...


def _time_based_id() -> str:
    return f"box_{time.time_ns() // 1_000_000}"


def _is_positive_int(value: Any) -> bool:
    return type(value) is int and value > 0


class InventoryStore:
    """
    Owns the single in-memory Database and every structural mutation on it.

    Each mutator validates first, applies the change to a private copy, saves
    the copy through the gateway and only then swaps it in. A rejected or
    failed operation leaves both memory and the persisted slot untouched.
    """

    def __init__(
        self,
        gateway: SnapshotGateway,
        database: Database | None = None,
        id_factory: Callable[[], str] | None = None,
    ) -> None:
        self._gateway = gateway
        self._db = database if database is not None else Database()
        self._new_id = id_factory or _time_based_id

    @classmethod
    def open(cls, gateway: SnapshotGateway, **kwargs) -> InventoryStore:
        return cls(gateway, database=gateway.load(), **kwargs)

    @property
    def database(self) -> Database:
        """A detached copy; mutate through the store only."""
        return self._db.model_copy(deep=True)

    # --- internals ---
    def _commit(self, draft: Database) -> None:
        self._gateway.save(draft)
        self._db = draft

    def _container(self, db: Database, container_id: str) -> Container:
        container = db.containers.get(container_id)
        if container is None:
            raise NotFoundError(f"No container with id {container_id!r}")
        return container

    @staticmethod
    def _position(container: Container, value: PositionLike) -> Position:
        try:
            pos = Position.parse(value)
        except ValueError as e:
            raise ValidationError(str(e)) from e
        if not container.contains(pos):
            raise ValidationError(
                f"Position {pos.key} lies outside {container.name!r} "
                f"({container.rows}x{container.cols})"
            )
        return pos

    def _positions(self, container: Container, values: Iterable[PositionLike]) -> list[Position]:
        if isinstance(values, str | Position):
            values = [values]
        positions = list(dict.fromkeys(self._position(container, v) for v in values))
        if not positions:
            raise ValidationError("Select at least one position")
        return positions

    @staticmethod
    def _sample(data: Sample | Mapping[str, Any]) -> Sample:
        try:
            sample = data if isinstance(data, Sample) else Sample.model_validate(dict(data))
        except pydantic.ValidationError as e:
            raise ValidationError(f"Invalid sample data: {e}") from e
        if not sample.occupied:
            raise ValidationError("Sample name is required")
        return sample

    # --- containers ---
    def create_container(self, name: str, rows: int, cols: int) -> str:
        name = (name or "").strip()
        if not name:
            raise ValidationError("Container name is required")
        if not _is_positive_int(rows) or not _is_positive_int(cols):
            raise ValidationError(f"Grid dimensions must be positive integers, got {rows!r}x{cols!r}")

        container_id = base = self._new_id()
        n = 1
        while container_id in self._db.containers:
            container_id = f"{base}_{n}"
            n += 1

        draft = self.database
        draft.containers[container_id] = Container(name=name, rows=rows, cols=cols)
        self._commit(draft)
        logger.info("created container %s %r (%dx%d)", container_id, name, rows, cols)
        return container_id

    def delete_container(self, container_id: str) -> None:
        draft = self.database
        container = self._container(draft, container_id)
        del draft.containers[container_id]
        self._commit(draft)
        logger.info(
            "deleted container %s %r with %d samples",
            container_id,
            container.name,
            len(container.slots),
        )

    def rename_container(self, container_id: str, new_name: str) -> None:
        new_name = (new_name or "").strip()
        if not new_name:
            raise ValidationError("Container name is required")
        draft = self.database
        self._container(draft, container_id).name = new_name
        self._commit(draft)
        logger.info("renamed container %s to %r", container_id, new_name)

    # --- samples ---
    def assign_batch(
        self,
        container_id: str,
        positions: Iterable[PositionLike],
        data: Sample | Mapping[str, Any],
    ) -> None:
        """Write a full copy of ``data`` into every listed position, replacing whatever was there."""
        draft = self.database
        container = self._container(draft, container_id)
        targets = self._positions(container, positions)
        sample = self._sample(data)
        for pos in targets:
            container.slots[pos.key] = sample.model_copy(deep=True)
        self._commit(draft)
        logger.info("assigned %r to %d positions in %s", sample.name, len(targets), container_id)

    def clear_batch(self, container_id: str, positions: Iterable[PositionLike]) -> None:
        draft = self.database
        container = self._container(draft, container_id)
        targets = self._positions(container, positions)
        removed = 0
        for pos in targets:
            if container.slots.pop(pos.key, None) is not None:
                removed += 1
        self._commit(draft)
        logger.info("cleared %d of %d positions in %s", removed, len(targets), container_id)

    def move_sample(self, container_id: str, from_pos: PositionLike, to_pos: PositionLike) -> None:
        draft = self.database
        container = self._container(draft, container_id)
        src = self._position(container, from_pos)
        dst = self._position(container, to_pos)
        if src == dst:
            raise ConflictError(f"Cannot move {src.key} onto itself")
        if src.key not in container.slots:
            raise NotFoundError(f"Position {src.key} is empty")
        if dst.key in container.slots:
            raise ConflictError(f"Position {dst.key} is occupied; clear it first")
        container.slots[dst.key] = container.slots.pop(src.key)
        self._commit(draft)
        logger.info("moved %s -> %s in %s", src.key, dst.key, container_id)

    def _adjust_uses(self, container_id: str, pos: PositionLike, delta: int) -> Sample:
        draft = self.database
        container = self._container(draft, container_id)
        key = self._position(container, pos).key
        sample = container.slots.get(key)
        if sample is None:
            raise NotFoundError(f"Position {key} is empty")
        updated = sample.with_uses(sample.uses_consumed + delta)
        container.slots[key] = updated
        self._commit(draft)
        return updated

    def record_use(self, container_id: str, pos: PositionLike) -> Sample:
        return self._adjust_uses(container_id, pos, +1)

    def undo_use(self, container_id: str, pos: PositionLike) -> Sample:
        return self._adjust_uses(container_id, pos, -1)

    # --- snapshots ---
    def import_snapshot(self, blob: bytes | str) -> None:
        """Replace the whole database with a snapshot. Prior data is discarded, not merged."""
        imported = self._gateway.parse_snapshot(blob)
        self._commit(imported)
        logger.info("imported snapshot with %d containers", len(imported.containers))

    def export_snapshot(self) -> bytes:
        return self._gateway.export_snapshot(self._db)

    def write_export(self, directory: Path, today: date | None = None) -> Path:
        return self._gateway.write_export(self._db, directory, today)

    # --- queries ---
    def get_container(self, container_id: str) -> Container:
        return self._container(self._db, container_id).model_copy(deep=True)

    def get_sample(self, container_id: str, pos: PositionLike) -> Sample | None:
        container = self._container(self._db, container_id)
        sample = container.slots.get(self._position(container, pos).key)
        return sample.model_copy(deep=True) if sample else None

    def container_summaries(self) -> list[ContainerSummaryDTO]:
        return [
            ContainerSummaryDTO(
                id=cid,
                name=c.name,
                rows=c.rows,
                cols=c.cols,
                occupied=sum(1 for _ in c.occupied_slots()),
            )
            for cid, c in self._db.containers.items()
        ]

    def grid(self, container_id: str) -> list[GridCellDTO]:
        container = self._container(self._db, container_id)
        cells = []
        for pos in container.positions():
            sample = container.slots.get(pos.key)
            cells.append(
                GridCellDTO(
                    position=pos.key,
                    row=pos.row,
                    col=pos.col,
                    sample=sample.model_copy(deep=True) if sample else None,
                )
            )
        return cells

    def count_by_name(self, name: str) -> int:
        needle = (name or "").strip().lower()
        if not needle:
            return 0
        return sum(
            1 for *_, sample in self._db.iter_samples() if sample.name.strip().lower() == needle
        )

    def name_stats(self, name: str) -> NameStatsDTO:
        count = self.count_by_name(name)
        return NameStatsDTO(
            name=(name or "").strip(),
            count=count,
            at_risk=0 < count <= LOW_STOCK_NAME_COUNT,
        )
