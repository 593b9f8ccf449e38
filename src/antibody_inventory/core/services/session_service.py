from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from antibody_inventory.core.dtos import SearchMatchDTO
from antibody_inventory.core.errors import ValidationError
from antibody_inventory.core.models import Position, Sample
from antibody_inventory.core.services.inventory_service import InventoryStore, PositionLike


class InventorySession:
    """
    Transient view state over a store: the active container and the selected
    positions that scope batch assign/clear. Nothing here is persisted.
    """

    def __init__(self, store: InventoryStore) -> None:
        self.store = store
        self.active_container_id: str | None = None
        self.selection: set[Position] = set()
        self.highlight: Position | None = None

    def _require_active(self) -> str:
        if self.active_container_id is None:
            raise ValidationError("Select a container first")
        return self.active_container_id

    def _reset_selection(self) -> None:
        self.selection.clear()

    # Containers
    def create_container(self, name: str, rows: int, cols: int) -> str:
        container_id = self.store.create_container(name, rows, cols)
        self.switch_container(container_id)
        return container_id

    def switch_container(self, container_id: str) -> None:
        self.store.get_container(container_id)  # raises NotFoundError
        self.active_container_id = container_id
        self.highlight = None
        self._reset_selection()

    def delete_container(self, container_id: str) -> None:
        self.store.delete_container(container_id)
        if self.active_container_id == container_id:
            self.active_container_id = None
            self.highlight = None
            self._reset_selection()

    # Selection
    def toggle(self, pos: PositionLike) -> bool:
        """Flip a position in or out of the selection; True if it is now selected."""
        container_id = self._require_active()
        container = self.store.get_container(container_id)
        try:
            p = Position.parse(pos)
        except ValueError as e:
            raise ValidationError(str(e)) from e
        if not container.contains(p):
            raise ValidationError(f"Position {p.key} lies outside {container.name!r}")
        self.highlight = None
        if p in self.selection:
            self.selection.discard(p)
            return False
        self.selection.add(p)
        return True

    def selected_sample(self) -> Sample | None:
        """The sample to echo into the edit form when exactly one position is selected."""
        if self.active_container_id is None or len(self.selection) != 1:
            return None
        (pos,) = self.selection
        return self.store.get_sample(self.active_container_id, pos)

    # Batch operations
    def assign_selected(self, data: Sample | Mapping[str, Any]) -> None:
        container_id = self._require_active()
        self.store.assign_batch(container_id, sorted(self.selection), data)
        self._reset_selection()

    def clear_selected(self) -> None:
        container_id = self._require_active()
        self.store.clear_batch(container_id, sorted(self.selection))
        self._reset_selection()

    def move(self, from_pos: PositionLike, to_pos: PositionLike) -> None:
        container_id = self._require_active()
        self.store.move_sample(container_id, from_pos, to_pos)
        if Position.parse(from_pos) in self.selection:
            self._reset_selection()

    # Search navigation
    def jump_to(self, match: SearchMatchDTO) -> None:
        self.switch_container(match.container_id)
        self.highlight = Position.parse(match.position)
