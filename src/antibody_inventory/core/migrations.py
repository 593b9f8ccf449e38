"""
Single normalization pass over raw (not yet validated) database documents.

Runs on every load and import. Safe to run multiple times: a normalized
document passes through unchanged and reports no change.
"""

from __future__ import annotations

import logging
from collections.abc import MutableMapping
from typing import Any

from antibody_inventory.core.models import Position

logger = logging.getLogger(__name__)


def normalize_legacy(container: MutableMapping[str, Any]) -> bool:
    """Backfill grid shape for square boxes saved before rows/cols existed.

    A legacy ``size`` fills whichever of ``rows``/``cols`` is missing.
    A missing slot mapping becomes empty. Returns True if anything changed.
    """
    changed = False
    size = container.get("size")
    if size:
        for dim in ("rows", "cols"):
            if not container.get(dim):
                container[dim] = size
                changed = True
    if not isinstance(container.get("slots"), MutableMapping):
        container["slots"] = {}
        changed = True
    return changed


def _in_grid(key: Any, rows: Any, cols: Any) -> bool:
    try:
        pos = Position.parse(key)
    except ValueError:
        return False
    if type(rows) is not int or type(cols) is not int:
        # Shape is invalid anyway; leave the slot for validation to reject.
        return True
    return pos.key == key and 1 <= pos.row <= rows and 1 <= pos.col <= cols


def _has_name(sample: Any) -> bool:
    if not isinstance(sample, MutableMapping):
        return False
    name = sample.get("name")
    return isinstance(name, str) and bool(name.strip())


def prune_slots(container: MutableMapping[str, Any]) -> bool:
    """Drop slots that can't be occupied: blank names and positions off the grid."""
    slots = container.get("slots")
    if not isinstance(slots, MutableMapping):
        return False
    rows, cols = container.get("rows"), container.get("cols")
    dropped = [
        key for key, sample in slots.items()
        if not _has_name(sample) or not _in_grid(key, rows, cols)
    ]
    for key in dropped:
        logger.warning("dropping unoccupiable slot %r from container %r", key, container.get("name"))
        del slots[key]
    return bool(dropped)


def backfill_name(container_id: str, container: MutableMapping[str, Any]) -> bool:
    """Name an unnamed container after its id so it stays loadable."""
    name = container.get("name")
    if isinstance(name, str) and name.strip():
        return False
    logger.warning("container %r has no name; using its id", container_id)
    container["name"] = container_id
    return True


def normalize_database(raw: MutableMapping[str, Any]) -> bool:
    """Normalize every container in a raw document in place; True if anything changed."""
    changed = False
    containers = raw.get("containers")
    if not isinstance(containers, MutableMapping):
        return False
    for cid, container in containers.items():
        if not isinstance(container, MutableMapping):
            continue
        changed = normalize_legacy(container) | changed
        changed = backfill_name(str(cid), container) | changed
        changed = prune_slots(container) | changed
    return changed
