"""Antibody inventory: boxes, grid positions and the vials stored in them.

The package is headless. A view layer drives it through
``antibody_inventory.app.di.bootstrap()``, which returns a store backed by a
local SQLite key/value file, and re-renders from the store's queries,
``core.services.search`` and ``core.services.list_warnings`` after each
operation.
"""

__all__ = []
