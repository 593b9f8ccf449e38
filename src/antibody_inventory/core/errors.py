"""Error taxonomy shared by the store, the session and the persistence gateway.

Every structural error is raised before any mutation is applied, so callers can
report it and carry on with the previous state.
"""


class InventoryError(Exception):
    pass


class ValidationError(InventoryError):
    """A required field is blank, a grid dimension is not a positive int,
    a batch has no positions, or a position lies outside its container."""


class ConflictError(InventoryError):
    """A move targets an occupied position (or its own source)."""


class NotFoundError(InventoryError):
    """An operation names a container or occupied position that doesn't exist."""


class DeserializationError(InventoryError):
    """Persisted or imported data is malformed."""
