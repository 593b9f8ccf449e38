from .inventory_service import InventoryStore
from .options_service import OptionsService
from .search_service import search
from .session_service import InventorySession
from .warning_service import list_warnings, quantity_status

__all__ = [
    "InventorySession",
    "InventoryStore",
    "OptionsService",
    "list_warnings",
    "quantity_status",
    "search",
]
