from __future__ import annotations

import sqlite3

from antibody_inventory.app.logging_config import configure_logging
from antibody_inventory.app.settings import Settings, get_settings

# Services
from antibody_inventory.core.services.inventory_service import InventoryStore
from antibody_inventory.core.services.options_service import OptionsService
from antibody_inventory.core.services.session_service import InventorySession

# Concrete repos
from antibody_inventory.infra.db.conn import get_conn
from antibody_inventory.infra.db.repositories import KeyValueRepo, OptionsRepo, SnapshotRepo

# -----------------------------
# Repo helpers
# -----------------------------


def kv_repo_for_conn(conn: sqlite3.Connection) -> KeyValueRepo:
    kv = KeyValueRepo(conn)
    kv.ensure_schema()
    return kv


def snapshot_repo_for_conn(
    conn: sqlite3.Connection, settings: Settings | None = None
) -> SnapshotRepo:
    settings = settings or get_settings()
    return SnapshotRepo(kv_repo_for_conn(conn), settings.storage_key)


# -----------------------------
# Factories used by the view layer
# -----------------------------


def inventory_store_for_conn(
    conn: sqlite3.Connection, settings: Settings | None = None
) -> InventoryStore:
    return InventoryStore.open(snapshot_repo_for_conn(conn, settings))


def options_service_for_conn(
    conn: sqlite3.Connection, settings: Settings | None = None
) -> OptionsService:
    settings = settings or get_settings()
    options = OptionsRepo(kv_repo_for_conn(conn), settings.options_key)
    return OptionsService(options, cap=settings.options_cap)


def get_inventory_store() -> InventoryStore:
    return inventory_store_for_conn(get_conn())


def get_options_service() -> OptionsService:
    return options_service_for_conn(get_conn())


def bootstrap(settings: Settings | None = None) -> InventorySession:
    """Configure logging, open the configured database and return a fresh session."""
    settings = settings or get_settings()
    configure_logging(settings.log_level, debug=settings.debug)
    settings.ensure_directories()
    conn = get_conn(settings.db_path)
    return InventorySession(inventory_store_for_conn(conn, settings))
