import itertools
import os
import sqlite3
import sys

import pytest

# Ensure 'src/' is on sys.path for imports like 'from antibody_inventory.core import models'
_REPO_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
_SRC_PATH = os.path.join(_REPO_ROOT, "src")
if _SRC_PATH not in sys.path:
    sys.path.insert(0, _SRC_PATH)

from antibody_inventory.core.services.inventory_service import InventoryStore  # noqa: E402
from antibody_inventory.core.services.session_service import InventorySession  # noqa: E402
from antibody_inventory.infra.db.repositories import KeyValueRepo, SnapshotRepo  # noqa: E402

STORAGE_KEY = "antibody_storage_v1_db"
OPTIONS_KEY = "antibody_dropdown_custom_options_v1"


# --- SQLite key/value fixtures ---


@pytest.fixture()
def conn():
    """In-memory SQLite connection shaped like the app's (Row factory)."""
    conn = sqlite3.connect(":memory:")
    conn.row_factory = sqlite3.Row
    try:
        yield conn
    finally:
        conn.close()


@pytest.fixture()
def kv(conn):
    repo = KeyValueRepo(conn)
    repo.ensure_schema()
    return repo


@pytest.fixture()
def gateway(kv):
    return SnapshotRepo(kv, STORAGE_KEY)


# --- Store / session fixtures ---


@pytest.fixture()
def id_factory():
    counter = itertools.count(1)
    return lambda: f"box_{next(counter)}"


@pytest.fixture()
def store(gateway, id_factory):
    return InventoryStore.open(gateway, id_factory=id_factory)


@pytest.fixture()
def session(store):
    return InventorySession(store)


@pytest.fixture()
def stocked_store(store):
    """Two boxes with a handful of vials, some of them opted into low-stock alerts."""
    a = store.create_container("Box A", 3, 3)
    b = store.create_container("Box B", 2, 4)
    store.assign_batch(
        a,
        ["1-1"],
        {
            "name": "Anti-GFP",
            "cloneId": "3H9",
            "vendor": "Abcam",
            "catalogNumber": "ab290",
            "hostSpecies": "Rabbit",
            "totalAmount": "100",
            "amountUnit": "µL",
            "amountPerUse": "10",
            "usesConsumed": 8,
            "warnThreshold": "30",
        },
    )
    store.assign_batch(
        a,
        ["2-2"],
        {
            "name": "Anti-Actin",
            "vendor": "Sigma-Aldrich",
            "totalAmount": "50",
            "amountPerUse": "5",
            "usesConsumed": 10,
        },
    )
    store.assign_batch(
        b,
        ["1-3", "1-4"],
        {
            "name": "anti-gfp",
            "vendor": "Proteintech",
            "totalAmount": "20",
            "amountUnit": "mL",
            "amountPerUse": "1",
            "usesConsumed": 0,
            "warnThreshold": "20",
            "remark": "backup lot",
        },
    )
    return store
