# filepath: src/antibody_inventory/infra/db/conn.py
from __future__ import annotations

import sqlite3
from pathlib import Path

from antibody_inventory.app.settings import get_settings


def get_conn(db_path: str | Path | None = None) -> sqlite3.Connection:
    """
    Open a sqlite3 connection with row_factory set to Row so results
    behave like dicts. Defaults to the configured db_path.
    """
    path = db_path if db_path is not None else get_settings().db_path
    conn = sqlite3.connect(str(path), timeout=30)
    conn.row_factory = sqlite3.Row
    return conn
