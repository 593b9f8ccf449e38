import sqlite3

import pytest

from antibody_inventory.infra.db.repositories import KeyValueRepo


def test_get_missing_key_is_none(kv):
    assert kv.get("nope") is None


def test_set_overwrites_whole_value(kv):
    kv.set("slot", b"first value")
    kv.set("slot", b"2nd")
    assert kv.get("slot") == b"2nd"
    assert kv.keys() == ["slot"]


def test_keys_are_independent(kv):
    kv.set("a", b"1")
    kv.set("b", "µL".encode())
    assert kv.get("a") == b"1"
    assert kv.get("b").decode() == "µL"
    kv.delete("a")
    assert kv.keys() == ["b"]


def test_ensure_schema_is_idempotent(conn):
    repo = KeyValueRepo(conn)
    repo.ensure_schema()
    repo.set("k", b"v")
    repo.ensure_schema()
    assert repo.get("k") == b"v"


def test_text_values_written_elsewhere_come_back_as_bytes(kv, conn):
    conn.execute("INSERT INTO kv_store(key, value) VALUES (?, ?)", ("legacy", '{"containers": {}}'))
    conn.commit()
    assert kv.get("legacy") == b'{"containers": {}}'


def test_transaction_rolls_back_on_error(kv, conn):
    kv.set("kept", b"1")
    with pytest.raises(sqlite3.IntegrityError):
        with kv.transaction():
            conn.execute("INSERT INTO kv_store(key, value) VALUES (?, ?)", ("half", b"x"))
            raise sqlite3.IntegrityError("boom")
    assert kv.keys() == ["kept"]


def test_transaction_commits_on_success(kv, conn):
    with kv.transaction():
        conn.execute("INSERT INTO kv_store(key, value) VALUES (?, ?)", ("a", b"1"))
        conn.execute("INSERT INTO kv_store(key, value) VALUES (?, ?)", ("b", b"2"))
    assert not conn.in_transaction
    assert kv.keys() == ["a", "b"]
