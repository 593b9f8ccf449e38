import json
from datetime import date

import pytest

from antibody_inventory.core.errors import DeserializationError
from antibody_inventory.core.models import Container, Database, Sample


def _db():
    return Database(
        containers={
            "box_1": Container(
                name="Rack 1",
                rows=8,
                cols=12,
                slots={
                    "1-1": Sample(
                        name="Anti-CD3",
                        clone_id="OKT3",
                        total_amount="100",
                        amount_unit="µL",
                        amount_per_use="2",
                        uses_consumed=4,
                        warn_threshold="10",
                        remark="多语言 ok",
                    ),
                    "8-12": Sample(name="Anti-CD8"),
                },
            ),
            "box_2": Container(name="Empty", rows=1, cols=1),
        }
    )


def test_round_trip(gateway):
    db = _db()
    gateway.save(db)
    assert gateway.load() == db


def test_load_empty_slot(gateway):
    assert gateway.load() == Database()


@pytest.mark.parametrize(
    "blob",
    [b"{not json", b"null", b'"text"', b'{"boxes": {}}', b'{"containers": {"b": {"name": "x"}}}', b"\xff\xfe"],
)
def test_load_never_raises(gateway, kv, blob):
    kv.set(gateway.key, blob)
    assert gateway.load() == Database()


def test_saved_json_uses_wire_names(gateway, kv):
    gateway.save(_db())
    raw = json.loads(kv.get(gateway.key))
    sample = raw["containers"]["box_1"]["slots"]["1-1"]
    assert sample["cloneId"] == "OKT3"
    assert sample["usesConsumed"] == 4
    assert sample["warnThreshold"] == "10"
    assert set(raw["containers"]["box_1"]) == {"name", "rows", "cols", "slots"}


def test_export_snapshot_is_what_save_writes(gateway, kv):
    db = _db()
    gateway.save(db)
    assert gateway.export_snapshot(db) == kv.get(gateway.key)


def test_load_normalizes_legacy_and_persists(gateway, kv):
    legacy = {
        "containers": {
            "box_9": {
                "name": "Old square box",
                "size": 9,
                "slots": {"9-9": {"name": "Corner", "usesConsumed": "2"}, "1-1": {"name": ""}},
            }
        }
    }
    kv.set(gateway.key, json.dumps(legacy).encode())
    db = gateway.load()
    box = db.containers["box_9"]
    assert (box.rows, box.cols) == (9, 9)
    assert list(box.slots) == ["9-9"]
    assert box.slots["9-9"].uses_consumed == 2
    stored = json.loads(kv.get(gateway.key))
    assert stored["containers"]["box_9"]["rows"] == 9
    assert "1-1" not in stored["containers"]["box_9"]["slots"]


def test_load_leaves_canonical_slot_untouched(gateway, kv):
    blob = b'{"containers":{"a":{"name":"A","rows":1,"cols":1,"slots":{}}}}'
    kv.set(gateway.key, blob)
    gateway.load()
    assert kv.get(gateway.key) == blob


def test_parse_snapshot_requires_containers(gateway):
    with pytest.raises(DeserializationError):
        gateway.parse_snapshot(b'{"boxes": {}}')
    with pytest.raises(DeserializationError):
        gateway.parse_snapshot("garbage")
    assert gateway.parse_snapshot('{"containers": {}}') == Database()


def test_export_filename_embeds_date():
    from antibody_inventory.infra.db.repositories import SnapshotRepo

    assert SnapshotRepo.export_filename(date(2024, 3, 9)) == "Antibody_Storage_Backup_2024-03-09.json"


def test_write_export(gateway, tmp_path):
    db = _db()
    path = gateway.write_export(db, tmp_path / "exports", today=date(2025, 1, 2))
    assert path.name == "Antibody_Storage_Backup_2025-01-02.json"
    assert gateway.parse_snapshot(path.read_bytes()) == db


def test_half_legacy_container_does_not_cost_the_rest(gateway, kv, id_factory):
    from antibody_inventory.core.services.inventory_service import InventoryStore

    blob = {
        "containers": {
            "good": {"name": "Good", "rows": 2, "cols": 2, "slots": {"2-2": {"name": "Keep me"}}},
            "legacy": {"name": "Legacy", "size": 3, "cols": 3, "slots": {"3-3": {"name": "Corner"}}},
        }
    }
    kv.set(gateway.key, json.dumps(blob).encode())
    db = gateway.load()
    assert list(db.containers) == ["good", "legacy"]
    assert (db.containers["legacy"].rows, db.containers["legacy"].cols) == (3, 3)

    store = InventoryStore.open(gateway, id_factory=id_factory)
    store.create_container("New", 1, 1)
    stored = json.loads(kv.get(gateway.key))["containers"]
    assert list(stored) == ["good", "legacy", "box_1"]
    assert stored["good"]["slots"]["2-2"]["name"] == "Keep me"


def test_load_names_unnamed_containers(gateway, kv):
    kv.set(gateway.key, b'{"containers": {"box_5": {"name": "  ", "rows": 1, "cols": 1}}}')
    assert gateway.load().containers["box_5"].name == "box_5"
