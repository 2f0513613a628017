import json
import logging
import os

import pytest

from kitchen.domain.Ledger import Ledger
from kitchen.domain.LineItem import LineItem
from kitchen.domain.errors import CorruptStateError
from kitchen.events.Event_Bus import EventBus, LEDGER_CORRUPT_STATE
from kitchen.infra.Ledger_Store import LedgerStore, hydrate_ledger
from kitchen.utilities.backup import BackupManager


@pytest.fixture
def store(tmp_path):
    return LedgerStore(tmp_path, slot="kitchenCostingData")


def _items():
    return [
        LineItem(1700000000001, "Flour", 20.0, 2.5, "kg"),
        LineItem(1700000000002, "Sugar", 15.0, 1.0, "kg"),
        LineItem(1700000000003, "Eggs", 2.5, 6.0, "units"),
    ]


def test_fresh_store_loads_empty(store):
    assert not store.exists()
    assert store.load() == []
    ledger = Ledger.from_store(store)
    assert ledger.total() == 0
    assert ledger.items() == ()


@pytest.mark.parametrize("content", ["", "   \n", "null"])
def test_empty_slot_loads_empty(store, content):
    store.path.write_text(content, encoding="utf-8")
    assert store.load() == []


def test_save_then_load_round_trip(store):
    items = _items()
    store.save(items)
    loaded = store.load()
    assert loaded == items
    assert [i.id for i in loaded] == [i.id for i in items]


def test_load_is_idempotent(store):
    store.save(_items())
    assert store.load() == store.load()


def test_save_writes_persisted_layout(store):
    store.save(_items()[:1])
    data = json.loads(store.path.read_text(encoding="utf-8"))
    assert data == [{
        "id": 1700000000001, "name": "Flour", "costPerUnit": 20.0,
        "quantityUsed": 2.5, "unit": "kg", "totalItemCost": 50.0,
    }]


def test_save_overwrites_and_leaves_no_temp_files(store, tmp_path):
    store.save(_items())
    store.save(_items()[:1])
    assert len(store.load()) == 1
    assert sorted(p.name for p in tmp_path.iterdir()) == ["kitchenCostingData.json"]


def test_save_creates_data_dir(tmp_path):
    store = LedgerStore(tmp_path / "nested" / "data")
    store.save(_items())
    assert store.exists()


def test_failed_write_keeps_previous_payload(store, tmp_path, monkeypatch):
    store.save(_items())

    def boom(src, dst):
        raise OSError("disk full")

    monkeypatch.setattr(os, "replace", boom)
    with pytest.raises(OSError):
        store.save(_items()[:1])
    monkeypatch.undo()
    assert len(store.load()) == 3
    assert sorted(p.name for p in tmp_path.iterdir()) == ["kitchenCostingData.json"]


def test_erase_removes_slot(store):
    store.save(_items())
    store.erase()
    assert not store.exists()
    assert store.load() == []
    store.erase()  # absent slot is fine


def test_payload_from_original_script_loads(store):
    # ids are Date.now() values; totals were stored at creation
    store.path.write_text(json.dumps([
        {"id": 1718000000000, "name": "Cream", "costPerUnit": 35, "quantityUsed": 0.5,
         "unit": "l", "totalItemCost": 17.5},
        {"id": 1718000000500, "name": "Salt", "costPerUnit": 8, "quantityUsed": 1},
    ]), encoding="utf-8")
    items = store.load()
    assert [i.name for i in items] == ["Cream", "Salt"]
    assert items[1].unit == "units"
    assert items[1].total_item_cost == 8
    ledger = Ledger(store=store, items=items)
    assert ledger.total() == pytest.approx(25.5)
    assert ledger.add("Pepper", 1, 1).id > 1718000000500


@pytest.mark.parametrize("payload", [
    "{not json",
    '{"id": 1}',
    '[1, 2, 3]',
    '[{"name": "no id", "costPerUnit": 1, "quantityUsed": 1}]',
    '[{"id": 1, "name": "x", "costPerUnit": "cheap", "quantityUsed": 1}]',
    '[{"id": 1, "name": "a", "costPerUnit": 1, "quantityUsed": 1},'
    ' {"id": 1, "name": "b", "costPerUnit": 1, "quantityUsed": 1}]',
])
def test_corrupt_payload_raises(store, payload, caplog):
    store.path.write_text(payload, encoding="utf-8")
    with caplog.at_level(logging.ERROR):
        with pytest.raises(CorruptStateError) as exc_info:
            store.load()
    assert exc_info.value.path == store.path
    assert "Corrupt ledger payload" in caplog.text


def test_hydrate_falls_back_on_corrupt_state(store, tmp_path, caplog):
    store.path.write_text("[{broken", encoding="utf-8")
    bus = EventBus()
    seen = []
    bus.subscribe(LEDGER_CORRUPT_STATE, lambda name, payload: seen.append(payload))
    backups = BackupManager(tmp_path)

    with caplog.at_level(logging.WARNING):
        ledger, warning = hydrate_ledger(store, backups=backups, event_bus=bus)

    assert ledger.items() == ()
    assert ledger.total() == 0
    assert warning
    assert "Starting with an empty ledger" in caplog.text
    assert len(backups.list_backups(store.path.name)) == 1
    assert seen and seen[0]["path"] == str(store.path)

    # The fresh ledger is bound to the same slot and overwrites the corrupt payload
    ledger.add("Flour", 20, 2.5, "kg")
    assert [i.name for i in store.load()] == ["Flour"]


def test_hydrate_loads_existing_items(store):
    store.save(_items())
    ledger, warning = hydrate_ledger(store)
    assert warning is None
    assert ledger.items() == tuple(_items())
    assert ledger.total() == pytest.approx(80.0)


def test_ledger_writes_through_to_disk(store):
    ledger = Ledger.from_store(store)
    flour = ledger.add("Flour", 20.00, 2.5, "kg")
    ledger.add("Sugar", 15.00, 1, "kg")
    assert [i.name for i in LedgerStore(store.data_dir, store.slot).load()] == ["Flour", "Sugar"]

    assert ledger.remove(flour.id)
    reloaded = Ledger.from_store(LedgerStore(store.data_dir, store.slot))
    assert reloaded.total() == pytest.approx(15.00)
    assert len(reloaded.items()) == 1

    assert not ledger.remove(flour.id)
    ledger.clear()
    assert not store.exists()
    assert store.load() == []


@pytest.mark.parametrize("raw", [
    b'\xff\xfe[garbage',
    ('[{"id": 1, "name": "x", "costPerUnit": ' + "9" * 400 + ', "quantityUsed": 1}]').encode(),
    ('[{"id": 1, "name": "x", "costPerUnit": ' + "9" * 5000 + ', "quantityUsed": 1}]').encode(),
    b'[' * 100000,
])
def test_undecodable_payload_raises(store, raw):
    store.path.write_bytes(raw)
    with pytest.raises(CorruptStateError):
        store.load()


def test_hydrate_survives_undecodable_payload(store):
    store.path.write_bytes(b'\xff\xfe[garbage')
    ledger, warning = hydrate_ledger(store)
    assert ledger.items() == ()
    assert warning


def test_hydrate_backs_up_from_store_directory(tmp_path):
    store = LedgerStore(tmp_path / "data")
    store.save(_items())
    store.path.write_text("{broken", encoding="utf-8")
    backups = BackupManager(tmp_path / "elsewhere", backup_dir=tmp_path / "backups")

    hydrate_ledger(store, backups=backups)

    assert len(backups.list_backups(store.path.name)) == 1
