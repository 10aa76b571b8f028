import asyncio
import json

from harvest.save.logic import NullStore, SnapshotStore
from harvest.save.models import Snapshot


def write_raw(data_manager, payload, slot='test'):
    path = data_manager.get_data_path() / 'saves' / f'{slot}.json'
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(payload if isinstance(payload, str) else json.dumps(payload), encoding='utf-8')


def test_missing_seed_inventory_uses_default():
    defaults = Snapshot(seedInventory={'wheat': 5})
    snapshot, fallen = Snapshot.from_raw({'currency': 999, 'xp': 40, 'level': 3}, defaults)
    assert snapshot.currency == 999
    assert snapshot.level == 3
    assert snapshot.seedInventory == {'wheat': 5}
    assert 'seedInventory' in fallen
    assert 'currency' not in fallen


def test_malformed_field_falls_back_alone():
    defaults = Snapshot(currency=50)
    snapshot, fallen = Snapshot.from_raw({'currency': -5, 'xp': 'lots', 'level': 2, 'buildTier': 1}, defaults)
    assert snapshot.currency == 50
    assert snapshot.xp == 0
    assert snapshot.level == 2
    assert snapshot.buildTier == 1
    assert {'currency', 'xp'} <= set(fallen)


def test_bad_inventory_entries_dropped():
    snapshot, _ = Snapshot.from_raw({'inventory': {'wheat': 3, 'egg': 'x', 'milk': -1, 'corn': 2.5, 'pumpkin': 2.0}})
    assert snapshot.inventory == {'wheat': 3, 'pumpkin': 2}


def test_bad_plots_fall_back():
    defaults = Snapshot(plots=[{'id': 0, 'unlocked': True}])
    snapshot, fallen = Snapshot.from_raw({'plots': 'garbage', 'currency': 7}, defaults)
    assert len(snapshot.plots) == 1
    assert snapshot.plots[0].unlocked
    assert snapshot.currency == 7
    assert 'plots' in fallen


def test_non_dict_snapshot():
    snapshot, fallen = Snapshot.from_raw(['not', 'a', 'dict'], Snapshot(currency=42))
    assert snapshot.currency == 42
    assert 'currency' in fallen


def test_store_round_trip(store):
    snapshot = Snapshot(
        currency=123, xp=7, level=2,
        inventory={'egg': 2}, seedInventory={'wheat': 1},
        animals=[{'id': 0, 'animalTypeId': 'chicken', 'lastCollectedAt': 12.5}],
        plots=[{'id': 0, 'cropId': 'wheat', 'plantedAt': 3.0, 'watered': True, 'unlocked': True}],
        buildTier=1, savedAt=99.0,
    )
    store.save(snapshot)
    loaded = store.load()
    assert loaded == snapshot


def test_store_missing_file(store):
    assert store.load() is None


def test_store_corrupt_file(store, data_manager):
    write_raw(data_manager, '{"currency": ')
    assert store.load() is None


def test_store_partial_file(store, data_manager):
    write_raw(data_manager, {'currency': 321})
    loaded = store.load(Snapshot(seedInventory={'wheat': 5}))
    assert loaded.currency == 321
    assert loaded.seedInventory == {'wheat': 5}


def test_save_failure_is_swallowed(store, data_manager):
    # 存档路径被目录占用，写入失败只记日志
    (data_manager.get_data_path() / 'saves' / 'test.json').mkdir(parents=True)
    store.save(Snapshot())
    assert store.load() is None


def test_async_round_trip(store):
    async def run():
        await store.async_save(Snapshot(currency=77, inventory={'milk': 1}))
        return await store.async_load()

    loaded = asyncio.run(run())
    assert loaded.currency == 77
    assert loaded.inventory == {'milk': 1}


def test_null_store():
    store = NullStore()
    store.save(Snapshot())
    assert store.load() is None


def test_bad_animal_and_plot_entries_dropped_individually():
    raw = {
        'animals': [
            {'id': 0, 'animalTypeId': 'chicken', 'lastCollectedAt': 10.0},
            {'id': 1, 'animalTypeId': 'cow', 'lastCollectedAt': 20.0},
            {'id': 2, 'animalTypeId': 'cow'},
        ],
        'plots': [
            {'id': 0, 'cropId': 'wheat', 'plantedAt': 3.0, 'unlocked': True},
            {'id': 1, 'cropId': 'corn', 'plantedAt': 'yesterday', 'unlocked': True},
        ],
    }
    snapshot, fallen = Snapshot.from_raw(raw)
    assert 'animals' not in fallen and 'plots' not in fallen
    assert [a.id for a in snapshot.animals] == [0, 1]
    assert [p.id for p in snapshot.plots] == [0]
    assert snapshot.plots[0].cropId == 'wheat'


def test_async_save_leaves_no_partial_file(store, data_manager):
    asyncio.run(store.async_save(Snapshot(currency=5)))
    saves = data_manager.get_data_path() / 'saves'
    assert sorted(p.name for p in saves.iterdir()) == ['test.json']
