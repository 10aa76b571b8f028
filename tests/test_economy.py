import pytest

from harvest.catalog.leveling import FlatCurve
from harvest.catalog.logic import Catalog
from harvest.common.results import Reason
from harvest.economy.logic import Economy
from harvest.economy.models import EconomyState


def make_economy(catalog, **state):
    return Economy(catalog, EconomyState(**state))


@pytest.mark.parametrize('grants', [[250], [20, 230], [100, 150], [50, 50, 50, 50, 50]])
def test_add_xp_decomposition(catalog, grants):
    eco = make_economy(catalog, xp=80, level=1)
    for g in grants:
        eco.add_xp(g)
    assert (eco.state.level, eco.state.xp) == (3, 30)


def test_add_xp_multi_level_flat():
    cat = Catalog.from_directory(threshold=FlatCurve(100))
    eco = Economy(cat, EconomyState(xp=80, level=1))
    gained = eco.add_xp(250)
    assert gained == 3
    assert (eco.state.level, eco.state.xp) == (4, 30)


def test_add_xp_rejects_negative(catalog):
    eco = make_economy(catalog)
    with pytest.raises(ValueError):
        eco.add_xp(-1)


def test_sell_crop(catalog):
    eco = make_economy(catalog, currency=0, inventory={'wheat': 3})
    result = eco.sell('wheat', 2)
    assert result.ok
    assert eco.state.inventory['wheat'] == 1
    assert eco.state.currency == 24
    assert eco.state.statistics.totalIncome == 24


def test_sell_produce(catalog):
    eco = make_economy(catalog, currency=10, inventory={'milk': 1})
    assert eco.sell('milk').ok
    assert eco.state.currency == 260
    assert eco.state.inventory['milk'] == 0


def test_sell_insufficient_unchanged(catalog):
    eco = make_economy(catalog, currency=5, inventory={'wheat': 1})
    result = eco.sell('wheat', 2)
    assert not result.ok
    assert result.reason == Reason.INSUFFICIENT_ITEMS
    assert eco.state.inventory == {'wheat': 1}
    assert eco.state.currency == 5


def test_sell_invalid_quantity(catalog):
    eco = make_economy(catalog, inventory={'wheat': 1})
    assert eco.sell('wheat', 0).reason == Reason.INVALID_QUANTITY
    assert eco.sell('wheat', -2).reason == Reason.INVALID_QUANTITY
    assert eco.state.inventory == {'wheat': 1}


def test_sell_unknown_item_fallback(catalog):
    eco = Economy(catalog, EconomyState(currency=0, inventory={'old_boot': 2}), unknown_item_value=1)
    assert eco.sell('old_boot', 2).ok
    assert eco.state.currency == 2


def test_buy_seed(catalog):
    eco = make_economy(catalog, currency=50, seedInventory={'wheat': 5})
    result = eco.buy_seed('wheat')
    assert result.ok
    assert eco.state.currency == 48
    assert eco.state.seedInventory['wheat'] == 6


def test_buy_seed_insufficient(catalog):
    eco = make_economy(catalog, currency=1)
    result = eco.buy_seed('wheat')
    assert result.reason == Reason.INSUFFICIENT_FUNDS
    assert eco.state.currency == 1
    assert eco.state.seedInventory.get('wheat', 0) == 0


def test_buy_seed_bulk_is_all_or_nothing(catalog):
    eco = make_economy(catalog, currency=9)
    assert eco.buy_seed('wheat', 5).reason == Reason.INSUFFICIENT_FUNDS
    assert eco.state.currency == 9
    assert eco.buy_seed('wheat', 4).ok
    assert eco.state.currency == 1


def test_buy_unknown_seed(catalog):
    eco = make_economy(catalog, currency=100)
    assert eco.buy_seed('mandrake').reason == Reason.UNKNOWN_ITEM


def test_buy_material(catalog):
    eco = make_economy(catalog, currency=45)
    assert eco.buy_material('wood').ok
    assert eco.buy_material('wood').ok
    assert eco.buy_material('wood').reason == Reason.INSUFFICIENT_FUNDS
    assert eco.state.materialInventory['wood'] == 2
    assert eco.state.currency == 5


def test_take_materials_is_atomic(catalog):
    eco = make_economy(catalog, materialInventory={'wood': 10, 'brick': 1})
    assert not eco.take_materials({'wood': 5, 'brick': 2})
    assert eco.state.materialInventory == {'wood': 10, 'brick': 1}
    assert eco.take_materials({'wood': 5, 'brick': 1})
    assert eco.state.materialInventory == {'wood': 5, 'brick': 0}


def test_debit_never_negative(catalog):
    eco = make_economy(catalog, currency=3)
    assert not eco.debit(4)
    assert eco.state.currency == 3
    assert eco.debit(3)
    assert eco.state.currency == 0
