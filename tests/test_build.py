import pytest

from harvest.build.logic import Construction
from harvest.common.results import Reason
from harvest.economy.logic import Economy
from harvest.economy.models import EconomyState


@pytest.fixture
def economy(catalog):
    return Economy(catalog, EconomyState(currency=600, materialInventory={'wood': 12, 'brick': 0, 'tile': 0}))


@pytest.fixture
def building(catalog, economy):
    return Construction(catalog, economy)


def test_initial_status(building):
    status = building.status()
    assert status.tier == 0
    assert status.name is None
    assert status.nextTier == 1
    assert status.nextCost == 500
    assert status.missingMaterials == {}


def test_upgrade_first_tier(building, economy):
    result = building.upgrade()
    assert result.ok
    assert building.tier == 1
    assert economy.state.currency == 100
    assert economy.material_count('wood') == 2
    # 150 经验：1 级需要 100
    assert (economy.state.level, economy.state.xp) == (2, 50)
    assert result.data['levels_gained'] == 1


def test_upgrade_insufficient_funds(building, economy):
    economy.state.currency = 499
    result = building.upgrade()
    assert result.reason == Reason.INSUFFICIENT_FUNDS
    assert building.tier == 0
    assert economy.state.currency == 499
    assert economy.material_count('wood') == 12


def test_upgrade_insufficient_materials(building, economy):
    economy.state.materialInventory['wood'] = 9
    result = building.upgrade()
    assert result.reason == Reason.INSUFFICIENT_MATERIALS
    assert result.data['missing'] == {'wood': 1}
    assert economy.state.currency == 600
    assert building.tier == 0


def test_upgrade_max_tier(catalog, economy):
    building = Construction(catalog, economy, tier=3)
    result = building.upgrade()
    assert result.reason == Reason.MAX_TIER
    assert building.status().nextTier is None


def test_tier_clamped(catalog, economy):
    assert Construction(catalog, economy, tier=99).tier == 3
    assert Construction(catalog, economy, tier=-2).tier == 0


def test_final_tier_multi_level(catalog):
    economy = Economy(catalog, EconomyState(
        currency=4000, materialInventory={'wood': 30, 'brick': 25, 'tile': 10}))
    building = Construction(catalog, economy, tier=2)
    result = building.upgrade()
    assert result.ok
    # 1000 经验 = 100 + 200 + 300 + 400
    assert result.data['levels_gained'] == 4
    assert (economy.state.level, economy.state.xp) == (5, 0)
    assert economy.state.currency == 0
    assert building.status().name == '农庄'
