from harvest import create_engine
from harvest.common.config_manager import ConfigManager
from harvest.services.notifier import ThrottledNotifier


def test_create_engine_round_trip(tmp_path, clock, notifier):
    config = ConfigManager({'save_slot': 'alice', 'initial_coins': 80})
    engine = create_engine(config, data_dir=tmp_path, clock=clock, notifier=notifier)
    assert isinstance(engine.notifier, ThrottledNotifier)
    assert engine.state.currency == 80

    engine.buy_seed('corn')
    engine.save()
    assert (tmp_path / 'saves' / 'alice.json').exists()

    again = create_engine(config, data_dir=tmp_path, clock=clock)
    assert again.state.currency == 75
    assert again.state.seedInventory['corn'] == 1


def test_create_engine_throttles_notifications(tmp_path, clock, notifier):
    engine = create_engine(ConfigManager({'notify_throttle_seconds': 30}), data_dir=tmp_path,
                           clock=clock, notifier=notifier)
    assert engine.enable_notifications()
    engine.plant(0, 'wheat')
    clock.set(2)
    engine.plant(1, 'wheat')
    clock.set(5)
    assert engine.poll() == [0]
    clock.set(7)
    assert engine.poll() == [1]
    assert len(notifier.sent) == 1
    assert (tmp_path / 'cooldowns.json').exists()
