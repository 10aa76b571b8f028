import pytest

from harvest.catalog.logic import Catalog
from harvest.common.clock import ManualClock
from harvest.common.config_manager import ConfigManager
from harvest.common.data_manager import DataManager
from harvest.engine import FarmEngine
from harvest.save.logic import SnapshotStore
from harvest.services.feedback import RecordingFeedback


class RecordingNotifier:
    def __init__(self, granted=True):
        self.granted = granted
        self.sent = []

    def request_permission(self):
        return self.granted

    def notify(self, crop_display_name, icon):
        self.sent.append((crop_display_name, icon))


@pytest.fixture
def clock():
    return ManualClock(0.0)


@pytest.fixture
def config():
    return ConfigManager()


@pytest.fixture
def catalog():
    return Catalog.from_directory()


@pytest.fixture
def feedback():
    return RecordingFeedback()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def data_manager(tmp_path):
    return DataManager(base_path=tmp_path)


@pytest.fixture
def store(data_manager):
    return SnapshotStore(data_manager, slot='test')


@pytest.fixture
def engine(catalog, config, clock, feedback, notifier, store):
    return FarmEngine(catalog, config=config, clock=clock, store=store,
                      feedback=feedback, notifier=notifier)


@pytest.fixture
def denied_notifier():
    return RecordingNotifier(granted=False)
