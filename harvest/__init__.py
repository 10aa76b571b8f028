"""休闲农场游戏的模拟引擎：作物生长、动物产出、金币经验与库存"""
from .catalog.logic import Catalog, CatalogError
from .common.clock import ManualClock, SystemClock
from .common.config_manager import ConfigManager
from .common.results import ActionResult, Reason
from .app import create_engine
from .engine import FarmEngine
from .save.logic import SnapshotStore
from .save.models import Snapshot

__version__ = "1.0.0"
