"""
按配置组装一个可用的 FarmEngine

宿主程序（桌面壳、聊天机器人插件等）只需要调用 create_engine，
剩下的协作者由这里注入
"""
import logging
from pathlib import Path
from typing import Optional

from .catalog.logic import Catalog
from .common.clock import Clock, SystemClock
from .common.config_manager import ConfigManager
from .common.cooldown import CooldownStore
from .common.data_manager import DataManager
from .engine import FarmEngine
from .save.logic import SnapshotStore
from .services.advisor import StaticAdvisor
from .services.feedback import NullFeedback
from .services.notifier import LogNotifier, ThrottledNotifier

logger = logging.getLogger(__name__)


def create_engine(config: Optional[ConfigManager] = None, data_dir: Optional[Path] = None,
                  redis_url: Optional[str] = None, clock: Optional[Clock] = None,
                  notifier=None, feedback=None, advisor=None) -> FarmEngine:
    config = config or ConfigManager()
    clock = clock or SystemClock()
    dm = DataManager(data_dir)
    catalog = Catalog.from_config(config)

    if redis_url:
        cooldown = CooldownStore.from_url(redis_url, clock=clock)
    else:
        cooldown = CooldownStore(dm.get_data_path() / 'cooldowns.json', clock=clock)

    engine = FarmEngine.load(
        catalog,
        SnapshotStore(dm, slot=config.save_slot),
        config=config,
        clock=clock,
        advisor=advisor or StaticAdvisor(),
        feedback=feedback or NullFeedback(),
        notifier=ThrottledNotifier(notifier or LogNotifier(), cooldown,
                                   throttle_seconds=config.notify_throttle_seconds,
                                   scope=config.save_slot),
    )
    logger.info("farm %s loaded from %s", config.save_slot, dm.get_data_path())
    return engine
