"""
配置管理器 - 读取和管理引擎配置

配置为扁平结构: {"key": value, ...}，未提供的键使用 DEFAULT_CONFIG
"""
from typing import Any, Dict, Optional


class ConfigManager:
    """
    配置管理器

    每个引擎实例持有自己的 ConfigManager，load_config 只覆盖传入的键
    """

    # 默认配置（扁平结构）
    DEFAULT_CONFIG = {
        "initial_coins": 50,
        "initial_seeds": {"wheat": 5},
        "initial_plot_count": 6,
        "max_plot_count": 12,
        "plot_unlock_cost": 200,
        "xp_per_level": 100,
        "level_curve": "linear",
        "unknown_item_value": 1,
        "notify_throttle_seconds": 30,
        "advice_timeout": 2.0,
        "default_advice": "欢迎回到你的农场！",
        "save_slot": "default",
    }

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        self._config = dict(self.DEFAULT_CONFIG)
        if config:
            self.load_config(config)

    def load_config(self, config: Dict[str, Any]) -> None:
        """
        加载配置

        Args:
            config: 配置字典（扁平结构）
        """
        if config:
            self._config.update(config)

    def get(self, key: str, default: Any = None) -> Any:
        """获取配置值"""
        return self._config.get(key, default)

    @property
    def initial_coins(self) -> int:
        """初始金币数"""
        return int(self._config.get("initial_coins", 50))

    @property
    def initial_seeds(self) -> Dict[str, int]:
        """初始种子库存"""
        return dict(self._config.get("initial_seeds") or {})

    @property
    def initial_plot_count(self) -> int:
        return int(self._config.get("initial_plot_count", 6))

    @property
    def max_plot_count(self) -> int:
        return max(self.initial_plot_count, int(self._config.get("max_plot_count", 12)))

    @property
    def plot_unlock_cost(self) -> int:
        """解锁一块地的价格"""
        return int(self._config.get("plot_unlock_cost", 200))

    @property
    def xp_per_level(self) -> int:
        return int(self._config.get("xp_per_level", 100))

    @property
    def level_curve(self) -> str:
        return str(self._config.get("level_curve", "linear"))

    @property
    def unknown_item_value(self) -> int:
        """未登记物品的出售单价"""
        return int(self._config.get("unknown_item_value", 1))

    @property
    def notify_throttle_seconds(self) -> float:
        return float(self._config.get("notify_throttle_seconds", 30))

    @property
    def advice_timeout(self) -> float:
        return float(self._config.get("advice_timeout", 2.0))

    @property
    def default_advice(self) -> str:
        return str(self._config.get("default_advice", self.DEFAULT_CONFIG["default_advice"]))

    @property
    def save_slot(self) -> str:
        """存档槽位名，对应 saves/<slot>.json"""
        return str(self._config.get("save_slot", "default"))

