import logging
from typing import Optional, Protocol

from ..common.cooldown import CooldownStore

logger = logging.getLogger(__name__)


class Notifier(Protocol):
    def request_permission(self) -> bool:  # pragma: no cover
        ...

    def notify(self, crop_display_name: str, icon: str) -> None:  # pragma: no cover
        ...


class NullNotifier:
    def request_permission(self) -> bool:
        return False

    def notify(self, crop_display_name: str, icon: str) -> None:
        pass


class ThrottledNotifier:
    """
    节流包装：两次通知之间至少间隔 throttle_seconds 秒

    冷却状态保存在 CooldownStore 中，可以是内存、JSON 文件或 redis
    """

    def __init__(self, inner: Notifier, cooldown: Optional[CooldownStore] = None,
                 throttle_seconds: float = 30, scope: str = 'default'):
        self.inner = inner
        self.cooldown = cooldown or CooldownStore()
        self.throttle_seconds = throttle_seconds
        self.scope = scope

    def request_permission(self) -> bool:
        return self.inner.request_permission()

    def notify(self, crop_display_name: str, icon: str) -> None:
        remaining = self.cooldown.check(self.scope, 'notify', 'harvest_ready')
        if remaining > 0:
            logger.debug("notification for %s throttled (%.1fs left)", crop_display_name, remaining)
            return
        self.cooldown.set(self.scope, 'notify', 'harvest_ready', self.throttle_seconds)
        self.inner.notify(crop_display_name, icon)


class LogNotifier:
    """把通知写进日志，没有桌面通知时使用"""

    def request_permission(self) -> bool:
        return True

    def notify(self, crop_display_name: str, icon: str) -> None:
        logger.info("你的%s %s 可以收获了！", crop_display_name, icon)
