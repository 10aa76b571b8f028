from pathlib import Path
import json
import logging
import math
from typing import Dict, Optional

import redis

from .clock import Clock, SystemClock

logger = logging.getLogger(__name__)


class CooldownStore:
    """
    冷却时间存储

    优先使用传入的 redis 客户端 (setex/ttl)，否则写入 JSON 文件；
    两者都没有时只保存在内存中
    """

    def __init__(self, path: Optional[Path] = None, redis_client=None, clock: Optional[Clock] = None):
        self.path = Path(path) if path else None
        self.redis = redis_client
        self.clock = clock or SystemClock()
        self._memory: Dict[str, float] = {}
        if self.path is not None:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            if not self.path.exists():
                self.path.write_text(json.dumps({}), encoding="utf-8")

    @classmethod
    def from_url(cls, url: str, clock: Optional[Clock] = None) -> "CooldownStore":
        """使用 redis 作为后端，例如 redis://localhost:6379/0"""
        return cls(redis_client=redis.Redis.from_url(url), clock=clock)

    @staticmethod
    def key(scope: str, category: str, action: str) -> str:
        return f"cooldown:{scope}:{category}:{action}"

    def _read(self) -> Dict[str, float]:
        if self.path is None:
            return self._memory
        try:
            return json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            return {}

    def _write(self, data: Dict[str, float]):
        if self.path is None:
            self._memory = data
            return
        self.path.write_text(json.dumps(data, indent=2), encoding="utf-8")

    def check(self, scope: str, category: str, action: str) -> float:
        """Return remaining seconds, 0 if not in cooldown"""
        key = self.key(scope, category, action)
        if self.redis is not None:
            try:
                ttl = self.redis.ttl(key)
                if ttl is None:
                    return 0
                return max(0, int(ttl))
            except Exception as e:
                logger.warning("redis ttl failed for %s: %s", key, e)
        data = self._read()
        val = data.get(key)
        if not val:
            return 0
        now = self.clock.now()
        if now >= val:
            # expired
            data.pop(key, None)
            self._write(data)
            return 0
        return val - now

    def set(self, scope: str, category: str, action: str, duration: float = 60):
        key = self.key(scope, category, action)
        if self.redis is not None:
            try:
                self.redis.setex(key, max(1, math.ceil(duration)), 1)
                return
            except Exception as e:
                logger.warning("redis setex failed for %s: %s", key, e)
        data = dict(self._read())
        data[key] = self.clock.now() + duration
        self._write(data)
