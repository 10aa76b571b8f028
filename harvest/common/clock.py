import time
from typing import Protocol


class Clock(Protocol):
    def now(self) -> float:  # pragma: no cover
        ...


class SystemClock:
    """墙上时钟，单位秒"""

    def now(self) -> float:
        return time.time()


class ManualClock:
    """手动推进的时钟，测试和回放用"""

    def __init__(self, start: float = 0.0):
        self._now = float(start)

    def now(self) -> float:
        return self._now

    def set(self, value: float):
        self._now = float(value)

    def advance(self, seconds: float) -> float:
        if seconds < 0:
            raise ValueError("时间不能倒退")
        self._now += seconds
        return self._now
